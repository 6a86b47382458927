"""
Обработка модификаторов обрезки пробелов.

Проход по потоку токенов сканера, применяющий ``{{-``/``-}}`` (и те же
варианты для комментариев) к соседним текстовым токенам:

- открыватель с trim_before обрезает хвостовые пробелы предыдущего текста;
- закрыватель с trim_after обрезает ведущие пробелы следующего текста.

Текстовые токены, ставшие пустыми, удаляются. Все выходные токены —
обычные Token без флагов.
"""

from __future__ import annotations

from typing import List, Sequence

from .tokens import Token, TokenType, TrimControlToken

_WHITESPACE = " \t\r\n"

_OPENERS = (TokenType.OPEN_TAG, TokenType.OPEN_COMMENT)
_CLOSERS = (TokenType.CLOSE_TAG, TokenType.CLOSE_COMMENT)


def process_whitespace(tokens: Sequence[Token]) -> List[Token]:
    """
    Применяет обрезку пробелов к потоку токенов.

    Входная последовательность не изменяется.

    Args:
        tokens: Сырые токены сканера

    Returns:
        Новый список обычных токенов
    """
    result: List[Token] = []
    skip_next = False

    for index, token in enumerate(tokens):
        if skip_next:
            skip_next = False
            continue

        trim_before = isinstance(token, TrimControlToken) and token.trim_before
        trim_after = isinstance(token, TrimControlToken) and token.trim_after

        if token.type in _OPENERS and trim_before:
            if result and result[-1].type == TokenType.TEXT:
                previous = result.pop()
                trimmed = previous.value.rstrip(_WHITESPACE)
                if trimmed:
                    result.append(Token(TokenType.TEXT, trimmed, previous.location))

        result.append(_plain(token))

        if token.type in _CLOSERS and trim_after:
            if index + 1 < len(tokens) and tokens[index + 1].type == TokenType.TEXT:
                following = tokens[index + 1]
                trimmed = following.value.lstrip(_WHITESPACE)
                if trimmed:
                    result.append(Token(TokenType.TEXT, trimmed, following.location))
                skip_next = True

    return result


def _plain(token: Token) -> Token:
    if isinstance(token, TrimControlToken):
        return token.plain()
    return token


__all__ = ["process_whitespace"]
