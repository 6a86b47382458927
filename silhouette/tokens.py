"""
Лексические типы шаблонизатора.

Определяет типы токенов, позиционную информацию и токен с флагами
управления пробелами, который существует только между сканером
и обработчиком пробелов.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""

    # Текстовый контент
    TEXT = "TEXT"
    NEWLINE = "NEWLINE"                      # зарезервирован, сканер не выдаёт
    EOF = "EOF"

    # Разделители тегов
    OPEN_TAG = "OPEN_TAG"                    # {{
    CLOSE_TAG = "CLOSE_TAG"                  # }}

    # Разделители комментариев
    OPEN_COMMENT = "OPEN_COMMENT"            # {{#
    CLOSE_COMMENT = "CLOSE_COMMENT"          # #}}

    # Идентификаторы и литералы
    IDENTIFIER = "IDENTIFIER"
    STRING_LITERAL = "STRING_LITERAL"
    NUMBER_LITERAL = "NUMBER_LITERAL"

    # Ключевые слова
    TRUE_KEYWORD = "TRUE_KEYWORD"
    FALSE_KEYWORD = "FALSE_KEYWORD"
    NULL_KEYWORD = "NULL_KEYWORD"
    RESERVED_KEYWORD = "RESERVED_KEYWORD"    # if else for let set in include render

    # Знаки
    OPEN_PAREN = "OPEN_PAREN"                # (
    CLOSE_PAREN = "CLOSE_PAREN"              # )
    COMMA = "COMMA"                          # ,
    COLON = "COLON"                          # :
    DOT = "DOT"                              # .
    SLASH = "SLASH"                          # / (пока не используется грамматикой)
    MINUS = "MINUS"                          # -
    OPEN_BRACKET = "OPEN_BRACKET"            # [
    CLOSE_BRACKET = "CLOSE_BRACKET"          # ]


@dataclass(frozen=True)
class SourceLocation:
    """
    Позиция в исходном тексте шаблона.

    Строка и колонка считаются с 1, смещение — с 0.
    Используется только для диагностики.
    """
    line: int
    column: int
    offset: int
    length: int

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.

    Равенство токенов определяется типом и значением: позиция
    в сравнении не участвует.
    """
    type: TokenType
    value: str
    location: SourceLocation = field(compare=False)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r} at {self.location})"


@dataclass(frozen=True)
class TrimControlToken(Token):
    """
    Токен тега или комментария с флагами обрезки пробелов.

    Выдаётся сканером для ``{{-``/``-}}`` (и вариантов комментариев).
    Единственный потребитель — обработчик пробелов, который всегда
    заменяет его обычным Token.
    """
    trim_before: bool = False
    trim_after: bool = False

    def plain(self) -> Token:
        """Возвращает тот же токен без флагов."""
        return Token(self.type, self.value, self.location)

    def __repr__(self) -> str:
        return (
            f"TrimControlToken({self.type.name}, {self.value!r} at {self.location}, "
            f"trim_before={self.trim_before}, trim_after={self.trim_after})"
        )


RESERVED_KEYWORDS = frozenset({"if", "else", "for", "let", "set", "in", "include", "render"})


__all__ = [
    "TokenType",
    "SourceLocation",
    "Token",
    "TrimControlToken",
    "RESERVED_KEYWORDS",
]
