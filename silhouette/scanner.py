"""
Лексический анализатор шаблонов Silhouette.

Разбивает исходный текст шаблона на последовательность токенов
для последующей обработки пробелов и синтаксического анализа.

Работает в двух режимах:
- вне тега: накапливает обычный текст до ``{{``
- внутри тега: токенизирует выражение до ``}}``

Сканер никогда не выбрасывает исключений: незакрытые строки,
комментарии и теги обрезаются по концу входа, неизвестные символы
внутри тега пропускаются. Синтаксические ошибки обнаруживает парсер.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .tokens import RESERVED_KEYWORDS, SourceLocation, Token, TokenType, TrimControlToken

logger = logging.getLogger(__name__)


_WHITESPACE = " \t\r\n"

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_SINGLE_CHAR_TOKENS = {
    "(": TokenType.OPEN_PAREN,
    ")": TokenType.CLOSE_PAREN,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
    "/": TokenType.SLASH,
    "[": TokenType.OPEN_BRACKET,
    "]": TokenType.CLOSE_BRACKET,
}

_KEYWORDS = {
    "true": TokenType.TRUE_KEYWORD,
    "false": TokenType.FALSE_KEYWORD,
    "null": TokenType.NULL_KEYWORD,
}


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_alpha(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def _is_identifier_start(char: str) -> bool:
    return _is_alpha(char) or char == "_"


def _is_identifier_part(char: str) -> bool:
    return _is_alpha(char) or _is_digit(char) or char == "_"


class TemplateScanner:
    """
    Сканер шаблонов.

    Каждый экземпляр сканирует один исходный текст. Возвращаемый список
    всегда заканчивается токеном EOF. Токены открытия/закрытия тегов
    и комментариев выдаются как TrimControlToken.
    """

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)
        self._inside_tag = False

    def scan(self) -> List[Token]:
        """
        Сканирует весь исходный текст и возвращает список токенов.
        """
        tokens: List[Token] = []

        while not self._is_at_end():
            if self._inside_tag:
                self._scan_inside_tag(tokens)
            else:
                self._scan_outside_tag(tokens)

        tokens.append(Token(TokenType.EOF, "", self._location(self.position, 0)))

        logger.debug(f"Scanned template of length {self.length} into {len(tokens)} tokens")
        return tokens

    # ---------------------------- текст вне тегов ---------------------------- #

    def _scan_outside_tag(self, tokens: List[Token]) -> None:
        """Собирает обычный текст до ``{{`` и обрабатывает найденный открыватель."""
        start_offset, start_line, start_column = self.position, self.line, self.column

        while not self._is_at_end() and not self._is_double_brace_opening():
            self._advance()

        if self.position > start_offset:
            value = self.text[start_offset:self.position]
            location = SourceLocation(start_line, start_column, start_offset, len(value))
            tokens.append(Token(TokenType.TEXT, value, location))

        if not self._is_at_end():
            # Третий символ решает: комментарий или тег
            if self._peek_at(2) == "#":
                self._handle_comment_opening(tokens)
            else:
                self._handle_tag_opening(tokens)

    def _is_double_brace_opening(self) -> bool:
        return self._peek() == "{" and self._peek_at(1) == "{"

    def _handle_tag_opening(self, tokens: List[Token]) -> None:
        """Обрабатывает ``{{`` или ``{{-`` и переключает сканер в режим тега."""
        start_offset, start_line, start_column = self.position, self.line, self.column

        self._advance(2)
        trim_before = self._consume_trim_marker()

        location = SourceLocation(start_line, start_column, start_offset, 3 if trim_before else 2)
        tokens.append(TrimControlToken(TokenType.OPEN_TAG, "{{", location, trim_before=trim_before))
        self._inside_tag = True

    def _handle_comment_opening(self, tokens: List[Token]) -> None:
        """
        Обрабатывает ``{{#`` или ``{{#-``.

        Содержимое комментария поглощается целиком: последовательности
        фигурных скобок внутри него тегами не считаются.
        """
        start_offset, start_line, start_column = self.position, self.line, self.column

        self._advance(3)
        trim_before = self._consume_trim_marker()

        location = SourceLocation(start_line, start_column, start_offset, 4 if trim_before else 3)
        tokens.append(TrimControlToken(TokenType.OPEN_COMMENT, "{{#", location, trim_before=trim_before))

        self._scan_comment_content(tokens)

    def _consume_trim_marker(self) -> bool:
        """Поглощает ``-`` после открывателя вместе с последующими пробелами."""
        if self._is_at_end() or self._peek() != "-":
            return False
        self._advance()
        self._skip_whitespace()
        return True

    def _scan_comment_content(self, tokens: List[Token]) -> None:
        while not self._is_at_end():
            if self._matches("-#}}"):
                self._handle_comment_closing(tokens, trim_after=True)
                return
            if self._matches("#}}"):
                self._handle_comment_closing(tokens, trim_after=False)
                return
            self._advance()

        # Незакрытый комментарий: дошли до конца входа, ошибку выдаст парсер

    def _handle_comment_closing(self, tokens: List[Token], trim_after: bool) -> None:
        start_offset, start_line, start_column = self.position, self.line, self.column

        length = 4 if trim_after else 3
        self._advance(length)

        location = SourceLocation(start_line, start_column, start_offset, length)
        tokens.append(TrimControlToken(TokenType.CLOSE_COMMENT, "#}}", location, trim_after=trim_after))

    # ---------------------------- внутри тега ---------------------------- #

    def _scan_inside_tag(self, tokens: List[Token]) -> None:
        """Токенизирует выражение внутри ``{{ ... }}``."""
        self._skip_whitespace()

        if self._is_at_end():
            return

        if self._is_tag_closing():
            self._handle_tag_closing(tokens)
            return

        # Числа проверяются раньше одиночных символов из-за отрицательных литералов
        token = (
            self._scan_number_literal()
            or self._scan_single_char_token()
            or self._scan_string_literal()
            or self._scan_identifier_or_keyword()
        )

        if token is not None:
            tokens.append(token)
        else:
            # Неизвестный символ пропускаем
            logger.debug(f"Skipping unexpected character {self._peek()!r} at {self.line}:{self.column}")
            self._advance()

    def _is_tag_closing(self) -> bool:
        return self._matches("-}}") or self._matches("}}")

    def _handle_tag_closing(self, tokens: List[Token]) -> None:
        start_offset, start_line, start_column = self.position, self.line, self.column

        trim_after = self._peek() == "-"
        length = 3 if trim_after else 2
        self._advance(length)

        location = SourceLocation(start_line, start_column, start_offset, length)
        tokens.append(TrimControlToken(TokenType.CLOSE_TAG, "}}", location, trim_after=trim_after))
        self._inside_tag = False

    def _scan_single_char_token(self) -> Optional[Token]:
        char = self._peek()

        token_type = _SINGLE_CHAR_TOKENS.get(char)
        if token_type is None and char == "-" and self._peek_at(1) != "}":
            # Минус перед ``}}`` принадлежит закрывателю ``-}}``
            token_type = TokenType.MINUS
        if token_type is None:
            return None

        location = self._location(self.position, 1)
        self._advance()
        return Token(token_type, char, location)

    def _scan_string_literal(self) -> Optional[Token]:
        """
        Сканирует строковый литерал в одинарных или двойных кавычках.

        Поддерживаемые escape-последовательности: ``\\n \\t \\r \\\\ \\' \\"``.
        Неизвестная последовательность даёт сам экранированный символ.
        Незакрытая строка продолжается до конца входа.
        """
        quote = self._peek()
        if quote not in ("'", '"'):
            return None

        start_offset, start_line, start_column = self.position, self.line, self.column
        self._advance()

        chars: List[str] = []
        while not self._is_at_end() and self._peek() != quote:
            char = self._advance()
            if char == "\\":
                if self._is_at_end():
                    break
                escaped = self._advance()
                chars.append(_ESCAPES.get(escaped, escaped))
            else:
                chars.append(char)

        if not self._is_at_end():
            self._advance()  # закрывающая кавычка

        location = SourceLocation(start_line, start_column, start_offset, self.position - start_offset)
        return Token(TokenType.STRING_LITERAL, "".join(chars), location)

    def _scan_number_literal(self) -> Optional[Token]:
        """
        Сканирует целое или десятичное число, в том числе отрицательное.

        Минус считается частью числа, только если сразу за ним идёт цифра.
        """
        current = self._peek()
        is_negative = current == "-" and _is_digit(self._peek_at(1))

        if not _is_digit(current) and not is_negative:
            return None

        start_offset, start_line, start_column = self.position, self.line, self.column

        if is_negative:
            self._advance()

        self._skip_digits()

        # Дробная часть только если после точки есть цифра: ``1.abs`` это свойство
        if self._peek() == "." and _is_digit(self._peek_at(1)):
            self._advance()
            self._skip_digits()

        value = self.text[start_offset:self.position]
        location = SourceLocation(start_line, start_column, start_offset, len(value))
        return Token(TokenType.NUMBER_LITERAL, value, location)

    def _scan_identifier_or_keyword(self) -> Optional[Token]:
        if not _is_identifier_start(self._peek()):
            return None

        start_offset, start_line, start_column = self.position, self.line, self.column

        while not self._is_at_end() and _is_identifier_part(self._peek()):
            self._advance()

        value = self.text[start_offset:self.position]
        location = SourceLocation(start_line, start_column, start_offset, len(value))
        return Token(self._identifier_type(value), value, location)

    @staticmethod
    def _identifier_type(value: str) -> TokenType:
        keyword_type = _KEYWORDS.get(value)
        if keyword_type is not None:
            return keyword_type
        if value in RESERVED_KEYWORDS:
            return TokenType.RESERVED_KEYWORD
        return TokenType.IDENTIFIER

    # ---------------------------- навигация ---------------------------- #

    def _skip_whitespace(self) -> None:
        while not self._is_at_end() and self._peek() in _WHITESPACE:
            self._advance()

    def _skip_digits(self) -> None:
        while not self._is_at_end() and _is_digit(self._peek()):
            self._advance()

    def _advance(self, count: int = 1) -> str:
        """
        Перемещает позицию на указанное количество символов,
        обновляя номера строк и колонок. Возвращает последний символ.
        """
        char = ""
        for _ in range(count):
            if self.position >= self.length:
                break
            char = self.text[self.position]
            if char == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.position += 1
        return char

    def _peek(self) -> str:
        return self._peek_at(0)

    def _peek_at(self, offset: int) -> str:
        """Символ на заданном смещении или пустая строка за концом входа."""
        index = self.position + offset
        return self.text[index] if index < self.length else ""

    def _matches(self, sequence: str) -> bool:
        return self.text.startswith(sequence, self.position)

    def _is_at_end(self) -> bool:
        return self.position >= self.length

    def _location(self, offset: int, length: int) -> SourceLocation:
        return SourceLocation(self.line, self.column, offset, length)


def scan_template(text: str) -> List[Token]:
    """
    Удобная функция для сканирования шаблона.

    Args:
        text: Исходный текст шаблона

    Returns:
        Список сырых токенов (с флагами управления пробелами)
    """
    return TemplateScanner(text).scan()


__all__ = ["TemplateScanner", "scan_template"]
