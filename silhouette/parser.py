"""
Парсер шаблонов с рекурсивным спуском.

Преобразует поток токенов (после обработки пробелов) в AST.
Разбор жадный и без восстановления: первая же ошибка прерывает
компиляцию исключением ParseError, частичное дерево не возвращается.

Грамматика:
template   → (TEXT | tag | comment)*
tag        → "{{" expression? "}}"
comment    → "{{#" "#}}"
expression → postfix
postfix    → primary ( "." IDENTIFIER | "[" expression "]" | "(" arguments? ")" )*
primary    → IDENTIFIER | literal | "(" expression ")"
arguments  → argument ( "," argument )*
argument   → IDENTIFIER ":" expression | expression
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from .errors import ParseError
from .nodes import (
    CallNode,
    Expression,
    ExpressionOutputNode,
    IdentifierNode,
    IndexAccessNode,
    LiteralNode,
    LiteralValue,
    OrderedStatements,
    PropertyAccessNode,
    Statement,
    TextOutputNode,
)
from .scanner import TemplateScanner
from .tokens import SourceLocation, Token, TokenType
from .whitespace import process_whitespace

logger = logging.getLogger(__name__)


_LITERAL_TYPES = (
    TokenType.STRING_LITERAL,
    TokenType.NUMBER_LITERAL,
    TokenType.TRUE_KEYWORD,
    TokenType.FALSE_KEYWORD,
    TokenType.NULL_KEYWORD,
)


class TemplateParser:
    """
    Рекурсивный парсер шаблонов.

    Принимает уже обработанный поток токенов: токены с флагами
    управления пробелами до парсера не доходят.
    """

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.position = 0

    def parse(self) -> Statement:
        """
        Парсит всю последовательность токенов.

        Returns:
            Единственную инструкцию, если шаблон состоит из одной,
            иначе OrderedStatements (пустой для пустого шаблона)

        Raises:
            ParseError: При синтаксической ошибке
        """
        statements: List[Statement] = []

        while not self._is_at_end():
            statement = self._parse_top_level()
            if statement is not None:
                statements.append(statement)

        logger.debug(f"Parsed {len(statements)} top-level statements")

        if len(statements) == 1:
            return statements[0]
        return OrderedStatements(tuple(statements))

    def _parse_top_level(self) -> Optional[Statement]:
        current = self._current_token()

        if current.type == TokenType.TEXT:
            self._advance()
            return TextOutputNode(current.value)
        if current.type == TokenType.OPEN_TAG:
            return self._parse_tag()
        if current.type == TokenType.OPEN_COMMENT:
            self._parse_comment()
            return None

        raise ParseError(f"Unexpected token at top level: {current.type.name}", current)

    def _parse_tag(self) -> Statement:
        """Парсит ``{{ expression? }}``; пустой тег выводит пустую строку."""
        self._consume(TokenType.OPEN_TAG, "Expected '{{'")

        if self._check(TokenType.CLOSE_TAG):
            self._advance()
            return TextOutputNode("")

        expression = self._parse_expression()
        self._consume(TokenType.CLOSE_TAG, "Expected '}}' to close tag")
        return ExpressionOutputNode(expression)

    def _parse_comment(self) -> None:
        opening = self._consume(TokenType.OPEN_COMMENT, "Expected '{{#'")
        if not self._check(TokenType.CLOSE_COMMENT):
            raise ParseError("Unclosed comment", opening)
        self._advance()

    # ---------------------------- выражения ---------------------------- #

    def _parse_expression(self) -> Expression:
        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        """Левоассоциативная цепочка ``a.b[0].c()``."""
        expression = self._parse_primary()

        while True:
            if self._check(TokenType.DOT):
                dot = self._advance()
                name = self._consume(TokenType.IDENTIFIER, "Expected property name after '.'")
                expression = PropertyAccessNode(expression, dot, name)
            elif self._check(TokenType.OPEN_BRACKET):
                left = self._advance()
                if self._check(TokenType.CLOSE_BRACKET):
                    raise ParseError("Expected index expression inside '[]'", self._current_token())
                index = self._parse_expression()
                right = self._consume(TokenType.CLOSE_BRACKET, "Expected ']' after index")
                expression = IndexAccessNode(expression, left, index, right)
            elif self._check(TokenType.OPEN_PAREN):
                self._advance()
                expression = self._parse_call(expression)
            else:
                return expression

    def _parse_primary(self) -> Expression:
        current = self._current_token()

        if current.type == TokenType.IDENTIFIER:
            self._advance()
            return IdentifierNode(current)

        if current.type in _LITERAL_TYPES:
            self._advance()
            return LiteralNode(current, self._literal_value(current))

        if current.type == TokenType.OPEN_PAREN:
            self._advance()
            expression = self._parse_expression()
            self._consume(TokenType.CLOSE_PAREN, "Expected ')' after grouped expression")
            return expression

        if current.type == TokenType.EOF:
            raise ParseError("Unexpected end of template, expected expression", None)
        raise ParseError(f"Expected expression, got {current.type.name} {current.value!r}", current)

    def _parse_call(self, callee: Expression) -> CallNode:
        """
        Парсит список аргументов после ``(``.

        Позиционные и именованные аргументы могут идти в любом порядке.
        """
        positional: List[Expression] = []
        named: Dict[str, Expression] = {}

        if not self._check(TokenType.CLOSE_PAREN):
            while True:
                if self._check(TokenType.IDENTIFIER) and self._peek_type(1) == TokenType.COLON:
                    name_token = self._advance()
                    self._advance()  # ':'
                    if name_token.value in named:
                        raise ParseError(f"Duplicate named parameter: {name_token.value}", name_token)
                    named[name_token.value] = self._parse_expression()
                else:
                    positional.append(self._parse_expression())

                if not self._check(TokenType.COMMA):
                    break
                self._advance()

        self._consume(TokenType.CLOSE_PAREN, "Expected ')' after arguments")
        return CallNode(callee, tuple(positional), named)

    @staticmethod
    def _literal_value(token: Token) -> LiteralValue:
        if token.type == TokenType.STRING_LITERAL:
            return token.value
        if token.type == TokenType.NUMBER_LITERAL:
            if "." in token.value:
                return float(token.value)
            return int(token.value)
        if token.type == TokenType.TRUE_KEYWORD:
            return True
        if token.type == TokenType.FALSE_KEYWORD:
            return False
        return None

    # Вспомогательные методы для работы с токенами

    def _current_token(self) -> Token:
        """Текущий токен; за концом списка — EOF."""
        if self.position >= len(self.tokens):
            return _eof_token()
        return self.tokens[self.position]

    def _peek_type(self, offset: int) -> Optional[TokenType]:
        index = self.position + offset
        if index >= len(self.tokens):
            return None
        return self.tokens[index].type

    def _is_at_end(self) -> bool:
        return self._current_token().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        return self._current_token().type == token_type

    def _advance(self) -> Token:
        token = self._current_token()
        if not self._is_at_end():
            self.position += 1
        return token

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Потребляет токен ожидаемого типа или выбрасывает ошибку."""
        if self._check(token_type):
            return self._advance()

        current = self._current_token()
        if current.type == TokenType.EOF:
            raise ParseError(f"{message}, reached end of template", None)
        raise ParseError(f"{message}, got {current.type.name} {current.value!r}", current)


def _eof_token() -> Token:
    return Token(TokenType.EOF, "", SourceLocation(1, 1, 0, 0))


def parse_template(source: str) -> Statement:
    """
    Компилирует исходный текст шаблона в AST.

    Сканирование, обработка пробелов и разбор выполняются синхронно
    и без побочных эффектов.

    Raises:
        ParseError: При синтаксической ошибке
    """
    raw_tokens = TemplateScanner(source).scan()
    tokens = process_whitespace(raw_tokens)
    return TemplateParser(tokens).parse()


__all__ = ["TemplateParser", "parse_template"]
