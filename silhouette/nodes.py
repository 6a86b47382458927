"""
AST-узлы шаблона.

Две замкнутые иерархии неизменяемых узлов: инструкции (Statement) и
выражения (Expression). Обход выполняется через двойную диспетчеризацию:
каждый узел вызывает соответствующий метод посетителя, а абстрактные
посетители объявляют по методу на каждый вариант, поэтому посетитель,
не обрабатывающий какой-либо узел, не может быть создан.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Generic, Tuple, TypeVar, Union

from .tokens import Token

R = TypeVar("R")

LiteralValue = Union[None, str, int, float, bool]


# ============================== Statements ============================== #

@dataclass(frozen=True)
class Statement(ABC):
    """Базовый класс для всех инструкций шаблона."""

    @abstractmethod
    def accept(self, visitor: StatementVisitor[R]) -> R:
        pass


@dataclass(frozen=True)
class OrderedStatements(Statement):
    """
    Последовательность инструкций, выполняемых по порядку.

    Например, ``Hello {{ name }}!`` даёт TextOutputNode("Hello "),
    ExpressionOutputNode(name) и TextOutputNode("!").
    """
    statements: Tuple[Statement, ...] = ()

    def accept(self, visitor: StatementVisitor[R]) -> R:
        return visitor.visit_ordered_statements(self)


@dataclass(frozen=True)
class TextOutputNode(Statement):
    """Статический текст, выводимый как есть."""
    text: str

    def accept(self, visitor: StatementVisitor[R]) -> R:
        return visitor.visit_text_output(self)


@dataclass(frozen=True)
class ExpressionOutputNode(Statement):
    """Выражение ``{{ ... }}``, результат которого выводится текстом."""
    expression: Expression

    def accept(self, visitor: StatementVisitor[R]) -> R:
        return visitor.visit_expression_output(self)


class StatementVisitor(ABC, Generic[R]):
    """Посетитель инструкций."""

    @abstractmethod
    def visit_ordered_statements(self, stmt: OrderedStatements) -> R:
        pass

    @abstractmethod
    def visit_text_output(self, stmt: TextOutputNode) -> R:
        pass

    @abstractmethod
    def visit_expression_output(self, stmt: ExpressionOutputNode) -> R:
        pass


# ============================== Expressions ============================== #

@dataclass(frozen=True)
class Expression(ABC):
    """Базовый класс для всех выражений."""

    @abstractmethod
    def accept(self, visitor: ExpressionVisitor[R]) -> R:
        pass


@dataclass(frozen=True)
class IdentifierNode(Expression):
    """Ссылка на переменную: ``{{ user }}``."""
    token: Token

    @property
    def name(self) -> str:
        return self.token.value

    def accept(self, visitor: ExpressionVisitor[R]) -> R:
        return visitor.visit_identifier(self)


@dataclass(frozen=True)
class LiteralNode(Expression):
    """
    Литерал: строка, число, булево значение или null.

    value хранит уже разобранное значение (str, int, float, bool
    или None), token — исходный текст и позицию.
    """
    token: Token
    value: LiteralValue

    def accept(self, visitor: ExpressionVisitor[R]) -> R:
        return visitor.visit_literal(self)


@dataclass(frozen=True)
class PropertyAccessNode(Expression):
    """Доступ к свойству или методу через точку: ``user.name``."""
    object: Expression
    dot_token: Token
    identifier: Token

    @property
    def name(self) -> str:
        return self.identifier.value

    def accept(self, visitor: ExpressionVisitor[R]) -> R:
        return visitor.visit_property_access(self)


@dataclass(frozen=True)
class IndexAccessNode(Expression):
    """Доступ по индексу или ключу: ``users[0]``, ``data['key']``."""
    object: Expression
    left_bracket: Token
    index: Expression
    right_bracket: Token

    def accept(self, visitor: ExpressionVisitor[R]) -> R:
        return visitor.visit_index_access(self)


@dataclass(frozen=True)
class CallNode(Expression):
    """
    Вызов функции или метода.

    Позиционные и именованные аргументы в исходном тексте могут
    чередоваться: ``f(name: "a", 1, age: 2, "b")``. Порядок позиционных
    аргументов сохраняется, ключи именованных уникальны.
    """
    callee: Expression
    positional_arguments: Tuple[Expression, ...] = ()
    named_arguments: Dict[str, Expression] = field(default_factory=dict, hash=False)

    def accept(self, visitor: ExpressionVisitor[R]) -> R:
        return visitor.visit_call(self)


class ExpressionVisitor(ABC, Generic[R]):
    """Посетитель выражений."""

    @abstractmethod
    def visit_identifier(self, expr: IdentifierNode) -> R:
        pass

    @abstractmethod
    def visit_literal(self, expr: LiteralNode) -> R:
        pass

    @abstractmethod
    def visit_property_access(self, expr: PropertyAccessNode) -> R:
        pass

    @abstractmethod
    def visit_index_access(self, expr: IndexAccessNode) -> R:
        pass

    @abstractmethod
    def visit_call(self, expr: CallNode) -> R:
        pass


__all__ = [
    "Statement",
    "OrderedStatements",
    "TextOutputNode",
    "ExpressionOutputNode",
    "StatementVisitor",
    "Expression",
    "IdentifierNode",
    "LiteralNode",
    "LiteralValue",
    "PropertyAccessNode",
    "IndexAccessNode",
    "CallNode",
    "ExpressionVisitor",
]
