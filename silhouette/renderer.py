"""
Рендерер шаблонов.

Обходит AST, вычисляя выражения относительно цепочки областей
видимости (глобальные значения движка, затем контекст рендеринга),
и собирает текстовый результат.

Рендеринг асинхронный: функции хоста могут возвращать awaitable.
Подвыражения вычисляются строго последовательно в порядке грамматики.
"""

from __future__ import annotations

import logging
from typing import Awaitable, List, Optional, Sequence

from .errors import SilhouetteError, UndefinedVariableError, UnknownPropertyError
from .nodes import (
    CallNode,
    ExpressionOutputNode,
    ExpressionVisitor,
    IdentifierNode,
    IndexAccessNode,
    LiteralNode,
    OrderedStatements,
    PropertyAccessNode,
    Statement,
    StatementVisitor,
    TextOutputNode,
)
from .values import (
    NULL,
    Arguments,
    BoolValue,
    DoubleValue,
    FunctionValue,
    Identifier,
    Indexable,
    IntValue,
    ObjectValue,
    StringValue,
    Value,
)

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """
    Рендерер скомпилированных шаблонов.

    Глобальные значения разделяются всеми вызовами render и только
    читаются; каждый вызов получает собственную цепочку областей
    видимости и буфер вывода, поэтому конкурентные рендеры одного
    шаблона независимы.
    """

    def __init__(self, globals: Optional[ObjectValue] = None):
        self.globals = globals if globals is not None else ObjectValue()

    async def render(self, statement: Statement, context: Optional[ObjectValue] = None) -> str:
        """
        Рендерит AST в строку.

        Args:
            statement: Корневая инструкция скомпилированного шаблона
            context: Значения, доступные шаблону поверх глобальных

        Returns:
            Отрендеренный текст

        Raises:
            SilhouetteError: При любой ошибке вычисления; частичный
                             результат не возвращается
        """
        scopes: List[ObjectValue] = [self.globals]
        if context is not None:
            scopes.append(context)

        evaluator = _Evaluator(scopes)
        await statement.accept(evaluator)

        result = "".join(evaluator.output)
        logger.debug(f"Rendered {len(evaluator.output)} chunks, {len(result)} characters")
        return result


class _Evaluator(StatementVisitor[Awaitable[None]], ExpressionVisitor[Awaitable[Value]]):
    """Состояние одного рендера: области видимости и буфер вывода."""

    def __init__(self, scopes: Sequence[ObjectValue]):
        self.scopes = list(scopes)
        self.output: List[str] = []

    # Инструкции

    async def visit_ordered_statements(self, stmt: OrderedStatements) -> None:
        for child in stmt.statements:
            await child.accept(self)

    async def visit_text_output(self, stmt: TextOutputNode) -> None:
        self.output.append(stmt.text)

    async def visit_expression_output(self, stmt: ExpressionOutputNode) -> None:
        value = await stmt.expression.accept(self)
        self.output.append(str(value))

    # Выражения

    async def visit_identifier(self, expr: IdentifierNode) -> Value:
        return self.lookup(expr.name)

    async def visit_literal(self, expr: LiteralNode) -> Value:
        value = expr.value
        if value is None:
            return NULL
        if isinstance(value, bool):
            return BoolValue(value)
        if isinstance(value, str):
            return StringValue(value)
        if isinstance(value, int):
            return IntValue(value)
        if isinstance(value, float):
            return DoubleValue(value)
        raise TypeError(f"Unsupported literal payload: {type(value).__name__}")

    async def visit_property_access(self, expr: PropertyAccessNode) -> Value:
        target = await expr.object.accept(self)
        return target.retrieve(expr.name)

    async def visit_index_access(self, expr: IndexAccessNode) -> Value:
        target = await expr.object.accept(self)
        key = await expr.index.accept(self)
        if not isinstance(target, Indexable):
            raise SilhouetteError(f"Cannot index {type(target).__name__}: value is not indexable")
        return target.for_key(key)

    async def visit_call(self, expr: CallNode) -> Value:
        callee = await expr.callee.accept(self)
        if not isinstance(callee, FunctionValue):
            raise SilhouetteError(f"Can't call {type(callee).__name__} as a function")

        positional = [await argument.accept(self) for argument in expr.positional_arguments]
        named = {}
        for name, argument in expr.named_arguments.items():
            named[Identifier(name)] = await argument.accept(self)

        return await callee.call(Arguments(tuple(positional), named))

    def lookup(self, name: str) -> Value:
        """
        Ищет переменную от внутренней области видимости к внешней.

        Raises:
            UndefinedVariableError: Если ни одна область не содержит имя
        """
        for scope in reversed(self.scopes):
            try:
                return scope.field(name)
            except UnknownPropertyError:
                continue
        raise UndefinedVariableError(name)


__all__ = ["TemplateRenderer"]
