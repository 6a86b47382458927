"""
Exceptions raised by the Silhouette template engine.

All expected errors (bad template syntax, unresolved names, invalid
operations against the render context) inherit from SilhouetteError so
callers can report them as clean messages without stack traces.

Internal failures (for example an unsupported literal payload in a
hand-built AST) use built-in exception types instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .tokens import Token


class SilhouetteError(Exception):
    """
    Base class for all user-facing errors of the template engine.

    Also used directly for generic evaluation failures: calling a value
    that is not a function, indexing a value that is not indexable,
    passing an argument of the wrong type to a built-in method.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownPropertyError(SilhouetteError):
    """Property or method name that the value does not define."""

    def __init__(self, name: str):
        super().__init__(f"Unknown property: {name}")
        self.name = name


class UnknownKeyError(SilhouetteError):
    """Index out of range or key absent from a map/object."""

    def __init__(self, key: Any):
        super().__init__(f"Unknown key: {key}")
        self.key = key


class UndefinedVariableError(SilhouetteError):
    """Identifier that none of the render scopes defines."""

    def __init__(self, name: str):
        super().__init__(f"Undefined variable: {name}")
        self.name = name


class ParseError(SilhouetteError):
    """
    Синтаксическая ошибка шаблона.

    Хранит токен, на котором разбор остановился (None, если ошибка
    обнаружена в конце входных данных), для точной диагностики.
    """

    def __init__(self, message: str, token: Optional[Token] = None):
        super().__init__(message)
        self.token = token

    @property
    def line(self) -> Optional[int]:
        return self.token.location.line if self.token is not None else None

    @property
    def column(self) -> Optional[int]:
        return self.token.location.column if self.token is not None else None

    def __str__(self) -> str:
        if self.token is None:
            return self.message
        loc = self.token.location
        return f"{self.message} at {loc.line}:{loc.column} (token: {self.token.type.name} {self.token.value!r})"


class FrontmatterError(SilhouetteError):
    """Invalid YAML frontmatter in a template file."""
    pass


__all__ = [
    "SilhouetteError",
    "UnknownPropertyError",
    "UnknownKeyError",
    "UndefinedVariableError",
    "ParseError",
    "FrontmatterError",
]
