"""
Callable values and the member-dispatch helper shared by built-in types.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, ClassVar, Dict, Mapping, Optional, Tuple, Union

from ..errors import SilhouetteError, UnknownPropertyError
from .base import Identifier, Value


@dataclass(frozen=True)
class Arguments:
    """
    Evaluated call arguments.

    positional keeps source order; named maps each argument name
    to its value and never contains duplicates.
    """
    positional: Tuple[Value, ...] = ()
    named: Dict[Identifier, Value] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "positional", tuple(self.positional))
        object.__setattr__(self, "named", {Identifier(k): v for k, v in self.named.items()})

    def get(self, index: int, name: str) -> Optional[Value]:
        """
        Argument passed either at position ``index`` or by ``name``.

        Returns None when the argument was not supplied.
        """
        if index < len(self.positional):
            return self.positional[index]
        return self.named.get(name)

    def require(self, index: int, name: str, method: str) -> Value:
        value = self.get(index, name)
        if value is None:
            raise SilhouetteError(f"{method}() requires argument '{name}'")
        return value


HostFunction = Callable[[Arguments], Union[Value, Awaitable[Value]]]


class FunctionValue(Value):
    """
    Callable template value.

    The wrapped host function receives an Arguments instance and may
    return either a Value or an awaitable resolving to one.
    """

    def __init__(self, function: HostFunction, name: Optional[str] = None):
        self.function = function
        self.name = name or getattr(function, "__name__", "function")

    async def call(self, arguments: Arguments) -> Value:
        result = self.function(arguments)
        if inspect.isawaitable(result):
            result = await result
        if not isinstance(result, Value):
            raise SilhouetteError(
                f"Function '{self.name}' returned {type(result).__name__}, expected a template value"
            )
        return result

    def retrieve(self, name: str) -> Value:
        raise UnknownPropertyError(name)

    def __str__(self) -> str:
        return "<function>"

    def __repr__(self) -> str:
        return f"FunctionValue({self.name!r})"


PropertyGetter = Callable[[Any], Value]
MethodImpl = Callable[[Any, Arguments], Value]


class BuiltinMembers(Value):
    """
    Table-driven ``retrieve`` for built-in value types.

    Subclasses list their properties (computed eagerly on access) and
    methods (bound into a FunctionValue) in class-level tables.
    """

    _properties: ClassVar[Mapping[str, PropertyGetter]] = {}
    _methods: ClassVar[Mapping[str, MethodImpl]] = {}

    def retrieve(self, name: str) -> Value:
        getter = self._properties.get(name)
        if getter is not None:
            return getter(self)

        method = self._methods.get(name)
        if method is not None:
            return FunctionValue(lambda args: method(self, args), name=name)

        raise UnknownPropertyError(name)


__all__ = ["Arguments", "FunctionValue", "HostFunction", "BuiltinMembers"]
