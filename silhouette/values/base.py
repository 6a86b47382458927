"""
Base types of the runtime value model.

Every value a template can see is an instance of a closed set of
immutable Value subclasses. Values expose members through
``retrieve(name)``; optional capabilities are expressed as mixins:

- Equatable: structural equality and a consistent hash (required for
  set elements and map keys);
- Indexable: ``for_key(key)`` checks the key's runtime type, then
  delegates to the type-specific lookup.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Tuple, Type, Union

from ..errors import SilhouetteError

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class Identifier(str):
    """
    Validated name of a property, variable or named argument.

    Construction fails for anything that does not match
    ``[A-Za-z_][A-Za-z0-9_]*``, so an Identifier instance is always valid.
    """

    __slots__ = ()

    def __new__(cls, name: str) -> Identifier:
        if isinstance(name, Identifier):
            return name
        if not cls.is_valid(name):
            raise SilhouetteError(
                f'Invalid identifier "{name}": must start with a letter or '
                f"underscore and contain only letters, digits, and underscores"
            )
        return super().__new__(cls, name)

    @staticmethod
    def is_valid(name: Any) -> bool:
        return isinstance(name, str) and _IDENTIFIER_RE.fullmatch(name) is not None


class Value(ABC):
    """Base class for all template values."""

    @abstractmethod
    def retrieve(self, name: str) -> Value:
        """
        Returns the property or method called ``name``.

        Methods resolve to a FunctionValue which the template then calls.

        Raises:
            UnknownPropertyError: If the value has no such member
        """
        pass

    @abstractmethod
    def __str__(self) -> str:
        """Textual rendering used when the value is output."""
        pass


class Equatable(ABC):
    """Capability: structural equality with a consistent hash."""

    @abstractmethod
    def __eq__(self, other: object) -> bool:
        pass

    @abstractmethod
    def __hash__(self) -> int:
        pass


class Indexable(ABC):
    """
    Capability: lookup by key through ``value[key]`` syntax.

    Subclasses declare ``key_type`` and implement ``_value_for_key``;
    the runtime type check is shared by all indexable variants.
    """

    key_type: ClassVar[Union[Type[Any], Tuple[Type[Any], ...]]]

    def for_key(self, key: Value) -> Value:
        if not isinstance(key, self.key_type):
            expected = _type_names(self.key_type)
            raise SilhouetteError(
                f"Cannot index {type(self).__name__} with {type(key).__name__} - expected {expected}"
            )
        return self._value_for_key(key)

    @abstractmethod
    def _value_for_key(self, key: Any) -> Value:
        pass


def _type_names(types: Union[Type[Any], Tuple[Type[Any], ...]]) -> str:
    if isinstance(types, tuple):
        return " or ".join(t.__name__ for t in types)
    return types.__name__


class NullValue(Value, Equatable):
    """
    The ``null`` value.

    A single shared instance exists (see NULL); it is equal only to
    itself and rejects every property access.
    """

    _instance: ClassVar[NullValue | None] = None

    def __new__(cls) -> NullValue:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def retrieve(self, name: str) -> Value:
        raise SilhouetteError(f"Can't access properties of null (requested '{name}')")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NullValue)

    def __hash__(self) -> int:
        return 0

    def __str__(self) -> str:
        return "null"

    def __repr__(self) -> str:
        return "NullValue()"


NULL = NullValue()


__all__ = [
    "Identifier",
    "Value",
    "Equatable",
    "Indexable",
    "NullValue",
    "NULL",
]
