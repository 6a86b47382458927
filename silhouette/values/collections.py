"""
Collection values: List, Set, Map and Object.

Collections are immutable snapshots of the host data they were built
from. They are not Equatable: two distinct lists with the same content
are different values.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Tuple

from ..errors import SilhouetteError, UnknownKeyError, UnknownPropertyError
from .base import Equatable, Identifier, Indexable, Value
from .functions import Arguments, BuiltinMembers
from .scalars import BoolValue, IntValue, StringValue, _expect


def _require_equatable(value: Value, role: str) -> Value:
    if not isinstance(value, Equatable):
        raise SilhouetteError(f"{type(value).__name__} cannot be used as a {role}")
    return value


def _size_properties(**extra):
    properties = {
        "length": lambda self: IntValue(len(self._items)),
        "isEmpty": lambda self: BoolValue(len(self._items) == 0),
        "isNotEmpty": lambda self: BoolValue(len(self._items) > 0),
    }
    properties.update(extra)
    return properties


class ListValue(BuiltinMembers, Indexable):
    """Ordered sequence indexed by non-negative Int."""

    key_type = IntValue

    def __init__(self, items: Iterable[Value] = ()):
        self._items: Tuple[Value, ...] = tuple(items)

    @property
    def value(self) -> Tuple[Value, ...]:
        return self._items

    def _value_for_key(self, key: IntValue) -> Value:
        index = key.value
        if not 0 <= index < len(self._items):
            raise UnknownKeyError(index)
        return self._items[index]

    def __str__(self) -> str:
        return "[" + ", ".join(str(item) for item in self._items) + "]"

    def __repr__(self) -> str:
        return f"ListValue({list(self._items)!r})"

    def _first(self) -> Value:
        if not self._items:
            raise SilhouetteError("Cannot get first element of empty list")
        return self._items[0]

    def _last(self) -> Value:
        if not self._items:
            raise SilhouetteError("Cannot get last element of empty list")
        return self._items[-1]

    def _join(self, args: Arguments) -> Value:
        separator_arg = args.get(0, "separator")
        separator = "" if separator_arg is None else _expect(separator_arg, StringValue, "join", "separator")
        return StringValue(separator.join(str(item) for item in self._items))

    def _reverse(self, args: Arguments) -> Value:
        return ListValue(reversed(self._items))

    def _contains(self, args: Arguments) -> Value:
        item = args.require(0, "item", "contains")
        return BoolValue(any(element == item for element in self._items))

    def _slice(self, args: Arguments) -> Value:
        length = len(self._items)
        start_arg = args.get(0, "start")
        end_arg = args.get(1, "end")

        start = 0 if start_arg is None else _expect(start_arg, IntValue, "slice", "start")
        end = length if end_arg is None else _expect(end_arg, IntValue, "slice", "end")

        start = min(max(start, 0), length)
        end = min(max(end, start), length)
        return ListValue(self._items[start:end])

    _properties = _size_properties(
        first=_first,
        last=_last,
    )

    _methods = {
        "join": _join,
        "reverse": _reverse,
        "contains": _contains,
        "slice": _slice,
    }


class SetValue(BuiltinMembers):
    """
    Collection of unique Equatable values.

    Iteration and rendering follow first-insertion order.
    """

    def __init__(self, items: Iterable[Value] = ()):
        unique: Dict[Value, None] = {}
        for item in items:
            unique[_require_equatable(item, "set element")] = None
        self._items: Tuple[Value, ...] = tuple(unique)

    @property
    def value(self) -> Tuple[Value, ...]:
        return self._items

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __str__(self) -> str:
        return "{" + ", ".join(str(item) for item in self._items) + "}"

    def __repr__(self) -> str:
        return f"SetValue({list(self._items)!r})"

    _properties = _size_properties()


class MapValue(BuiltinMembers, Indexable):
    """Mapping from Equatable keys to values, indexed by key."""

    key_type = Equatable

    def __init__(self, entries: Mapping[Value, Value] | None = None):
        self._items: Dict[Value, Value] = {}
        for key, item in (entries or {}).items():
            self._items[_require_equatable(key, "map key")] = item

    @property
    def value(self) -> Mapping[Value, Value]:
        return dict(self._items)

    def _value_for_key(self, key: Value) -> Value:
        try:
            return self._items[key]
        except KeyError:
            raise UnknownKeyError(key) from None

    def __str__(self) -> str:
        return _render_entries(self._items)

    def __repr__(self) -> str:
        return f"MapValue({self._items!r})"

    _properties = _size_properties(
        keys=lambda self: SetValue(self._items.keys()),
        values=lambda self: ListValue(self._items.values()),
    )


class ObjectValue(BuiltinMembers, Indexable):
    """
    Record of named fields; the usual shape of a render context.

    Field names are validated Identifiers. Fields shadow the built-in
    size properties, so ``{{ user.length }}`` prefers a ``length`` field.
    """

    key_type = StringValue

    def __init__(self, fields: Mapping[str, Value] | None = None):
        self._items: Dict[Identifier, Value] = {
            Identifier(name): item for name, item in (fields or {}).items()
        }

    @property
    def value(self) -> Mapping[Identifier, Value]:
        return dict(self._items)

    def field(self, name: str) -> Value:
        """
        Returns a field without falling back to built-in properties.

        Raises:
            UnknownPropertyError: If no such field exists
        """
        try:
            return self._items[name]
        except KeyError:
            raise UnknownPropertyError(name) from None

    def merged(self, other: ObjectValue) -> ObjectValue:
        """New object with fields of ``other`` overriding ours."""
        combined = dict(self._items)
        combined.update(other._items)
        return ObjectValue(combined)

    def retrieve(self, name: str) -> Value:
        if name in self._items:
            return self._items[name]
        return super().retrieve(name)

    def _value_for_key(self, key: StringValue) -> Value:
        name = key.value
        if not Identifier.is_valid(name) or name not in self._items:
            raise UnknownKeyError(name)
        return self._items[name]

    def __str__(self) -> str:
        return _render_entries(self._items)

    def __repr__(self) -> str:
        return f"ObjectValue({dict(self._items)!r})"

    _properties = _size_properties()


def _render_entries(entries: Mapping[object, Value]) -> str:
    return "{" + ", ".join(f"{key}: {item}" for key, item in entries.items()) + "}"


__all__ = ["ListValue", "SetValue", "MapValue", "ObjectValue"]
