"""
Conversion of host (Python) data into template values.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..errors import SilhouetteError
from .base import NULL, Value
from .collections import ListValue, MapValue, ObjectValue, SetValue
from .functions import FunctionValue
from .scalars import BoolValue, DoubleValue, IntValue, StringValue


def to_value(obj: Any, *, nested_objects: bool = False) -> Value:
    """
    Converts a Python object into a template value.

    Args:
        obj: None, str, bool, int, float, list/tuple, set/frozenset,
             dict, a callable taking Arguments, or an existing Value
        nested_objects: Convert str-keyed dicts into ObjectValue instead
                        of MapValue

    Returns:
        Matching Value instance

    Raises:
        SilhouetteError: For unsupported types, non-equatable set elements
                         or map keys, and invalid field names
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return NULL
    if isinstance(obj, str):
        return StringValue(obj)
    # bool is a subclass of int
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, int):
        return IntValue(obj)
    if isinstance(obj, float):
        return DoubleValue(obj)
    if isinstance(obj, (list, tuple)):
        return ListValue(to_value(item, nested_objects=nested_objects) for item in obj)
    if isinstance(obj, (set, frozenset)):
        return SetValue(to_value(item, nested_objects=nested_objects) for item in obj)
    if isinstance(obj, Mapping):
        if nested_objects and all(isinstance(key, str) for key in obj):
            return to_object(obj, nested_objects=True)
        return MapValue({
            to_value(key, nested_objects=nested_objects): to_value(item, nested_objects=nested_objects)
            for key, item in obj.items()
        })
    if callable(obj):
        return FunctionValue(obj)

    raise SilhouetteError(f"Cannot convert {type(obj).__name__} to a template value")


def to_object(mapping: Mapping[str, Any], *, nested_objects: bool = False) -> ObjectValue:
    """
    Converts a str-keyed mapping into an ObjectValue.

    Every key must be a valid identifier. Nested dicts become MapValue
    unless nested_objects is set, in which case str-keyed dicts become
    ObjectValue all the way down (the shape of YAML render contexts).
    """
    if isinstance(mapping, ObjectValue):
        return mapping
    if not isinstance(mapping, Mapping):
        raise SilhouetteError(f"Context must be a mapping, got {type(mapping).__name__}")

    fields = {}
    for key, item in mapping.items():
        if not isinstance(key, str):
            raise SilhouetteError(f"Object field names must be strings, got {type(key).__name__}")
        fields[key] = to_value(item, nested_objects=nested_objects)
    return ObjectValue(fields)


__all__ = ["to_value", "to_object"]
