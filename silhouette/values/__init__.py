"""
Runtime value model of the template language.
"""

from __future__ import annotations

from .base import NULL, Equatable, Identifier, Indexable, NullValue, Value
from .collections import ListValue, MapValue, ObjectValue, SetValue
from .conversion import to_object, to_value
from .functions import Arguments, FunctionValue
from .scalars import BoolValue, DoubleValue, IntValue, StringValue, format_double

__all__ = [
    "Value",
    "Equatable",
    "Indexable",
    "Identifier",
    "NullValue",
    "NULL",
    "StringValue",
    "BoolValue",
    "IntValue",
    "DoubleValue",
    "format_double",
    "ListValue",
    "SetValue",
    "MapValue",
    "ObjectValue",
    "Arguments",
    "FunctionValue",
    "to_value",
    "to_object",
]
