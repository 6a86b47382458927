"""
Скалярные значения: строки, булевы значения, целые и дробные числа.

Все скаляры неизменяемы и поддерживают структурное равенство
(Equatable): значения разных типов никогда не равны, поэтому
IntValue(1) != DoubleValue(1.0).
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Type, Union

from ..errors import SilhouetteError
from .base import Equatable, Value
from .functions import Arguments, BuiltinMembers


class _ScalarValue(BuiltinMembers, Equatable):
    """Общая основа скаляров: одно неизменяемое поле value."""

    __slots__ = ("_value",)

    def __init__(self, value: Any):
        self._value = value

    @property
    def value(self) -> Any:
        return self._value

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.value == self._value

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"


def _expect(value: Value, expected: Type[Value], method: str, name: str) -> Any:
    """Проверяет тип аргумента встроенного метода и возвращает его payload."""
    if not isinstance(value, expected):
        raise SilhouetteError(
            f"{method}() argument '{name}' must be {expected.__name__}, got {type(value).__name__}"
        )
    return value.value


# ============================== String ============================== #

class StringValue(_ScalarValue):
    """Строка; длина считается в символах Unicode."""

    __slots__ = ()

    def __init__(self, value: str):
        super().__init__(value)

    def __str__(self) -> str:
        return self._value

    def _substring(self, args: Arguments) -> Value:
        text = self._value
        start = _expect(args.require(0, "start", "substring"), IntValue, "substring", "start")
        end_arg = args.get(1, "end")
        end = len(text) if end_arg is None else _expect(end_arg, IntValue, "substring", "end")

        if not 0 <= start <= end <= len(text):
            raise SilhouetteError(
                f"substring() range {start}..{end} is out of bounds for length {len(text)}"
            )
        return StringValue(text[start:end])

    def _replace(self, args: Arguments) -> Value:
        old = _expect(args.require(0, "from", "replace"), StringValue, "replace", "from")
        new = _expect(args.require(1, "to", "replace"), StringValue, "replace", "to")
        all_arg = args.get(2, "all")
        replace_all = True if all_arg is None else _expect(all_arg, BoolValue, "replace", "all")

        if replace_all:
            return StringValue(self._value.replace(old, new))
        return StringValue(self._value.replace(old, new, 1))

    def _contains(self, args: Arguments) -> Value:
        other = _expect(args.require(0, "other", "contains"), StringValue, "contains", "other")
        return BoolValue(other in self._value)

    def _starts_with(self, args: Arguments) -> Value:
        prefix = _expect(args.require(0, "prefix", "startsWith"), StringValue, "startsWith", "prefix")
        return BoolValue(self._value.startswith(prefix))

    def _ends_with(self, args: Arguments) -> Value:
        suffix = _expect(args.require(0, "suffix", "endsWith"), StringValue, "endsWith", "suffix")
        return BoolValue(self._value.endswith(suffix))

    def _split(self, args: Arguments) -> Value:
        from .collections import ListValue

        separator = _expect(args.require(0, "separator", "split"), StringValue, "split", "separator")
        if separator == "":
            parts = list(self._value)
        else:
            parts = self._value.split(separator)
        return ListValue(StringValue(part) for part in parts)

    def _trim(self, args: Arguments) -> Value:
        return StringValue(self._value.strip())

    _properties = {
        "length": lambda self: IntValue(len(self._value)),
        "isEmpty": lambda self: BoolValue(not self._value),
        "isNotEmpty": lambda self: BoolValue(bool(self._value)),
        "toUpperCase": lambda self: StringValue(self._value.upper()),
        "toLowerCase": lambda self: StringValue(self._value.lower()),
    }

    _methods = {
        "substring": _substring,
        "replace": _replace,
        "contains": _contains,
        "startsWith": _starts_with,
        "endsWith": _ends_with,
        "split": _split,
        "trim": _trim,
    }


# ============================== Bool ============================== #

class BoolValue(_ScalarValue):
    __slots__ = ()

    def __init__(self, value: bool):
        super().__init__(bool(value))

    def __str__(self) -> str:
        return "true" if self._value else "false"


# ============================== Numbers ============================== #

_MAX_FIXED_PRECISION = 20


def _fixed_precision(args: Arguments) -> int:
    precision = _expect(
        args.require(0, "precision", "toStringAsFixed"), IntValue, "toStringAsFixed", "precision"
    )
    if not 0 <= precision <= _MAX_FIXED_PRECISION:
        raise SilhouetteError(
            f"toStringAsFixed() precision must be between 0 and {_MAX_FIXED_PRECISION}, got {precision}"
        )
    return precision


class IntValue(_ScalarValue):
    """Целое число произвольной величины."""

    __slots__ = ()

    def __init__(self, value: int):
        super().__init__(int(value))

    def __str__(self) -> str:
        return str(self._value)

    def _abs(self, args: Arguments) -> Value:
        return IntValue(abs(self._value))

    def _identity(self, args: Arguments) -> Value:
        return self

    def _to_string_as_fixed(self, args: Arguments) -> Value:
        precision = _fixed_precision(args)
        return StringValue(_format_fixed(self._value, precision))

    _properties = {
        "isEven": lambda self: BoolValue(self._value % 2 == 0),
        "isOdd": lambda self: BoolValue(self._value % 2 != 0),
    }

    _methods = {
        "abs": _abs,
        "round": _identity,
        "floor": _identity,
        "ceil": _identity,
        "toStringAsFixed": _to_string_as_fixed,
    }


def format_double(value: float) -> str:
    """
    Текстовое представление дробного числа.

    Кратчайшая десятичная запись, однозначно восстанавливающая число.
    Значения от 1e-6 до 1e21 по модулю пишутся без экспоненты
    (``3.0``, ``0.00001``, ``100000000000000000000.0``), остальные в
    экспоненциальной форме (``1e-7``, ``1.5e+21``). Для нечисловых
    значений ``NaN``, ``Infinity`` и ``-Infinity``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "-0.0" if math.copysign(1.0, value) < 0 else "0.0"

    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    # value = 0.digits * 10**point
    point = len(digits) + exponent
    prefix = "-" if sign else ""

    if len(digits) <= point <= 21:
        return f"{prefix}{digits}{'0' * (point - len(digits))}.0"
    if 0 < point <= 21:
        return f"{prefix}{digits[:point]}.{digits[point:]}"
    if -6 < point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"

    mantissa = digits if len(digits) == 1 else f"{digits[0]}.{digits[1:]}"
    power = point - 1
    return f"{prefix}{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def _format_fixed(value: Union[int, float], precision: int) -> str:
    """Фиксированная запись с округлением половин от нуля."""
    exact = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + precision + 2)
        return format(exact.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP), "f")


def _round_half_away_from_zero(value: float) -> int:
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return int(whole) if value >= 0 else -int(whole)


class DoubleValue(_ScalarValue):
    """Число с плавающей точкой двойной точности."""

    __slots__ = ()

    def __init__(self, value: float):
        super().__init__(float(value))

    def __str__(self) -> str:
        return format_double(self._value)

    def _require_finite(self, method: str) -> float:
        if not math.isfinite(self._value):
            raise SilhouetteError(f"{method}() cannot convert {format_double(self._value)} to Int")
        return self._value

    def _abs(self, args: Arguments) -> Value:
        return DoubleValue(abs(self._value))

    def _round(self, args: Arguments) -> Value:
        return IntValue(_round_half_away_from_zero(self._require_finite("round")))

    def _floor(self, args: Arguments) -> Value:
        return IntValue(math.floor(self._require_finite("floor")))

    def _ceil(self, args: Arguments) -> Value:
        return IntValue(math.ceil(self._require_finite("ceil")))

    def _to_string_as_fixed(self, args: Arguments) -> Value:
        precision = _fixed_precision(args)
        if not math.isfinite(self._value) or abs(self._value) >= 1e21:
            return StringValue(format_double(self._value))
        return StringValue(_format_fixed(self._value, precision))

    _methods = {
        "abs": _abs,
        "round": _round,
        "floor": _floor,
        "ceil": _ceil,
        "toStringAsFixed": _to_string_as_fixed,
    }


__all__ = [
    "StringValue",
    "BoolValue",
    "IntValue",
    "DoubleValue",
    "format_double",
]
