"""Canonical conversions from loosely-typed input values to scalar kinds."""

from __future__ import annotations

import math
import numbers
import re
from typing import Any, Callable, Dict

from .exceptions import ConversionError
from .shapes import ShapeKind

_INTEGER = re.compile(r"[+-]?\d+")
_TRUE_TEXT = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_TEXT = frozenset({"0", "f", "F", "FALSE", "false", "False"})
# integral floats at or above this magnitude render in exponent form
_EXPONENT_AT = 1e21


def format_value(value: Any) -> str:  # noqa: ANN401
    """Render a scalar the way it would appear in a config file."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < _EXPONENT_AT:
        return str(int(value))
    return str(value)


def to_string(value: Any, *, field: str | None = None) -> str:  # noqa: ANN401
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, numbers.Real)):
        return format_value(value)
    raise ConversionError(value=value, target="str", field=field)


def to_int(value: Any, *, field: str | None = None) -> int:  # noqa: ANN401
    if isinstance(value, bool):
        raise ConversionError(value=value, target="int", field=field)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        as_float = float(value)
        if math.isfinite(as_float) and as_float.is_integer():
            return int(as_float)
        raise ConversionError(value=value, target="int", field=field)
    if isinstance(value, str) and _INTEGER.fullmatch(value):
        return int(value)
    raise ConversionError(value=value, target="int", field=field)


def to_bool(value: Any, *, field: str | None = None) -> bool:  # noqa: ANN401
    if isinstance(value, bool):
        return value
    if isinstance(value, (str, numbers.Real)):
        text = format_value(value)
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False
    raise ConversionError(value=value, target="bool", field=field)


def to_float(value: Any, *, field: str | None = None) -> float:  # noqa: ANN401
    if isinstance(value, bool):
        raise ConversionError(value=value, target="float", field=field)
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as exc:
            raise ConversionError(value=value, target="float", field=field) from exc
    raise ConversionError(value=value, target="float", field=field)


_CONVERTERS: Dict[ShapeKind, Callable[..., Any]] = {
    ShapeKind.STRING: to_string,
    ShapeKind.INTEGER: to_int,
    ShapeKind.BOOLEAN: to_bool,
    ShapeKind.FLOAT: to_float,
}


def coerce_scalar(kind: ShapeKind, value: Any, *, field: str | None = None) -> Any:  # noqa: ANN401
    """Convert ``value`` to the primitive type of ``kind``.

    Raises:
        ConversionError: if the value has no canonical conversion.
    """

    converter = _CONVERTERS.get(kind)
    if converter is None:
        raise ValueError(f"{kind} is not a scalar kind")
    return converter(value, field=field)


__all__ = [
    "coerce_scalar",
    "format_value",
    "to_bool",
    "to_float",
    "to_int",
    "to_string",
]
