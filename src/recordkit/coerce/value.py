"""
Value: accessor over one loosely typed value.

Numbers decoded from JSON arrive as float, from YAML as int, from forms as
str; Value reads any of them as the number the caller wants.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from recordkit.errors import ConversionError, NilValueError, ReflectError
from .text import float_to_int, format_value, int_range, parse_bool, parse_float, parse_int


def _wrap(n: int, bits: int, signed: bool) -> int:
    lo, hi = int_range(bits, signed)
    return (n - lo) % (hi - lo + 1) + lo


class Value:
    __slots__ = ("_v",)

    def __init__(self, v: Any = None):
        self._v = v

    def __repr__(self) -> str:
        return f"Value({self._v!r})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Value):
            return self._v == other._v
        return NotImplemented

    def interface(self) -> Any:
        return self._v

    def is_nil(self) -> bool:
        return self._v is None

    def default(self, default_val: Any) -> "Value":
        """This value, or ``default_val`` when nil."""
        if self._v is None:
            return Value(default_val)
        return self

    def plus(self, step: Any) -> "Value":
        """
        Add an integral ``step``; the result keeps the type of the held value.

        A nil or non-numeric held value yields ``step`` itself. Sized numpy
        integers wrap around like machine integers.
        """
        i = Value(step).to_int()
        v = self._v

        if v is None or isinstance(v, (bool, np.bool_)):
            return Value(step)
        if isinstance(v, np.integer):
            info = np.iinfo(type(v))
            return Value(type(v)(_wrap(int(v) + i, info.bits, info.min < 0)))
        if isinstance(v, int):
            return Value(v + i)
        if isinstance(v, (float, np.floating)):
            try:
                return Value(type(v)(float_to_int(float(v)) + i))
            except ConversionError:
                return Value(step)
        if isinstance(v, str):
            try:
                return Value(str(parse_int(v, 64) + i))
            except ConversionError:
                return Value(step)
        return Value(step)

    def __str__(self) -> str:
        if self._v is None:
            return ""
        try:
            return format_value(self._v)
        except ReflectError:
            return str(self._v)

    # -----------------------------------------------------
    # Strict accessors
    # -----------------------------------------------------
    def to_int(self) -> int:
        v = self._v
        if v is None:
            raise NilValueError()
        if isinstance(v, (bool, np.bool_)):
            raise ConversionError(f"can't get int from {v!r}")
        if isinstance(v, (int, np.integer)):
            return int(v)
        if isinstance(v, (float, np.floating)):
            return float_to_int(float(v))
        if isinstance(v, str):
            return parse_int(v, 64)
        raise ConversionError(f"can't get int from {v!r}")

    def to_uint(self) -> int:
        v = self._v
        if isinstance(v, str):
            return parse_int(v, 64, signed=False)
        n = self.to_int()
        if n < 0:
            raise ConversionError(f"can't get uint from {v!r}")
        return n

    def to_float(self) -> float:
        v = self._v
        if v is None:
            raise NilValueError()
        if isinstance(v, (bool, np.bool_)):
            raise ConversionError(f"can't get float from {v!r}")
        if isinstance(v, (int, float, np.integer, np.floating)):
            return float(v)
        if isinstance(v, str):
            return parse_float(v)
        raise ConversionError(f"can't get float from {v!r}")

    def to_bool(self) -> bool:
        s = str(self)
        if s == "":
            raise NilValueError()
        return parse_bool(s)

    # -----------------------------------------------------
    # Lenient accessors: zero on any error
    # -----------------------------------------------------
    def as_int(self) -> int:
        try:
            return self.to_int()
        except ReflectError:
            return 0

    def as_uint(self) -> int:
        try:
            return self.to_uint()
        except ReflectError:
            return 0

    def as_float(self) -> float:
        try:
            return self.to_float()
        except ReflectError:
            return 0.0

    def as_bool(self) -> bool:
        try:
            return self.to_bool()
        except ReflectError:
            return False
