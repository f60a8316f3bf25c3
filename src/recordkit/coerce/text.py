"""
Text <-> typed scalar conversion.

Integers accept any base prefix Python understands ("0x1f", "0b101", "1_000"),
a leading-zero octal ("010" == 8) and, failing that, a float-formatted string
("10.000") provided it is an exact integer inside the 53-bit safe range.
Every integer is then checked against the bit width of its target type.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional, Tuple

import numpy as np

from recordkit.errors import ConversionError, UnsupportedKindError
from recordkit.fields.kinds import Kind, bits_of, deref, kind_of, type_name
from recordkit.fields.resolve import FieldRef

SAFE_INT_MAX = 2 ** 53 - 1
SAFE_INT_MIN = -SAFE_INT_MAX

# C-style octal ("010" == 8), which int(s, 0) refuses
_LEGACY_OCTAL = re.compile(r"[+-]?0[0-7]+")

TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


# ---------------------------------------------------------
# Primitive parsers
# ---------------------------------------------------------
def int_range(bits: Optional[int], signed: bool) -> Optional[Tuple[int, int]]:
    if bits is None:
        return None
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def float_to_int(f: float) -> int:
    """Exact integer held by ``f``; fails outside the 53-bit safe range."""
    if math.isfinite(f):
        n = int(f)
        if n == f and SAFE_INT_MIN <= n <= SAFE_INT_MAX:
            return n
    raise ConversionError(f"can't convert {f!r} to int")


def parse_int(s: str, bits: Optional[int] = None, signed: bool = True) -> int:
    try:
        n = int(s, 8) if _LEGACY_OCTAL.fullmatch(s) else int(s, 0)
    except ValueError:
        # try again if s is a float value like "10.000"
        try:
            f = float(s)
        except ValueError:
            raise ConversionError(f"parsing {s!r}: invalid syntax") from None
        n = float_to_int(f)

    bounds = int_range(bits, signed)
    if bounds is not None and not bounds[0] <= n <= bounds[1]:
        raise ConversionError(f"parsing {s!r}: value out of range")
    return n


def parse_bool(s: str) -> bool:
    if s in TRUE_STRINGS:
        return True
    if s in FALSE_STRINGS:
        return False
    raise ConversionError(f"parsing {s!r}: invalid syntax")


def parse_float(s: str, typ: Any = float) -> Any:
    try:
        f = float(s)
    except ValueError:
        raise ConversionError(f"parsing {s!r}: invalid syntax") from None
    if typ is float:
        return f

    with np.errstate(over="ignore"):
        v = typ(f)
    if np.isinf(v) and not math.isinf(f):
        raise ConversionError(f"parsing {s!r}: value out of range")
    return v


# ---------------------------------------------------------
# Typed conversion
# ---------------------------------------------------------
def parse_text(text: str, typ: Any) -> Any:
    """
    Value of declared type ``typ`` represented by ``text``.

    For an ``Optional`` type the empty string means "no value" (None).
    """
    inner, optional = deref(typ)
    if optional and text == "":
        return None

    kind = kind_of(inner)
    if kind is Kind.BOOL:
        return inner(parse_bool(text))
    if kind is Kind.INT:
        return inner(parse_int(text, bits_of(inner), signed=True))
    if kind is Kind.UINT:
        return inner(parse_int(text, bits_of(inner), signed=False))
    if kind is Kind.FLOAT:
        return parse_float(text, inner)
    if kind is Kind.STRING:
        return text
    raise UnsupportedKindError("parse_text", type_name(typ))


def format_value(value: Any) -> str:
    """
    Shortest text that parses back to ``value``.

    None (a nil reference) formats as the empty string.
    """
    if value is None:
        return ""
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, np.floating):
        # numpy prints the shortest repr that round-trips at the scalar's own width
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return value
    raise UnsupportedKindError("format_value", type_name(type(value)))


def text_to_value(text: str, ref: FieldRef) -> None:
    """Parse ``text`` into the field behind ``ref``; the field is untouched on error."""
    ref.set(parse_text(text, ref.type))


def value_to_text(ref: FieldRef) -> str:
    return format_value(ref.get())
