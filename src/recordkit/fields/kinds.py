"""
Type analysis helpers.

Everything in recordkit works from declared annotations, so this module is
the single place that turns an annotation (``Optional[List[np.int16]]``,
``Dict[str, Any]``, a dataclass ...) into a Kind plus the handful of facts
the builder, coercer and codec need.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import sys
import types
import typing
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

import numpy as np


class Kind(enum.Enum):
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STRING = "string"
    STRUCT = "struct"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    ANY = "any"
    UNSUPPORTED = "unsupported"


_NONE_TYPE = type(None)
_UNION_TYPES: Tuple[Any, ...] = (Union,)
if sys.version_info >= (3, 10):
    _UNION_TYPES = (Union, types.UnionType)

# numpy scalar -> bit width
INT_BITS: Dict[type, int] = {np.int8: 8, np.int16: 16, np.int32: 32, np.int64: 64}
UINT_BITS: Dict[type, int] = {np.uint8: 8, np.uint16: 16, np.uint32: 32, np.uint64: 64}
FLOAT_BITS: Dict[type, int] = {np.float16: 16, np.float32: 32, np.float64: 64, float: 64}


# ---------------------------------------------------------
# Annotation shape
# ---------------------------------------------------------
def deref(tp: Any) -> Tuple[Any, bool]:
    """Strip one ``Optional[...]`` layer: returns (inner type, is_optional)."""
    if typing.get_origin(tp) in _UNION_TYPES:
        args = [a for a in typing.get_args(tp) if a is not _NONE_TYPE]
        if len(args) == 1 and len(args) != len(typing.get_args(tp)):
            return args[0], True
    return tp, False


def is_optional(tp: Any) -> bool:
    return deref(tp)[1]


def is_struct_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def kind_of(tp: Any) -> Kind:
    """Kind of a declared type, looking through ``Optional``."""
    tp, _ = deref(tp)
    if tp is Any or tp is object:
        return Kind.ANY
    if is_struct_type(tp):
        return Kind.STRUCT

    origin = typing.get_origin(tp)
    if origin is list or tp is list:
        return Kind.SEQUENCE
    if origin is dict or tp is dict:
        return Kind.MAPPING
    if origin is not None:
        return Kind.UNSUPPORTED

    if tp is bool or tp is np.bool_:
        return Kind.BOOL
    if tp is int or tp in INT_BITS:
        return Kind.INT
    if tp in UINT_BITS:
        return Kind.UINT
    if tp in FLOAT_BITS:
        return Kind.FLOAT
    if tp is str:
        return Kind.STRING
    return Kind.UNSUPPORTED


def value_kind(value: Any) -> Kind:
    """Kind of a runtime value (used where no declaration is available)."""
    if value is None:
        return Kind.ANY
    if isinstance(value, (bool, np.bool_)):
        return Kind.BOOL
    if isinstance(value, np.unsignedinteger):
        return Kind.UINT
    if isinstance(value, (int, np.integer)):
        return Kind.INT
    if isinstance(value, (float, np.floating)):
        return Kind.FLOAT
    if isinstance(value, str):
        return Kind.STRING
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Kind.STRUCT
    if isinstance(value, (list, tuple)):
        return Kind.SEQUENCE
    if isinstance(value, dict):
        return Kind.MAPPING
    return Kind.UNSUPPORTED


def elem_type(tp: Any) -> Any:
    """Element type of a sequence annotation (``Any`` for a bare ``list``)."""
    tp, _ = deref(tp)
    args = typing.get_args(tp)
    return args[0] if args else Any


def key_elem_types(tp: Any) -> Tuple[Any, Any]:
    """(key type, value type) of a mapping annotation."""
    tp, _ = deref(tp)
    args = typing.get_args(tp)
    if len(args) == 2:
        return args[0], args[1]
    return Any, Any


def bits_of(tp: Any) -> Optional[int]:
    """Bit width of a numeric scalar type; None for unbounded ``int``."""
    tp, _ = deref(tp)
    return INT_BITS.get(tp) or UINT_BITS.get(tp) or FLOAT_BITS.get(tp)


def type_name(tp: Any) -> str:
    """Printable name of a type; for classes ``module.qualname``."""
    if isinstance(tp, type):
        if tp.__module__ == "builtins":
            return tp.__qualname__
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp).replace("typing.", "")


def struct_fields(cls: type) -> Tuple[dataclasses.Field, ...]:
    return dataclasses.fields(cls)


@functools.lru_cache(maxsize=None)
def type_hints(cls: type) -> Dict[str, Any]:
    """Resolved annotations of a dataclass (``Annotated`` extras stripped)."""
    return typing.get_type_hints(cls)


# ---------------------------------------------------------
# Zero values
# ---------------------------------------------------------
def zero_value(tp: Any, _expanding: FrozenSet[type] = frozenset()) -> Any:
    """
    The empty instance of a declared type.

    Struct instances are created without running ``__init__`` so types with
    required fields or side-effecting ``__post_init__`` hooks can still be
    allocated. A non-optional struct that contains itself yields None at the
    point of recursion.
    """
    inner, optional = deref(tp)
    if optional:
        return None

    kind = kind_of(inner)
    if kind is Kind.STRUCT:
        if inner in _expanding:
            return None
        obj = inner.__new__(inner)
        hints = type_hints(inner)
        for f in struct_fields(inner):
            object.__setattr__(obj, f.name, zero_value(hints[f.name], _expanding | {inner}))
        return obj
    if kind is Kind.SEQUENCE:
        return []
    if kind is Kind.MAPPING:
        return {}
    if kind is Kind.STRING:
        return ""
    if kind in (Kind.BOOL, Kind.INT, Kind.UINT, Kind.FLOAT):
        return inner(0)
    return None


# ---------------------------------------------------------
# Structural equality
# ---------------------------------------------------------
def deep_equal(a: Any, b: Any) -> bool:
    """Equality that recurses through dataclasses, lists and dicts by value."""
    if a is b:
        return True
    if a is None or b is None:
        return False
    if dataclasses.is_dataclass(a) and not isinstance(a, type):
        if type(a) is not type(b):
            return False
        return all(deep_equal(getattr(a, f.name), getattr(b, f.name)) for f in struct_fields(type(a)))
    if isinstance(a, (list, tuple)):
        if not isinstance(b, (list, tuple)) or len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, dict):
        if not isinstance(b, dict) or a.keys() != b.keys():
            return False
        return all(deep_equal(v, b[k]) for k, v in a.items())
    if isinstance(a, (bool, np.bool_)) != isinstance(b, (bool, np.bool_)):
        return False
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        return False
