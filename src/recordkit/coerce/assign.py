"""
Assignment of loosely typed values (as produced by JSON/YAML decoders) into
concretely typed fields.

    int  <- 3.0, "3", np.int16(3)
    List[np.int16] <- [1, 2.0, "3"]
    Dict[int, str] <- {"1": 1, "2": True}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from recordkit.errors import TypeMismatchError
from recordkit.fields.kinds import Kind, deref, elem_type, key_elem_types, kind_of, type_name, zero_value
from recordkit.fields.resolve import FieldRef
from .text import format_value, parse_text
from .value import Value


def _mismatch(expected: Any, src: Any) -> TypeMismatchError:
    return TypeMismatchError(type_name(expected), type_name(type(src)))


def convert(src: Any, typ: Any) -> Any:
    """
    ``src`` converted to the declared type ``typ``.

    None converts to the zero value of ``typ``. Struct targets require the
    exact type; sequences and mappings are rebuilt element by element; any
    other kind goes through its text form.
    """
    if isinstance(src, Value):
        src = src.interface()

    inner, optional = deref(typ)
    if src is None:
        return None if optional else zero_value(inner)

    kind = kind_of(inner)
    if kind is Kind.ANY or type(src) is inner:
        return src

    if kind is Kind.STRUCT:
        raise _mismatch(typ, src)

    if kind is Kind.SEQUENCE:
        if not isinstance(src, (list, tuple)):
            raise _mismatch(typ, src)
        et = elem_type(inner)
        return [convert(e, et) for e in src]

    if kind is Kind.MAPPING:
        if not isinstance(src, Mapping):
            raise _mismatch(typ, src)
        kt, vt = key_elem_types(inner)
        return {convert(k, kt): convert(v, vt) for k, v in src.items()}

    return parse_text(format_value(src), inner)


def assign_dynamic(ref: FieldRef, src: Any) -> None:
    """
    Store ``src`` into the field behind ``ref`` converting as needed.

    A None source is a no-op. On error the field keeps its old value.
    """
    if isinstance(src, Value):
        src = src.interface()
    if src is None:
        return
    ref.set(convert(src, ref.type))
