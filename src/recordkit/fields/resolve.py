"""
Navigation from a record value to one of its (possibly nested) fields.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from .kinds import Kind, deref, kind_of, struct_fields, type_hints, zero_value


class _Slot:
    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value


class FieldRef:
    """
    Settable handle to one attribute of one object.

    Writes go through ``object.__setattr__`` so frozen dataclasses can be
    populated by the decoder and the default applier.
    """

    __slots__ = ("owner", "attr", "type")

    def __init__(self, owner: Any, attr: str, typ: Any):
        self.owner = owner
        self.attr = attr
        self.type = typ

    @classmethod
    def detached(cls, value: Any, typ: Any) -> "FieldRef":
        """A handle that is not part of any record (container elements, scratch values)."""
        return cls(_Slot(value), "value", typ)

    @property
    def kind(self) -> Kind:
        return kind_of(self.type)

    @property
    def is_optional(self) -> bool:
        return deref(self.type)[1]

    def get(self) -> Any:
        return getattr(self.owner, self.attr)

    def set(self, value: Any) -> None:
        object.__setattr__(self.owner, self.attr, value)

    def __repr__(self) -> str:
        return f"FieldRef({type(self.owner).__name__}.{self.attr})"


def alloc(tp: Any) -> Any:
    """A freshly allocated zero value of ``tp`` with ``Optional`` removed."""
    return zero_value(deref(tp)[0])


def _child(obj: Any, pos: int) -> FieldRef:
    cls = type(obj)
    f = struct_fields(cls)[pos]
    return FieldRef(obj, f.name, type_hints(cls)[f.name])


def field_by_indexes(obj: Any, index: Sequence[int]) -> FieldRef:
    """
    Resolve ``index`` from ``obj`` for writing.

    Every nil optional struct met on the way is replaced with a fresh zero
    instance, so the returned handle always sits in a fully linked chain.
    An empty index yields a detached handle on ``obj`` itself.
    """
    if not index:
        return FieldRef.detached(obj, type(obj))

    cur = obj
    ref = None
    for depth, pos in enumerate(index):
        ref = _child(cur, pos)
        if depth == len(index) - 1:
            break
        cur = ref.get()
        if cur is None:
            cur = alloc(ref.type)
            ref.set(cur)
    return ref


def field_by_indexes_read_only(obj: Any, index: Sequence[int]) -> Optional[FieldRef]:
    """
    Resolve ``index`` from ``obj`` for reading.

    Returns None as soon as a nil reference is met; ``obj`` is never modified.
    """
    if obj is None:
        return None
    if not index:
        return FieldRef.detached(obj, type(obj))

    cur = obj
    ref = None
    for depth, pos in enumerate(index):
        if cur is None:
            return None
        ref = _child(cur, pos)
        if depth < len(index) - 1:
            cur = ref.get()
    return ref
