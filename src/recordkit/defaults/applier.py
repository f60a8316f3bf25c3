"""
Declarative default values.

    @dataclass
    class Job:
        name: str = tag("", default="job")
        grid: List[int] = tag(default_factory=list, default="4,5")
        scf: Dict[str, float] = tag(default_factory=dict, default="tol=1e-8,damp=0.5")

Every record type gets one cached template instance holding all declared
defaults. Copies of it are handed out, never the template itself.
"""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from recordkit.coerce.text import parse_text
from recordkit.errors import DefaultTagError, ReflectError
from recordkit.fields.kinds import Kind, deep_equal, deref, elem_type, key_elem_types, struct_fields, type_name, zero_value
from recordkit.fields.mapper import Mapper
from recordkit.fields.naming import TagFunc, default_tag_func
from recordkit.fields.resolve import field_by_indexes
from recordkit.fields.types import FieldInfo

logger = logging.getLogger(__name__)

DEFAULT_TAG = "default"


@dataclass
class DefaultField:
    index: Tuple[int, ...]
    is_optional: bool
    kind: Kind
    # zero of the field type with Optional removed
    zero: Any = field(repr=False)
    value: Any = None


@dataclass
class DefaultStruct:
    fields: List[DefaultField]
    zero: Any = field(repr=False)
    value: Any = field(repr=False)


_NO_DEFAULTS = object()


class DefaultMapper:
    def __init__(self, tag_name: str = DEFAULT_TAG, tag_func: Optional[TagFunc] = None):
        self.mapper = Mapper(tag_name or DEFAULT_TAG, tag_func or default_tag_func)
        self._cache: Dict[type, DefaultStruct] = {}
        self._local = threading.local()

    def _pending(self) -> Set[type]:
        pending = getattr(self._local, "pending", None)
        if pending is None:
            pending = self._local.pending = set()
        return pending

    # -----------------------------------------------------
    # Template cache
    # -----------------------------------------------------
    def get_default_struct(self, cls: Any) -> DefaultStruct:
        cls = deref(cls)[0]
        ds = self._cache.get(cls)
        if ds is not None:
            return ds

        pending = self._pending()
        if cls in pending:
            # re-entered through a recursive type: the inner occurrence gets no defaults
            return DefaultStruct(fields=[], zero=None, value=None)

        pending.add(cls)
        try:
            built = self._build(cls)
        finally:
            pending.discard(cls)
        return self._cache.setdefault(cls, built)

    def _build(self, cls: type) -> DefaultStruct:
        tree = self.mapper.type_map(cls).tree
        ds = DefaultStruct(fields=[], zero=zero_value(cls), value=zero_value(cls))

        for fi in tree.children:
            kind = fi.kind
            if kind is not Kind.STRUCT and not fi.parts:
                continue

            try:
                dv = self._default_of(fi, kind)
            except ReflectError as e:
                raise DefaultTagError(f"bad default for {type_name(cls)}.{fi.path}: {e}") from e
            if dv is _NO_DEFAULTS:
                continue

            field_by_indexes(ds.value, fi.index).set(dv)
            ds.fields.append(DefaultField(fi.index, fi.is_optional, kind, fi.zero, dv))

        logger.debug("built default template for %s: %d fields", type_name(cls), len(ds.fields))
        return ds

    def _default_of(self, fi: FieldInfo, kind: Kind) -> Any:
        inner = fi.elem
        if kind is Kind.STRUCT:
            child = self.get_default_struct(inner)
            if not child.fields:
                return _NO_DEFAULTS
            return copy.deepcopy(child.value)
        if kind is Kind.MAPPING:
            kt, vt = key_elem_types(inner)
            return {parse_text(k, kt): parse_text(v, vt) for k, v in fi.options.items()}
        if kind is Kind.SEQUENCE:
            et = elem_type(inner)
            return [parse_text(p, et) for p in fi.parts]
        return parse_text(fi.parts[0], inner)

    # -----------------------------------------------------
    # Application
    # -----------------------------------------------------
    def set_default(self, obj: Any) -> None:
        """
        Fill zero-valued fields of ``obj`` with their declared defaults.

        Non-zero fields are left alone; nested structs (and non-nil optional
        structs) are updated recursively rather than replaced.
        """
        ds = self.get_default_struct(type(obj))
        if deep_equal(obj, ds.zero):
            fresh = copy.deepcopy(ds.value)
            for f in struct_fields(type(obj)):
                object.__setattr__(obj, f.name, getattr(fresh, f.name))
            return

        for df in ds.fields:
            ref = field_by_indexes(obj, df.index)
            cur = ref.get()
            if cur is None:
                ref.set(copy.deepcopy(df.value))
            elif df.kind is Kind.STRUCT:
                self.set_default(cur)
            elif not df.is_optional and deep_equal(cur, df.zero):
                ref.set(copy.deepcopy(df.value))

    def alloc_default(self, cls: Any) -> Any:
        """A new instance of ``cls`` holding every declared default."""
        return copy.deepcopy(self.get_default_struct(cls).value)


DEFAULT_MAPPER = DefaultMapper()


def set_default(obj: Any) -> None:
    DEFAULT_MAPPER.set_default(obj)


def alloc_default(cls: Any) -> Any:
    return DEFAULT_MAPPER.alloc_default(cls)
