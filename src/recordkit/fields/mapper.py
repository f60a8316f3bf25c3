"""
Mapper: cached, process-wide access to field trees.

A Mapper obeys one tag key and one naming function, much like the
marshallers in the standard library obey their own tag, and hands out the
``StructMap`` of any dataclass on first use. Trees are never evicted.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from recordkit.errors import NotAStructError
from .builder import get_mapping
from .kinds import deref, is_struct_type, type_name
from .naming import TagFunc, std_tag_func
from .resolve import FieldRef, field_by_indexes, field_by_indexes_read_only
from .types import StructMap


class Mapper:
    def __init__(self, tag_name: str = "", tag_func: Optional[TagFunc] = None):
        self.tag_name = tag_name
        self.tag_func = tag_func or std_tag_func
        self._cache: Dict[type, StructMap] = {}
        self._names: Dict[str, type] = {}

    def __repr__(self) -> str:
        return f"Mapper(tag_name={self.tag_name!r}, tag_func={self.tag_func.__name__})"

    # -----------------------------------------------------
    # Cache
    # -----------------------------------------------------
    def type_map(self, cls: Any) -> StructMap:
        """Field tree of ``cls`` (``Optional[cls]`` is accepted), built once."""
        cls = deref(cls)[0]
        mapping = self._cache.get(cls)
        if mapping is not None:
            return mapping
        if not is_struct_type(cls):
            raise NotAStructError(cls)

        built = get_mapping(cls, self.tag_name, self.tag_func)
        # two racing builders produce equal trees; the first stored one wins
        mapping = self._cache.setdefault(cls, built)
        self._names.setdefault(type_name(cls), cls)
        return mapping

    def register(self, cls: type) -> type:
        """Build (and so make known by name) the tree of ``cls``; usable as a decorator."""
        self.type_map(cls)
        return cls

    def type_by_name(self, name: str) -> Optional[type]:
        return self._names.get(name)

    def name_map(self, name: str) -> Optional[StructMap]:
        """StructMap of a previously mapped type, looked up by its type name."""
        cls = self._names.get(name)
        if cls is None:
            return None
        return self._cache[cls]

    # -----------------------------------------------------
    # Lookups on values
    # -----------------------------------------------------
    def field_map(self, obj: Any) -> Dict[str, FieldRef]:
        """Every canonical path of ``obj`` mapped to a writable handle."""
        tm = self.type_map(type(obj))
        return {path: field_by_indexes(obj, fi.index) for path, fi in tm.paths.items()}

    def field_by_path(self, obj: Any, path: str) -> Optional[FieldRef]:
        fi = self.type_map(type(obj)).get_by_path(path)
        if fi is None:
            return None
        return field_by_indexes(obj, fi.index)

    def fields_by_path(self, obj: Any, paths: Sequence[str]) -> List[Optional[FieldRef]]:
        tm = self.type_map(type(obj))
        refs: List[Optional[FieldRef]] = []
        for path in paths:
            fi = tm.get_by_path(path)
            refs.append(None if fi is None else field_by_indexes(obj, fi.index))
        return refs

    def traversals_by_path(self, cls: type, paths: Sequence[str]) -> List[Tuple[int, ...]]:
        """Index path for each canonical path; ``()`` for unknown paths."""
        tm = self.type_map(cls)
        return [tm.paths[p].index if p in tm.paths else () for p in paths]


STD_MAPPER = Mapper("", std_tag_func)


def copy_struct(dst: Any, src: Any) -> None:
    """
    Copy every leaf of ``src`` whose canonical path also exists in ``dst``.

    Leaves behind a nil reference in ``src`` are skipped; values are
    converted into the destination's declared types.
    """
    from recordkit.coerce.assign import assign_dynamic

    src_map = STD_MAPPER.type_map(type(src))
    dst_map = STD_MAPPER.type_map(type(dst))

    for path, src_fi in src_map.leaves.items():
        dst_fi = dst_map.leaves.get(path)
        if dst_fi is None:
            continue
        src_ref = field_by_indexes_read_only(src, src_fi.index)
        if src_ref is None:
            continue
        assign_dynamic(field_by_indexes(dst, dst_fi.index), src_ref.get())
