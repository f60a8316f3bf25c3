from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .kinds import Kind, deref, kind_of

# metadata key marking an embedded (anonymous) field
EMBEDDED = "__recordkit_embedded__"


def tag(value: Any = dataclasses.MISSING, *, default_factory: Any = dataclasses.MISSING,
        embedded: bool = False, **tags: str) -> Any:
    """
    ``dataclasses.field`` carrying recordkit tags in its metadata.

    ``value`` is the dataclass default of the field; every keyword other
    than ``default_factory`` and ``embedded`` is a tag, ``default`` included.

        @dataclass
        class Foo:
            size: int = tag(0, form="sz,omitempty", default="64")
            grid: List[int] = tag(default_factory=list, default="4,5")
            base: Base = tag(default_factory=Base, embedded=True)
    """
    metadata: Dict[str, Any] = dict(tags)
    if embedded:
        metadata[EMBEDDED] = True
    return field(default=value, default_factory=default_factory, metadata=metadata)


@dataclass(eq=False)
class FieldInfo:
    """
    One field occurrence in the flattened field space of a record type.

    ``index`` is the chain of positions (``dataclasses.fields`` order) from
    the root; ``path`` is the dot-joined canonical name, unique per type.
    ``children`` is only populated when this node owns a nested struct;
    fields reached through "flatten" or an embedded shortcut are listed under
    the node that owns them instead.
    """

    index: Tuple[int, ...]
    path: str
    is_optional: bool
    type: Any
    zero: Any = field(repr=False)
    name: str
    attr: str = ""
    parts: List[str] = field(default_factory=list)
    options: Dict[str, str] = field(default_factory=dict)
    embedded: bool = False
    children: List["FieldInfo"] = field(default_factory=list, repr=False)
    parent: Optional["FieldInfo"] = field(default=None, repr=False)

    @property
    def kind(self) -> Kind:
        return kind_of(self.type)

    @property
    def elem(self) -> Any:
        """Declared type with ``Optional`` removed."""
        return deref(self.type)[0]

    @property
    def is_struct(self) -> bool:
        return self.kind is Kind.STRUCT

    def has_option(self, name: str) -> bool:
        return name in self.options

    def strings_to_field(self, strs: Sequence[str], obj: Any) -> None:
        """
        Write textual values into this field of ``obj``.

        Sequence fields take one element per string; any other field takes
        exactly one string.
        """
        from recordkit.coerce.text import parse_text, text_to_value
        from recordkit.errors import ConversionError
        from .kinds import elem_type, type_name
        from .resolve import field_by_indexes

        ref = field_by_indexes(obj, self.index)
        where = f"{type_name(type(obj))}.{self.path}"

        if self.kind is Kind.SEQUENCE:
            et = elem_type(self.type)
            try:
                ref.set([parse_text(s, et) for s in strs])
            except ConversionError as e:
                raise ConversionError(f"can not convert {list(strs)} to {where}: {e}") from e
            return

        if len(strs) != 1:
            raise ConversionError(f"can not convert {list(strs)} to {where}")
        text_to_value(strs[0], ref)


@dataclass
class StructMap:
    """Index of field metadata for one record type."""

    tree: FieldInfo
    fields: List[FieldInfo]
    paths: Dict[str, FieldInfo]
    leaves: Dict[str, FieldInfo]

    def get_by_path(self, path: str) -> Optional[FieldInfo]:
        if path == "":
            return self.tree
        return self.paths.get(path)

    def get_by_traversal(self, index: Sequence[int]) -> Optional[FieldInfo]:
        """Look up a field by its index path, analogous to ``field_by_indexes``."""
        index = tuple(index)
        if not index:
            return self.tree
        for fi in self.fields:
            if fi.index == index:
                return fi
        return None
