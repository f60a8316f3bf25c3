from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, FrozenSet, List, Tuple

from recordkit.errors import DuplicatePathError, NotAStructError
from .kinds import Kind, deref, is_struct_type, kind_of, struct_fields, type_hints, type_name, zero_value
from .naming import FLATTEN, IGNORE, OMIT_NESTED, TagFunc, parse_options
from .types import EMBEDDED, FieldInfo, StructMap

logger = logging.getLogger(__name__)


@dataclass
class _Pending:
    cls: type
    owner: FieldInfo
    index: Tuple[int, ...]
    # struct types already being expanded on the way down to this one
    expanding: FrozenSet[type]


def _read_tag(f, tag_name: str) -> str:
    if not tag_name or tag_name not in f.metadata:
        return ""
    return str(f.metadata[tag_name])


def get_mapping(cls: type, tag_name: str, tag_func: TagFunc) -> StructMap:
    """
    Build the field tree of ``cls``.

    Breadth-first over the declared fields; nested struct fields are queued
    for expansion with an "owner" that receives their children. Flattened
    and embedded (shortcut) structs hand their children to the parent, so
    their fields appear at the parent's path.
    """
    if not is_struct_type(cls):
        raise NotAStructError(cls)

    root = FieldInfo(
        index=(),
        path="",
        is_optional=False,
        type=cls,
        zero=zero_value(cls),
        name=type_name(cls),
    )
    found: List[FieldInfo] = []
    queue: Deque[_Pending] = deque([_Pending(cls, root, (), frozenset())])

    while queue:
        item = queue.popleft()
        if item.cls in item.expanding:
            continue

        hints = type_hints(item.cls)
        for pos, f in enumerate(struct_fields(item.cls)):
            embedded = bool(f.metadata.get(EMBEDDED, False))
            if f.name.startswith("_") and not embedded:
                continue

            name, parts = tag_func(f.name, _read_tag(f, tag_name))
            if name == IGNORE or name == "":
                continue

            declared = hints[f.name]
            inner, optional = deref(declared)
            fi = FieldInfo(
                index=item.index + (pos,),
                path=name if item.owner.path == "" else f"{item.owner.path}.{name}",
                is_optional=optional,
                type=declared,
                zero=zero_value(inner),
                name=name,
                attr=f.name,
                parts=list(parts),
                options=parse_options(parts),
                embedded=embedded,
                parent=item.owner,
            )

            owner = fi
            if kind_of(inner) is Kind.STRUCT:
                if FLATTEN in fi.options:
                    owner = item.owner
                if embedded:
                    # the naming function may rewrite names, compare against its own default
                    default_name, _ = tag_func(f.name, "")
                    if default_name == name:
                        owner = item.owner
                if OMIT_NESTED not in fi.options:
                    queue.append(_Pending(inner, owner, fi.index, item.expanding | {item.cls}))

            if owner is fi:
                item.owner.children.append(fi)
            found.append(fi)

    paths: Dict[str, FieldInfo] = {}
    leaves: Dict[str, FieldInfo] = {}
    for fi in found:
        if fi.path in paths:
            raise DuplicatePathError(type_name(cls), fi.path, paths[fi.path].index, fi.index)
        paths[fi.path] = fi
        if not fi.is_struct:
            leaves[fi.path] = fi

    logger.debug("built field tree for %s: %d fields, %d leaves", type_name(cls), len(found), len(leaves))
    return StructMap(tree=root, fields=found, paths=paths, leaves=leaves)
