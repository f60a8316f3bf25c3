"""
Generic codec: record graphs <-> self-describing plain data.

JSON or YAML decoders only produce dicts, lists and scalars, so nested
records lose their types on the way back. The generic form keeps them: every
record becomes a dict carrying its type name under a reserved key.

    Job(id="a", grid=[4, 5])  <->  {"_struct_name": "jobs.Job", "id": "a", "grid": [4, 5]}
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from recordkit.coerce.assign import assign_dynamic
from recordkit.coerce.value import Value
from recordkit.errors import UnknownPathError, UnknownTypeError
from recordkit.fields.kinds import Kind, deep_equal, type_name, value_kind
from recordkit.fields.mapper import Mapper
from recordkit.fields.naming import OMIT_EMPTY, std_tag_func
from recordkit.fields.resolve import alloc, field_by_indexes, field_by_indexes_read_only
from recordkit.fields.types import FieldInfo, StructMap

STRUCT_NAME_KEY = "_struct_name"
REFLECTOR_TAG = "reflector"


def _plain_key(k: Any) -> Any:
    # serializers only accept builtin scalar keys
    if isinstance(k, np.generic):
        return k.item()
    return k


class GenericCodec:
    def __init__(self, mapper: Optional[Mapper] = None, type_key: str = STRUCT_NAME_KEY):
        self.mapper = mapper or Mapper(REFLECTOR_TAG, std_tag_func)
        self.type_key = type_key

    def register(self, cls: type) -> type:
        """Make ``cls`` known to ``decode``; usable as a class decorator."""
        return self.mapper.register(cls)

    # -----------------------------------------------------
    # Encode
    # -----------------------------------------------------
    def encode(self, value: Any, fi: Optional[FieldInfo] = None) -> Any:
        """
        Plain-data form of ``value``, or of its field ``fi`` when given.

        None means "absent": nil references, empty lists and empty dicts all
        encode to None and are left out of the enclosing record's dict.
        """
        if fi is not None:
            ref = field_by_indexes_read_only(value, fi.index)
            if ref is None:
                return None
            value = ref.get()
        return self._encode_value(value)

    def _encode_value(self, v: Any) -> Any:
        if isinstance(v, Value):
            v = v.interface()
        if v is None:
            return None

        kind = value_kind(v)
        if kind is Kind.STRUCT:
            return self._encode_struct(self.mapper.type_map(type(v)).tree, v)
        if kind is Kind.SEQUENCE:
            if len(v) == 0:
                return None
            # nil elements keep their position
            return [self._encode_value(e) for e in v]
        if kind is Kind.MAPPING:
            if len(v) == 0:
                return None
            return {_plain_key(k): self._encode_value(e) for k, e in v.items()}
        if isinstance(v, np.generic):
            return v.item()
        return v

    def _encode_struct(self, node: FieldInfo, root: Any) -> dict:
        mp = {self.type_key: type_name(type(root))}
        for child in node.children:
            ref = field_by_indexes_read_only(root, child.index)
            if ref is None:
                continue
            cur = ref.get()
            if not child.is_optional and child.has_option(OMIT_EMPTY) and deep_equal(cur, child.zero):
                continue
            elem = self._encode_value(cur)
            if elem is not None:
                mp[child.name] = elem
        return mp

    # -----------------------------------------------------
    # Decode
    # -----------------------------------------------------
    def decode(self, node: Any) -> Any:
        """
        Rebuild values from plain data.

        Dicts carrying the type key become instances of the named (registered)
        type; other dicts and lists are decoded element-wise; scalars pass
        through.
        """
        if isinstance(node, dict):
            if not node:
                return {}
            name = node.get(self.type_key)
            if not isinstance(name, str) or name == "":
                return {k: self.decode(v) for k, v in node.items()}
            sm = self.mapper.name_map(name)
            if sm is None:
                raise UnknownTypeError(name)
            return self._decode_struct(node, sm)
        if isinstance(node, list):
            return [self.decode(e) for e in node]
        return node

    def _decode_struct(self, node: dict, sm: StructMap) -> Any:
        cls = sm.tree.type
        obj = alloc(cls)
        for k, v in node.items():
            if k == self.type_key or v is None:
                continue
            fi = sm.paths.get(k)
            if fi is None:
                raise UnknownPathError(k, type_name(cls))
            assign_dynamic(field_by_indexes(obj, fi.index), self.decode(v))
        return obj
