from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, Callable, Dict, Optional, Union

import yaml

from recordkit.errors import TypeMismatchError
from recordkit.fields.kinds import type_name
from recordkit.fields.mapper import Mapper
from recordkit.fields.naming import TagFunc, std_tag_func
from .generic import REFLECTOR_TAG, STRUCT_NAME_KEY, GenericCodec

logger = logging.getLogger(__name__)

FORMATS = ("json", "indentedjson", "yaml")


def _json_dump(indent: Optional[int]) -> Callable[[Any], bytes]:
    def dump(v: Any) -> bytes:
        return json.dumps(v, indent=indent, sort_keys=True).encode("utf-8")
    return dump


def _yaml_dump(v: Any) -> bytes:
    return yaml.safe_dump(v, sort_keys=True, default_flow_style=False).encode("utf-8")


class Reflector:
    """
    Typed round trip through a textual format.

    ``json.loads`` and ``yaml.safe_load`` only give back dicts; a Reflector
    gives back the registered dataclasses the data was encoded from.

        r = Reflector("yaml")
        r.register(Job)
        job = r.decode(r.encode(Job(id="a")))
    """

    def __init__(self, format: str = "indentedjson", tag_name: str = REFLECTOR_TAG,
                 tag_func: Optional[TagFunc] = None, type_key: str = STRUCT_NAME_KEY):
        if format == "json":
            self._marshal = _json_dump(None)
            self._unmarshal = json.loads
        elif format == "indentedjson":
            self._marshal = _json_dump(4)
            self._unmarshal = json.loads
        elif format == "yaml":
            self._marshal = _yaml_dump
            self._unmarshal = yaml.safe_load
        else:
            raise ValueError(f"unknown format name: {format!r} (expected one of {', '.join(FORMATS)})")

        self.format = format
        self.codec = GenericCodec(Mapper(tag_name or REFLECTOR_TAG, tag_func or std_tag_func), type_key)

    def register(self, cls: type) -> type:
        return self.codec.register(cls)

    def encode(self, obj: Any) -> bytes:
        """``obj`` is a dataclass instance or a dict of str to values."""
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            node = self.codec.encode(obj)
        elif isinstance(obj, dict):
            node = {k: self.codec.encode(v) for k, v in obj.items()}
        else:
            raise TypeMismatchError("struct or Dict[str, Any]", type_name(type(obj)))

        data = self._marshal(node)
        logger.debug("encoded %s as %d bytes of %s", type_name(type(obj)), len(data), self.format)
        return data

    def decode(self, data: Union[bytes, str]) -> Any:
        """Parse ``data`` and rebuild registered records from it."""
        mp: Dict[str, Any] = self._unmarshal(data)
        if not isinstance(mp, dict):
            raise TypeMismatchError("Dict[str, Any]", type_name(type(mp)))
        return self.codec.decode(mp)
