from __future__ import annotations

from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, Field, field_validator

from recordkit.codec import FORMATS, STRUCT_NAME_KEY, GenericCodec, Reflector
from recordkit.defaults import DEFAULT_TAG, DefaultMapper
from recordkit.fields import TAG_FUNCS, Mapper


class ReflectConfig(BaseModel):
    # Settings shared by the mapper, codec, reflector and default applier
    tag_name: str = Field(default="reflector")
    naming: str = Field(default="std")
    type_key: str = Field(default=STRUCT_NAME_KEY)
    format: str = Field(default="indentedjson")
    default_tag: str = Field(default=DEFAULT_TAG)

    @field_validator("naming")
    @classmethod
    def _known_naming(cls, v: str) -> str:
        if v not in TAG_FUNCS:
            raise ValueError(f"unknown naming {v!r}, expected one of {sorted(TAG_FUNCS)}")
        return v

    @field_validator("format")
    @classmethod
    def _known_format(cls, v: str) -> str:
        if v not in FORMATS:
            raise ValueError(f"unknown format {v!r}, expected one of {list(FORMATS)}")
        return v

    @field_validator("type_key")
    @classmethod
    def _non_empty_key(cls, v: str) -> str:
        if not v:
            raise ValueError("type_key must not be empty")
        return v

    # -----------------------------------------------------
    @staticmethod
    def from_yaml(path: Union[str, Path]) -> "ReflectConfig":
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        return ReflectConfig(**data)

    def build_mapper(self) -> Mapper:
        return Mapper(self.tag_name, TAG_FUNCS[self.naming])

    def build_codec(self) -> GenericCodec:
        return GenericCodec(self.build_mapper(), self.type_key)

    def build_reflector(self) -> Reflector:
        return Reflector(self.format, self.tag_name, TAG_FUNCS[self.naming], self.type_key)

    def build_default_mapper(self) -> DefaultMapper:
        return DefaultMapper(self.default_tag)
