from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import pytest

from recordkit.errors import ConversionError
from recordkit.fields import (
    STD_MAPPER,
    FieldRef,
    Mapper,
    copy_struct,
    field_by_indexes,
    field_by_indexes_read_only,
)


@dataclass
class Leaf:
    n: int = 0


@dataclass
class Mid:
    leaf: Optional[Leaf] = None


@dataclass
class Top:
    mid: Optional[Mid] = None
    label: str = ""


@dataclass(frozen=True)
class Frozen:
    x: int = 0


@dataclass
class Src:
    name: str = ""
    count: int = 0
    only_src: float = 0.0
    mid: Optional[Mid] = None


@dataclass
class Dst:
    name: str = ""
    count: np.int32 = np.int32(0)
    only_dst: bool = False
    mid: Optional[Mid] = None


@dataclass
class Form:
    ids: List[np.int16] = field(default_factory=list)
    name: str = ""
    maybe: Optional[int] = None


# -------------------------------------------------------
# Index resolution
# -------------------------------------------------------

def test_field_by_indexes_allocates_intermediates():
    top = Top()

    ref = field_by_indexes(top, (0, 0, 0))
    ref.set(5)

    assert top.mid is not None
    assert top.mid.leaf is not None
    assert top.mid.leaf.n == 5
    assert ref.type is int


def test_read_only_stops_at_nil():
    top = Top()

    assert field_by_indexes_read_only(top, (0, 0, 0)) is None
    assert top.mid is None

    ref = field_by_indexes_read_only(top, (1,))
    assert ref is not None and ref.get() == ""
    assert field_by_indexes_read_only(None, (0,)) is None


def test_empty_index_is_the_record_itself():
    top = Top(label="x")
    assert field_by_indexes(top, ()).get() is top
    assert field_by_indexes_read_only(top, ()).get() is top


def test_field_ref_writes_frozen_records():
    fz = Frozen()
    field_by_indexes(fz, (0,)).set(3)
    assert fz.x == 3


def test_detached_ref():
    ref = FieldRef.detached(1, Optional[int])
    assert ref.get() == 1
    assert ref.is_optional
    ref.set(None)
    assert ref.get() is None


# -------------------------------------------------------
# Mapper lookups
# -------------------------------------------------------

def test_field_by_path():
    top = Top()
    STD_MAPPER.field_by_path(top, "mid.leaf.n").set(3)

    assert top.mid.leaf.n == 3
    assert STD_MAPPER.field_by_path(top, "nope") is None
    assert STD_MAPPER.field_by_path(top, "").get() is top


def test_fields_by_path_keeps_order():
    top = Top(label="l")
    refs = STD_MAPPER.fields_by_path(top, ["label", "nope", "mid.leaf"])

    assert refs[0].get() == "l"
    assert refs[1] is None
    assert refs[2].get() is None


def test_traversals_by_path():
    assert STD_MAPPER.traversals_by_path(Top, ["mid.leaf.n", "label", "nope"]) == [(0, 0, 0), (1,), ()]


def test_field_map_covers_every_path():
    top = Top()
    refs = Mapper().field_map(top)

    assert set(refs) == {"mid", "mid.leaf", "mid.leaf.n", "label"}
    refs["mid.leaf.n"].set(9)
    assert top.mid.leaf.n == 9


# -------------------------------------------------------
# copy_struct
# -------------------------------------------------------

def test_copy_struct_copies_shared_leaves():
    dst = Dst()
    copy_struct(dst, Src(name="x", count=7, only_src=1.5))

    assert dst.name == "x"
    assert dst.count == 7
    assert isinstance(dst.count, np.int32)
    assert dst.only_dst is False


def test_copy_struct_skips_nil_chains():
    dst = Dst()
    copy_struct(dst, Src())
    assert dst.mid is None

    copy_struct(dst, Src(mid=Mid(leaf=Leaf(n=4))))
    assert dst.mid.leaf.n == 4


# -------------------------------------------------------
# strings_to_field
# -------------------------------------------------------

def test_strings_to_sequence_field():
    form = Form()
    STD_MAPPER.type_map(Form).paths["ids"].strings_to_field(["1", "2", "3"], form)

    assert form.ids == [1, 2, 3]
    assert all(isinstance(i, np.int16) for i in form.ids)


def test_strings_to_scalar_field():
    form = Form()
    paths = STD_MAPPER.type_map(Form).paths

    paths["name"].strings_to_field(["a"], form)
    assert form.name == "a"

    paths["maybe"].strings_to_field(["12"], form)
    assert form.maybe == 12
    paths["maybe"].strings_to_field([""], form)
    assert form.maybe is None


def test_strings_to_field_errors():
    form = Form()
    paths = STD_MAPPER.type_map(Form).paths

    with pytest.raises(ConversionError, match="can not convert"):
        paths["name"].strings_to_field(["a", "b"], form)
    with pytest.raises(ConversionError):
        paths["ids"].strings_to_field(["1", "x"], form)
    assert form.ids == []
