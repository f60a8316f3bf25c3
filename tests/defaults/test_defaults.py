from __future__ import annotations

import threading
from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional

import numpy as np
import pytest

import recordkit
from recordkit.defaults import DefaultMapper
from recordkit.errors import DefaultTagError
from recordkit.fields import Kind, tag, zero_value


@dataclass
class Third:
    third: str = tag("", default="Third")


@dataclass
class FooStruct:
    foo: str = tag("", default="foo")
    pfoo: Optional[str] = tag(None, default="pfoo")
    third: Third = tag(default_factory=Third, form=",inline")
    pthird: Optional[Third] = None


@dataclass
class NoTagStruct:
    a: int = tag(0, form=",omitempty")
    b: int = tag(0, form=",omitempty")


@dataclass
class FooBarStruct:
    _private: float = tag(0.0, default="1.23")
    no_tag: str = tag("", form=",")
    ignore: bool = tag(False, default="-", form="-")
    count: int = tag(0, default="9", form=",omitempty")
    pcount: Optional[int] = tag(None, default="10")
    foo_struct: FooStruct = tag(default_factory=FooStruct, embedded=True, form="FS")
    pfs: Optional[FooStruct] = tag(None, form=",inline")
    bar: List[np.int16] = tag(default_factory=list, default="1,2,3,4,5")
    pbar: Optional[List[np.int16]] = tag(None, default="2,3,4,5,6")
    barp: List[Optional[np.int64]] = tag(default_factory=list, default="3,4,5,6,7")
    pbarp: Optional[List[Optional[np.int64]]] = tag(None, default="4,5,6,7,8")
    n: NoTagStruct = field(default_factory=NoTagStruct)
    pn: Optional[NoTagStruct] = None


@dataclass
class WithMap:
    weights: Dict[str, float] = tag(default_factory=dict, default="x=1,y=2.5")
    ports: Dict[int, np.uint16] = tag(default_factory=dict, default="1=80,2=443")


@dataclass
class Grid:
    size: int = tag(0, default="64")
    grid: List[int] = tag(default_factory=list, default="4,5")


@dataclass
class BadDefault:
    n: int = tag(0, default="abc")


@dataclass
class TreeNode:
    label: str = tag("", default="node")
    left: Optional[TreeNode] = None
    kids: List[TreeNode] = field(default_factory=list)


def expected_foo() -> FooStruct:
    return FooStruct(foo="foo", pfoo="pfoo", third=Third("Third"), pthird=Third("Third"))


def expected_foo_bar() -> FooBarStruct:
    return FooBarStruct(
        count=9,
        pcount=10,
        foo_struct=expected_foo(),
        pfs=expected_foo(),
        bar=[np.int16(i) for i in (1, 2, 3, 4, 5)],
        pbar=[np.int16(i) for i in (2, 3, 4, 5, 6)],
        barp=[np.int64(i) for i in (3, 4, 5, 6, 7)],
        pbarp=[np.int64(i) for i in (4, 5, 6, 7, 8)],
    )


# -------------------------------------------------------
# Template
# -------------------------------------------------------

def test_default_struct_template():
    ds = DefaultMapper().get_default_struct(FooBarStruct)

    assert ds.zero == zero_value(FooBarStruct)
    assert ds.value == expected_foo_bar()
    assert [df.index for df in ds.fields] == [
        (3,), (4,), (6,), (7,), (8,), (9,), (10,), (5, 0), (5, 1), (5, 2), (5, 3),
    ]


def test_default_field_metadata():
    ds = DefaultMapper().get_default_struct(FooBarStruct)
    by_index = {df.index: df for df in ds.fields}

    pcount = by_index[(4,)]
    assert pcount.is_optional
    assert pcount.kind is Kind.INT
    assert pcount.zero == 0
    assert pcount.value == 10

    pfs = by_index[(6,)]
    assert pfs.kind is Kind.STRUCT
    assert pfs.value == expected_foo()


def test_template_is_cached():
    dm = DefaultMapper()
    assert dm.get_default_struct(FooBarStruct) is dm.get_default_struct(Optional[FooBarStruct])


def test_template_is_built_once_under_contention():
    dm = DefaultMapper()
    results = []

    def worker():
        results.append(dm.get_default_struct(FooBarStruct))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(r is dm.get_default_struct(FooBarStruct) for r in results)


# -------------------------------------------------------
# alloc_default
# -------------------------------------------------------

def test_alloc_default():
    obj = DefaultMapper().alloc_default(FooBarStruct)
    assert obj == expected_foo_bar()
    assert obj.bar == [1, 2, 3, 4, 5]
    assert len(obj.bar) == 5


def test_alloc_default_hands_out_copies():
    dm = DefaultMapper()
    first = dm.alloc_default(FooBarStruct)
    second = dm.alloc_default(FooBarStruct)

    first.bar[0] = np.int16(99)
    first.foo_struct.third.third = "changed"
    first.pfs.pthird = None

    assert second == expected_foo_bar()
    assert dm.alloc_default(FooBarStruct) == expected_foo_bar()


def test_mapping_defaults():
    obj = DefaultMapper().alloc_default(WithMap)
    assert obj.weights == {"x": 1.0, "y": 2.5}
    assert obj.ports == {1: 80, 2: 443}
    assert all(type(v) is np.uint16 for v in obj.ports.values())


def test_bad_default_is_fatal():
    with pytest.raises(DefaultTagError, match="BadDefault.n"):
        DefaultMapper().alloc_default(BadDefault)


def test_recursive_type():
    obj = DefaultMapper().alloc_default(TreeNode)
    assert obj == TreeNode(label="node")


# -------------------------------------------------------
# set_default
# -------------------------------------------------------

def test_set_default_on_zero_record():
    dm = DefaultMapper()
    obj = FooBarStruct()
    dm.set_default(obj)

    assert obj == expected_foo_bar()
    obj.bar.append(np.int16(6))
    assert dm.alloc_default(FooBarStruct).bar == [1, 2, 3, 4, 5]


def test_set_default_keeps_non_zero_fields():
    obj = FooBarStruct(count=3, pcount=0, bar=[np.int16(8)])
    DefaultMapper().set_default(obj)

    assert obj.count == 3
    assert obj.pcount == 0
    assert obj.bar == [8]
    assert obj.pbar == [2, 3, 4, 5, 6]
    assert obj.foo_struct == expected_foo()
    assert obj.pfs == expected_foo()
    assert obj.n == NoTagStruct()
    assert obj.pn is None


def test_set_default_updates_nested_records_in_place():
    pfs = FooStruct(foo="mine")
    obj = FooBarStruct(pfs=pfs)
    DefaultMapper().set_default(obj)

    assert obj.pfs is pfs
    assert pfs.foo == "mine"
    assert pfs.pfoo == "pfoo"
    assert pfs.third == Third("Third")
    assert pfs.pthird == Third("Third")


def test_module_level_helpers():
    obj = FooBarStruct(count=1)
    recordkit.set_default(obj)

    assert obj.count == 1
    assert obj.pcount == 10
    assert recordkit.alloc_default(WithMap).weights == {"x": 1.0, "y": 2.5}


def test_default_annotation_is_a_tag():
    grid = next(f for f in fields(Grid) if f.name == "grid")
    size = next(f for f in fields(Grid) if f.name == "size")

    assert grid.metadata["default"] == "4,5"
    assert size.metadata["default"] == "64"
    assert Grid() == Grid(size=0, grid=[])
    assert DefaultMapper().alloc_default(Grid) == Grid(size=64, grid=[4, 5])
