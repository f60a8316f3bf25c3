from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pytest
import yaml

from recordkit.codec import STRUCT_NAME_KEY, Reflector
from recordkit.errors import TypeMismatchError
from recordkit.fields import field_name_to_underscore, tag, type_name


@dataclass
class Step:
    name: str = ""
    retries: Optional[int] = None


@dataclass
class Plan:
    title: str = tag("", reflector="title")
    steps: List[Step] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)


@dataclass
class Keyed:
    m: Dict[np.int16, str] = field(default_factory=dict)
    w: Dict[np.uint8, np.float32] = field(default_factory=dict)


@dataclass
class Camel:
    userName: str = ""


def sample() -> Plan:
    return Plan(title="opt", steps=[Step("a"), Step("b", retries=2)], env={"OMP": "4"})


def test_indented_json_is_sorted_and_indented():
    data = Reflector().encode(Step("a", retries=1))

    assert data.startswith(b"{\n    ")
    assert json.loads(data) == {STRUCT_NAME_KEY: type_name(Step), "name": "a", "retries": 1}
    assert data.index(b'"name"') < data.index(b'"retries"')


def test_compact_json():
    data = Reflector("json").encode(Step("a"))
    assert b"\n" not in data


@pytest.mark.parametrize("fmt", ["json", "indentedjson", "yaml"])
def test_round_trip(fmt):
    r = Reflector(fmt)
    plan = sample()
    assert r.decode(r.encode(plan)) == plan


@pytest.mark.parametrize("fmt", ["json", "yaml"])
def test_round_trip_sized_keys(fmt):
    r = Reflector(fmt)
    keyed = Keyed(m={np.int16(1): "a", np.int16(-2): "b"}, w={np.uint8(3): np.float32(0.5)})
    back = r.decode(r.encode(keyed))

    assert back == keyed
    assert all(type(k) is np.int16 for k in back.m)
    assert all(type(k) is np.uint8 for k in back.w)


def test_yaml_output():
    data = Reflector("yaml").encode(sample())
    doc = yaml.safe_load(data)

    assert doc[STRUCT_NAME_KEY] == type_name(Plan)
    assert doc["steps"][1] == {STRUCT_NAME_KEY: type_name(Step), "name": "b", "retries": 2}


def test_decode_needs_registration():
    r = Reflector("json")
    data = json.dumps({STRUCT_NAME_KEY: type_name(Step), "name": "x"})

    r.register(Step)
    assert r.decode(data) == Step("x")


def test_encode_dict_of_values():
    r = Reflector("yaml")
    back = r.decode(r.encode({"step": Step("a"), "n": 1, "none": None}))
    assert back == {"step": Step("a"), "n": 1, "none": None}


def test_naming_function():
    r = Reflector("json", tag_func=field_name_to_underscore)
    assert json.loads(r.encode(Camel("x")))["user_name"] == "x"


def test_rejects_non_records():
    r = Reflector()
    with pytest.raises(TypeMismatchError):
        r.encode(3)
    with pytest.raises(TypeMismatchError):
        r.decode("[1, 2]")


def test_unknown_format():
    with pytest.raises(ValueError, match="unknown format"):
        Reflector("toml")
