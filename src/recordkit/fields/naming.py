"""
Naming conventions ("tag functions").

A tag function receives the declared attribute name and the raw annotation
string for one tag key and returns ``(canonical name, option parts)``.
Returning ``IGNORE`` or ``""`` as the name drops the field.
"""

from __future__ import annotations

import re
from typing import Callable, List, Tuple

TagFunc = Callable[[str, str], Tuple[str, List[str]]]

IGNORE = "-"
OMIT_EMPTY = "omitempty"
OMIT_NESTED = "omitnested"
FLATTEN = "flatten"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def std_tag_func(field_name: str, tag: str) -> Tuple[str, List[str]]:
    """
    Split ``"name,opt,k=v"``; the first token renames the field.

      std_tag_func("Foo", "foo,bar,size=64") -> ("foo", ["bar", "size=64"])
      std_tag_func("Foo", ",bar")            -> ("Foo", ["bar"])
    """
    if tag == "":
        return field_name, []

    parts = tag.split(",")
    if parts[0] != "":
        field_name = parts[0]
    return field_name, parts[1:]


def field_name_to_lower(field_name: str, tag: str) -> Tuple[str, List[str]]:
    return std_tag_func(field_name.lower(), tag)


def field_name_to_underscore(field_name: str, tag: str) -> Tuple[str, List[str]]:
    return std_tag_func(camel_case_to_underscore(field_name), tag)


def default_tag_func(field_name: str, tag: str) -> Tuple[str, List[str]]:
    """The whole tag is options; the declared name is always kept."""
    if tag == IGNORE:
        return IGNORE, []
    # an empty tag is not a skip: the field may be a struct with defaults inside
    if tag == "":
        return field_name, []
    return field_name, tag.split(",")


def camel_case_to_underscore(s: str) -> str:
    """MyFunc -> my_func, HTTPServer -> http_server, already_snake -> already_snake"""
    return _CAMEL_BOUNDARY.sub("_", s).lower()


def underscore_to_camel_case(s: str) -> str:
    """my_func -> MyFunc"""
    return "".join(part.capitalize() for part in s.lower().split("_"))


def parse_options(parts: List[str]) -> dict:
    """``["omitempty", "size=64"]`` -> ``{"omitempty": "", "size": "64"}``"""
    options = {}
    for opt in parts:
        if "=" in opt:
            k, v = opt.split("=", 1)
            options[k] = v
        else:
            options[opt] = ""
    return options


TAG_FUNCS = {
    "std": std_tag_func,
    "lower": field_name_to_lower,
    "underscore": field_name_to_underscore,
    "default": default_tag_func,
}
