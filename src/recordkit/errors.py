"""
Exception hierarchy for recordkit.

Structural errors mean a record type (or the data naming it) is
self-contradictory and are not meant to be caught in normal operation.
Conversion, type-mismatch and unsupported-kind errors are recoverable:
the target field is left untouched and the caller decides what to do.
"""

from __future__ import annotations

from typing import Any, Sequence

PREFIX = "recordkit: "


class ReflectError(Exception):
    def __init__(self, message: str):
        super().__init__(PREFIX + message)


# ---------------------------------------------------------
# Structural (fatal) errors
# ---------------------------------------------------------
class StructuralError(ReflectError):
    pass


class DuplicatePathError(StructuralError):
    def __init__(self, type_name: str, path: str, first: Sequence[int], second: Sequence[int]):
        self.path = path
        self.indexes = (tuple(first), tuple(second))
        super().__init__(
            f"duplicated path: {type_name}.{path}, indexes are {list(first)} and {list(second)}"
        )


class UnknownPathError(StructuralError, KeyError):
    def __init__(self, path: str, type_name: str):
        self.path = path
        super().__init__(f"{path} is not a path in struct {type_name}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownTypeError(StructuralError, KeyError):
    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"unknown struct name: {type_name}")

    def __str__(self) -> str:
        return self.args[0]


class DefaultTagError(StructuralError):
    pass


class NotAStructError(StructuralError, TypeError):
    def __init__(self, typ: Any):
        self.type = typ
        super().__init__(f"expected a dataclass type, got {typ!r}")


# ---------------------------------------------------------
# Recoverable errors
# ---------------------------------------------------------
class ConversionError(ReflectError, ValueError):
    pass


class NilValueError(ConversionError):
    def __init__(self):
        super().__init__("nil value")


class TypeMismatchError(ReflectError, TypeError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"type mismatch, expected {expected}, got {actual}")


class UnsupportedKindError(ReflectError, TypeError):
    def __init__(self, operation: str, kind: str):
        self.kind = kind
        super().__init__(f"unexpected type for {operation}: {kind}")
