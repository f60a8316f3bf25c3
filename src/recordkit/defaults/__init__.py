from .applier import (
    DEFAULT_MAPPER,
    DEFAULT_TAG,
    DefaultField,
    DefaultMapper,
    DefaultStruct,
    alloc_default,
    set_default,
)

__all__ = [
    "DEFAULT_MAPPER",
    "DEFAULT_TAG",
    "DefaultField",
    "DefaultMapper",
    "DefaultStruct",
    "alloc_default",
    "set_default",
]
