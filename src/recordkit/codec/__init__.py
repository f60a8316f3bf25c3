from .generic import REFLECTOR_TAG, STRUCT_NAME_KEY, GenericCodec
from .reflector import FORMATS, Reflector

__all__ = [
    "FORMATS",
    "REFLECTOR_TAG",
    "STRUCT_NAME_KEY",
    "GenericCodec",
    "Reflector",
]
