"""
Value coercion between text, loosely typed data and declared field types.

Exports the public API:
- parse_text, format_value, text_to_value, value_to_text
- convert, assign_dynamic
- Value
"""
from .text import (
    SAFE_INT_MAX,
    float_to_int,
    format_value,
    parse_bool,
    parse_float,
    parse_int,
    parse_text,
    text_to_value,
    value_to_text,
)
from .value import Value
from .assign import assign_dynamic, convert
