"""Conversion between store text values and typed inventory fields.

Parsing is strict: unsigned integers are plain base-10 digits that must
fit the field width, floats use Python's decimal literal syntax without
surrounding whitespace, and booleans accept the usual spellings of
true/false. Every failure raises MalformedFieldError carrying the key.
"""

import re

from .errors import MalformedFieldError

UINT32_BITS = 32
UINT64_BITS = 64

_DIGITS = re.compile(r"[0-9]+")

_TRUE_VALUES = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_VALUES = {"0", "f", "F", "FALSE", "false", "False"}


def parse_uint(key: str, text: str, bits: int = UINT64_BITS) -> int:
    """Parse an unsigned base-10 integer that fits in ``bits`` bits."""
    if text is None or not _DIGITS.fullmatch(text):
        raise MalformedFieldError(key, text, "not an unsigned integer")
    value = int(text)
    if value >= 1 << bits:
        raise MalformedFieldError(key, text, f"value out of range for uint{bits}")
    return value


def parse_float(key: str, text: str) -> float:
    """Parse a decimal floating point value."""
    if not text or text != text.strip() or "_" in text:
        raise MalformedFieldError(key, text, "not a floating point number")
    try:
        return float(text)
    except ValueError:
        raise MalformedFieldError(key, text, "not a floating point number") from None


def parse_bool(key: str, text: str) -> bool:
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise MalformedFieldError(key, text, "not a boolean")


def format_uint(value: int) -> str:
    return str(int(value))


def format_float(value: float) -> str:
    """Render a float so that parse_float returns the same value."""
    return repr(float(value))


def format_bool(value: bool) -> str:
    return "true" if value else "false"
