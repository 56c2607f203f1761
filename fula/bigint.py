"""Arbitrary-precision integers as they travel in JSON bodies."""

import re

_DECIMAL = re.compile(r"[+-]?[0-9]+")


def encode_big_int(value):
    """Return the decimal text of an integer, as written into a JSON body."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"not an integer: {value!r}")
    return str(value)


def decode_big_int(text):
    """Parse a raw JSON value into an int.

    Returns None for a JSON null and raises ValueError for anything that is
    not a plain base-10 integer.
    """
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8", errors="replace")
    if text == "null":
        return None
    if not _DECIMAL.fullmatch(text):
        raise ValueError(f"not a valid big integer: {text}")
    return int(text)