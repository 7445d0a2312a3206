"""Deterministic short keys for extracted strings."""

from __future__ import annotations

import base64
import struct


def string_hash(text: str) -> int:
    """Polynomial rolling hash (``h * 31 + c``) over UTF-16 code units.

    The result wraps like a signed 32-bit integer, so the same text hashes
    identically on every platform.
    """

    value = 0
    encoded = text.encode("utf-16-le", "surrogatepass")
    for (unit,) in struct.iter_unpack("<H", encoded):
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def key_for(text: str) -> str:
    """Return a short catalog key for *text*.

    Distinct strings may collide; the later one wins in a file record.
    """

    packed = struct.pack("<i", string_hash(text))
    key = base64.urlsafe_b64encode(packed).decode("ascii").rstrip("=")
    key = key.replace("-", "_")
    if key[0].isdigit():
        return "_" + key
    return key
