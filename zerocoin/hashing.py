"""
Transcript Hashing

Double SHA-256 over a canonical, length-prefixed encoding of protocol
elements. Used for parameter seeds and for every Fiat-Shamir challenge.
"""

import hashlib
from typing import Any

from .serialization import encode_bignum, encode_bytes, encode_uint32

HASH_OUTPUT_BITS = 256


def _encode_item(item: Any) -> bytes:
    """
    Canonical encoding of one transcript element.

    Each element carries a one-byte type tag so that, for example, the
    integer 0 and the empty string never hash alike.
    """
    if isinstance(item, bool):
        raise TypeError("bool is not a transcript element")
    if isinstance(item, int):
        return b"i" + encode_bignum(item)
    if isinstance(item, str):
        return b"s" + encode_bytes(item.encode("utf-8"))
    if isinstance(item, (bytes, bytearray)):
        return b"b" + encode_bytes(bytes(item))
    if isinstance(item, (list, tuple)):
        return b"l" + encode_uint32(len(item)) + b"".join(_encode_item(x) for x in item)
    if hasattr(item, "to_bytes"):
        return b"o" + encode_bytes(item.to_bytes())
    raise TypeError(f"Cannot hash object of type {type(item).__name__}")


class HashWriter:
    """
    Incremental transcript hash.

    Example:
        >>> digest = HashWriter().write(modulus, "||", 80).digest()
    """

    def __init__(self):
        self._hasher = hashlib.sha256()

    def write(self, *items: Any) -> "HashWriter":
        for item in items:
            self._hasher.update(_encode_item(item))
        return self

    def digest(self) -> bytes:
        return hashlib.sha256(self._hasher.digest()).digest()

    def to_int(self) -> int:
        return int.from_bytes(self.digest(), byteorder='big')


def hash_int(*items: Any) -> int:
    """Hash the given elements and return the digest as an integer."""
    return HashWriter().write(*items).to_int()
