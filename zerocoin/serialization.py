"""
Wire Encoding Helpers

Length-prefixed encoding for the big integers, counters and digests
that make up accumulators, public coins and spend proofs.

Big integer layout:  sign (1 byte) | length (4 bytes, big-endian) | magnitude
The magnitude is minimal (no leading zero byte) and zero has length 0,
so every value has exactly one encoding.
"""

from typing import Iterable, List, Optional

from .exceptions import SerializationError

SIGN_POSITIVE = 0
SIGN_NEGATIVE = 1
LENGTH_BYTES = 4
UINT32_MAX = 0xFFFFFFFF


def encode_bignum(value: int) -> bytes:
    """
    Encode a signed integer.

    Args:
        value: Integer to encode

    Returns:
        bytes: sign byte, 4-byte length and minimal big-endian magnitude
    """
    if not isinstance(value, int):
        raise TypeError("value must be an int")

    sign = SIGN_NEGATIVE if value < 0 else SIGN_POSITIVE
    magnitude = abs(value)
    body = magnitude.to_bytes((magnitude.bit_length() + 7) // 8, byteorder='big')
    return bytes([sign]) + len(body).to_bytes(LENGTH_BYTES, byteorder='big') + body


def encode_uint32(value: int) -> bytes:
    """Encode a counter or denomination as 4 big-endian bytes."""
    if not 0 <= value <= UINT32_MAX:
        raise ValueError(f"Value {value} does not fit in 32 bits")
    return value.to_bytes(4, byteorder='big')


def encode_bytes(data: bytes) -> bytes:
    """Encode a byte string with a 4-byte length prefix."""
    if not isinstance(data, bytes):
        raise TypeError("data must be bytes")
    return len(data).to_bytes(LENGTH_BYTES, byteorder='big') + data


def encode_bignum_list(values: Iterable[int]) -> bytes:
    """Encode a count followed by each integer."""
    values = list(values)
    return encode_uint32(len(values)) + b"".join(encode_bignum(v) for v in values)


class ByteReader:
    """Sequential decoder over an encoded buffer."""

    def __init__(self, data: bytes):
        if not isinstance(data, (bytes, bytearray)):
            raise SerializationError("Encoded data must be bytes")
        self._data = bytes(data)
        self._offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise SerializationError(
                f"Truncated input: need {size} bytes at offset {self._offset}, "
                f"{self.remaining} available"
            )
        chunk = self._data[self._offset:self._offset + size]
        self._offset += size
        return chunk

    def read_uint32(self) -> int:
        return int.from_bytes(self._take(4), byteorder='big')

    def read_bytes(self) -> bytes:
        length = int.from_bytes(self._take(LENGTH_BYTES), byteorder='big')
        return self._take(length)

    def read_bignum(self) -> int:
        sign = self._take(1)[0]
        if sign not in (SIGN_POSITIVE, SIGN_NEGATIVE):
            raise SerializationError(f"Invalid sign byte {sign:#04x}")

        body = self.read_bytes()
        if body and body[0] == 0:
            raise SerializationError("Non-canonical integer: leading zero byte")
        if not body and sign == SIGN_NEGATIVE:
            raise SerializationError("Non-canonical integer: negative zero")

        value = int.from_bytes(body, byteorder='big')
        return -value if sign == SIGN_NEGATIVE else value

    def read_bignum_list(self, expected: Optional[int] = None) -> List[int]:
        count = self.read_uint32()
        if expected is not None and count != expected:
            raise SerializationError(f"Expected {expected} integers, found {count}")
        # Every integer takes at least 5 bytes
        if count * (1 + LENGTH_BYTES) > self.remaining:
            raise SerializationError(f"Truncated input: {count} integers announced")
        return [self.read_bignum() for _ in range(count)]

    def finish(self) -> None:
        """Require that the whole buffer was consumed."""
        if self.remaining:
            raise SerializationError(f"Trailing data: {self.remaining} unread bytes")
