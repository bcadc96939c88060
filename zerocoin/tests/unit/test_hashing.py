"""
Unit Tests for Transcript Hashing
"""

import hashlib

import pytest

from zerocoin.hashing import HASH_OUTPUT_BITS, HashWriter, hash_int
from zerocoin.params import IntegerGroupParams
from zerocoin.serialization import encode_bignum


class TestHashWriter:
    """Test the canonical transcript hash."""

    def test_deterministic(self):
        assert HashWriter().write(12345, "||", b"abc").digest() == HashWriter().write(12345, "||", b"abc").digest()

    def test_digest_is_double_sha256(self):
        encoded = b"i" + encode_bignum(42)
        expected = hashlib.sha256(hashlib.sha256(encoded).digest()).digest()
        assert HashWriter().write(42).digest() == expected
        assert len(expected) * 8 == HASH_OUTPUT_BITS

    def test_incremental_writes_match_single_write(self):
        assert HashWriter().write(1).write("a").digest() == HashWriter().write(1, "a").digest()

    def test_type_tags_separate_values(self):
        """0, the empty string and empty bytes all hash differently."""
        digests = {
            HashWriter().write(0).digest(),
            HashWriter().write("").digest(),
            HashWriter().write(b"").digest(),
            HashWriter().write([]).digest(),
        }
        assert len(digests) == 4

    def test_length_prefix_prevents_concatenation_collisions(self):
        assert HashWriter().write("ab", "c").digest() != HashWriter().write("a", "bc").digest()

    def test_objects_with_to_bytes(self):
        group = IntegerGroupParams(modulus=23, group_order=11, g=4, h=9)
        assert HashWriter().write(group).digest() == HashWriter().write(group).digest()
        other = IntegerGroupParams(modulus=23, group_order=11, g=9, h=4)
        assert HashWriter().write(group).digest() != HashWriter().write(other).digest()

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            HashWriter().write(True)

    def test_rejects_unknown_types(self):
        with pytest.raises(TypeError):
            HashWriter().write(1.5)

    def test_hash_int(self):
        value = hash_int("label", 7)
        assert value == int.from_bytes(HashWriter().write("label", 7).digest(), "big")
        assert 0 <= value < 2**HASH_OUTPUT_BITS
