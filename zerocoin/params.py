"""
Zerocoin Public Parameters

Immutable group descriptions shared by every coin, accumulator and
proof created in a session. Use param_generation.calculate_params()
to derive them from a seed modulus.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Optional

from .serialization import encode_bignum, encode_uint32

# Statistical security parameters of the accumulator proof of knowledge
ACCPROOF_KPRIME = 160
ACCPROOF_KDPRIME = 128

# 31^2, a quadratic residue modulo any RSA modulus coprime to 31
ACCUMULATOR_BASE = 961


@dataclass(frozen=True)
class IntegerGroupParams:
    """
    A subgroup of Z*_p with two independent generators.

    For the QRN commitment group the modulus is the RSA modulus N and
    the order is unknown (group_order is None).
    """

    modulus: int
    group_order: Optional[int]
    g: int
    h: int

    def to_bytes(self) -> bytes:
        return (
            encode_bignum(self.g)
            + encode_bignum(self.h)
            + encode_bignum(self.modulus)
            + encode_bignum(self.group_order or 0)
        )


@dataclass(frozen=True)
class AccumulatorAndProofParams:
    """Accumulator modulus, coin range and the groups used to prove membership."""

    accumulator_modulus: int
    accumulator_base: int
    min_coin_value: int
    max_coin_value: int
    accumulator_pok_commitment_group: IntegerGroupParams
    accumulator_qrn_commitment_group: IntegerGroupParams
    k_prime: int = ACCPROOF_KPRIME
    k_dprime: int = ACCPROOF_KDPRIME

    @cached_property
    def encoded(self) -> bytes:
        return (
            encode_bignum(self.accumulator_modulus)
            + encode_bignum(self.accumulator_base)
            + encode_bignum(self.min_coin_value)
            + encode_bignum(self.max_coin_value)
            + self.accumulator_pok_commitment_group.to_bytes()
            + self.accumulator_qrn_commitment_group.to_bytes()
            + encode_uint32(self.k_prime)
            + encode_uint32(self.k_dprime)
        )

    def to_bytes(self) -> bytes:
        return self.encoded


@dataclass(frozen=True)
class Params:
    """
    Complete public parameters.

    Attributes:
        accumulator_params: Accumulator modulus, coin range and proof groups
        coin_commitment_group: Group in which coins commit to (serial, randomness)
        serial_number_sok_commitment_group: Group whose order equals the coin
            commitment group's modulus, used by the serial number proof
        security_level: Target security in bits
        zkp_iterations: Rounds of the serial number signature of knowledge
    """

    accumulator_params: AccumulatorAndProofParams
    coin_commitment_group: IntegerGroupParams
    serial_number_sok_commitment_group: IntegerGroupParams
    security_level: int
    zkp_iterations: int

    @cached_property
    def encoded(self) -> bytes:
        return (
            self.accumulator_params.to_bytes()
            + self.coin_commitment_group.to_bytes()
            + self.serial_number_sok_commitment_group.to_bytes()
            + encode_uint32(self.security_level)
            + encode_uint32(self.zkp_iterations)
        )

    def to_bytes(self) -> bytes:
        return self.encoded
