"""
Serial Number Signature of Knowledge

Given the revealed serial number S and a commitment

    V = g^C * h^rho mod p'

to the coin C = a^S * b^R mod P (g, h from the serial number group,
whose order is P; a, b from the coin commitment group), proves
knowledge of R and rho. The proof is a cut-and-choose protocol with
one challenge bit per round, made non-interactive by hashing every
round commitment together with a message, so it doubles as a
signature on that message.
"""

import logging
from typing import List

from .bignum import is_unit, random_below
from .commitment import Commitment
from .hashing import HASH_OUTPUT_BITS, HashWriter
from .params import Params
from .serialization import ByteReader, encode_bignum_list, encode_bytes

logger = logging.getLogger(__name__)

ZEROCOIN_SERIAL_NUMBER_SOK = "SERIAL_NUMBER_SIGNATURE_OF_KNOWLEDGE"


def _challenge_bit(digest: bytes, index: int) -> int:
    return (digest[index // 8] >> (index % 8)) & 1


class SerialNumberSignatureOfKnowledge:
    """
    Signature of knowledge of the coin opening behind a serial number.

    Attributes:
        s_notprime: Per-round responses in the coin group exponent range
        sprime: Per-round responses in the serial group exponent range
        challenge_hash: Fiat-Shamir digest whose bits select each round's challenge
    """

    def __init__(self, params: Params, s_notprime: List[int], sprime: List[int], challenge_hash: bytes):
        self.params = params
        self.s_notprime = s_notprime
        self.sprime = sprime
        self.challenge_hash = challenge_hash

    @staticmethod
    def _challenge_calculation(params: Params, serial: int, r: int, v: int) -> int:
        coin_group = params.coin_commitment_group
        serial_group = params.serial_number_sok_commitment_group

        exponent = (
            pow(coin_group.g, serial, coin_group.modulus) * pow(coin_group.h, r, coin_group.modulus)
        ) % serial_group.group_order
        return (
            pow(serial_group.g, exponent, serial_group.modulus)
            * pow(serial_group.h, v, serial_group.modulus)
        ) % serial_group.modulus

    @staticmethod
    def _calculate_hash(params: Params, commitment_value: int, serial: int, msghash: bytes, commitments: List[int]) -> bytes:
        return HashWriter().write(
            ZEROCOIN_SERIAL_NUMBER_SOK, params, commitment_value, serial, msghash, commitments,
        ).digest()

    @classmethod
    def sign(
        cls,
        params: Params,
        serial_number: int,
        coin_randomness: int,
        commitment_to_coin: Commitment,
        msghash: bytes,
    ) -> "SerialNumberSignatureOfKnowledge":
        """
        Sign msghash with knowledge of the coin opening.

        Args:
            params: Public parameters
            serial_number: Revealed serial number S
            coin_randomness: Coin randomness R
            commitment_to_coin: Commitment to the coin under the serial number group
            msghash: Message digest to bind

        Raises:
            ValueError: If the serial group order is not the coin group modulus
        """
        coin_group = params.coin_commitment_group
        serial_group = params.serial_number_sok_commitment_group
        if serial_group.group_order != coin_group.modulus:
            raise ValueError("Serial number group order must equal the coin group modulus")

        iterations = params.zkp_iterations
        r = [random_below(coin_group.group_order) for _ in range(iterations)]
        v = [random_below(serial_group.group_order) for _ in range(iterations)]
        c = [cls._challenge_calculation(params, serial_number, r[i], v[i]) for i in range(iterations)]

        digest = cls._calculate_hash(params, commitment_to_coin.commitment_value, serial_number, msghash, c)

        s_notprime = []
        sprime = []
        for i in range(iterations):
            if _challenge_bit(digest, i):
                s_notprime.append(r[i])
                sprime.append(v[i])
            else:
                s_np = (r[i] - coin_randomness) % coin_group.group_order
                s_notprime.append(s_np)
                sprime.append(
                    (v[i] - commitment_to_coin.randomness * pow(coin_group.h, s_np, coin_group.modulus))
                    % serial_group.group_order
                )

        logger.debug(f"Serial number signature built with {iterations} rounds")
        return cls(params, s_notprime, sprime, digest)

    def verify(self, coin_serial_number: int, commitment_value: int, msghash: bytes) -> bool:
        """
        Verify against the revealed serial number and the serial group commitment.

        Returns:
            bool: True iff every round checks out and the digest matches
        """
        params = self.params
        coin_group = params.coin_commitment_group
        serial_group = params.serial_number_sok_commitment_group
        iterations = params.zkp_iterations

        if serial_group.group_order != coin_group.modulus:
            return False
        if len(self.s_notprime) != iterations or len(self.sprime) != iterations:
            return False
        if len(self.challenge_hash) != HASH_OUTPUT_BITS // 8:
            return False
        if not is_unit(commitment_value, serial_group.modulus):
            return False
        for s_np, s_p in zip(self.s_notprime, self.sprime):
            if not 0 <= s_np < coin_group.group_order or not 0 <= s_p < serial_group.group_order:
                return False

        t = []
        for i in range(iterations):
            if _challenge_bit(self.challenge_hash, i):
                t.append(self._challenge_calculation(params, coin_serial_number, self.s_notprime[i], self.sprime[i]))
            else:
                exponent = pow(coin_group.h, self.s_notprime[i], coin_group.modulus)
                t.append(
                    (pow(commitment_value, exponent, serial_group.modulus)
                     * pow(serial_group.h, self.sprime[i], serial_group.modulus))
                    % serial_group.modulus
                )

        digest = self._calculate_hash(params, commitment_value, coin_serial_number, msghash, t)
        return digest == self.challenge_hash

    def to_bytes(self) -> bytes:
        return encode_bignum_list(self.s_notprime) + encode_bignum_list(self.sprime) + encode_bytes(self.challenge_hash)

    @classmethod
    def read_from(cls, reader: ByteReader, params: Params) -> "SerialNumberSignatureOfKnowledge":
        s_notprime = reader.read_bignum_list(params.zkp_iterations)
        sprime = reader.read_bignum_list(params.zkp_iterations)
        digest = reader.read_bytes()
        return cls(params, s_notprime, sprime, digest)

    @classmethod
    def from_bytes(cls, params: Params, data: bytes) -> "SerialNumberSignatureOfKnowledge":
        """
        Decode a signature produced by to_bytes().

        Raises:
            SerializationError: If data is truncated, malformed or has the
                wrong number of rounds
        """
        reader = ByteReader(data)
        signature = cls.read_from(reader, params)
        reader.finish()
        return signature
