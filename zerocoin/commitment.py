"""
Pedersen Commitments and Commitment Equality Proofs

A commitment to m with randomness r in group (p, q, g, h) is

    C = g^m * h^r mod p

It hides m perfectly and binds computationally as long as log_g(h)
is unknown (g and h come from independent verifiable derivations).

CommitmentProofOfKnowledge proves that two commitments in two
different groups open to the same value m, without revealing m.
"""

from typing import Optional

from .bignum import is_unit, random_below
from .hashing import HashWriter
from .params import IntegerGroupParams
from .serialization import ByteReader, encode_bignum

ZEROCOIN_COMMITMENT_EQUALITY_PROOF = "COMMITMENT_EQUALITY_PROOF"
COMMITMENT_EQUALITY_CHALLENGE_SIZE = 256
COMMITMENT_EQUALITY_SECMARGIN = 512


class Commitment:
    """
    Pedersen commitment with its opening.

    Instances hold secrets (contents and randomness) and are never
    serialized; only commitment_value is published.
    """

    def __init__(self, group: IntegerGroupParams, value: int, randomness: Optional[int] = None):
        if group.group_order is None:
            raise ValueError("Commitment group must have a known order")

        self.group = group
        self.contents = value
        self.randomness = random_below(group.group_order) if randomness is None else randomness
        self.commitment_value = (
            pow(group.g, value, group.modulus) * pow(group.h, self.randomness, group.modulus)
        ) % group.modulus

    def __repr__(self) -> str:
        return f"Commitment(value={self.commitment_value:#x})"


class CommitmentProofOfKnowledge:
    """
    Proof that commitments A (group ap) and B (group bp) contain the same value.

    Transcript: challenge c and responses S1, S2, S3 with

        T1 = g1^S1 * h1^S2 * A^-c mod p1
        T2 = g2^S1 * h2^S3 * B^-c mod p2
        c  = H(T1, T2, A, B, ap, bp)

    Responses are computed over the integers, so the randomizers are
    drawn from a range large enough to statistically hide m * c.
    """

    def __init__(self, ap: IntegerGroupParams, bp: IntegerGroupParams, challenge: int, S1: int, S2: int, S3: int):
        self.ap = ap
        self.bp = bp
        self.challenge = challenge
        self.S1 = S1
        self.S2 = S2
        self.S3 = S3

    @staticmethod
    def _random_size(ap: IntegerGroupParams, bp: IntegerGroupParams) -> int:
        return (
            COMMITMENT_EQUALITY_CHALLENGE_SIZE
            + COMMITMENT_EQUALITY_SECMARGIN
            + max(ap.modulus.bit_length(), bp.modulus.bit_length(),
                  ap.group_order.bit_length(), bp.group_order.bit_length())
        )

    @classmethod
    def prove(cls, ap: IntegerGroupParams, bp: IntegerGroupParams, a: Commitment, b: Commitment) -> "CommitmentProofOfKnowledge":
        """
        Prove that commitment a (under ap) and b (under bp) share their contents.

        Raises:
            ValueError: If the two commitments open to different values
        """
        if a.contents != b.contents:
            raise ValueError("Both commitments must contain the same value")

        max_range = 1 << cls._random_size(ap, bp)
        r1 = random_below(max_range)
        r2 = random_below(max_range)
        r3 = random_below(max_range)

        T1 = (pow(ap.g, r1, ap.modulus) * pow(ap.h, r2, ap.modulus)) % ap.modulus
        T2 = (pow(bp.g, r1, bp.modulus) * pow(bp.h, r3, bp.modulus)) % bp.modulus

        challenge = cls._calculate_challenge(ap, bp, a.commitment_value, b.commitment_value, T1, T2)

        # Not modular: the group orders differ between ap and bp
        S1 = r1 + a.contents * challenge
        S2 = r2 + a.randomness * challenge
        S3 = r3 + b.randomness * challenge

        return cls(ap, bp, challenge, S1, S2, S3)

    @staticmethod
    def _calculate_challenge(ap: IntegerGroupParams, bp: IntegerGroupParams, a: int, b: int, commit_one: int, commit_two: int) -> int:
        return HashWriter().write(
            ZEROCOIN_COMMITMENT_EQUALITY_PROOF,
            commit_one, "||", commit_two, "||", a, "||", b, "||", ap, "||", bp,
        ).to_int()

    def verify(self, A: int, B: int) -> bool:
        """
        Verify against the commitment values A (under ap) and B (under bp).

        Returns:
            bool: True iff the proof is valid
        """
        ap, bp = self.ap, self.bp

        max_size = 64 * self._random_size(ap, bp)
        for s in (self.S1, self.S2, self.S3):
            if s < 0 or s.bit_length() > max_size:
                return False

        if not is_unit(A, ap.modulus) or not is_unit(B, bp.modulus):
            return False
        if not 0 <= self.challenge < (1 << COMMITMENT_EQUALITY_CHALLENGE_SIZE):
            return False

        T1 = (
            pow(A, -self.challenge, ap.modulus)
            * pow(ap.g, self.S1, ap.modulus)
            * pow(ap.h, self.S2, ap.modulus)
        ) % ap.modulus
        T2 = (
            pow(B, -self.challenge, bp.modulus)
            * pow(bp.g, self.S1, bp.modulus)
            * pow(bp.h, self.S3, bp.modulus)
        ) % bp.modulus

        computed_challenge = self._calculate_challenge(ap, bp, A, B, T1, T2)
        return computed_challenge == self.challenge

    def to_bytes(self) -> bytes:
        return (
            encode_bignum(self.challenge)
            + encode_bignum(self.S1)
            + encode_bignum(self.S2)
            + encode_bignum(self.S3)
        )

    @classmethod
    def read_from(cls, reader: ByteReader, ap: IntegerGroupParams, bp: IntegerGroupParams) -> "CommitmentProofOfKnowledge":
        return cls(ap, bp, reader.read_bignum(), reader.read_bignum(), reader.read_bignum(), reader.read_bignum())

    @classmethod
    def from_bytes(cls, data: bytes, ap: IntegerGroupParams, bp: IntegerGroupParams) -> "CommitmentProofOfKnowledge":
        """
        Decode a proof produced by to_bytes().

        Raises:
            SerializationError: If data is truncated or malformed
        """
        reader = ByteReader(data)
        proof = cls.read_from(reader, ap, bp)
        reader.finish()
        return proof
