"""
Accumulator Proof of Knowledge

Proves that the value e committed in the accumulator PoK group,

    C = sg^e * sh^r mod p,

is accumulated in A, i.e. that the prover knows a witness u with
u^e == A (mod N), without revealing e or u. This is the
Camenisch-Lysyanskaya proof (CRYPTO 2002, section 3.3) made
non-interactive with a Fiat-Shamir challenge.

The prover commits to e, u and the helper randomness in the QRN group:

    C_e = g_n^e  * h_n^r1
    C_u = u      * h_n^r2
    C_r = g_n^r2 * h_n^r3

and proves three relations in the PoK group (knowledge of the opening of
C, e != 1, e != -1) and four relations mod N linking C_e, C_u and C_r to A.
"""

import logging
from dataclasses import dataclass

from .bignum import is_unit, modular_inverse, random_below, random_signed_below
from .commitment import Commitment
from .exceptions import SpendConstructionError
from .hashing import HASH_OUTPUT_BITS, HashWriter
from .params import AccumulatorAndProofParams
from .serialization import ByteReader, encode_bignum

logger = logging.getLogger(__name__)

ZEROCOIN_ACCUMULATOR_PROOF = "ACCUMULATOR_PROOF_OF_KNOWLEDGE"

# Wire order; the first ten are commitments, the rest responses
_TRANSCRIPT_FIELDS = (
    "C_e", "C_u", "C_r",
    "st_1", "st_2", "st_3",
    "t_1", "t_2", "t_3", "t_4",
    "s_alpha", "s_beta", "s_zeta", "s_sigma", "s_eta", "s_epsilon",
    "s_delta", "s_xi", "s_phi", "s_gamma", "s_psi",
)
_RESPONSE_FIELDS = _TRANSCRIPT_FIELDS[10:]


@dataclass
class AccumulatorProofOfKnowledge:
    """
    Transcript of the accumulator membership proof.

    Commitments C_e, C_u, C_r and t_1..t_4 live mod N; st_1..st_3 live
    mod the PoK group modulus. Responses s_alpha, s_beta, s_zeta, s_eta,
    s_epsilon and s_delta are signed integers; the others are reduced
    mod the PoK group order.
    """

    params: AccumulatorAndProofParams
    C_e: int
    C_u: int
    C_r: int
    st_1: int
    st_2: int
    st_3: int
    t_1: int
    t_2: int
    t_3: int
    t_4: int
    s_alpha: int
    s_beta: int
    s_zeta: int
    s_sigma: int
    s_eta: int
    s_epsilon: int
    s_delta: int
    s_xi: int
    s_phi: int
    s_gamma: int
    s_psi: int

    @classmethod
    def prove(
        cls,
        params: AccumulatorAndProofParams,
        commitment_to_coin: Commitment,
        witness: int,
        accumulator: int,
    ) -> "AccumulatorProofOfKnowledge":
        """
        Prove that the coin committed in commitment_to_coin is accumulated.

        Args:
            params: Accumulator parameters
            commitment_to_coin: Commitment to the coin value under the
                accumulator PoK group
            witness: Witness value u with u^e == accumulator (mod N)
            accumulator: Accumulator value A

        Raises:
            SpendConstructionError: If the coin value is degenerate in the PoK group
        """
        pok = params.accumulator_pok_commitment_group
        qrn = params.accumulator_qrn_commitment_group
        sg, sh, p, q = pok.g, pok.h, pok.modulus, pok.group_order
        g_n, h_n, N = qrn.g, qrn.h, params.accumulator_modulus

        e = commitment_to_coin.contents
        r = commitment_to_coin.randomness
        C = commitment_to_coin.commitment_value

        e_minus_one_inv = modular_inverse(e - 1, q)
        e_plus_one_inv = modular_inverse(e + 1, q)
        if e_minus_one_inv is None or e_plus_one_inv is None:
            raise SpendConstructionError("Coin value is +-1 modulo the PoK group order")

        # Blinding factors for the QRN commitments
        r_1 = random_below(N // 4)
        r_2 = random_below(N // 4)
        r_3 = random_below(N // 4)

        C_e = (pow(g_n, e, N) * pow(h_n, r_1, N)) % N
        C_u = (witness * pow(h_n, r_2, N)) % N
        C_r = (pow(g_n, r_2, N) * pow(h_n, r_3, N)) % N

        slack = 1 << (params.k_prime + params.k_dprime)
        r_alpha = random_signed_below(params.max_coin_value * slack)
        r_gamma = random_below(p)
        r_phi = random_below(p)
        r_psi = random_below(p)
        r_sigma = random_below(p)
        r_xi = random_below(p)
        r_epsilon = random_signed_below((N // 4) * slack)
        r_eta = random_signed_below((N // 4) * slack)
        r_zeta = random_signed_below((N // 4) * slack)
        r_beta = random_signed_below((N // 4) * p * slack)
        r_delta = random_signed_below((N // 4) * p * slack)

        sg_inv = modular_inverse(sg, p)
        h_n_inv = modular_inverse(h_n, N)
        g_n_inv = modular_inverse(g_n, N)

        st_1 = (pow(sg, r_alpha, p) * pow(sh, r_phi, p)) % p
        st_2 = (pow(C * sg_inv, r_gamma, p) * pow(sh, r_psi, p)) % p
        st_3 = (pow(sg * C, r_sigma, p) * pow(sh, r_xi, p)) % p

        t_1 = (pow(h_n, r_zeta, N) * pow(g_n, r_epsilon, N)) % N
        t_2 = (pow(h_n, r_eta, N) * pow(g_n, r_alpha, N)) % N
        t_3 = (pow(C_u, r_alpha, N) * pow(h_n_inv, r_beta, N)) % N
        t_4 = (pow(C_r, r_alpha, N) * pow(h_n_inv, r_delta, N) * pow(g_n_inv, r_beta, N)) % N

        c = cls._calculate_challenge(
            params, C, accumulator, C_e, C_u, C_r, st_1, st_2, st_3, t_1, t_2, t_3, t_4
        )

        proof = cls(
            params=params,
            C_e=C_e, C_u=C_u, C_r=C_r,
            st_1=st_1, st_2=st_2, st_3=st_3,
            t_1=t_1, t_2=t_2, t_3=t_3, t_4=t_4,
            s_alpha=r_alpha - c * e,
            s_beta=r_beta - c * r_2 * e,
            s_zeta=r_zeta - c * r_3,
            s_sigma=(r_sigma - c * e_plus_one_inv) % q,
            s_eta=r_eta - c * r_1,
            s_epsilon=r_epsilon - c * r_2,
            s_delta=r_delta - c * r_3 * e,
            s_xi=(r_xi + c * r * e_plus_one_inv) % q,
            s_phi=(r_phi - c * r) % q,
            s_gamma=(r_gamma - c * e_minus_one_inv) % q,
            s_psi=(r_psi + c * r * e_minus_one_inv) % q,
        )
        logger.debug("Accumulator proof of knowledge constructed")
        return proof

    @staticmethod
    def _calculate_challenge(params: AccumulatorAndProofParams, C: int, A: int, *commitments: int) -> int:
        pok = params.accumulator_pok_commitment_group
        qrn = params.accumulator_qrn_commitment_group
        return HashWriter().write(
            ZEROCOIN_ACCUMULATOR_PROOF, params,
            pok.g, pok.h, qrn.g, qrn.h, C, A, list(commitments),
        ).to_int()

    def _max_response_bits(self) -> int:
        params = self.params
        return (
            params.accumulator_modulus.bit_length()
            + params.max_coin_value.bit_length()
            + params.accumulator_pok_commitment_group.modulus.bit_length()
            + params.k_prime + params.k_dprime + HASH_OUTPUT_BITS
        )

    def verify(self, accumulator: int, commitment_value: int) -> bool:
        """
        Verify the proof against accumulator value A and the coin commitment C.

        Returns:
            bool: True iff every relation holds and s_alpha is in range
        """
        params = self.params
        pok = params.accumulator_pok_commitment_group
        qrn = params.accumulator_qrn_commitment_group
        sg, sh, p = pok.g, pok.h, pok.modulus
        g_n, h_n, N = qrn.g, qrn.h, params.accumulator_modulus
        C, A = commitment_value, accumulator

        if not is_unit(C, p) or not is_unit(A, N):
            return False
        for value in (self.C_e, self.C_u, self.C_r):
            if not is_unit(value, N):
                return False

        max_bits = self._max_response_bits()
        for name in _RESPONSE_FIELDS:
            if getattr(self, name).bit_length() > max_bits:
                return False

        # e must lie in the coin range; |s_alpha| bounds it
        if abs(self.s_alpha) > params.max_coin_value << (params.k_prime + params.k_dprime + 1):
            return False

        c = self._calculate_challenge(
            params, C, A, self.C_e, self.C_u, self.C_r,
            self.st_1, self.st_2, self.st_3, self.t_1, self.t_2, self.t_3, self.t_4,
        )

        sg_inv = modular_inverse(sg, p)
        h_n_inv = modular_inverse(h_n, N)
        g_n_inv = modular_inverse(g_n, N)

        st_1_prime = (pow(C, c, p) * pow(sg, self.s_alpha, p) * pow(sh, self.s_phi, p)) % p
        st_2_prime = (pow(sg, c, p) * pow(C * sg_inv, self.s_gamma, p) * pow(sh, self.s_psi, p)) % p
        st_3_prime = (pow(sg, c, p) * pow(sg * C, self.s_sigma, p) * pow(sh, self.s_xi, p)) % p

        t_1_prime = (pow(self.C_r, c, N) * pow(h_n, self.s_zeta, N) * pow(g_n, self.s_epsilon, N)) % N
        t_2_prime = (pow(self.C_e, c, N) * pow(h_n, self.s_eta, N) * pow(g_n, self.s_alpha, N)) % N
        t_3_prime = (pow(A, c, N) * pow(self.C_u, self.s_alpha, N) * pow(h_n_inv, self.s_beta, N)) % N
        t_4_prime = (
            pow(self.C_r, self.s_alpha, N) * pow(h_n_inv, self.s_delta, N) * pow(g_n_inv, self.s_beta, N)
        ) % N

        return (
            st_1_prime == self.st_1
            and st_2_prime == self.st_2
            and st_3_prime == self.st_3
            and t_1_prime == self.t_1
            and t_2_prime == self.t_2
            and t_3_prime == self.t_3
            and t_4_prime == self.t_4
        )

    def to_bytes(self) -> bytes:
        return b"".join(encode_bignum(getattr(self, name)) for name in _TRANSCRIPT_FIELDS)

    @classmethod
    def read_from(cls, reader: ByteReader, params: AccumulatorAndProofParams) -> "AccumulatorProofOfKnowledge":
        values = {name: reader.read_bignum() for name in _TRANSCRIPT_FIELDS}
        return cls(params=params, **values)

    @classmethod
    def from_bytes(cls, params: AccumulatorAndProofParams, data: bytes) -> "AccumulatorProofOfKnowledge":
        """
        Decode a proof produced by to_bytes().

        Raises:
            SerializationError: If data is truncated or malformed
        """
        reader = ByteReader(data)
        proof = cls.read_from(reader, params)
        reader.finish()
        return proof
