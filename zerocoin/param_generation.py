"""
Parameter Generation

Deterministically derives every group used by the scheme from a single
seed modulus, so that independent parties reproduce identical public
parameters. Primes are built with the Shawe-Taylor construction and
groups/generators follow NIST FIPS 186-3 (Appendices A.1.2 and A.2.3).
"""

import logging
import math
from typing import Optional, Tuple

from .bignum import (
    ceil_div,
    is_probable_prime,
    is_unit,
    passes_trial_division,
    primality_test_by_trial_division,
)
from .config import get_settings
from .exceptions import ParameterGenerationError
from .hashing import HASH_OUTPUT_BITS, hash_int
from .params import (
    ACCPROOF_KDPRIME,
    ACCPROOF_KPRIME,
    ACCUMULATOR_BASE,
    AccumulatorAndProofParams,
    IntegerGroupParams,
    Params,
)

logger = logging.getLogger(__name__)

# Domain separation labels for the derived groups
STRING_COMMIT_GROUP = "COIN_COMMITMENT_GROUP"
STRING_AIC_GROUP = "ACCUMULATOR_INTERNAL_COMMITMENT_GROUP"
STRING_QRNCOMMIT_GROUPG = "ACCUMULATOR_QRN_COMMITMENT_GROUPG"
STRING_QRNCOMMIT_GROUPH = "ACCUMULATOR_QRN_COMMITMENT_GROUPH"

# Seeds behave like 256-bit unsigned counters
SEED_MODULUS = 1 << HASH_OUTPUT_BITS


def calculate_group_param_lengths(max_p_len: int, security_level: int) -> Tuple[int, int]:
    """
    Choose modulus and subgroup order sizes for a security level.

    Args:
        max_p_len: Largest modulus size (bits) that may be used
        security_level: Target security level in bits

    Returns:
        Tuple[int, int]: (p_len, q_len) in bits

    Raises:
        ParameterGenerationError: If the level is unsupported or does not
            fit below max_p_len

    Example:
        >>> calculate_group_param_lengths(4000, 80)
        (1024, 256)
    """
    if security_level < 80:
        raise ParameterGenerationError("Security level must be at least 80 bits.")
    elif security_level == 80:
        p_len, q_len = 1024, 256
    elif security_level <= 112:
        p_len, q_len = 2048, 256
    elif security_level <= 128:
        p_len, q_len = 3072, 320
    else:
        raise ParameterGenerationError(f"Security level {security_level} not supported.")

    if p_len > max_p_len:
        raise ParameterGenerationError(
            f"Modulus size is too small for this security level: "
            f"need {p_len} bits, at most {max_p_len} available"
        )

    return p_len, q_len


def calculate_seed(modulus: int, aux_string: str, security_level: int, group_name: str) -> int:
    """
    Derive a 256-bit seed from <modulus>||<security level>||<aux>||<group name>.

    The same inputs always give the same seed.
    """
    return hash_int(modulus, "||", security_level, "||", aux_string, "||", group_name)


def calculate_generator_seed(seed: int, p_seed: int, q_seed: int, label: str, index: int, count: int) -> int:
    """Hash(seed || p_seed || q_seed || label || index || count)."""
    return hash_int(seed, "||", p_seed, "||", q_seed, "||", label, "||", index, "||", count)


def calculate_hash(value: int) -> int:
    return hash_int(value % SEED_MODULUS)


def _seed_add(seed: int, amount: int) -> int:
    return (seed + amount) % SEED_MODULUS


def generate_integer_from_seed(num_bits: int, seed: int) -> Tuple[int, int]:
    """
    Expand a seed into an integer of exactly num_bits bits.

    Returns:
        Tuple[int, int]: (value, number of hash iterations consumed)
    """
    iterations = ceil_div(num_bits, HASH_OUTPUT_BITS)
    result = 0
    for count in range(iterations):
        result += calculate_hash(_seed_add(seed, count)) << (count * HASH_OUTPUT_BITS)

    top = 1 << (num_bits - 1)
    return top + (result % top), iterations


def generate_random_prime(prime_bit_len: int, in_seed: int) -> Tuple[int, int, int]:
    """
    Shawe-Taylor provable prime construction.

    Args:
        prime_bit_len: Bit length of the prime to build
        in_seed: Input seed

    Returns:
        Tuple[int, int, int]: (prime, output seed, prime generation counter)

    Raises:
        ParameterGenerationError: If no prime is found within the attempt limit
    """
    if prime_bit_len < 2:
        raise ParameterGenerationError("Prime length is too short")

    if prime_bit_len < 33:
        prime_seed = in_seed
        prime_gen_counter = 0
        while prime_gen_counter < 4 * prime_bit_len:
            c, iterations = generate_integer_from_seed(prime_bit_len, prime_seed)
            prime_seed = _seed_add(prime_seed, iterations + 1)
            prime_gen_counter += 1

            c = 2 * (c // 2) + 1
            if primality_test_by_trial_division(c):
                return c, prime_seed, prime_gen_counter

        raise ParameterGenerationError("Unable to find prime in Shawe-Taylor algorithm")

    # Recursive case: a prime c0 > sqrt(c) certifies c via Pocklington
    c0, out_seed, prime_gen_counter = generate_random_prime(ceil_div(prime_bit_len, 2) + 1, in_seed)

    x, iterations = generate_integer_from_seed(prime_bit_len, out_seed)
    out_seed = _seed_add(out_seed, iterations + 1)
    t = ceil_div(x, 2 * c0)

    for _ in range(get_settings().max_primegen_attempts):
        if 2 * t * c0 + 1 > (1 << prime_bit_len):
            t = ceil_div(1 << (prime_bit_len - 1), 2 * c0)

        c = 2 * t * c0 + 1
        prime_gen_counter += 1

        if passes_trial_division(c):
            a, iterations = generate_integer_from_seed(c.bit_length(), out_seed)
            out_seed = _seed_add(out_seed, iterations + 1)
            a = 2 + (a % (c - 3))

            z = pow(a, 2 * t, c)
            if math.gcd(z - 1, c) == 1 and pow(z, c0, c) == 1:
                return c, out_seed, prime_gen_counter

        t += 1

    raise ParameterGenerationError("Unable to generate random prime (too many tests)")


def calculate_group_modulus_and_order(seed: int, p_len: int, q_len: int) -> Tuple[int, int, int, int]:
    """
    Build primes q (q_len bits) and p = 2*t*q*p0 + 1 (p_len bits).

    Returns:
        Tuple[int, int, int, int]: (modulus p, group order q, p seed, q seed)

    Raises:
        ParameterGenerationError: If no modulus is found within 4 * p_len candidates
    """
    group_order, q_seed, _ = generate_random_prime(q_len, seed)

    p0, p_seed, pgen_counter = generate_random_prime(ceil_div(p_len, 2) + 1, q_seed)
    old_counter = pgen_counter

    x, iterations = generate_integer_from_seed(p_len, p_seed)
    p_seed = _seed_add(p_seed, iterations + 1)

    step = 2 * group_order * p0
    t = ceil_div(x, step)

    while pgen_counter <= 4 * p_len + old_counter:
        if step * t + 1 > (1 << p_len):
            t = ceil_div(1 << (p_len - 1), step)

        modulus = step * t + 1
        pgen_counter += 1

        if passes_trial_division(modulus):
            a, iterations = generate_integer_from_seed(p_len, p_seed)
            p_seed = _seed_add(p_seed, iterations + 1)
            a = 2 + (a % (modulus - 3))

            z = pow(a, 2 * t * group_order, modulus)
            if math.gcd(z - 1, modulus) == 1 and pow(z, p0, modulus) == 1:
                return modulus, group_order, p_seed, q_seed

        t += 1

    raise ParameterGenerationError("Unable to generate a prime modulus for the group")


def calculate_group_generator(seed: int, p_seed: int, q_seed: int, modulus: int, group_order: int, index: int) -> int:
    """
    Verifiable generator of the order-q subgroup of Z*_p.

    Index 1 is used for g and index 2 for h.
    """
    if not 0 <= index <= 255:
        raise ParameterGenerationError("Invalid index for group generation")

    e = (modulus - 1) // group_order
    for count in range(1, get_settings().max_generator_attempts):
        w = calculate_generator_seed(seed, p_seed, q_seed, "ggen", index, count)
        result = pow(w, e, modulus)
        if result > 1:
            return result

    raise ParameterGenerationError("Unable to find a generator, too many attempts")


def validate_group_params(group: IntegerGroupParams, p_len: int = 0, q_len: int = 0) -> None:
    """
    Validate a Schnorr group.

    Raises:
        ParameterGenerationError: If any structural check fails
    """
    rounds = get_settings().param_prime_rounds
    p, q, g, h = group.modulus, group.group_order, group.g, group.h

    if q is None:
        raise ParameterGenerationError("Group order must be known")

    if p.bit_length() < p_len or q.bit_length() < q_len:
        raise ParameterGenerationError("Group parameters are not valid: sizes below requested lengths")

    if not is_probable_prime(p, rounds) or not is_probable_prime(q, rounds):
        raise ParameterGenerationError("Group parameters are not valid: modulus or order is not prime")

    if (p - 1) % q != 0:
        raise ParameterGenerationError("Group parameters are not valid: order does not divide p - 1")

    if pow(g, q, p) != 1 or pow(h, q, p) != 1:
        raise ParameterGenerationError("Group parameters are not valid: generator outside the subgroup")

    if pow(g, 100, p) == 1 or pow(h, 100, p) == 1 or g == h or g == 1:
        raise ParameterGenerationError("Group parameters are not valid: degenerate generators")


def derive_integer_group_params(seed: int, p_len: int, q_len: int) -> IntegerGroupParams:
    """
    Derive a Schnorr group with a p_len-bit modulus and q_len-bit prime order.

    Args:
        seed: Output of calculate_seed()
        p_len: Modulus size in bits
        q_len: Subgroup order size in bits

    Returns:
        IntegerGroupParams: Validated group with generators g and h

    Raises:
        ParameterGenerationError: If the bounded search fails or validation fails
    """
    modulus, group_order, p_seed, q_seed = calculate_group_modulus_and_order(seed, p_len, q_len)

    group = IntegerGroupParams(
        modulus=modulus,
        group_order=group_order,
        g=calculate_group_generator(seed, p_seed, q_seed, modulus, group_order, 1),
        h=calculate_group_generator(seed, p_seed, q_seed, modulus, group_order, 2),
    )
    validate_group_params(group, p_len, q_len)
    return group


def derive_integer_group_from_order(group_order: int) -> IntegerGroupParams:
    """
    Build a Schnorr group whose order is the given prime.

    Tries moduli of the form 2 * i * group_order + 1 for increasing i.
    """
    settings = get_settings()

    for i in range(1, settings.max_schnorrgen_attempts):
        modulus = group_order * 2 * i + 1
        if not is_probable_prime(modulus, settings.param_prime_rounds):
            continue

        seed = calculate_seed(group_order, "", 128, "")
        p_seed = calculate_hash(seed)
        q_seed = calculate_hash(p_seed)

        group = IntegerGroupParams(
            modulus=modulus,
            group_order=group_order,
            g=calculate_group_generator(seed, p_seed, q_seed, modulus, group_order, 1),
            h=calculate_group_generator(seed, p_seed, q_seed, modulus, group_order, 2),
        )
        validate_group_params(group)
        return group

    raise ParameterGenerationError("Too many attempts to generate Schnorr group.")


def calculate_params(modulus: int, aux_string: Optional[str] = None, security_level: Optional[int] = None) -> Params:
    """
    Derive the complete public parameters from an RSA modulus.

    The modulus should have unknown factorization (e.g. an RSA challenge
    number or the output of a trusted setup).

    Args:
        modulus: Accumulator modulus N
        aux_string: Domain separation string (default: protocol version)
        security_level: Target security in bits (default: from settings)

    Returns:
        Params: Public parameters for one session

    Raises:
        ParameterGenerationError: If N is unsuitable or any group search fails
    """
    settings = get_settings()
    if aux_string is None:
        aux_string = settings.protocol_version
    if security_level is None:
        security_level = settings.security_level

    if modulus <= 0 or modulus % 2 == 0:
        raise ParameterGenerationError("Accumulator modulus must be a positive odd integer")
    if not is_unit(ACCUMULATOR_BASE, modulus):
        raise ParameterGenerationError("Accumulator base is not a unit modulo N")

    n_len = modulus.bit_length()
    p_len, q_len = calculate_group_param_lengths(n_len - 2, security_level)
    logger.info(f"Deriving parameters: N={n_len} bits, security={security_level}, pLen={p_len}, qLen={q_len}")

    coin_commitment_group = derive_integer_group_params(
        calculate_seed(modulus, aux_string, security_level, STRING_COMMIT_GROUP), p_len, q_len
    )
    logger.debug(f"Coin commitment group: p={coin_commitment_group.modulus.bit_length()} bits")

    serial_number_sok_commitment_group = derive_integer_group_from_order(coin_commitment_group.modulus)
    logger.debug(
        f"Serial number group: p={serial_number_sok_commitment_group.modulus.bit_length()} bits"
    )

    accumulator_pok_commitment_group = derive_integer_group_params(
        calculate_seed(modulus, aux_string, security_level, STRING_AIC_GROUP), q_len + 300, q_len + 1
    )
    logger.debug(f"Accumulator PoK group: p={accumulator_pok_commitment_group.modulus.bit_length()} bits")

    # Squares of seed-derived integers land in the quadratic residues mod N
    g_n, _ = generate_integer_from_seed(
        n_len - 1, calculate_seed(modulus, aux_string, security_level, STRING_QRNCOMMIT_GROUPG)
    )
    h_n, _ = generate_integer_from_seed(
        n_len - 1, calculate_seed(modulus, aux_string, security_level, STRING_QRNCOMMIT_GROUPH)
    )
    accumulator_qrn_commitment_group = IntegerGroupParams(
        modulus=modulus,
        group_order=None,
        g=pow(g_n, 2, modulus),
        h=pow(h_n, 2, modulus),
    )
    qrn = accumulator_qrn_commitment_group
    if not is_unit(qrn.g, modulus) or not is_unit(qrn.h, modulus) or qrn.g == qrn.h:
        raise ParameterGenerationError("QRN commitment generators are not valid")

    max_coin_value = coin_commitment_group.modulus
    accumulator_params = AccumulatorAndProofParams(
        accumulator_modulus=modulus,
        accumulator_base=ACCUMULATOR_BASE,
        min_coin_value=1 << ((max_coin_value.bit_length() // 2) + 3),
        max_coin_value=max_coin_value,
        accumulator_pok_commitment_group=accumulator_pok_commitment_group,
        accumulator_qrn_commitment_group=accumulator_qrn_commitment_group,
        k_prime=ACCPROOF_KPRIME,
        k_dprime=ACCPROOF_KDPRIME,
    )

    logger.info("Parameter generation complete")
    return Params(
        accumulator_params=accumulator_params,
        coin_commitment_group=coin_commitment_group,
        serial_number_sok_commitment_group=serial_number_sok_commitment_group,
        security_level=security_level,
        zkp_iterations=security_level,
    )
