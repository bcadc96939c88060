"""
Big-Integer Helpers

Primality testing, modular inverses and CSPRNG sampling used by
parameter generation, minting and the proof protocols.
"""

import hashlib
import math
import secrets
from typing import List, Optional, Tuple


def _sieve(limit: int) -> List[int]:
    flags = bytearray([1]) * (limit + 1)
    flags[0:2] = b"\x00\x00"
    for i in range(2, int(limit ** 0.5) + 1):
        if flags[i]:
            flags[i * i::i] = bytearray(len(flags[i * i::i]))
    return [i for i, is_prime in enumerate(flags) if is_prime]


SMALL_PRIMES = _sieve(2000)
_SMALL_PRIMES_PRODUCT = math.prod(SMALL_PRIMES)


def passes_trial_division(n: int) -> bool:
    """
    Cheap filter: False if n has a prime factor below 2000 (other than itself).

    A True result says nothing about primality on its own.
    """
    if n < 2:
        return False
    if n <= SMALL_PRIMES[-1]:
        return n in SMALL_PRIMES
    return math.gcd(n, _SMALL_PRIMES_PRODUCT) == 1


def primality_test_by_trial_division(n: int) -> bool:
    """Exact primality test for small integers (up to about 2^40)."""
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False
    for d in range(3, math.isqrt(n) + 1, 2):
        if n % d == 0:
            return False
    return True


def is_probable_prime(n: int, rounds: int = 64, *, random_bases: bool = False) -> bool:
    """
    Miller-Rabin primality test.

    By default the bases are derived from SHA-256 of n, so the result is
    reproducible. Candidates chosen by another party must be tested with
    random_bases=True: fixed bases can be searched for a composite that
    passes all of them.

    Args:
        n: Candidate
        rounds: Number of Miller-Rabin rounds
        random_bases: Draw bases from the CSPRNG instead of hashing n

    Returns:
        bool: False if n is composite, True if n is prime with
              error probability at most 4^-rounds
    """
    if not passes_trial_division(n):
        return False
    if n <= SMALL_PRIMES[-1]:
        return True

    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    seed = n.to_bytes((n.bit_length() + 7) // 8, "big")
    for i in range(rounds):
        if random_bases:
            a = 2 + secrets.randbelow(n - 3)
        else:
            h = hashlib.sha256(seed + i.to_bytes(4, "big")).digest()
            a = 2 + (int.from_bytes(h, "big") % (n - 3))
        x = pow(a, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(s - 1):
            x = (x * x) % n
            if x == n - 1:
                break
        else:
            return False
    return True


def extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """
    Extended Euclidean Algorithm.

    Returns:
        Tuple[int, int, int]: (gcd, x, y) where ax + by = gcd

    Example:
        >>> gcd, x, y = extended_gcd(35, 15)
        >>> assert gcd == 5
        >>> assert 35 * x + 15 * y == 5
    """
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r != 0:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_x, x = x, old_x - quotient * x
        old_y, y = y, old_y - quotient * y
    return old_r, old_x, old_y


def modular_inverse(a: int, m: int) -> Optional[int]:
    """
    Compute modular inverse of a modulo m.

    Returns:
        Optional[int]: x with (a * x) % m == 1, or None if gcd(a, m) != 1

    Raises:
        ValueError: If m is not positive
    """
    if m <= 0:
        raise ValueError("Modulus must be positive")

    a = a % m
    if a == 0:
        return None

    gcd, x, _ = extended_gcd(a, m)
    if gcd != 1:
        return None

    return x % m


def is_unit(value: int, modulus: int) -> bool:
    """True if value is a reduced, invertible residue modulo modulus."""
    return 0 < value < modulus and math.gcd(value, modulus) == 1


def ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def random_below(upper: int) -> int:
    """Uniform integer in [0, upper) from the system CSPRNG."""
    if upper <= 0:
        raise ValueError("upper must be positive")
    return secrets.randbelow(upper)


def random_signed_below(upper: int) -> int:
    """Uniform magnitude in [0, upper) with a random sign."""
    value = random_below(upper)
    return -value if secrets.randbelow(2) else value
