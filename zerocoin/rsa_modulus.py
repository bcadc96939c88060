"""
Accumulator Modulus Sources

Production deployments must use a modulus whose factorization nobody
knows (an RSA challenge number or the output of a trusted setup). For
tests and benchmarks an RSA key generated here is good enough: the
private key is discarded immediately.
"""

import logging

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger(__name__)


def generate_test_modulus(key_size: int = 2048) -> int:
    """
    Generate an RSA modulus for testing.

    Args:
        key_size: RSA key size in bits (default: 2048)

    Returns:
        int: The modulus N = p * q; the factors are not retained

    Example:
        >>> N = generate_test_modulus(2048)
        >>> params = calculate_params(N)
    """
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=key_size,
    )
    modulus = private_key.public_key().public_numbers().n
    logger.debug(f"Generated {modulus.bit_length()}-bit test modulus")
    return modulus


def modulus_from_public_key_pem(public_key_pem: str) -> int:
    """
    Extract the modulus from a PEM-encoded RSA public key.

    Raises:
        ValueError: If the PEM is invalid or not an RSA key
    """
    public_key = serialization.load_pem_public_key(public_key_pem.encode())
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise ValueError("Public key is not an RSA key")
    return public_key.public_numbers().n
