"""
Zerocoin Exceptions

Error taxonomy for parameter generation, accumulation, minting,
proof construction and decoding. Proof verification never raises:
a proof that does not verify is reported as False.
"""


class ZerocoinError(Exception):
    """Base class for all library errors."""


class ParameterGenerationError(ZerocoinError):
    """No suitable group could be derived within the bounded search."""


class InvalidMemberError(ZerocoinError):
    """A value offered to an accumulator is not a well-formed member."""


class CoinGenerationExhausted(ZerocoinError):
    """Minting gave up after the configured number of attempts."""


class SerializationError(ZerocoinError):
    """Encoded bytes are truncated, malformed or out of range."""


class SpendConstructionError(ZerocoinError):
    """A spend proof cannot be built from the supplied inputs."""
