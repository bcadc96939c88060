"""
Coins

A PrivateCoin is a secret serial number S and randomness r. Its public
identity is the Pedersen commitment

    C = g^S * h^r mod p

in the coin commitment group. C must be a prime within the coin range
so that it can be accumulated; minting resamples until it is.
"""

import logging
from enum import IntEnum
from typing import Union

from .bignum import is_probable_prime, random_below
from .commitment import Commitment
from .config import get_settings
from .exceptions import CoinGenerationExhausted, InvalidMemberError, SerializationError
from .params import Params
from .serialization import ByteReader, encode_bignum, encode_uint32

logger = logging.getLogger(__name__)


class CoinDenomination(IntEnum):
    ZQ_LOVELACE = 1
    ZQ_GOLDWASSER = 10
    ZQ_RACKOFF = 25
    ZQ_PEDERSEN = 50
    ZQ_WILLIAMSON = 100


def as_denomination(value: Union[int, CoinDenomination]) -> CoinDenomination:
    try:
        return CoinDenomination(value)
    except ValueError:
        raise InvalidMemberError(f"Unknown coin denomination: {value}") from None


class PublicCoin:
    """
    The published half of a coin: commitment value and denomination.

    Two public coins are equal iff value and denomination are equal.
    """

    def __init__(self, params: Params, value: int, denomination: Union[int, CoinDenomination]):
        self.params = params
        self.value = value
        self.denomination = as_denomination(denomination)

    def validate(self) -> bool:
        """
        Check that the coin may be accumulated.

        Returns:
            bool: True iff the value lies in the coin range and is a probable prime
        """
        acc_params = self.params.accumulator_params
        if not acc_params.min_coin_value <= self.value <= acc_params.max_coin_value:
            return False
        return is_probable_prime(self.value, get_settings().mint_prime_rounds, random_bases=True)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PublicCoin):
            return NotImplemented
        return self.value == other.value and self.denomination == other.denomination

    def __hash__(self) -> int:
        return hash((self.value, int(self.denomination)))

    def __repr__(self) -> str:
        return f"PublicCoin(denomination={self.denomination.name}, value={self.value:#x})"

    def to_bytes(self) -> bytes:
        return encode_uint32(self.denomination) + encode_bignum(self.value)

    @classmethod
    def read_from(cls, reader: ByteReader, params: Params) -> "PublicCoin":
        denomination = reader.read_uint32()
        value = reader.read_bignum()
        if denomination not in {d.value for d in CoinDenomination}:
            raise SerializationError(f"Unknown coin denomination: {denomination}")
        acc_params = params.accumulator_params
        if not acc_params.min_coin_value <= value <= acc_params.max_coin_value:
            raise SerializationError("Coin value outside the coin range")
        return cls(params, value, denomination)

    @classmethod
    def from_bytes(cls, params: Params, data: bytes) -> "PublicCoin":
        """
        Decode a public coin produced by to_bytes().

        Raises:
            SerializationError: If data is truncated, malformed or out of range
        """
        reader = ByteReader(data)
        coin = cls.read_from(reader, params)
        reader.finish()
        return coin


class PrivateCoin:
    """
    A freshly minted coin with its secret opening.

    Args:
        params: Public parameters
        denomination: Coin denomination

    Raises:
        CoinGenerationExhausted: If no valid commitment was found within
            settings.max_mint_attempts samples

    Example:
        >>> coin = PrivateCoin(params, CoinDenomination.ZQ_LOVELACE)
        >>> assert coin.public_coin.validate()
    """

    def __init__(self, params: Params, denomination: Union[int, CoinDenomination] = CoinDenomination.ZQ_LOVELACE):
        self.params = params
        self.denomination = as_denomination(denomination)
        self.serial_number, self.randomness, value = self._mint()
        self.public_coin = PublicCoin(params, value, self.denomination)

    def _mint(self):
        settings = get_settings()
        group = self.params.coin_commitment_group
        acc_params = self.params.accumulator_params

        for attempt in range(1, settings.max_mint_attempts + 1):
            commitment = Commitment(group, random_below(group.group_order))
            value = commitment.commitment_value

            if not acc_params.min_coin_value <= value <= acc_params.max_coin_value:
                continue
            if is_probable_prime(value, settings.mint_prime_rounds):
                logger.debug(f"Minted coin after {attempt} attempts")
                return commitment.contents, commitment.randomness, value

        logger.warning(f"Minting failed after {settings.max_mint_attempts} attempts")
        raise CoinGenerationExhausted(
            f"No prime coin commitment found in {settings.max_mint_attempts} attempts"
        )

    def __repr__(self) -> str:
        return f"PrivateCoin(denomination={self.denomination.name})"
