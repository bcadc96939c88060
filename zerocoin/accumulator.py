"""
RSA Accumulator and Membership Witnesses

The accumulator folds prime coin commitments into a single element of
Z*_N:

    A = base^(C_1 * C_2 * ... * C_n) mod N

Accumulation commutes, so any insertion order yields the same value.
A witness for coin C is the accumulation of every other member, and
satisfies witness^C == A (mod N).
"""

import logging
from typing import Iterable, Optional, Union

from .coin import CoinDenomination, PublicCoin, as_denomination
from .exceptions import InvalidMemberError, SerializationError
from .params import AccumulatorAndProofParams, Params
from .serialization import ByteReader, encode_bignum, encode_uint32

logger = logging.getLogger(__name__)


class Accumulator:
    """
    Accumulator for coins of one denomination.

    Args:
        params: Accumulator parameters (or full Params)
        denomination: Denomination of the coins it accepts
        value: Starting value (default: the accumulator base)

    Example:
        >>> acc = Accumulator(params.accumulator_params, CoinDenomination.ZQ_LOVELACE)
        >>> acc += coin.public_coin
    """

    def __init__(
        self,
        params: Union[AccumulatorAndProofParams, Params],
        denomination: Union[int, CoinDenomination] = CoinDenomination.ZQ_LOVELACE,
        value: Optional[int] = None,
    ):
        if isinstance(params, Params):
            params = params.accumulator_params
        self.params = params
        self.denomination = as_denomination(denomination)
        self.value = params.accumulator_base if value is None else value

    def accumulate(self, coin: PublicCoin) -> "Accumulator":
        """
        Add a coin: value <- value^C mod N.

        Raises:
            InvalidMemberError: If the coin is not prime, lies outside the
                coin range or has a different denomination
        """
        if coin.denomination != self.denomination:
            raise InvalidMemberError(
                f"Wrong denomination: coin is {coin.denomination.name}, "
                f"accumulator is {self.denomination.name}"
            )
        if coin.params.accumulator_params != self.params:
            raise InvalidMemberError("Coin was created under different parameters")
        if not coin.validate():
            raise InvalidMemberError("Coin is not a valid accumulator member")

        self.value = pow(self.value, coin.value, self.params.accumulator_modulus)
        return self

    def __iadd__(self, coin: PublicCoin) -> "Accumulator":
        return self.accumulate(coin)

    def accumulate_all(self, coins: Iterable[PublicCoin]) -> "Accumulator":
        """Accumulate several coins, stopping at the first invalid one."""
        count = 0
        for coin in coins:
            self.accumulate(coin)
            count += 1
        logger.debug(f"Accumulated {count} coins")
        return self

    def copy(self) -> "Accumulator":
        return Accumulator(self.params, self.denomination, self.value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Accumulator):
            return NotImplemented
        return (
            self.params == other.params
            and self.denomination == other.denomination
            and self.value == other.value
        )

    # Mutable: accumulate() changes value
    __hash__ = None

    def __repr__(self) -> str:
        return f"Accumulator(denomination={self.denomination.name}, value={self.value:#x})"

    def to_bytes(self) -> bytes:
        return encode_uint32(self.denomination) + encode_bignum(self.value)

    @classmethod
    def read_from(cls, reader: ByteReader, params: Union[AccumulatorAndProofParams, Params]) -> "Accumulator":
        if isinstance(params, Params):
            params = params.accumulator_params

        denomination = reader.read_uint32()
        value = reader.read_bignum()
        if denomination not in {d.value for d in CoinDenomination}:
            raise SerializationError(f"Unknown coin denomination: {denomination}")
        if not 0 < value < params.accumulator_modulus:
            raise SerializationError("Accumulator value outside Z_N")
        return cls(params, denomination, value)

    @classmethod
    def from_bytes(cls, params: Union[AccumulatorAndProofParams, Params], data: bytes) -> "Accumulator":
        """
        Decode an accumulator produced by to_bytes().

        Raises:
            SerializationError: If data is truncated, malformed or out of range
        """
        reader = ByteReader(data)
        accumulator = cls.read_from(reader, params)
        reader.finish()
        return accumulator


class AccumulatorWitness:
    """
    Membership witness for one designated coin.

    Starts from a checkpoint accumulator that does not contain the coin
    and is updated with every other member as the set grows.

    Args:
        params: Public parameters
        checkpoint: Accumulator state before the coin was added
        coin: The designated coin
    """

    def __init__(self, params: Params, checkpoint: Accumulator, coin: PublicCoin):
        self.params = params
        self.witness = checkpoint.copy()
        self.element = coin

    def add_element(self, coin: PublicCoin) -> "AccumulatorWitness":
        """Update the witness with a newly accumulated coin (skips the designated one)."""
        if coin != self.element:
            self.witness.accumulate(coin)
        return self

    def __iadd__(self, coin: PublicCoin) -> "AccumulatorWitness":
        return self.add_element(coin)

    @property
    def value(self) -> int:
        return self.witness.value

    def verify_witness(self, accumulator: Accumulator, coin: PublicCoin) -> bool:
        """
        Check that coin is accumulated in accumulator.

        Returns:
            bool: True iff coin is the designated coin and witness^C == A (mod N)
        """
        if coin != self.element:
            return False
        if accumulator.denomination != self.witness.denomination:
            return False
        if accumulator.params != self.witness.params:
            return False

        modulus = self.witness.params.accumulator_modulus
        return pow(self.witness.value, coin.value, modulus) == accumulator.value

    def __repr__(self) -> str:
        return f"AccumulatorWitness(coin={self.element!r})"
