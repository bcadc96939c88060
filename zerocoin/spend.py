"""
Coin Spends

A CoinSpend proves, in zero knowledge, that the spender owns a coin
accumulated in a given accumulator, and reveals the coin's serial
number so that a ledger can reject a second spend of the same coin.

The proof is three sub-proofs tied together by commitments to the
coin under two groups:

    CommitmentProofOfKnowledge        both commitments open to the same coin
    AccumulatorProofOfKnowledge       the committed coin is in the accumulator
    SerialNumberSignatureOfKnowledge  the committed coin has the revealed serial,
                                      signed over the spend metadata
"""

import logging
from dataclasses import dataclass
from typing import Union

from .accumulator import Accumulator, AccumulatorWitness
from .accumulator_proof import AccumulatorProofOfKnowledge
from .coin import CoinDenomination, PrivateCoin
from .commitment import Commitment, CommitmentProofOfKnowledge
from .exceptions import SerializationError, SpendConstructionError
from .hashing import HashWriter
from .params import Params
from .serial_number_proof import SerialNumberSignatureOfKnowledge
from .serialization import ByteReader, encode_bignum, encode_uint32

logger = logging.getLogger(__name__)

ZEROCOIN_SPEND_SIGNATURE = "COIN_SPEND_SIGNATURE"


@dataclass(frozen=True)
class SpendMetaData:
    """
    Transaction data a spend is bound to.

    Attributes:
        accumulator_id: Identifier of the accumulator checkpoint spent against
        tx_hash: Hash of the spending transaction
    """

    accumulator_id: int
    tx_hash: int

    def to_bytes(self) -> bytes:
        return encode_bignum(self.accumulator_id) + encode_bignum(self.tx_hash)


def _signature_hash(
    metadata: SpendMetaData,
    denomination: CoinDenomination,
    serial_commitment_value: int,
    accumulator_commitment_value: int,
    commitment_pok: CommitmentProofOfKnowledge,
    accumulator_pok: AccumulatorProofOfKnowledge,
) -> bytes:
    return HashWriter().write(
        ZEROCOIN_SPEND_SIGNATURE,
        metadata,
        int(denomination),
        serial_commitment_value,
        accumulator_commitment_value,
        commitment_pok,
        accumulator_pok,
    ).digest()


class CoinSpend:
    """
    Zero-knowledge proof of a coin spend.

    Build with CoinSpend.build() or decode with CoinSpend.from_bytes();
    check with verify(). Instances are not modified after construction.

    Example:
        >>> spend = CoinSpend.build(params, coin, accumulator, witness, SpendMetaData(1, 1))
        >>> assert spend.verify(accumulator, SpendMetaData(1, 1))
        >>> ledger.mark_spent(spend.coin_serial_number)
    """

    def __init__(
        self,
        params: Params,
        denomination: Union[int, CoinDenomination],
        coin_serial_number: int,
        serial_commitment_to_coin_value: int,
        accumulator_commitment_to_coin_value: int,
        commitment_pok: CommitmentProofOfKnowledge,
        accumulator_pok: AccumulatorProofOfKnowledge,
        serial_number_sok: SerialNumberSignatureOfKnowledge,
    ):
        self.params = params
        self.denomination = CoinDenomination(denomination)
        self.coin_serial_number = coin_serial_number
        self.serial_commitment_to_coin_value = serial_commitment_to_coin_value
        self.accumulator_commitment_to_coin_value = accumulator_commitment_to_coin_value
        self.commitment_pok = commitment_pok
        self.accumulator_pok = accumulator_pok
        self.serial_number_sok = serial_number_sok

    @classmethod
    def build(
        cls,
        params: Params,
        coin: PrivateCoin,
        accumulator: Accumulator,
        witness: AccumulatorWitness,
        metadata: SpendMetaData,
    ) -> "CoinSpend":
        """
        Build a spend proof for coin.

        Args:
            params: Public parameters
            coin: The coin being spent
            accumulator: Accumulator containing the coin
            witness: Witness for the coin against accumulator
            metadata: Transaction data to bind the proof to

        Returns:
            CoinSpend: The proof

        Raises:
            SpendConstructionError: If parameters or denominations disagree,
                or the witness does not prove membership in accumulator
        """
        if coin.params != params or accumulator.params != params.accumulator_params:
            raise SpendConstructionError("Coin and accumulator must use the given parameters")
        if coin.denomination != accumulator.denomination:
            raise SpendConstructionError(
                f"Coin denomination {coin.denomination.name} does not match "
                f"accumulator denomination {accumulator.denomination.name}"
            )
        if not witness.verify_witness(accumulator, coin.public_coin):
            logger.warning("Refusing to build spend: witness does not match accumulator")
            raise SpendConstructionError("Accumulator witness does not verify")

        coin_value = coin.public_coin.value

        # Both commitments take fresh randomness
        serial_commitment = Commitment(params.serial_number_sok_commitment_group, coin_value)
        accumulator_commitment = Commitment(
            params.accumulator_params.accumulator_pok_commitment_group, coin_value
        )

        commitment_pok = CommitmentProofOfKnowledge.prove(
            params.serial_number_sok_commitment_group,
            params.accumulator_params.accumulator_pok_commitment_group,
            serial_commitment,
            accumulator_commitment,
        )
        accumulator_pok = AccumulatorProofOfKnowledge.prove(
            params.accumulator_params, accumulator_commitment, witness.value, accumulator.value
        )

        msghash = _signature_hash(
            metadata,
            coin.denomination,
            serial_commitment.commitment_value,
            accumulator_commitment.commitment_value,
            commitment_pok,
            accumulator_pok,
        )
        serial_number_sok = SerialNumberSignatureOfKnowledge.sign(
            params, coin.serial_number, coin.randomness, serial_commitment, msghash
        )

        logger.info(f"Built spend proof for {coin.denomination.name} coin")
        return cls(
            params,
            coin.denomination,
            coin.serial_number,
            serial_commitment.commitment_value,
            accumulator_commitment.commitment_value,
            commitment_pok,
            accumulator_pok,
            serial_number_sok,
        )

    def signature_hash(self, metadata: SpendMetaData) -> bytes:
        """Digest of the metadata and every proof component except the signature itself."""
        return _signature_hash(
            metadata,
            self.denomination,
            self.serial_commitment_to_coin_value,
            self.accumulator_commitment_to_coin_value,
            self.commitment_pok,
            self.accumulator_pok,
        )

    def verify(self, accumulator: Accumulator, metadata: SpendMetaData) -> bool:
        """
        Verify the spend against accumulator and metadata.

        Returns:
            bool: True iff all sub-proofs hold; False for any mismatch or
                  malformed element
        """
        params = self.params

        if not isinstance(self.serial_number_sok, SerialNumberSignatureOfKnowledge):
            logger.debug("Spend carries no serial number signature")
            return False
        if accumulator.params != params.accumulator_params:
            logger.warning("Spend verification against an accumulator with different parameters")
            return False
        if accumulator.denomination != self.denomination:
            logger.debug("Spend denomination does not match accumulator")
            return False
        if not 0 < self.coin_serial_number < params.coin_commitment_group.group_order:
            logger.debug("Serial number out of range")
            return False

        if not self.commitment_pok.verify(
            self.serial_commitment_to_coin_value, self.accumulator_commitment_to_coin_value
        ):
            logger.debug("Commitment equality proof failed")
            return False
        if not self.accumulator_pok.verify(accumulator.value, self.accumulator_commitment_to_coin_value):
            logger.debug("Accumulator proof of knowledge failed")
            return False
        if not self.serial_number_sok.verify(
            self.coin_serial_number, self.serial_commitment_to_coin_value, self.signature_hash(metadata)
        ):
            logger.debug("Serial number signature of knowledge failed")
            return False

        return True

    def __eq__(self, other) -> bool:
        if not isinstance(other, CoinSpend):
            return NotImplemented
        return self.params == other.params and self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        return f"CoinSpend(denomination={self.denomination.name}, serial={self.coin_serial_number:#x})"

    def to_bytes(self) -> bytes:
        return (
            encode_uint32(self.denomination)
            + encode_bignum(self.coin_serial_number)
            + encode_bignum(self.serial_commitment_to_coin_value)
            + encode_bignum(self.accumulator_commitment_to_coin_value)
            + self.commitment_pok.to_bytes()
            + self.accumulator_pok.to_bytes()
            + self.serial_number_sok.to_bytes()
        )

    @classmethod
    def from_bytes(cls, params: Params, data: bytes) -> "CoinSpend":
        """
        Decode a spend produced by to_bytes().

        Raises:
            SerializationError: If data is truncated, malformed or out of range
        """
        serial_group = params.serial_number_sok_commitment_group
        pok_group = params.accumulator_params.accumulator_pok_commitment_group

        reader = ByteReader(data)
        denomination = reader.read_uint32()
        if denomination not in {d.value for d in CoinDenomination}:
            raise SerializationError(f"Unknown coin denomination: {denomination}")

        coin_serial_number = reader.read_bignum()
        serial_commitment_value = reader.read_bignum()
        accumulator_commitment_value = reader.read_bignum()
        if not 0 < serial_commitment_value < serial_group.modulus:
            raise SerializationError("Serial commitment outside its group")
        if not 0 < accumulator_commitment_value < pok_group.modulus:
            raise SerializationError("Accumulator commitment outside its group")

        commitment_pok = CommitmentProofOfKnowledge.read_from(reader, serial_group, pok_group)
        accumulator_pok = AccumulatorProofOfKnowledge.read_from(reader, params.accumulator_params)
        serial_number_sok = SerialNumberSignatureOfKnowledge.read_from(reader, params)
        reader.finish()

        return cls(
            params,
            denomination,
            coin_serial_number,
            serial_commitment_value,
            accumulator_commitment_value,
            commitment_pok,
            accumulator_pok,
            serial_number_sok,
        )
