"""
Zerocoin Accumulator and Spend Proof Package

RSA accumulator based anonymous coins: deterministic public parameter
generation, coin minting, accumulation with updatable witnesses, and
zero-knowledge spend proofs that reveal only a serial number.
"""

__version__ = "0.1.0"

from .accumulator import Accumulator, AccumulatorWitness
from .accumulator_proof import AccumulatorProofOfKnowledge
from .coin import CoinDenomination, PrivateCoin, PublicCoin
from .commitment import Commitment, CommitmentProofOfKnowledge
from .exceptions import (
    CoinGenerationExhausted,
    InvalidMemberError,
    ParameterGenerationError,
    SerializationError,
    SpendConstructionError,
    ZerocoinError,
)
from .param_generation import (
    calculate_group_param_lengths,
    calculate_params,
    calculate_seed,
    derive_integer_group_from_order,
    derive_integer_group_params,
)
from .params import AccumulatorAndProofParams, IntegerGroupParams, Params
from .rsa_modulus import generate_test_modulus, modulus_from_public_key_pem
from .serial_number_proof import SerialNumberSignatureOfKnowledge
from .spend import CoinSpend, SpendMetaData

__all__ = [
    "Accumulator",
    "AccumulatorWitness",
    "AccumulatorProofOfKnowledge",
    "CoinDenomination",
    "PrivateCoin",
    "PublicCoin",
    "Commitment",
    "CommitmentProofOfKnowledge",
    "CoinGenerationExhausted",
    "InvalidMemberError",
    "ParameterGenerationError",
    "SerializationError",
    "SpendConstructionError",
    "ZerocoinError",
    "calculate_group_param_lengths",
    "calculate_params",
    "calculate_seed",
    "derive_integer_group_from_order",
    "derive_integer_group_params",
    "AccumulatorAndProofParams",
    "IntegerGroupParams",
    "Params",
    "generate_test_modulus",
    "modulus_from_public_key_pem",
    "SerialNumberSignatureOfKnowledge",
    "CoinSpend",
    "SpendMetaData",
]
