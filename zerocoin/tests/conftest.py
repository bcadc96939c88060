"""
Test Configuration and Fixtures

Provides session-wide fixtures for:
- A 2048-bit RSA test modulus
- Public parameters derived from it at the default security level
- A batch of minted coins and an accumulator/witness built over them
"""

from typing import List, Tuple

import pytest

from zerocoin.accumulator import Accumulator, AccumulatorWitness
from zerocoin.coin import CoinDenomination, PrivateCoin
from zerocoin.param_generation import calculate_params
from zerocoin.params import Params
from zerocoin.rsa_modulus import generate_test_modulus

COINS_TO_ACCUMULATE = 5


@pytest.fixture(scope="session")
def test_modulus() -> int:
    """RSA modulus with discarded factors."""
    return generate_test_modulus(2048)


@pytest.fixture(scope="session")
def params(test_modulus: int) -> Params:
    """Public parameters at security level 80 (pLen=1024, qLen=256)."""
    return calculate_params(test_modulus, aux_string="test", security_level=80)


@pytest.fixture(scope="session")
def coins(params: Params) -> List[PrivateCoin]:
    """Freshly minted coins of the default denomination."""
    return [PrivateCoin(params, CoinDenomination.ZQ_LOVELACE) for _ in range(COINS_TO_ACCUMULATE)]


@pytest.fixture
def accumulator_and_witness(params: Params, coins: List[PrivateCoin]) -> Tuple[Accumulator, AccumulatorWitness]:
    """Accumulator over every coin and a witness for coins[0]."""
    accumulator = Accumulator(params.accumulator_params, CoinDenomination.ZQ_LOVELACE)
    witness = AccumulatorWitness(params, accumulator, coins[0].public_coin)
    for coin in coins:
        accumulator += coin.public_coin
        witness += coin.public_coin
    return accumulator, witness
