"""
Zerocoin Benchmark Utility

Seeds a parameter set from a fresh RSA modulus, runs a fixed battery of
named checks and reports PASS/FAIL with elapsed time for each. A failing
check does not stop the run; the exit status is 0 only if every check
passed.

Usage:
    zerocoin-benchmark
    zerocoin-benchmark --coins 10 --log-format json
"""

import argparse
import logging
import sys
import time
from typing import Callable, List, Optional, Tuple

from . import __version__
from .accumulator import Accumulator, AccumulatorWitness
from .coin import PrivateCoin
from .config import get_settings
from .exceptions import ZerocoinError
from .logging_config import setup_logging
from .param_generation import (
    calculate_group_param_lengths,
    calculate_params,
    calculate_seed,
    derive_integer_group_params,
)
from .params import Params
from .rsa_modulus import generate_test_modulus
from .spend import CoinSpend, SpendMetaData

logger = logging.getLogger(__name__)

DEFAULT_COINS_TO_ACCUMULATE = 5
DEFAULT_MODULUS_BITS = 2048


class BenchmarkRun:
    """
    One benchmark session.

    Holds the modulus, parameters and minted coins shared by the checks,
    and the per-check results.
    """

    def __init__(self, modulus_bits: int = DEFAULT_MODULUS_BITS,
                 coins_to_accumulate: int = DEFAULT_COINS_TO_ACCUMULATE,
                 security_level: Optional[int] = None):
        self.modulus_bits = modulus_bits
        self.coins_to_accumulate = coins_to_accumulate
        self.security_level = security_level or get_settings().security_level
        self.modulus: Optional[int] = None
        self.params: Optional[Params] = None
        self.coins: List[PrivateCoin] = []
        self.results: List[Tuple[str, bool, float]] = []

    def run_check(self, description: str, check: Callable[[], bool]) -> bool:
        logger.info(f"Testing if {description}...")
        start = time.perf_counter()
        try:
            passed = bool(check())
        except Exception:
            logger.exception(f"Check raised: {description}")
            passed = False
        elapsed_ms = (time.perf_counter() - start) * 1000

        if passed:
            logger.info(f"[PASS] {description} ({elapsed_ms:.1f} ms)")
        else:
            logger.error(f"[FAIL] {description} ({elapsed_ms:.1f} ms)")
        self.results.append((description, passed, elapsed_ms))
        return passed

    # Checks

    def check_rsa_modulus(self) -> bool:
        modulus = generate_test_modulus(self.modulus_bits)
        return modulus.bit_length() == self.modulus_bits and modulus % 2 == 1

    def check_param_sizes(self) -> bool:
        p_len, q_len = calculate_group_param_lengths(4000, 80)
        return p_len >= 1024 and q_len >= 256

    def check_group_params(self) -> bool:
        p_len, q_len = 1024, 256
        seed = calculate_seed(self.modulus, "test", self.security_level, "TEST GROUP")
        group = derive_integer_group_params(seed, p_len, q_len)

        if group.group_order.bit_length() < q_len or group.modulus.bit_length() < p_len:
            return False
        return pow(group.g, group.group_order, group.modulus) == 1

    def check_param_gen(self) -> bool:
        start = time.perf_counter()
        params = calculate_params(self.modulus, security_level=self.security_level)
        logger.info(f"Parameter generation took {(time.perf_counter() - start) * 1000:.1f} ms")
        return params == self.params

    def check_mint_coins(self) -> bool:
        start = time.perf_counter()
        self.coins = [PrivateCoin(self.params) for _ in range(self.coins_to_accumulate)]
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Minted {len(self.coins)} coins in {elapsed_ms:.1f} ms "
            f"({elapsed_ms / max(len(self.coins), 1):.1f} ms per coin)"
        )
        return all(coin.public_coin.validate() for coin in self.coins)

    def check_accumulator(self) -> bool:
        if len(self.coins) < 2:
            return False

        count = len(self.coins)
        acc_one = Accumulator(self.params)
        acc_two = Accumulator(self.params)
        acc_three = Accumulator(self.params)
        acc_four = Accumulator(self.params)
        witness = AccumulatorWitness(self.params, acc_three, self.coins[0].public_coin)

        for i in range(count):
            acc_one += self.coins[i].public_coin
            acc_two += self.coins[count - (i + 1)].public_coin
            acc_three += self.coins[i].public_coin
            witness += self.coins[i].public_coin
            if i != 0:
                acc_four += self.coins[i].public_coin

        if acc_one != acc_two or acc_one != acc_three:
            logger.error("Accumulators don't match")
            return False
        if acc_four.value != witness.value:
            logger.error("Witness does not equal the accumulation of the other coins")
            return False
        if not witness.verify_witness(acc_three, self.coins[0].public_coin):
            logger.error("Witness not valid")
            return False
        return True

    def _spend_fixture(self) -> Tuple[Accumulator, AccumulatorWitness]:
        if not self.coins:
            self.check_mint_coins()

        accumulator = Accumulator(self.params)
        witness = AccumulatorWitness(self.params, accumulator, self.coins[0].public_coin)
        for coin in self.coins:
            accumulator += coin.public_coin
            witness += coin.public_coin
        return accumulator, witness

    def check_mint_and_spend(self) -> bool:
        accumulator, witness = self._spend_fixture()
        metadata = SpendMetaData(1, 1)

        if not witness.verify_witness(accumulator, self.coins[0].public_coin):
            logger.error("Witness did not verify")
            return False

        start = time.perf_counter()
        spend = CoinSpend.build(self.params, self.coins[0], accumulator, witness, metadata)
        logger.info(f"Spend construction took {(time.perf_counter() - start) * 1000:.1f} ms")

        encoded = spend.to_bytes()
        logger.info(f"Serialized spend is {len(encoded)} bytes")
        decoded = CoinSpend.from_bytes(self.params, encoded)

        start = time.perf_counter()
        valid = decoded.verify(accumulator, metadata)
        logger.info(f"Spend verification took {(time.perf_counter() - start) * 1000:.1f} ms")
        return valid and decoded.coin_serial_number == self.coins[0].serial_number

    def check_metadata_binding(self) -> bool:
        accumulator, witness = self._spend_fixture()
        spend = CoinSpend.build(self.params, self.coins[0], accumulator, witness, SpendMetaData(1, 1))
        return not spend.verify(accumulator, SpendMetaData(1, 2))

    def check_accumulator_round_trip(self) -> bool:
        accumulator, _ = self._spend_fixture()
        decoded = Accumulator.from_bytes(self.params, accumulator.to_bytes())
        return decoded == accumulator

    def run(self) -> bool:
        """Seed parameters, run every check and log a summary."""
        logger.info(f"zerocoin v{__version__} benchmark utility")

        try:
            self.modulus = generate_test_modulus(self.modulus_bits)
            self.params = calculate_params(self.modulus, security_level=self.security_level)
        except ZerocoinError as e:
            logger.error(f"Could not seed parameters: {e}")
            return False

        self.run_check("an RSA modulus can be generated", self.check_rsa_modulus)
        self.run_check("parameter sizes are correct", self.check_param_sizes)
        self.run_check("group/field parameters can be generated", self.check_group_params)
        self.run_check("parameter generation is correct", self.check_param_gen)
        self.run_check("coins can be minted", self.check_mint_coins)
        self.run_check("the accumulator works", self.check_accumulator)
        self.run_check("a minted coin can be spent", self.check_mint_and_spend)
        self.run_check("a spend is bound to its metadata", self.check_metadata_binding)
        self.run_check("an accumulator survives serialization", self.check_accumulator_round_trip)

        passed = sum(1 for _, ok, _ in self.results if ok)
        if passed < len(self.results):
            logger.error("SOME TESTS FAILED")
        logger.info(f"{passed} out of {len(self.results)} tests passed.")
        return passed == len(self.results)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Zerocoin accumulator and spend proof benchmark',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default run: 2048-bit modulus, 5 coins
  zerocoin-benchmark

  # JSON logs for collection
  ZEROCOIN_LOG_FORMAT=json zerocoin-benchmark --coins 10
        """
    )

    parser.add_argument(
        '--coins',
        type=int,
        default=DEFAULT_COINS_TO_ACCUMULATE,
        help=f'Coins to mint and accumulate (default: {DEFAULT_COINS_TO_ACCUMULATE})'
    )

    parser.add_argument(
        '--modulus-bits',
        type=int,
        default=DEFAULT_MODULUS_BITS,
        help=f'Size of the generated RSA modulus (default: {DEFAULT_MODULUS_BITS})'
    )

    parser.add_argument(
        '--security-level',
        type=int,
        default=None,
        help='Security level in bits (default: ZEROCOIN_SECURITY_LEVEL or 80)'
    )

    parser.add_argument(
        '--log-format',
        choices=['text', 'json'],
        default=None,
        help='Log format (default: ZEROCOIN_LOG_FORMAT or text)'
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    if args.log_format:
        settings = settings.model_copy(update={'log_format': args.log_format})
    setup_logging(settings)

    if args.coins < 2:
        logger.error("At least 2 coins are needed")
        return 2

    run = BenchmarkRun(
        modulus_bits=args.modulus_bits,
        coins_to_accumulate=args.coins,
        security_level=args.security_level,
    )
    return 0 if run.run() else 1


if __name__ == '__main__':
    sys.exit(main())
