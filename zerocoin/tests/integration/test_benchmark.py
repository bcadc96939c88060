"""
Integration Tests for the Benchmark Utility

Runs individual checks against the session parameters instead of
seeding a fresh parameter set for every test.
"""

import logging

import pytest

from zerocoin.benchmark import BenchmarkRun, main


@pytest.fixture
def bench(test_modulus, params, coins):
    """Benchmark run preloaded with the session modulus, parameters and coins."""
    run = BenchmarkRun(coins_to_accumulate=len(coins), security_level=80)
    run.modulus = test_modulus
    run.params = params
    run.coins = list(coins)
    return run


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestBenchmarkChecks:
    """Test the individual benchmark checks."""

    def test_param_sizes(self, bench):
        assert bench.check_param_sizes()

    def test_group_params(self, bench):
        assert bench.check_group_params()

    def test_accumulator(self, bench):
        assert bench.check_accumulator()

    def test_accumulator_needs_two_coins(self, bench):
        bench.coins = bench.coins[:1]
        assert not bench.check_accumulator()

    def test_mint_and_spend(self, bench):
        assert bench.check_mint_and_spend()

    def test_metadata_binding(self, bench):
        assert bench.check_metadata_binding()

    def test_accumulator_round_trip(self, bench):
        assert bench.check_accumulator_round_trip()


class TestRunCheck:
    """Test result bookkeeping."""

    def test_records_pass(self, bench):
        assert bench.run_check("always passes", lambda: True)
        description, passed, elapsed_ms = bench.results[0]

        assert description == "always passes"
        assert passed
        assert elapsed_ms >= 0

    def test_records_fail(self, bench):
        assert not bench.run_check("always fails", lambda: False)
        assert bench.results == [("always fails", False, bench.results[0][2])]

    def test_raising_check_is_a_failure(self, bench):
        def explode():
            raise RuntimeError("boom")

        assert not bench.run_check("raises", explode)
        assert bench.run_check("still runs", lambda: True)
        assert [passed for _, passed, _ in bench.results] == [False, True]


class TestMain:
    """Test the command line entry point."""

    def test_too_few_coins(self, restore_root_logger):
        assert main(["--coins", "1"]) == 2

    def test_rejects_unknown_log_format(self):
        with pytest.raises(SystemExit):
            main(["--log-format", "xml"])
