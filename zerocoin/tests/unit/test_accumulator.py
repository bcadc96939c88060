"""
Unit Tests for the RSA Accumulator and Witnesses

Tests accumulation, commutativity, witness maintenance and verification,
and the accumulator encoding.
"""

import dataclasses
import itertools

import pytest

from zerocoin.accumulator import Accumulator, AccumulatorWitness
from zerocoin.coin import CoinDenomination, PrivateCoin, PublicCoin
from zerocoin.exceptions import InvalidMemberError, SerializationError
from zerocoin.serialization import encode_bignum, encode_uint32


class TestAccumulator:
    """Test accumulator operations."""

    def test_initial_value_is_base(self, params):
        acc = Accumulator(params.accumulator_params)
        assert acc.value == 961
        assert acc.denomination == CoinDenomination.ZQ_LOVELACE

    def test_accepts_full_params(self, params):
        assert Accumulator(params) == Accumulator(params.accumulator_params)

    def test_accumulate(self, params, coins):
        acc = Accumulator(params)
        coin = coins[0].public_coin
        acc.accumulate(coin)
        assert acc.value == pow(961, coin.value, params.accumulator_params.accumulator_modulus)

    def test_iadd_alias(self, params, coins):
        first = Accumulator(params)
        second = Accumulator(params)
        first.accumulate(coins[0].public_coin)
        second += coins[0].public_coin
        assert first == second

    def test_commutative(self, params, coins):
        """Every insertion order of the same coins gives the same value."""
        members = [coin.public_coin for coin in coins[:3]]
        values = set()
        for order in itertools.permutations(members):
            acc = Accumulator(params)
            for coin in order:
                acc += coin
            values.add(acc.value)
        assert len(values) == 1

    def test_forward_and_reverse(self, params, coins):
        forward = Accumulator(params)
        reverse = Accumulator(params)
        for coin in coins:
            forward += coin.public_coin
        for coin in reversed(coins):
            reverse += coin.public_coin
        assert forward == reverse

    def test_accumulate_all(self, params, coins):
        one_by_one = Accumulator(params)
        for coin in coins:
            one_by_one += coin.public_coin
        batch = Accumulator(params).accumulate_all(coin.public_coin for coin in coins)
        assert batch == one_by_one

    def test_rejects_wrong_denomination(self, params, coins):
        acc = Accumulator(params, CoinDenomination.ZQ_GOLDWASSER)
        with pytest.raises(InvalidMemberError, match="Wrong denomination"):
            acc.accumulate(coins[0].public_coin)

    def test_rejects_composite(self, params, coins):
        bad = PublicCoin(params, coins[0].public_coin.value + 1, CoinDenomination.ZQ_LOVELACE)
        acc = Accumulator(params)
        with pytest.raises(InvalidMemberError, match="not a valid accumulator member"):
            acc.accumulate(bad)
        assert acc.value == 961

    def test_rejects_out_of_range(self, params):
        acc = Accumulator(params)
        with pytest.raises(InvalidMemberError):
            acc.accumulate(PublicCoin(params, 7, CoinDenomination.ZQ_LOVELACE))

    def test_copy_is_independent(self, params, coins):
        acc = Accumulator(params)
        snapshot = acc.copy()
        acc += coins[0].public_coin

        assert snapshot.value == 961
        assert acc != snapshot

    def test_equality_requires_same_params(self, params):
        other_params = dataclasses.replace(params.accumulator_params, k_prime=161)
        assert Accumulator(params) != Accumulator(other_params)

    def test_equality_requires_same_denomination(self, params):
        assert Accumulator(params) != Accumulator(params, CoinDenomination.ZQ_RACKOFF)

    def test_unhashable(self, params):
        """Accumulators change value in place, so they cannot be set members or dict keys."""
        with pytest.raises(TypeError):
            hash(Accumulator(params))
        with pytest.raises(TypeError):
            {Accumulator(params)}


class TestAccumulatorEncoding:
    """Test the accumulator byte encoding."""

    def test_round_trip(self, params, accumulator_and_witness):
        acc, _ = accumulator_and_witness
        decoded = Accumulator.from_bytes(params, acc.to_bytes())
        assert decoded == acc

    def test_round_trip_empty(self, params):
        acc = Accumulator(params, CoinDenomination.ZQ_WILLIAMSON)
        assert Accumulator.from_bytes(params, acc.to_bytes()) == acc

    def test_value_must_be_in_range(self, params):
        modulus = params.accumulator_params.accumulator_modulus
        for value in (0, modulus, -961):
            data = encode_uint32(1) + encode_bignum(value)
            with pytest.raises(SerializationError):
                Accumulator.from_bytes(params, data)

    def test_unknown_denomination(self, params):
        data = encode_uint32(2) + encode_bignum(961)
        with pytest.raises(SerializationError, match="denomination"):
            Accumulator.from_bytes(params, data)

    def test_truncated(self, params, accumulator_and_witness):
        acc, _ = accumulator_and_witness
        data = acc.to_bytes()
        for cut in (1, 4, 9, len(data) - 1):
            with pytest.raises(SerializationError):
                Accumulator.from_bytes(params, data[:cut])

    def test_trailing_data(self, params, accumulator_and_witness):
        acc, _ = accumulator_and_witness
        with pytest.raises(SerializationError, match="Trailing"):
            Accumulator.from_bytes(params, acc.to_bytes() + b"\x01")


class TestAccumulatorWitness:
    """Test witness maintenance and verification."""

    def test_witness_verifies(self, accumulator_and_witness, coins):
        acc, witness = accumulator_and_witness
        assert witness.verify_witness(acc, coins[0].public_coin)

    def test_witness_is_accumulation_of_others(self, params, accumulator_and_witness, coins):
        _, witness = accumulator_and_witness
        others = Accumulator(params)
        for coin in coins[1:]:
            others += coin.public_coin
        assert witness.value == others.value

    def test_witness_invariant(self, params, accumulator_and_witness, coins):
        acc, witness = accumulator_and_witness
        modulus = params.accumulator_params.accumulator_modulus
        assert pow(witness.value, coins[0].public_coin.value, modulus) == acc.value

    def test_checkpoint_is_copied(self, params, coins):
        checkpoint = Accumulator(params)
        witness = AccumulatorWitness(params, checkpoint, coins[0].public_coin)
        checkpoint += coins[1].public_coin
        assert witness.value == 961

    def test_designated_coin_is_skipped(self, params, coins):
        witness = AccumulatorWitness(params, Accumulator(params), coins[0].public_coin)
        witness += coins[0].public_coin
        assert witness.value == 961

    def test_wrong_coin_fails(self, accumulator_and_witness, coins):
        acc, witness = accumulator_and_witness
        assert not witness.verify_witness(acc, coins[1].public_coin)

    def test_accumulator_without_coin_fails(self, params, accumulator_and_witness, coins):
        _, witness = accumulator_and_witness
        partial = Accumulator(params)
        for coin in coins[1:]:
            partial += coin.public_coin
        assert not witness.verify_witness(partial, coins[0].public_coin)

    def test_non_member_fails(self, params, coins):
        outsider = PrivateCoin(params).public_coin
        acc = Accumulator(params)
        witness = AccumulatorWitness(params, acc, outsider)
        for coin in coins:
            acc += coin.public_coin
            witness += coin.public_coin
        assert not witness.verify_witness(acc, outsider)

    def test_wrong_denomination_fails(self, params, accumulator_and_witness, coins):
        acc, witness = accumulator_and_witness
        other = Accumulator(params, CoinDenomination.ZQ_RACKOFF, acc.value)
        assert not witness.verify_witness(other, coins[0].public_coin)
