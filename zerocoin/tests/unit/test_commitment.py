"""
Unit Tests for Pedersen Commitments and the Commitment Equality Proof
"""

import pytest

from zerocoin.commitment import Commitment, CommitmentProofOfKnowledge
from zerocoin.exceptions import SerializationError


@pytest.fixture(scope="module")
def groups(params):
    """(serial number group, accumulator PoK group)."""
    return (
        params.serial_number_sok_commitment_group,
        params.accumulator_params.accumulator_pok_commitment_group,
    )


class TestCommitment:
    """Test commitment construction."""

    def test_commitment_value(self, params):
        group = params.coin_commitment_group
        commitment = Commitment(group, 12345, randomness=678)

        expected = (pow(group.g, 12345, group.modulus) * pow(group.h, 678, group.modulus)) % group.modulus
        assert commitment.commitment_value == expected
        assert commitment.contents == 12345
        assert commitment.randomness == 678

    def test_random_randomness(self, params):
        group = params.coin_commitment_group
        first = Commitment(group, 5)
        second = Commitment(group, 5)

        assert 0 <= first.randomness < group.group_order
        # Same value, fresh randomness: commitments differ
        assert first.commitment_value != second.commitment_value

    def test_unknown_order_rejected(self, params):
        with pytest.raises(ValueError, match="known order"):
            Commitment(params.accumulator_params.accumulator_qrn_commitment_group, 5)


class TestCommitmentProofOfKnowledge:
    """Test the proof that two commitments hold the same value."""

    @pytest.fixture
    def proof_inputs(self, groups, coins):
        serial_group, pok_group = groups
        value = coins[0].public_coin.value
        a = Commitment(serial_group, value)
        b = Commitment(pok_group, value)
        return a, b

    def test_valid_proof(self, groups, proof_inputs):
        serial_group, pok_group = groups
        a, b = proof_inputs

        proof = CommitmentProofOfKnowledge.prove(serial_group, pok_group, a, b)
        assert proof.verify(a.commitment_value, b.commitment_value)

    def test_different_contents_rejected_by_prover(self, groups, proof_inputs):
        serial_group, pok_group = groups
        a, _ = proof_inputs
        other = Commitment(pok_group, a.contents + 2)

        with pytest.raises(ValueError, match="same value"):
            CommitmentProofOfKnowledge.prove(serial_group, pok_group, a, other)

    def test_wrong_commitment_fails(self, groups, proof_inputs):
        serial_group, pok_group = groups
        a, b = proof_inputs
        proof = CommitmentProofOfKnowledge.prove(serial_group, pok_group, a, b)

        other = Commitment(pok_group, a.contents + 2)
        assert not proof.verify(a.commitment_value, other.commitment_value)

    def test_swapped_commitments_fail(self, groups, proof_inputs):
        serial_group, pok_group = groups
        a, b = proof_inputs
        proof = CommitmentProofOfKnowledge.prove(serial_group, pok_group, a, b)

        assert not proof.verify(b.commitment_value, a.commitment_value)

    def test_out_of_range_inputs_fail(self, groups, proof_inputs):
        serial_group, pok_group = groups
        a, b = proof_inputs
        proof = CommitmentProofOfKnowledge.prove(serial_group, pok_group, a, b)

        assert not proof.verify(0, b.commitment_value)
        assert not proof.verify(a.commitment_value, pok_group.modulus)

    def test_negative_response_fails(self, groups, proof_inputs):
        serial_group, pok_group = groups
        a, b = proof_inputs
        proof = CommitmentProofOfKnowledge.prove(serial_group, pok_group, a, b)
        proof.S2 = -proof.S2

        assert not proof.verify(a.commitment_value, b.commitment_value)

    def test_round_trip(self, groups, proof_inputs):
        serial_group, pok_group = groups
        a, b = proof_inputs
        proof = CommitmentProofOfKnowledge.prove(serial_group, pok_group, a, b)

        decoded = CommitmentProofOfKnowledge.from_bytes(proof.to_bytes(), serial_group, pok_group)
        assert decoded.to_bytes() == proof.to_bytes()
        assert decoded.verify(a.commitment_value, b.commitment_value)

    def test_truncated_encoding(self, groups, proof_inputs):
        serial_group, pok_group = groups
        a, b = proof_inputs
        data = CommitmentProofOfKnowledge.prove(serial_group, pok_group, a, b).to_bytes()

        with pytest.raises(SerializationError):
            CommitmentProofOfKnowledge.from_bytes(data[:-1], serial_group, pok_group)
