"""
Merkle Proofs Unit Tests
Tests for core/merkle/merkle_proofs.py

Tests:
- Proof JSON (de)serialization and error reporting
- MerkleProver convenience wrappers
- MerkleVerifier with and without a local tree
"""
import json

import pytest

from core.merkle import (
    MerkleProver,
    MerkleVerifier,
    ProofNode,
    build_merkle_tree,
    proofs_from_dicts,
    proofs_from_json,
    proofs_to_dicts,
    proofs_to_json,
)
from core.schemas.errors import EmptyInputError, IndexOutOfRangeError, MalformedProofError
from fixtures.vault_fixtures import make_files


class TestProofSerialization:
    """Tests for proof (de)serialization."""

    def test_round_trip(self):
        """proofs_from_json(proofs_to_json(p)) == p."""
        proof = build_merkle_tree(make_files(9)).generate_proof(5)
        assert proofs_from_json(proofs_to_json(proof, indent=2)) == proof

    def test_record_shape(self):
        """Each sibling serializes as {hash, left_idx, right_idx}."""
        proof = build_merkle_tree([b"a", b"b"]).generate_proof(0)
        assert proofs_to_dicts(proof) == [
            {"hash": proof[0].hash, "left_idx": 1, "right_idx": 1}
        ]

    def test_extra_tree_fields_ignored(self):
        """Records dumped from whole tree nodes still parse."""
        tree = build_merkle_tree([b"a", b"b"])
        records = [tree.root.right.to_dict()]

        assert proofs_from_dicts(records) == [ProofNode.from_node(tree.root.right)]

    def test_not_a_list_rejected(self):
        with pytest.raises(MalformedProofError, match="must be a list"):
            proofs_from_dicts({"hash": "x"})

    def test_bad_step_reported(self):
        """The failing step is carried in the error details."""
        tree = build_merkle_tree(make_files(4))
        records = proofs_to_dicts(tree.generate_proof(0))
        records[1] = {"hash": records[1]["hash"]}

        with pytest.raises(MalformedProofError) as exc_info:
            proofs_from_dicts(records)
        assert exc_info.value.details["step"] == 1

    def test_invalid_json_rejected(self):
        with pytest.raises(MalformedProofError, match="invalid proof JSON"):
            proofs_from_json("[{")

    def test_empty_proof(self):
        assert proofs_from_json(json.dumps([])) == []


class TestMerkleProver:
    """Tests for MerkleProver."""

    def test_prove_matches_tree(self):
        files = make_files(6)
        assert MerkleProver.prove(files, 4) == build_merkle_tree(files).generate_proof(4)

    def test_compute_root(self):
        files = make_files(3)
        assert MerkleProver.compute_root(files) == MerkleProver.build(files).root_hash

    def test_prove_errors(self):
        with pytest.raises(EmptyInputError):
            MerkleProver.prove([], 0)
        with pytest.raises(IndexOutOfRangeError):
            MerkleProver.prove(make_files(2), 2)


class TestMerkleVerifier:
    """Tests for MerkleVerifier."""

    def test_verify(self):
        files = make_files(5)
        tree = build_merkle_tree(files)

        assert MerkleVerifier.verify(files[3], 3, tree.generate_proof(3), tree.root_hash)

    def test_verify_never_raises_on_malformed(self):
        """Malformed proofs give False."""
        files = make_files(2)
        tree = build_merkle_tree(files)

        assert not MerkleVerifier.verify(files[0], 0, [{"bogus": 1}], tree.root_hash)

    def test_verify_with_tree(self):
        files = make_files(5)
        tree = build_merkle_tree(files)
        proof = tree.generate_proof(2)

        assert MerkleVerifier.verify_with_tree(files[2], 2, proof, tree.root_hash, tree)

    def test_verify_with_tree_none_falls_back(self):
        files = make_files(5)
        tree = build_merkle_tree(files)
        proof = tree.generate_proof(2)

        assert MerkleVerifier.verify_with_tree(files[2], 2, proof, tree.root_hash, None)

    def test_verify_with_mismatched_tree_fails(self):
        """A local tree that disagrees with the trusted root gives False."""
        files = make_files(5)
        tree = build_merkle_tree(files)
        stale = build_merkle_tree(make_files(5, prefix="old"))

        assert not MerkleVerifier.verify_with_tree(
            files[0], 0, tree.generate_proof(0), tree.root_hash, stale
        )
