"""
Merkle Proofs Unit Tests
Tests for merkle_arena/merkle/merkle_proofs.py and detached verification.
"""
import pytest

from fixtures import SAMPLE, EXPECTED_ROOT, make_leaves
from merkle_arena.crypto.hashing import get_hasher, hash_leaf
from merkle_arena.merkle.merkle_proofs import MerkleProver, MerkleVerifier
from merkle_arena.merkle.merkle_tree import MerkleProof, verify_merkle_proof
from merkle_arena.schemas.errors import LeafIndexOutOfBoundsException


class TestMerkleProver:
    """Tests for MerkleProver."""

    def test_compute_root_sample(self):
        assert MerkleProver.compute_root(SAMPLE) == EXPECTED_ROOT

    def test_compute_root_empty(self):
        assert MerkleProver.compute_root([]) is None

    def test_prove(self):
        proof = MerkleProver.prove(SAMPLE, 9)

        assert proof.leaf == hash_leaf(b"iaculis")
        assert proof.root == EXPECTED_ROOT
        assert len(proof.siblings) == 4

    def test_prove_out_of_range(self):
        with pytest.raises(LeafIndexOutOfBoundsException):
            MerkleProver.prove(SAMPLE, 10)

    def test_prove_all(self):
        proofs = MerkleProver.prove_all(make_leaves(6))

        assert [p.index for p in proofs] == list(range(6))
        assert len({p.root for p in proofs}) == 1
        assert all(MerkleVerifier.verify(p) for p in proofs)

    def test_prove_with_other_algorithm(self):
        proof = MerkleProver.prove(SAMPLE, 3, hash_algorithm="blake2b")

        assert proof.algorithm == "blake2b"
        assert proof.leaf == get_hasher("blake2b").leaf(b"sit")
        assert MerkleVerifier.verify(proof)


class TestDetachedVerification:
    """Verification without the tree."""

    def test_verify_every_index(self):
        leaves = make_leaves(13)
        for proof in MerkleProver.prove_all(leaves):
            assert verify_merkle_proof(proof), f"index {proof.index}"

    def test_verify_data_in_root(self):
        proof = MerkleProver.prove(SAMPLE, 9)

        assert MerkleVerifier.verify_data_in_root(
            b"iaculis", 9, proof.siblings, EXPECTED_ROOT
        )
        assert MerkleVerifier.verify_data_in_root(
            "iaculis", 9, proof.siblings, EXPECTED_ROOT
        )

    def test_verify_wrong_data_fails(self):
        proof = MerkleProver.prove(SAMPLE, 9)

        assert not MerkleVerifier.verify_data_in_root(
            b"Integer", 9, proof.siblings, EXPECTED_ROOT
        )

    def test_verify_leaf_in_root(self):
        proof = MerkleProver.prove(SAMPLE, 2)

        assert MerkleVerifier.verify_leaf_in_root(
            leaf=proof.leaf,
            index=2,
            siblings=proof.siblings,
            root=EXPECTED_ROOT,
        )

    def test_wrong_algorithm_fails(self):
        proof = MerkleProver.prove(SAMPLE, 2)

        assert not MerkleVerifier.verify_leaf_in_root(
            proof.leaf, 2, proof.siblings, EXPECTED_ROOT, hash_algorithm="sha3_256"
        )

    def test_tampered_root_fails(self):
        proof = MerkleProver.prove(SAMPLE, 0)
        tampered = MerkleProof(
            leaf=proof.leaf,
            index=proof.index,
            siblings=proof.siblings,
            root=hash_leaf(b"wrong root"),
        )

        assert not verify_merkle_proof(tampered)

    def test_index_beyond_height_fails(self):
        """Index 16 cannot exist under four levels even if the low bits fold."""
        proof = MerkleProver.prove(SAMPLE, 0)
        shifted = MerkleProof(
            leaf=proof.leaf,
            index=16,
            siblings=proof.siblings,
            root=proof.root,
        )

        assert not verify_merkle_proof(shifted)

    def test_leaf_count_binds_index(self):
        """Self-paired nodes fold alike from both sides; only index 9 exists."""
        proof = MerkleProver.prove(SAMPLE, 9)
        assert proof.leaf_count == 10

        accepted = [
            i for i in range(16)
            if MerkleVerifier.verify_leaf_in_root(
                proof.leaf, i, proof.siblings, EXPECTED_ROOT, leaf_count=10
            )
        ]

        assert accepted == [9]

    def test_without_leaf_count_index_past_last_leaf_folds(self):
        proof = MerkleProver.prove(SAMPLE, 9)

        assert MerkleVerifier.verify_leaf_in_root(
            proof.leaf, 11, proof.siblings, EXPECTED_ROOT
        )

    def test_verify_data_with_leaf_count(self):
        proof = MerkleProver.prove(SAMPLE, 9)

        assert MerkleVerifier.verify_data_in_root(
            b"iaculis", 9, proof.siblings, EXPECTED_ROOT, leaf_count=10
        )
        assert not MerkleVerifier.verify_data_in_root(
            b"iaculis", 13, proof.siblings, EXPECTED_ROOT, leaf_count=10
        )

    def test_leaf_count_height_mismatch_fails(self):
        """Four siblings cannot belong to a tree of 20 leaves."""
        proof = MerkleProver.prove(SAMPLE, 9)

        assert not MerkleVerifier.verify_leaf_in_root(
            proof.leaf, 9, proof.siblings, EXPECTED_ROOT, leaf_count=20
        )

    def test_proof_rejects_non_positive_leaf_count(self):
        with pytest.raises(ValueError):
            MerkleProof(leaf=hash_leaf(b"x"), index=0, leaf_count=0)

    def test_single_leaf_proof(self):
        proof = MerkleProver.prove([b"alone"], 0)

        assert proof.siblings == []
        assert proof.root == proof.leaf == hash_leaf(b"alone")
        assert MerkleVerifier.verify(proof)
