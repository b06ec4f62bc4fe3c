"""
Merkle Proofs Convenience Wrappers
Class-based interfaces over MerkleTree for callers holding raw leaf data.

This module provides:
- MerkleProver: compute roots and proofs from raw leaf data
- MerkleVerifier: verify proofs without access to the tree, hashing the
  verifier's own copy of the leaf data where needed
"""
from __future__ import annotations

from typing import Optional, Sequence

from merkle_arena.crypto.hashing import DEFAULT_ALGORITHM, get_hasher
from merkle_arena.merkle.merkle_tree import (
    LeafData,
    MerkleProof,
    MerkleTree,
    _as_bytes,
    verify_merkle_proof,
)


class MerkleProver:
    """
    Convenience class for generating roots and proofs.

    Example:
        >>> proof = MerkleProver.prove([b"a", b"b", b"c"], index=1)
        >>> MerkleVerifier.verify(proof)
        True
    """

    @staticmethod
    def compute_root(
        leaves: Sequence[LeafData],
        hash_algorithm: Optional[str] = None,
    ) -> Optional[bytes]:
        """
        Compute the root over raw leaf data.

        Returns:
            Root hash, or None for an empty sequence
        """
        return MerkleTree.from_leaves(leaves, hash_algorithm=hash_algorithm).get_root()

    @staticmethod
    def prove(
        leaves: Sequence[LeafData],
        index: int,
        hash_algorithm: Optional[str] = None,
    ) -> MerkleProof:
        """
        Generate a proof for the leaf at the given index.

        Raises:
            LeafIndexOutOfBoundsException: If index is out of range
        """
        tree = MerkleTree.from_leaves(leaves, hash_algorithm=hash_algorithm)
        return tree.get_proof(index)

    @staticmethod
    def prove_all(
        leaves: Sequence[LeafData],
        hash_algorithm: Optional[str] = None,
    ) -> list[MerkleProof]:
        """Generate one proof per leaf from a single tree build."""
        tree = MerkleTree.from_leaves(leaves, hash_algorithm=hash_algorithm)
        return [tree.get_proof(i) for i in range(tree.leaf_count)]


class MerkleVerifier:
    """
    Convenience class for verifying proofs detached from any tree.

    Example:
        >>> proof = MerkleProver.prove([b"a", b"b"], index=0)
        >>> MerkleVerifier.verify_data_in_root(b"a", 0, proof.siblings, proof.root)
        True
    """

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        """Verify a MerkleProof."""
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        index: int,
        siblings: list[bytes],
        root: bytes,
        hash_algorithm: str = DEFAULT_ALGORITHM,
        leaf_count: Optional[int] = None,
    ) -> bool:
        """
        Verify a leaf hash is included in a root using raw components.

        Args:
            leaf: The leaf hash (already domain-separated)
            index: The claimed position of the leaf
            siblings: Sibling hashes, leaf level first
            root: The claimed root
            hash_algorithm: Digest algorithm the tree was built with
            leaf_count: Number of leaves in the tree; binds the index exactly
        """
        proof = MerkleProof(
            leaf=leaf,
            index=index,
            siblings=siblings,
            root=root,
            algorithm=hash_algorithm,
            leaf_count=leaf_count,
        )
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_data_in_root(
        data: LeafData,
        index: int,
        siblings: list[bytes],
        root: bytes,
        hash_algorithm: str = DEFAULT_ALGORITHM,
        leaf_count: Optional[int] = None,
    ) -> bool:
        """
        Verify raw leaf data is included in a root.

        The data is hashed with the leaf prefix before folding.
        """
        leaf = get_hasher(hash_algorithm).leaf(_as_bytes(data))
        return MerkleVerifier.verify_leaf_in_root(
            leaf, index, siblings, root, hash_algorithm, leaf_count=leaf_count
        )


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
