"""
Merkle Tree and Openings
Fixed-capacity, array-backed Merkle tree with positional openings.

This module provides:
- MerkleTree: flat node array, left-to-right insertion, one-shot root
- MerkleProof: Dataclass representing an opening bundled with leaf and root
- Level arithmetic: height, next level length, capacity, level offsets
- MerkleProver / MerkleVerifier: detached proof generation and verification

Commitment Rules:
1. Leaf hashing: H(0x00 || data)
2. Node hashing: H(0x01 || left || right)
3. Odd levels: the last node is paired with itself
4. Empty tree: no root (None)
5. Single leaf: root = leaf hash, opening is empty

Usage:
    from merkle_arena.merkle import MerkleTree

    tree = MerkleTree(len(records))
    for record in records:
        tree.insert(record)
    root = tree.get_root()

    opening = tree.get_opening(2)
    assert tree.verify_opening(opening, root, 2)
"""
from .levels import (
    calculate_height,
    calculate_next_level_len,
    calculate_max_capacity,
    level_lengths,
    level_offsets,
)

from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    fold_opening,
    verify_merkle_proof,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "MerkleTree",
    "MerkleProof",
    # Level arithmetic
    "calculate_height",
    "calculate_next_level_len",
    "calculate_max_capacity",
    "level_lengths",
    "level_offsets",
    # Verification
    "fold_opening",
    "verify_merkle_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
