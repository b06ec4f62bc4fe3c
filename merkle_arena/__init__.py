"""
merkle_arena

Fixed-capacity, array-backed Merkle tree: root commitments over ordered
leaves and compact membership openings.
"""

from merkle_arena.merkle import MerkleProof, MerkleTree, MerkleProver, MerkleVerifier
from merkle_arena.schemas.errors import (
    LeafIndexOutOfBoundsException,
    MerkleException,
    RootNotComputedException,
    TreeFinalizedException,
)

__version__ = "0.1.0"

__all__ = [
    "MerkleTree",
    "MerkleProof",
    "MerkleProver",
    "MerkleVerifier",
    "MerkleException",
    "LeafIndexOutOfBoundsException",
    "RootNotComputedException",
    "TreeFinalizedException",
]
