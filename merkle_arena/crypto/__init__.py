"""
Core cryptographic utilities.

Provides the domain-separated hashing protocol used by the Merkle tree.
"""
from .hashing import (
    LEAF_PREFIX,
    NODE_PREFIX,
    DEFAULT_ALGORITHM,
    DEFAULT_LEAF,
    SUPPORTED_ALGORITHMS,
    Hasher,
    get_hasher,
    sha256,
    hash_leaf,
    hash_node,
    to_hex,
    from_hex,
)

__all__ = [
    "LEAF_PREFIX",
    "NODE_PREFIX",
    "DEFAULT_ALGORITHM",
    "DEFAULT_LEAF",
    "SUPPORTED_ALGORITHMS",
    "Hasher",
    "get_hasher",
    "sha256",
    "hash_leaf",
    "hash_node",
    "to_hex",
    "from_hex",
]
