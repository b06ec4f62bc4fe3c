"""
Schemas

Purpose: Export the error taxonomy shared by every merkle_arena module.
"""

from .errors import (
    ErrorCodes,
    MerkleError,
    MerkleException,
    LeafIndexOutOfBoundsException,
    RootNotComputedException,
    TreeFinalizedException,
    UnsupportedHashAlgorithmException,
    ConfigurationException,
)

__all__ = [
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "LeafIndexOutOfBoundsException",
    "RootNotComputedException",
    "TreeFinalizedException",
    "UnsupportedHashAlgorithmException",
    "ConfigurationException",
]
