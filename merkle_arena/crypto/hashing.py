"""
Hashing Utilities
Domain-separated hashing for Merkle leaves and interior nodes.

This module provides:
- SHA-256 hashing for raw bytes
- hash_leaf / hash_node with one-byte domain prefixes
- Hasher: binds one digest algorithm for the lifetime of a tree
- Hex encoding/decoding with 0x prefix

Hashing Rules (Hard Contracts):
1. Leaf hashing: leaf = H(0x00 || data)
2. Node hashing: node = H(0x01 || left || right)
3. The prefix is never omitted: an interior node must never hash equal
   to a leaf over the same 64 bytes.
4. Unfilled leaf slots hold H(0x00) (the leaf hash of empty data).
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

from merkle_arena.schemas.errors import UnsupportedHashAlgorithmException


LEAF_PREFIX: bytes = b"\x00"
NODE_PREFIX: bytes = b"\x01"

DEFAULT_ALGORITHM = "sha256"


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def _blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


_DIGESTS: dict[str, Callable[[bytes], bytes]] = {
    "sha256": sha256,
    "sha3_256": lambda data: hashlib.sha3_256(data).digest(),
    "blake2b": _blake2b_256,
}

SUPPORTED_ALGORITHMS: tuple[str, ...] = tuple(_DIGESTS)


@dataclass(frozen=True)
class Hasher:
    """
    A digest algorithm bound to the leaf/node hashing protocol.

    Attributes:
        algorithm: Algorithm name (one of SUPPORTED_ALGORITHMS)
        digest: Function mapping bytes to a fixed-width digest
    """
    algorithm: str
    digest: Callable[[bytes], bytes]

    @property
    def digest_size(self) -> int:
        return len(self.default_leaf)

    @property
    def default_leaf(self) -> bytes:
        """Placeholder hash held by leaf slots that were never filled."""
        return self.leaf(b"")

    def leaf(self, data: bytes) -> bytes:
        """H(0x00 || data)"""
        return self.digest(LEAF_PREFIX + bytes(data))

    def node(self, left: bytes, right: bytes) -> bytes:
        """H(0x01 || left || right)"""
        return self.digest(NODE_PREFIX + left + right)

    def pair(self, pair: tuple[bytes, bytes]) -> bytes:
        """Unpacking form of node(), convenient for executor.map."""
        return self.node(pair[0], pair[1])


@lru_cache(maxsize=None)
def get_hasher(algorithm: str = DEFAULT_ALGORITHM) -> Hasher:
    """
    Look up the Hasher for an algorithm name.

    Args:
        algorithm: One of "sha256", "sha3_256", "blake2b"

    Returns:
        Hasher bound to that algorithm

    Raises:
        UnsupportedHashAlgorithmException: If the name is not recognised
    """
    name = algorithm.lower().replace("-", "_")
    if name not in _DIGESTS:
        raise UnsupportedHashAlgorithmException(
            f"Unsupported hash algorithm: {algorithm!r} "
            f"(supported: {', '.join(SUPPORTED_ALGORITHMS)})",
            algorithm=algorithm,
        )
    return Hasher(algorithm=name, digest=_DIGESTS[name])


def hash_leaf(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """
    Hash leaf content with the 0x00 domain prefix.

    Args:
        data: Raw leaf content
        algorithm: Digest algorithm name

    Returns:
        Leaf hash
    """
    return get_hasher(algorithm).leaf(data)


def hash_node(left: bytes, right: bytes, algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """
    Hash two child hashes with the 0x01 domain prefix.

    Order matters: hash_node(a, b) != hash_node(b, a).

    Args:
        left: Left child hash
        right: Right child hash
        algorithm: Digest algorithm name

    Returns:
        Parent hash
    """
    return get_hasher(algorithm).node(left, right)


# Placeholder for unfilled SHA-256 leaf slots: sha256(b"\x00")
DEFAULT_LEAF: bytes = hash_leaf(b"")


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


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
