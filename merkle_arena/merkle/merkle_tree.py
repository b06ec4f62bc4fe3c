"""
Merkle Tree Implementation
Fixed-capacity, array-backed Merkle tree with positional openings.

This module provides:
- MerkleTree: flat node array, strict left-to-right leaf insertion,
  one-shot root computation, opening generation and verification
- MerkleProof: immutable bundle of a leaf, its index, siblings and root
- fold_opening / verify_merkle_proof: root recomputation from an opening

Node Layout:
    nodes[0:leaf_count]            leaf hashes (placeholder until inserted)
    nodes[leaf_count:...]          each interior level, appended bottom-up
    nodes[-1]                      root, once get_root() has run

Commitment Rules (Hard Contracts):
1. Leaf hashing: H(0x00 || data)
2. Node hashing: H(0x01 || left || right)
3. Odd levels: the unpaired last node is hashed with itself
4. Root computation runs exactly once; afterwards the tree is read-only
5. Openings are positional: leaf i sits at node index i

Orientation:
    Verification hashes the running value on the left when the path index
    is even and on the right when it is odd, so every leaf of every tree
    shape verifies. Roots are bit-compatible with a plain self-pairing tree.
"""
from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence, TypeVar, Union

from merkle_arena.config.runtime import MerkleConfig, get_default_config
from merkle_arena.crypto.hashing import Hasher, get_hasher
from merkle_arena.merkle.levels import (
    calculate_height,
    calculate_max_capacity,
    calculate_next_level_len,
)
from merkle_arena.schemas.errors import (
    LeafIndexOutOfBoundsException,
    RootNotComputedException,
    TreeFinalizedException,
)


logger = logging.getLogger(__name__)

LeafData = Union[bytes, bytearray, memoryview, str]

_T = TypeVar("_T")
_R = TypeVar("_R")


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven
        index: The 0-based position of the leaf
        siblings: Sibling hashes from the leaf level upward (root excluded)
        root: The root this proof is against
        algorithm: Digest algorithm the tree was built with
        leaf_count: Number of leaves in the tree; None if unknown
    """
    leaf: bytes
    index: int
    siblings: list[bytes] = field(default_factory=list)
    root: bytes = b""
    algorithm: str = "sha256"
    leaf_count: Optional[int] = None

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")
        if self.leaf_count is not None and self.leaf_count < 1:
            raise ValueError(f"Leaf count must be positive, got {self.leaf_count}")


def fold_opening(
    hasher: Hasher,
    leaf: bytes,
    leaf_index: int,
    opening: Sequence[bytes],
) -> bytes:
    """
    Recompute a root from a leaf hash and its opening.

    At each level the running value is the left operand when the current
    index is even and the right operand when it is odd. A self-paired node
    is its own sibling, so either order gives the same parent.

    An empty opening returns the leaf itself (single-leaf tree).
    """
    computed = leaf
    current_index = leaf_index
    for sibling in opening:
        if current_index % 2 == 0:
            computed = hasher.node(computed, sibling)
        else:
            computed = hasher.node(sibling, computed)
        current_index //= 2
    return computed


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a detached Merkle proof.

    Returns False (never raises) for tampered leaves, siblings, roots or
    indices. A self-paired node folds the same from either side, so the
    index is only bound exactly when the proof carries its leaf_count;
    without it, indices past the last leaf of an odd level can still fold.
    """
    if proof.leaf_count is not None:
        if proof.index >= proof.leaf_count:
            logger.debug(
                f"Proof index {proof.index} outside a tree of {proof.leaf_count} leaves"
            )
            return False
        if len(proof.siblings) != calculate_height(proof.leaf_count):
            logger.debug(
                f"Proof has {len(proof.siblings)} siblings, a tree of "
                f"{proof.leaf_count} leaves has height {calculate_height(proof.leaf_count)}"
            )
            return False
    if proof.index >> len(proof.siblings):
        logger.debug(
            f"Proof index {proof.index} exceeds a tree of height {len(proof.siblings)}"
        )
        return False
    hasher = get_hasher(proof.algorithm)
    computed = fold_opening(hasher, proof.leaf, proof.index, proof.siblings)
    return computed == proof.root


def _as_bytes(leaf: LeafData) -> bytes:
    if isinstance(leaf, str):
        return leaf.encode("utf-8")
    if isinstance(leaf, (bytes, bytearray, memoryview)):
        return bytes(leaf)
    raise TypeError(f"Leaf data must be bytes-like or str, got {type(leaf).__name__}")


class MerkleTree:
    """
    Fixed-capacity Merkle tree stored as one flat list of node hashes.

    Lifecycle: create with a leaf count, insert leaves left to right,
    call get_root() once, then read values and produce/verify openings.

    Example:
        >>> tree = MerkleTree(3)
        >>> tree.insert(b"a").insert(b"b").insert(b"c")
        MerkleTree(leaf_count=3, inserted=3, algorithm='sha256', finalized=False)
        >>> root = tree.get_root()
        >>> tree.verify_opening(tree.get_opening(2), root, 2)
        True
    """

    def __init__(
        self,
        leaf_count: int,
        hash_algorithm: Optional[str] = None,
        config: Optional[MerkleConfig] = None,
    ) -> None:
        self.config = config or get_default_config()
        self.hasher = get_hasher(hash_algorithm or self.config.hash_algorithm)

        self.max_capacity = calculate_max_capacity(leaf_count)
        self.leaf_count = leaf_count
        self.current_leaf_index = 0
        self.nodes: list[bytes] = [self.hasher.default_leaf] * leaf_count
        self._finalized = False

    @classmethod
    def from_leaves(
        cls,
        leaves: Iterable[LeafData],
        hash_algorithm: Optional[str] = None,
        config: Optional[MerkleConfig] = None,
    ) -> "MerkleTree":
        """Build a tree holding exactly these leaves and compute its root."""
        leaves = list(leaves)
        tree = cls(len(leaves), hash_algorithm=hash_algorithm, config=config)
        tree.extend(leaves)
        tree.get_root()
        return tree

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def algorithm(self) -> str:
        return self.hasher.algorithm

    @property
    def height(self) -> int:
        return calculate_height(self.leaf_count)

    @property
    def is_full(self) -> bool:
        return self.current_leaf_index == self.leaf_count

    @property
    def is_finalized(self) -> bool:
        """True once get_root() has appended the interior levels."""
        return self._finalized

    def __len__(self) -> int:
        return self.current_leaf_index

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaf_count={self.leaf_count}, inserted={self.current_leaf_index}, "
            f"algorithm={self.algorithm!r}, finalized={self._finalized})"
        )

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def _check_mutable(self) -> None:
        if self._finalized:
            raise TreeFinalizedException(
                "Cannot insert leaves after the root has been computed",
                details={"leaf_count": self.leaf_count},
            )

    def insert(self, leaf: LeafData) -> "MerkleTree":
        """
        Hash a leaf and write it at the next free position.

        Raises:
            LeafIndexOutOfBoundsException: If the tree is already full
            TreeFinalizedException: If the root was already computed
        """
        self._check_mutable()
        if self.current_leaf_index == self.leaf_count:
            raise LeafIndexOutOfBoundsException(
                f"New leaf exceeds size of tree: {self.leaf_count}",
                leaf_index=self.current_leaf_index,
                leaf_count=self.leaf_count,
            )

        self.nodes[self.current_leaf_index] = self.hasher.leaf(_as_bytes(leaf))
        self.current_leaf_index += 1
        return self

    def extend(self, leaves: Iterable[LeafData]) -> "MerkleTree":
        """
        Insert several leaves in order.

        Leaf hashes are independent, so a large batch is hashed on the
        worker pool when parallelism is configured. Nothing is written if
        the batch does not fit.
        """
        self._check_mutable()
        batch = [_as_bytes(leaf) for leaf in leaves]
        start = self.current_leaf_index
        end = start + len(batch)
        if end > self.leaf_count:
            raise LeafIndexOutOfBoundsException(
                f"{len(batch)} new leaves exceed size of tree: {self.leaf_count} "
                f"({self.leaf_count - start} slots free)",
                leaf_index=end - 1,
                leaf_count=self.leaf_count,
            )

        with self._executor(len(batch)) as pool:
            hashed = self._map(self.hasher.leaf, batch, pool)
        self.nodes[start:end] = hashed
        self.current_leaf_index = end
        return self

    def get_value(self, leaf_index: int) -> Optional[bytes]:
        """Return the leaf hash at the given index, or None if out of range."""
        if 0 <= leaf_index < self.leaf_count:
            return self.nodes[leaf_index]
        return None

    # ------------------------------------------------------------------
    # Root
    # ------------------------------------------------------------------

    def get_root(self) -> Optional[bytes]:
        """
        Append every interior level and return the root.

        Runs once; later calls return the stored root. Unfilled leaf slots
        take part in the root as placeholder hashes, so fill the tree first.

        Returns:
            Root hash, or None for a tree without leaves
        """
        if self.leaf_count == 0:
            return None

        if not self._finalized:
            if not self.is_full and self.config.warn_on_partial_root:
                logger.warning(
                    f"Computing root with {self.current_leaf_index} of "
                    f"{self.leaf_count} leaves inserted; remaining slots hold placeholders"
                )
            self._append_levels()
            self._finalized = True

        return self.nodes[-1]

    def _append_levels(self) -> None:
        prev_level_len = 0
        current_level_len = self.leaf_count

        with self._executor(self.leaf_count // 2) as pool:
            for _ in range(self.height):
                level = self.nodes[prev_level_len:prev_level_len + current_level_len]
                pairs = [
                    (level[i], level[i + 1] if i + 1 < current_level_len else level[i])
                    for i in range(0, current_level_len, 2)
                ]
                # Barrier: the whole level is appended before the next one is read
                self.nodes.extend(self._map(self.hasher.pair, pairs, pool))

                prev_level_len += current_level_len
                current_level_len = calculate_next_level_len(current_level_len)
                logger.debug(
                    f"Appended level of {current_level_len} nodes at offset {prev_level_len}"
                )

    # ------------------------------------------------------------------
    # Openings
    # ------------------------------------------------------------------

    def _check_index(self, leaf_index: int) -> None:
        if not 0 <= leaf_index < self.leaf_count:
            raise LeafIndexOutOfBoundsException(
                f"Tree has {self.leaf_count} leaves but index given was {leaf_index}",
                leaf_index=leaf_index,
                leaf_count=self.leaf_count,
            )

    def get_opening(self, leaf_index: int) -> list[bytes]:
        """
        Return the sibling hashes on the path from a leaf to the root.

        One sibling per level, leaf level first; neither the leaf nor the
        root is included, so the length always equals the tree height.

        Raises:
            LeafIndexOutOfBoundsException: If leaf_index >= leaf_count
            RootNotComputedException: If get_root() has not run yet
        """
        self._check_index(leaf_index)
        height = self.height
        if height > 0 and not self._finalized:
            raise RootNotComputedException(
                "Openings require the interior levels; call get_root() first",
                details={"leaf_index": leaf_index},
            )

        path: list[bytes] = []
        current_index = leaf_index
        prev_level_len = 0
        current_level_len = self.leaf_count

        for _ in range(height):
            if current_index % 2 == 0:
                if current_index + 1 < current_level_len:
                    sibling_index = current_index + 1
                else:
                    # Unpaired last node of an odd level is its own sibling
                    sibling_index = current_index
            else:
                sibling_index = current_index - 1

            path.append(self.nodes[prev_level_len + sibling_index])

            current_index //= 2
            prev_level_len += current_level_len
            current_level_len = calculate_next_level_len(current_level_len)

        return path

    def verify_opening(
        self,
        opening: Sequence[bytes],
        root: bytes,
        leaf_index: int,
    ) -> bool:
        """
        Check that an opening for the stored leaf recomputes to the given root.

        Raises:
            LeafIndexOutOfBoundsException: If leaf_index >= leaf_count
        """
        self._check_index(leaf_index)

        if len(opening) != self.height:
            logger.debug(
                f"Opening has {len(opening)} siblings, tree height is {self.height}"
            )
            return False

        leaf = self.nodes[leaf_index]
        computed = fold_opening(self.hasher, leaf, leaf_index, opening)
        valid = computed == root
        logger.debug(f"Opening for leaf {leaf_index} valid={valid}")
        return valid

    def get_proof(self, leaf_index: int) -> MerkleProof:
        """Bundle a leaf's opening with its leaf hash and the root."""
        siblings = self.get_opening(leaf_index)
        return MerkleProof(
            leaf=self.nodes[leaf_index],
            index=leaf_index,
            siblings=siblings,
            root=self.nodes[-1],
            algorithm=self.algorithm,
            leaf_count=self.leaf_count,
        )

    # ------------------------------------------------------------------
    # Parallel helpers
    # ------------------------------------------------------------------

    def _executor(self, workload: int):
        if self.config.parallel and workload >= self.config.parallel_threshold:
            return ThreadPoolExecutor(max_workers=self.config.max_workers)
        return nullcontext(None)

    def _map(
        self,
        fn: Callable[[_T], _R],
        items: Sequence[_T],
        pool: Optional[Executor],
    ) -> list[_R]:
        if pool is not None and len(items) >= self.config.parallel_threshold:
            return list(pool.map(fn, items))
        return [fn(item) for item in items]


__all__ = [
    "LeafData",
    "MerkleProof",
    "MerkleTree",
    "fold_opening",
    "verify_merkle_proof",
]
