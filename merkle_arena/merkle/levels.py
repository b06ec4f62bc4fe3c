"""
Level Arithmetic
Capacity, height and level-boundary arithmetic for the flat node array.

Level boundaries are never stored. They are recomputed from the leaf count
with one rule: a level of n > 1 nodes produces ceil(n / 2) parents, the last
node of an odd-length level being paired with itself.

Example (11 leaves):
    lengths: [11, 6, 3, 2, 1]   -> capacity 23
    offsets: [0, 11, 17, 20, 22]
    height:  4
"""
from __future__ import annotations


def _check_count(leaf_count: int) -> None:
    if leaf_count < 0:
        raise ValueError(f"Leaf count must be non-negative, got {leaf_count}")


def calculate_height(leaf_count: int) -> int:
    """
    Number of interior levels hashed above the leaves: ceil(log2(leaf_count)).

    Args:
        leaf_count: Number of leaves

    Returns:
        Tree height (0 for zero or one leaf)
    """
    _check_count(leaf_count)
    if leaf_count == 0:
        return 0
    return (leaf_count - 1).bit_length()


def calculate_next_level_len(current_level_len: int) -> int:
    """
    Length of the level built on top of a level of the given length.

    Returns 0 when the current level is already the root (or empty).
    """
    if current_level_len > 1:
        return (current_level_len + 1) // 2
    return 0


def calculate_max_capacity(leaf_count: int) -> int:
    """
    Total node count across all levels, leaves and root included.

    This sizes the flat node array once and for all.
    """
    _check_count(leaf_count)
    return sum(level_lengths(leaf_count))


def level_lengths(leaf_count: int) -> list[int]:
    """
    Length of every level, leaf level first, root level last.

    Empty for a tree without leaves.
    """
    _check_count(leaf_count)
    lengths: list[int] = []
    current = leaf_count
    while current > 0:
        lengths.append(current)
        current = calculate_next_level_len(current)
    return lengths


def level_offsets(leaf_count: int) -> list[int]:
    """Start index of every level inside the flat node array."""
    offsets: list[int] = []
    position = 0
    for length in level_lengths(leaf_count):
        offsets.append(position)
        position += length
    return offsets


__all__ = [
    "calculate_height",
    "calculate_next_level_len",
    "calculate_max_capacity",
    "level_lengths",
    "level_offsets",
]
