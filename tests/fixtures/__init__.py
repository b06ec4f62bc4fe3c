"""
Test fixtures package for merkle_arena tests.

Usage:
    from fixtures import SAMPLE, EXPECTED_ROOT, make_tree

    def test_something():
        tree = make_tree(7)
        assert tree.verify_opening(tree.get_opening(3), tree.get_root(), 3)
"""

from .tree_fixtures import (
    SAMPLE,
    EXPECTED_ROOT,
    EXPECTED_ROOT_HEX,
    make_leaves,
    make_tree,
    make_sample_tree,
)

__all__ = [
    "SAMPLE",
    "EXPECTED_ROOT",
    "EXPECTED_ROOT_HEX",
    "make_leaves",
    "make_tree",
    "make_sample_tree",
]
