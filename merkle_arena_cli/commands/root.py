"""
CLI Root Command

Compute the Merkle root over a list of leaves.

Usage:
    merkle-arena root lorem ipsum dolor [--json]
    merkle-arena --algorithm sha3_256 root --file leaves.txt
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace

from merkle_arena.crypto.hashing import to_hex
from merkle_arena.merkle.merkle_tree import MerkleTree
from merkle_arena.schemas.errors import MerkleException
from merkle_arena_cli.io import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    LeafInputError,
    error_payload,
    load_leaves,
    print_json,
)


logger = logging.getLogger(__name__)


def root_cmd(args: Namespace) -> int:
    """
    Execute the root command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        leaves = load_leaves(args)
        tree = MerkleTree.from_leaves(
            leaves,
            config=args.merkle_config,
        )
    except (LeafInputError, MerkleException) as e:
        if args.json:
            print_json(error_payload(e))
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    root = tree.get_root()
    logger.info(f"Computed root over {tree.leaf_count} leaves")

    if args.json:
        print_json({
            "ok": True,
            "algorithm": tree.algorithm,
            "leaf_count": tree.leaf_count,
            "height": tree.height,
            "root": to_hex(root) if root is not None else None,
        })
    else:
        print(f"algorithm: {tree.algorithm}")
        print(f"leaf_count: {tree.leaf_count}")
        print(f"height: {tree.height}")
        print(f"root: {to_hex(root) if root is not None else '(empty tree)'}")

    return EXIT_SUCCESS
