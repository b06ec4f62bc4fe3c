"""
CLI Prove Command

Build a tree over the leaves and print the opening for one of them.

Usage:
    merkle-arena prove 9 --file leaves.txt [--json]
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


def prove_cmd(args: Namespace) -> int:
    """Execute the prove command."""
    try:
        leaves = load_leaves(args)
        tree = MerkleTree.from_leaves(
            leaves,
            config=args.merkle_config,
        )
        proof = tree.get_proof(args.index)
    except (LeafInputError, MerkleException) as e:
        if args.json:
            print_json(error_payload(e))
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    logger.info(f"Produced opening of {len(proof.siblings)} siblings for leaf {proof.index}")

    if args.json:
        print_json({
            "ok": True,
            "algorithm": proof.algorithm,
            "index": proof.index,
            "leaf_count": proof.leaf_count,
            "leaf": to_hex(proof.leaf),
            "root": to_hex(proof.root),
            "opening": [to_hex(s) for s in proof.siblings],
        })
    else:
        print(f"algorithm: {proof.algorithm}")
        print(f"index: {proof.index}")
        print(f"leaf_count: {proof.leaf_count}")
        print(f"leaf: {to_hex(proof.leaf)}")
        print(f"root: {to_hex(proof.root)}")
        print(f"opening ({len(proof.siblings)}):")
        for sibling in proof.siblings:
            print(f"  {to_hex(sibling)}")

    return EXIT_SUCCESS
