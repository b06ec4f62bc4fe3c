"""
CLI Verify Command

Verify an opening detached from any tree: the leaf is supplied as raw
data (hashed with the leaf prefix) or as an already computed leaf hash.

Usage:
    merkle-arena verify 9 0x<root> 0x<sibling> ... --leaf-count 10 --leaf iaculis
    merkle-arena verify 9 0x<root> 0x<sibling> ... --leaf-count 10 --leaf-hash 0x<hash>
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace

from merkle_arena.crypto.hashing import from_hex, get_hasher
from merkle_arena.merkle.merkle_proofs import MerkleVerifier
from merkle_arena.schemas.errors import ErrorCodes, MerkleError, MerkleException
from merkle_arena_cli.io import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    error_payload,
    print_json,
)


logger = logging.getLogger(__name__)


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        EXIT_SUCCESS if the opening is valid, EXIT_VERIFICATION_FAILED if
        not, EXIT_RUNTIME_ERROR for malformed input
    """
    algorithm = args.merkle_config.hash_algorithm

    try:
        root = from_hex(args.root)
        siblings = [from_hex(s) for s in args.siblings]
        if args.leaf_hash is not None:
            leaf = from_hex(args.leaf_hash)
        else:
            leaf = get_hasher(algorithm).leaf(args.leaf.encode("utf-8"))
        valid = MerkleVerifier.verify_leaf_in_root(
            leaf=leaf,
            index=args.index,
            siblings=siblings,
            root=root,
            hash_algorithm=algorithm,
            leaf_count=args.leaf_count,
        )
    except (ValueError, MerkleException) as e:
        if args.json:
            print_json(error_payload(e))
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        payload = {
            "ok": valid,
            "index": args.index,
            "leaf_count": args.leaf_count,
            "algorithm": algorithm,
        }
        if not valid:
            payload["error"] = MerkleError(
                code=ErrorCodes.MERKLE_PROOF_INVALID,
                message="Opening does not recompute to the given root",
                details={"index": args.index, "leaf_count": args.leaf_count},
            ).model_dump()
        print_json(payload)
    else:
        print(f"valid: {str(valid).lower()}")

    if valid:
        logger.info("Opening verified")
        return EXIT_SUCCESS
    logger.warning("Opening did not verify")
    return EXIT_VERIFICATION_FAILED
