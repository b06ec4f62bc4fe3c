"""
CLI input/output helpers.

Leaves come either from positional arguments or from a text file with one
leaf per line (trailing newline stripped, blank lines kept as empty leaves
except a final one).
"""

from __future__ import annotations

import json
from argparse import Namespace
from pathlib import Path
from typing import Any

from merkle_arena.schemas.errors import MerkleException


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


class LeafInputError(Exception):
    """Raised when leaves cannot be read from the command line or a file."""


def read_leaf_file(path: Path) -> list[bytes]:
    """Read one leaf per line from a file."""
    if not path.exists():
        raise LeafInputError(f"Leaf file not found: {path}")
    lines = path.read_bytes().split(b"\n")
    if lines and lines[-1] == b"":
        lines.pop()
    return [line.rstrip(b"\r") for line in lines]


def load_leaves(args: Namespace) -> list[bytes]:
    """Collect leaves from --file or positional arguments (not both)."""
    positional = list(getattr(args, "leaves", None) or [])
    leaf_file = getattr(args, "file", None)

    if leaf_file and positional:
        raise LeafInputError("Pass leaves either as arguments or with --file, not both")
    if leaf_file:
        return read_leaf_file(Path(leaf_file))
    return [leaf.encode("utf-8") for leaf in positional]


def print_json(data: dict[str, Any]) -> None:
    print(json.dumps(data, indent=2))


def error_payload(error: Exception) -> dict[str, Any]:
    """Structured JSON form of an error for --json output."""
    if isinstance(error, MerkleException):
        return {"ok": False, "error": error.to_error_model().model_dump()}
    return {"ok": False, "error": {"code": "CLI_ERROR", "message": str(error)}}
