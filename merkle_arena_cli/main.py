"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkle_arena_cli root LEAF... [--file PATH] [--json]
    python -m merkle_arena_cli prove INDEX LEAF... [--file PATH] [--json]
    python -m merkle_arena_cli verify INDEX ROOT SIBLING... --leaf-count N (--leaf DATA | --leaf-hash HEX) [--json]
    python -m merkle_arena_cli bench [--sizes 1024,4096] [--repeat N] [--json]
    python -m merkle_arena_cli config --show

Environment Variables:
    MERKLE_ARENA_HASH_ALGORITHM       Digest algorithm (default: sha256)
    MERKLE_ARENA_MAX_WORKERS          Worker threads for level hashing (default: 1)
    MERKLE_ARENA_PARALLEL_THRESHOLD   Minimum level length to parallelise (default: 1024)
    MERKLE_ARENA_LOG_LEVEL            Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from merkle_arena.config.runtime import MerkleConfig
from merkle_arena.crypto.hashing import SUPPORTED_ALGORITHMS
from merkle_arena_cli.commands import root, prove, verify, bench
from merkle_arena_cli.io import EXIT_RUNTIME_ERROR, EXIT_SUCCESS


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_leaf_source(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "leaves",
        nargs="*",
        help="Leaf values (UTF-8), in tree order",
    )
    parser.add_argument(
        "--file", "-f",
        type=str,
        default=None,
        help="Read leaves from a file, one per line",
    )


def _add_json(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle-arena",
        description="Array-backed Merkle tree CLI - compute roots, produce and verify openings.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file",
    )
    parser.add_argument(
        "--algorithm",
        type=str,
        default=None,
        choices=list(SUPPORTED_ALGORITHMS),
        help="Digest algorithm (overrides config)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for level hashing (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Compute the root over a list of leaves",
    )
    _add_leaf_source(root_parser)
    _add_json(root_parser)
    root_parser.set_defaults(func=root.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Print the opening for one leaf",
    )
    prove_parser.add_argument("index", type=int, help="0-based leaf index")
    _add_leaf_source(prove_parser)
    _add_json(prove_parser)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an opening against a root",
        description="Detached verification: no tree is rebuilt.",
    )
    verify_parser.add_argument("index", type=int, help="0-based leaf index")
    verify_parser.add_argument("root", type=str, help="Claimed root (0x-prefixed hex)")
    verify_parser.add_argument(
        "siblings",
        nargs="*",
        help="Opening sibling hashes, leaf level first (0x-prefixed hex)",
    )
    verify_parser.add_argument(
        "--leaf-count",
        type=int,
        required=True,
        help="Number of leaves in the tree the opening came from",
    )
    leaf_group = verify_parser.add_mutually_exclusive_group(required=True)
    leaf_group.add_argument("--leaf", type=str, help="Raw leaf value (UTF-8)")
    leaf_group.add_argument("--leaf-hash", type=str, help="Leaf hash (0x-prefixed hex)")
    _add_json(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- bench command ---
    bench_parser = subparsers.add_parser(
        "bench",
        help="Time tree construction, openings and verification",
    )
    bench_parser.add_argument(
        "--sizes",
        type=str,
        default="1024",
        help="Comma-separated leaf counts (default: 1024)",
    )
    bench_parser.add_argument(
        "--repeat",
        type=int,
        default=5,
        help="Runs per measurement, best time reported (default: 5)",
    )
    _add_json(bench_parser)
    bench_parser.set_defaults(func=bench.bench_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Show the effective configuration",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def load_config(args: argparse.Namespace) -> MerkleConfig:
    """File (if given), then environment, then command-line overrides."""
    if args.config is not None:
        config = MerkleConfig.from_yaml(args.config).with_env_overrides()
    else:
        config = MerkleConfig.from_env()

    changes = {}
    if args.algorithm is not None:
        changes["hash_algorithm"] = args.algorithm
    if args.workers is not None:
        changes["max_workers"] = args.workers
    if args.log_level is not None:
        changes["log_level"] = args.log_level
    return config.copy(**changes) if changes else config


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.show:
        print(json.dumps(args.merkle_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: merkle-arena config --show")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=config.log_level, log_file=args.log_file)

    # Attach config to args for commands to use
    args.merkle_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if config.log_level == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
