"""
CLI Bench Command

Timing harness: fill + root, opening and verification over random leaves.

Usage:
    merkle-arena bench [--sizes 1024,16384] [--repeat 5] [--json]
"""

from __future__ import annotations

import logging
import os
import sys
import time
from argparse import Namespace
from dataclasses import dataclass, asdict
from typing import Callable

from merkle_arena.config.runtime import MerkleConfig
from merkle_arena.merkle.merkle_tree import MerkleTree
from merkle_arena_cli.io import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, print_json


logger = logging.getLogger(__name__)


@dataclass
class BenchResult:
    """Best-of-N timings for one tree size, in milliseconds."""
    leaf_count: int
    repeat: int
    build_ms: float
    opening_ms: float
    verify_ms: float


def parse_sizes(raw: str) -> list[int]:
    """Parse a comma-separated list of positive leaf counts."""
    sizes = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        size = int(part)
        if size < 1:
            raise ValueError(f"Tree sizes must be positive, got {size}")
        sizes.append(size)
    if not sizes:
        raise ValueError("No tree sizes given")
    return sizes


def _best_of(repeat: int, fn: Callable[[], object]) -> float:
    best = float("inf")
    for _ in range(repeat):
        start = time.perf_counter()
        fn()
        best = min(best, time.perf_counter() - start)
    return best * 1000.0


def run_bench(leaf_count: int, repeat: int, config: MerkleConfig) -> BenchResult:
    """Time one tree size."""
    # Signature-sized random leaves
    leaves = [os.urandom(64).hex().encode("ascii") for _ in range(leaf_count)]

    def build() -> MerkleTree:
        tree = MerkleTree(leaf_count, config=config)
        for leaf in leaves:
            tree.insert(leaf)
        tree.get_root()
        return tree

    build_ms = _best_of(repeat, build)

    tree = build()
    root = tree.get_root()
    index = leaf_count - 1
    opening = tree.get_opening(index)

    opening_ms = _best_of(repeat, lambda: tree.get_opening(index))
    verify_ms = _best_of(repeat, lambda: tree.verify_opening(opening, root, index))

    return BenchResult(
        leaf_count=leaf_count,
        repeat=repeat,
        build_ms=build_ms,
        opening_ms=opening_ms,
        verify_ms=verify_ms,
    )


def bench_cmd(args: Namespace) -> int:
    """Execute the bench command."""
    try:
        sizes = parse_sizes(args.sizes)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    if args.repeat < 1:
        print("Error: --repeat must be >= 1", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    config: MerkleConfig = args.merkle_config
    results = []
    for size in sizes:
        logger.info(f"Benchmarking {size} leaves ({args.repeat} runs)")
        results.append(run_bench(size, args.repeat, config))

    if args.json:
        print_json({
            "algorithm": config.hash_algorithm,
            "max_workers": config.max_workers,
            "results": [asdict(r) for r in results],
        })
    else:
        print(f"algorithm: {config.hash_algorithm}  workers: {config.max_workers}")
        print(f"{'leaves':>10} {'build ms':>12} {'opening ms':>12} {'verify ms':>12}")
        for r in results:
            print(f"{r.leaf_count:>10} {r.build_ms:>12.3f} {r.opening_ms:>12.4f} {r.verify_ms:>12.4f}")

    return EXIT_SUCCESS
