"""
merkle-arena CLI

Command-line interface for building roots, producing openings and
verifying them.

Usage:
    python -m merkle_arena_cli root lorem ipsum dolor
    python -m merkle_arena_cli prove 2 --file leaves.txt
    python -m merkle_arena_cli verify 2 0x<root> 0x<sibling>... --leaf-count 3 --leaf dolor
    python -m merkle_arena_cli bench --sizes 1024,4096
"""

__version__ = "0.1.0"
