"""
CLI command modules.
"""

from merkle_arena_cli.commands import root, prove, verify, bench

__all__ = ["root", "prove", "verify", "bench"]
