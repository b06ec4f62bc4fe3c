"""
Runtime Configuration Module

Provides configuration loading and management for merkle_arena.
"""

from .runtime import MerkleConfig, get_default_config, set_default_config

__all__ = [
    "MerkleConfig",
    "get_default_config",
    "set_default_config",
]
