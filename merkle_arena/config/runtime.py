"""
Runtime Configuration

Central configuration for tree construction: hash algorithm selection,
level-hashing parallelism and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from merkle_arena.crypto.hashing import DEFAULT_ALGORITHM, get_hasher
from merkle_arena.schemas.errors import ConfigurationException

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "MERKLE_ARENA_"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class MerkleConfig:
    """
    Configuration for MerkleTree instances.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hash_algorithm: str = DEFAULT_ALGORITHM
    max_workers: int = 1  # 1 keeps hashing on the calling thread
    parallel_threshold: int = 1024  # minimum level length before using the pool
    log_level: str = "INFO"
    warn_on_partial_root: bool = True

    def __post_init__(self) -> None:
        for name in ("hash_algorithm", "log_level"):
            _require_type(name, getattr(self, name), str)
        for name in ("max_workers", "parallel_threshold"):
            _require_type(name, getattr(self, name), int)
        _require_type("warn_on_partial_root", self.warn_on_partial_root, bool)

        # Raises UnsupportedHashAlgorithmException for unknown names
        self.hash_algorithm = get_hasher(self.hash_algorithm).algorithm
        if self.max_workers < 1:
            raise ConfigurationException(
                f"max_workers must be >= 1, got {self.max_workers}",
                field_path="max_workers",
            )
        if self.parallel_threshold < 2:
            raise ConfigurationException(
                f"parallel_threshold must be >= 2, got {self.parallel_threshold}",
                field_path="parallel_threshold",
            )
        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationException(
                f"Unknown log level: {self.log_level}",
                field_path="log_level",
            )

    @property
    def parallel(self) -> bool:
        return self.max_workers > 1

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - MERKLE_ARENA_HASH_ALGORITHM: sha256, sha3_256 or blake2b
        - MERKLE_ARENA_MAX_WORKERS: worker threads for level hashing
        - MERKLE_ARENA_PARALLEL_THRESHOLD: minimum level length to parallelise
        - MERKLE_ARENA_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR
        - MERKLE_ARENA_WARN_ON_PARTIAL_ROOT: true/false
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}MAX_WORKERS"):
            overrides["max_workers"] = _parse_int(f"{ENV_PREFIX}MAX_WORKERS")
        if os.getenv(f"{ENV_PREFIX}PARALLEL_THRESHOLD"):
            overrides["parallel_threshold"] = _parse_int(f"{ENV_PREFIX}PARALLEL_THRESHOLD")
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}WARN_ON_PARTIAL_ROOT"):
            overrides["warn_on_partial_root"] = (
                os.getenv(f"{ENV_PREFIX}WARN_ON_PARTIAL_ROOT", "true").lower() == "true"
            )

        return overrides

    @classmethod
    def from_env(cls) -> "MerkleConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "MerkleConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationException(f"Config file must contain a mapping: {path}")

        # Accept both a flat file and one nested under a "merkle" key
        return cls.from_dict(data.get("merkle", data))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerkleConfig":
        """Load configuration from a dictionary (supports partial data)."""
        known = {key: data[key] for key in cls.__dataclass_fields__ if key in data}
        try:
            return cls(**known)
        except TypeError as e:
            raise ConfigurationException(f"Invalid configuration: {e}") from e

    def with_env_overrides(self) -> "MerkleConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        merged = self.to_dict()
        merged.update(overrides)
        return self.from_dict(merged)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def copy(self, **changes: Any) -> "MerkleConfig":
        """Return a validated copy with selected fields replaced."""
        data = copy.deepcopy(self.to_dict())
        data.update(changes)
        return self.from_dict(data)


def _require_type(field_name: str, value: Any, expected: type) -> None:
    # bool is an int subclass; a YAML "true" is not a worker count
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ConfigurationException(
            f"{field_name} must be {expected.__name__}, got {type(value).__name__}",
            field_path=field_name,
        )


def _parse_int(env_var: str) -> int:
    raw = os.getenv(env_var, "")
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationException(
            f"{env_var} must be an integer, got {raw!r}",
            field_path=env_var,
        ) from e


# Global default configuration
_default_config: Optional[MerkleConfig] = None


def get_default_config() -> MerkleConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = MerkleConfig.from_env()
    return _default_config


def set_default_config(config: Optional[MerkleConfig]) -> None:
    """Set the default runtime configuration (None resets to env defaults)."""
    global _default_config
    _default_config = config
