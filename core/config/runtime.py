"""
Runtime Configuration

Central configuration for record locations, batch execution and logging.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "REWARDS_"

# Default record locations, relative to the working directory
DEFAULT_DISTRIBUTION_FILE = "data/distribution.json"
DEFAULT_TREES_FILE = "data/trees.json"


@dataclass
class DataConfig:
    """Locations of the distribution and tree record files."""
    distribution_file: str = DEFAULT_DISTRIBUTION_FILE
    trees_file: str = DEFAULT_TREES_FILE


@dataclass
class PipelineConfig:
    """Configuration for per-token batch processing."""
    parallel: bool = True
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (REWARDS_* and a .env file)
    - JSON file
    - Programmatic construction
    """
    data: DataConfig = field(default_factory=DataConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - REWARDS_DISTRIBUTION_FILE: Path of the distribution record
        - REWARDS_TREES_FILE: Path of the tree record
        - REWARDS_PARALLEL: Build/load token groups in parallel (true/false)
        - REWARDS_MAX_WORKERS: Thread pool size for parallel batches
        - REWARDS_LOG_LEVEL: Log level name
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}DISTRIBUTION_FILE"):
            overrides.setdefault("data", {})["distribution_file"] = os.getenv(
                f"{ENV_PREFIX}DISTRIBUTION_FILE"
            )
        if os.getenv(f"{ENV_PREFIX}TREES_FILE"):
            overrides.setdefault("data", {})["trees_file"] = os.getenv(f"{ENV_PREFIX}TREES_FILE")

        if os.getenv(f"{ENV_PREFIX}PARALLEL"):
            overrides.setdefault("pipeline", {})["parallel"] = (
                os.getenv(f"{ENV_PREFIX}PARALLEL", "true").lower() == "true"
            )
        if os.getenv(f"{ENV_PREFIX}MAX_WORKERS"):
            overrides.setdefault("pipeline", {})["max_workers"] = int(
                os.getenv(f"{ENV_PREFIX}MAX_WORKERS", "4")
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        data_section = data.get("data", {})
        pipeline_section = data.get("pipeline", {})

        return cls(
            data=DataConfig(**data_section) if data_section else DataConfig(),
            pipeline=PipelineConfig(**pipeline_section) if pipeline_section else PipelineConfig(),
            log_level=data.get("log_level", "INFO"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        for key, value in overrides.get("data", {}).items():
            setattr(new_config.data, key, value)

        for key, value in overrides.get("pipeline", {}).items():
            setattr(new_config.pipeline, key, value)
        # setattr bypasses __post_init__
        if new_config.pipeline.max_workers < 1:
            raise ValueError(
                f"max_workers must be >= 1, got {new_config.pipeline.max_workers}"
            )

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "data": {
                "distribution_file": self.data.distribution_file,
                "trees_file": self.data.trees_file,
            },
            "pipeline": {
                "parallel": self.pipeline.parallel,
                "max_workers": self.pipeline.max_workers,
            },
            "log_level": self.log_level,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
