"""
API Dependencies

Dependency injection for the API.
Provides the rewards pipeline configured from file and environment.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from core.config.runtime import RuntimeConfig
from core.schemas.rewards import TokenDistribution, TokenTreeRecord
from orchestrator.pipeline import BatchResult, RewardsPipeline, create_pipeline

logger = logging.getLogger(__name__)


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./rewards.json
      2. ./.rewards.json
      3. ~/.config/rewards/config.json

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "rewards.json",
        Path.cwd() / ".rewards.json",
        Path.home() / ".config" / "rewards" / "config.json",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
                logger.info(f"Loaded config from {path}")
                config = RuntimeConfig.from_dict(data)
                break
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_pipeline() -> RewardsPipeline:
    """Create a RewardsPipeline from the server configuration."""
    return create_pipeline(_load_runtime_config())


def resolve_trees(
    pipeline: RewardsPipeline,
    distribution: Optional[list[TokenDistribution]],
    trees: Optional[list[TokenTreeRecord]],
) -> BatchResult:
    """Build trees from a distribution, or load them from serialized records."""
    if trees is not None:
        return pipeline.load_trees(trees)
    return pipeline.build_trees(distribution or [])
