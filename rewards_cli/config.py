"""
CLI Configuration

Configuration management for the rewards CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.config.runtime import ENV_PREFIX, RuntimeConfig


DEFAULT_CONFIG_NAME = "rewards.json"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Record locations, batch settings and log level
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Logging
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    @property
    def log_level(self) -> str:
        return self.runtime.log_level

    @property
    def distribution_file(self) -> str:
        return self.runtime.data.distribution_file

    @property
    def trees_file(self) -> str:
        return self.runtime.data.trees_file

    def to_dict(self) -> dict[str, Any]:
        data = self.runtime.to_dict()
        data["log_file"] = self.log_file
        data["default_output_format"] = self.default_output_format
        return data


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return CLIConfig(
        runtime=RuntimeConfig.from_dict(data),
        log_file=data.get("log_file"),
        default_output_format=data.get("default_output_format", "human"),
    )


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / DEFAULT_CONFIG_NAME,
            Path.cwd() / f".{DEFAULT_CONFIG_NAME}",
            Path.home() / ".config" / "rewards" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    config.runtime = config.runtime.with_env_overrides()

    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", "human")

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "data": {
    "distribution_file": "data/distribution.json",
    "trees_file": "data/trees.json"
  },
  "pipeline": {
    "parallel": true,
    "max_workers": 4
  },
  "log_level": "INFO",
  "log_file": null,
  "default_output_format": "human"
}
"""
