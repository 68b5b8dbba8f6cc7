"""
Runtime Configuration Module

Provides configuration loading and management for the rewards engine.
"""

from .runtime import (
    DataConfig,
    PipelineConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "DataConfig",
    "PipelineConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
