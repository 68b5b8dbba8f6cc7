"""
Record IO

Provides functionality for saving and loading distribution and tree records.
"""

from orchestrator.artifacts.io import (
    RecordIOError,
    dump_json,
    load_distribution,
    save_distribution,
    load_tree_records,
    save_tree_records,
)

__all__ = [
    "RecordIOError",
    "dump_json",
    "load_distribution",
    "save_distribution",
    "load_tree_records",
    "save_tree_records",
]
