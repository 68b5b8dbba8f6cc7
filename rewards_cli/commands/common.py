"""
CLI Shared Helpers

Exit codes, record source selection and failure reporting shared by the
subcommands.
"""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path

from orchestrator.artifacts.io import load_distribution, load_tree_records
from orchestrator.pipeline import BatchResult, RewardsPipeline, TokenFailure


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2

SEPARATOR = "-------------------------------"


def make_pipeline(args: Namespace) -> RewardsPipeline:
    return RewardsPipeline(config=args.cli_config.runtime.pipeline)


def load_source_trees(args: Namespace) -> tuple[str, BatchResult]:
    """
    Build or load trees from whichever record the command was pointed at.

    ``--trees`` loads serialized trees; otherwise the distribution record
    (``--distribution`` or the configured default) is built from scratch.

    Raises:
        RecordIOError: If the source file cannot be read
    """
    pipeline = make_pipeline(args)

    trees_path = getattr(args, "trees", None)
    if trees_path:
        return trees_path, pipeline.load_trees(load_tree_records(Path(trees_path)))

    distribution_path = getattr(args, "distribution", None) or args.cli_config.distribution_file
    return distribution_path, pipeline.build_trees(load_distribution(Path(distribution_path)))


def print_failures(failures: list[TokenFailure]) -> None:
    """Report failed token groups on stderr."""
    for failure in failures:
        print(
            f"Error: token {failure.token} failed [{failure.error.code}]: {failure.error.message}",
            file=sys.stderr,
        )


def batch_exit_code(result: BatchResult) -> int:
    return EXIT_SUCCESS if result.ok else EXIT_VERIFICATION_FAILED
