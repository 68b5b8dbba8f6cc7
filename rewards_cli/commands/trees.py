"""
CLI Tree Commands

Convert between distribution records and serialized tree records.

Usage:
    rewards trees [--distribution data/distribution.json] [--out data/trees.json]
    rewards distribution [--trees data/trees.json] [--out data/distribution.json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from orchestrator.artifacts.io import (
    RecordIOError,
    load_distribution,
    load_tree_records,
    save_distribution,
    save_tree_records,
)
from orchestrator.pipeline import distribution_from_trees, tree_records

from rewards_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    batch_exit_code,
    make_pipeline,
    print_failures,
)


logger = logging.getLogger(__name__)


@dataclass
class ConversionSummary:
    """Summary of a record conversion for CLI output."""
    source: str = ""
    output_path: str = ""
    tokens_ok: list[str] = field(default_factory=list)
    tokens_failed: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["tokens_failed"]:
            del d["tokens_failed"]
        return d


def _print_summary(summary: ConversionSummary, label: str, output_json: bool) -> None:
    if output_json:
        print(json.dumps(summary.to_dict(), indent=2))
        return
    print(f"{label} written to {summary.output_path}")
    print(f"tokens: {len(summary.tokens_ok)} ok, {len(summary.tokens_failed)} failed")


def trees_cmd(args: Namespace) -> int:
    """Build a tree per token from a distribution record and save them."""
    config = args.cli_config
    source = Path(args.distribution or config.distribution_file)
    out_path = Path(args.out or config.trees_file)

    try:
        distribution = load_distribution(source)
    except RecordIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    result = make_pipeline(args).build_trees(distribution)
    save_tree_records(tree_records(result.trees), out_path)

    print_failures(result.failures)
    _print_summary(
        ConversionSummary(
            source=str(source),
            output_path=str(out_path),
            tokens_ok=[item.token for item in result.trees],
            tokens_failed=[failure.to_dict() for failure in result.failures],
        ),
        "Trees",
        args.json,
    )
    return batch_exit_code(result)


def distribution_cmd(args: Namespace) -> int:
    """Recover the distribution record from saved trees."""
    config = args.cli_config
    source = Path(args.trees or config.trees_file)
    out_path = Path(args.out or config.distribution_file)

    try:
        records = load_tree_records(source)
    except RecordIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    result = make_pipeline(args).load_trees(records)
    save_distribution(distribution_from_trees(result.trees), out_path)

    print_failures(result.failures)
    _print_summary(
        ConversionSummary(
            source=str(source),
            output_path=str(out_path),
            tokens_ok=[item.token for item in result.trees],
            tokens_failed=[failure.to_dict() for failure in result.failures],
        ),
        "Distribution",
        args.json,
    )
    return batch_exit_code(result)
