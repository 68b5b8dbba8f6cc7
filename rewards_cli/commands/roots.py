"""
CLI Roots Command

Print the Merkle root of every token tree.

Usage:
    rewards roots [--distribution PATH | --trees PATH] [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from orchestrator.artifacts.io import RecordIOError
from orchestrator.pipeline import compute_roots

from rewards_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    SEPARATOR,
    batch_exit_code,
    load_source_trees,
    print_failures,
)


def roots_cmd(args: Namespace) -> int:
    """Handle roots command."""
    try:
        _, result = load_source_trees(args)
    except RecordIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    roots = compute_roots(result.trees)

    if args.json:
        print(json.dumps(
            {
                "roots": [root.model_dump() for root in roots],
                "failures": [failure.to_dict() for failure in result.failures],
            },
            indent=2,
        ))
    else:
        for root in roots:
            print(SEPARATOR)
            print(f"Token: {root.token}")
            print(f"Merkle Root: {root.root}")

    print_failures(result.failures)
    return batch_exit_code(result)
