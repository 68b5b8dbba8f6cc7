"""
CLI Proofs Command

Print inclusion proofs for an operator across every token tree.

Usage:
    rewards proofs <operator> [--reward N] [--distribution PATH | --trees PATH] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from core.schemas.errors import MalformedLeafException
from orchestrator.artifacts.io import RecordIOError
from orchestrator.pipeline import find_proofs, prove_leaf

from rewards_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    SEPARATOR,
    batch_exit_code,
    load_source_trees,
    print_failures,
)


logger = logging.getLogger(__name__)


def proofs_cmd(args: Namespace) -> int:
    """Handle proofs command."""
    try:
        _, result = load_source_trees(args)
    except RecordIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        if args.reward is not None:
            scan = prove_leaf(result.trees, args.operator, args.reward)
        else:
            scan = find_proofs(result.trees, args.operator)
    except MalformedLeafException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(
            {
                "operator": scan.operator,
                "proofs": [proof.model_dump() for proof in scan.proofs],
                "missing_tokens": scan.missing_tokens,
                "failures": [failure.to_dict() for failure in result.failures],
            },
            indent=2,
        ))
    else:
        for proof in scan.proofs:
            print(SEPARATOR)
            print(f"Token: {proof.token}")
            if args.reward is None:
                print(f"Reward: {proof.reward}")
            print(f"Proof: {json.dumps(proof.proof)}")
        if not scan.found:
            print(f"Operator {scan.operator} not found in any token", file=sys.stderr)

    print_failures(result.failures)
    return batch_exit_code(result)
