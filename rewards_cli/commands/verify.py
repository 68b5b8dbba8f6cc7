"""
CLI Verify Command

Check an inclusion proof against a root without any tree file.

Usage:
    rewards verify --root 0x.. --operator 0x.. --reward N --proof 0x.. [0x.. ...] [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.crypto.hashing import bytes32_from_hex
from core.merkle.leaf import LeafValue
from core.merkle.standard_tree import StandardMerkleTree
from core.schemas.errors import MalformedLeafException

from rewards_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)


def _check_arguments(args: Namespace, proof: list[str]) -> str | None:
    """Return an error message for malformed arguments, or None."""
    try:
        bytes32_from_hex(args.root)
    except ValueError:
        return f"Invalid root: {args.root!r}"
    try:
        LeafValue.parse(args.operator, args.reward)
    except MalformedLeafException as e:
        return e.message
    for node in proof:
        try:
            bytes32_from_hex(node)
        except ValueError:
            return f"Invalid proof entry: {node!r}"
    return None


def verify_cmd(args: Namespace) -> int:
    """Handle verify command."""
    proof = list(args.proof or [])

    error = _check_arguments(args, proof)
    if error is not None:
        print(f"Error: {error}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    valid = StandardMerkleTree.verify(args.root, (args.operator, args.reward), proof)

    if args.json:
        print(json.dumps(
            {
                "root": args.root,
                "operator": args.operator,
                "reward": args.reward,
                "proof": proof,
                "valid": valid,
            },
            indent=2,
        ))
    else:
        print(f"valid: {str(valid).lower()}")

    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
