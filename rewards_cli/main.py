"""
Rewards CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m rewards_cli trees [--distribution PATH] [--out PATH] [--json]
    python -m rewards_cli distribution [--trees PATH] [--out PATH] [--json]
    python -m rewards_cli roots [--distribution PATH | --trees PATH] [--json]
    python -m rewards_cli proofs <operator> [--reward N] [--distribution PATH | --trees PATH] [--json]
    python -m rewards_cli verify --root R --operator A --reward N --proof H [H ...]
    python -m rewards_cli config --init

Environment Variables:
    REWARDS_DISTRIBUTION_FILE   Distribution record path (default: data/distribution.json)
    REWARDS_TREES_FILE          Tree record path (default: data/trees.json)
    REWARDS_PARALLEL            Build token trees in parallel (default: true)
    REWARDS_MAX_WORKERS         Worker threads for parallel builds (default: 4)
    REWARDS_LOG_LEVEL           Log level (default: INFO)
    REWARDS_LOG_FILE            Optional log file
    REWARDS_OUTPUT_FORMAT       Default output format: human or json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from rewards_cli import __version__
from rewards_cli.commands import proofs, roots, trees, verify
from rewards_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from rewards_cli.config import DEFAULT_CONFIG_NAME, get_default_config_template, load_config


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_RUNTIME_ERROR",
    "EXIT_VERIFICATION_FAILED",
    "create_parser",
    "main",
    "setup_logging",
]


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_output_flags(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    sub.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )


def _add_source_flags(sub: argparse.ArgumentParser) -> None:
    source = sub.add_mutually_exclusive_group()
    source.add_argument(
        "--distribution", "-d",
        type=str,
        default=None,
        help="Build trees from this distribution record (default: from config)",
    )
    source.add_argument(
        "--trees", "-t",
        type=str,
        default=None,
        help="Load trees from this tree record file instead",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="rewards",
        description="Operator rewards CLI - Build Merkle trees, print roots, and generate or check proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: ./{DEFAULT_CONFIG_NAME} or ~/.config/rewards/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- trees command ---
    trees_parser = subparsers.add_parser(
        "trees",
        help="Build per-token trees from a distribution record",
        description="Build one Merkle tree per token and write the serialized trees.",
    )
    trees_parser.add_argument(
        "--distribution", "-d",
        type=str,
        default=None,
        help="Distribution record to read (default: from config)",
    )
    trees_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Tree record file to write (default: from config)",
    )
    _add_output_flags(trees_parser)
    trees_parser.set_defaults(func=trees.trees_cmd)

    # --- distribution command ---
    distribution_parser = subparsers.add_parser(
        "distribution",
        help="Recover a distribution record from saved trees",
        description="Load serialized trees and write their reward rows back out.",
    )
    distribution_parser.add_argument(
        "--trees", "-t",
        type=str,
        default=None,
        help="Tree record file to read (default: from config)",
    )
    distribution_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Distribution record to write (default: from config)",
    )
    _add_output_flags(distribution_parser)
    distribution_parser.set_defaults(func=trees.distribution_cmd)

    # --- roots command ---
    roots_parser = subparsers.add_parser(
        "roots",
        help="Print the Merkle root of every token",
    )
    _add_source_flags(roots_parser)
    _add_output_flags(roots_parser)
    roots_parser.set_defaults(func=roots.roots_cmd)

    # --- proofs command ---
    proofs_parser = subparsers.add_parser(
        "proofs",
        help="Print an operator's inclusion proofs for every token",
    )
    proofs_parser.add_argument(
        "operator",
        type=str,
        help="Operator address (0x-prefixed, 40 hex digits)",
    )
    proofs_parser.add_argument(
        "--reward", "-r",
        type=str,
        default=None,
        help="Only prove the leaf with this exact reward",
    )
    _add_source_flags(proofs_parser)
    _add_output_flags(proofs_parser)
    proofs_parser.set_defaults(func=proofs.proofs_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Check an inclusion proof against a root",
        description="Offline proof check; no tree file is needed.",
    )
    verify_parser.add_argument("--root", type=str, required=True, help="Expected root (0x + 64 hex)")
    verify_parser.add_argument("--operator", type=str, required=True, help="Operator address")
    verify_parser.add_argument("--reward", type=str, required=True, help="Reward amount (decimal)")
    verify_parser.add_argument(
        "--proof",
        type=str,
        nargs="*",
        default=[],
        help="Sibling hashes, leaf to root",
    )
    _add_output_flags(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_NAME,
        help=f"Path for config file (default: {DEFAULT_CONFIG_NAME})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template(), encoding="utf-8")
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (REWARDS_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: rewards config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=token failure or rejected proof)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config
    if hasattr(args, "json") and config.default_output_format == "json":
        args.json = True

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
