"""CLI subcommand handlers."""

from rewards_cli.commands import proofs, roots, trees, verify

__all__ = ["proofs", "roots", "trees", "verify"]
