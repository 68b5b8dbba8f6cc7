"""
Rewards CLI

Command-line interface for operator reward Merkle trees.

Usage:
    python -m rewards_cli trees --distribution data/distribution.json
    python -m rewards_cli roots --trees data/trees.json
    python -m rewards_cli proofs 0x1111111111111111111111111111111111111111
    python -m rewards_cli verify --root 0x.. --operator 0x.. --reward 100 --proof 0x..
"""

__version__ = "0.1.0"
