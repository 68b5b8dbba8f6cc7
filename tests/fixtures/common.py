"""
Common test fixtures shared by all modules.

Provides factory functions for the core reward data structures:
- Operator addresses
- Reward rows / distribution records
- Built trees and their serialized records

These are the foundational building blocks used by higher-level tests.
"""

from typing import Any, Optional

from core.merkle.standard_tree import StandardMerkleTree
from core.schemas.rewards import DistributionRecord


# =============================================================================
# Addresses
# =============================================================================

ADDRESS_A = "0x" + "A" * 39 + "1"
ADDRESS_B = "0x" + "B" * 39 + "2"
ADDRESS_C = "0x" + "c" * 39 + "3"


def make_address(n: int) -> str:
    """
    Deterministic, distinct operator address for an integer seed.

    Example:
        >>> make_address(1)
        '0x0000000000000000000000000000000000000001'
    """
    return "0x" + format(n, "040x")


# =============================================================================
# Reward Rows
# =============================================================================

def make_rows(count: int = 5, base_reward: int = 100) -> list[tuple[str, int]]:
    """Create ``count`` distinct (address, amount) rows."""
    return [(make_address(i + 1), base_reward * (i + 1)) for i in range(count)]


def make_distribution(
    tokens: Optional[dict[str, list[tuple[str, Any]]]] = None,
) -> list[dict[str, Any]]:
    """
    Create a distribution record as plain JSON data.

    Args:
        tokens: token id -> rows; defaults to two tokens with three rows each
    """
    if tokens is None:
        tokens = {
            "token-x": [(ADDRESS_A, 100), (ADDRESS_B, 200), (ADDRESS_C, 300)],
            "token-y": [(ADDRESS_B, 50), (ADDRESS_C, 75)],
        }
    return [
        {
            "token": token,
            "operators": [{"operator": address, "reward": str(reward)} for address, reward in rows],
        }
        for token, rows in tokens.items()
    ]


def make_distribution_record(
    tokens: Optional[dict[str, list[tuple[str, Any]]]] = None,
) -> DistributionRecord:
    """Create a validated DistributionRecord."""
    return DistributionRecord.model_validate(make_distribution(tokens))


# =============================================================================
# Trees
# =============================================================================

def make_tree(rows: Optional[list[tuple[str, Any]]] = None) -> StandardMerkleTree:
    """Build a StandardMerkleTree over ``rows`` (default: five rows)."""
    return StandardMerkleTree.of(rows if rows is not None else make_rows())


def make_tree_record(rows: Optional[list[tuple[str, Any]]] = None) -> dict[str, Any]:
    """Serialized (JSON-ready) record of a freshly built tree."""
    return make_tree(rows).dump().to_json_dict()


def make_tree_records(
    tokens: Optional[dict[str, list[tuple[str, Any]]]] = None,
) -> list[dict[str, Any]]:
    """Serialized per-token tree records for a distribution."""
    distribution = make_distribution(tokens)
    return [
        {
            "token": group["token"],
            "tree": StandardMerkleTree.of(group["operators"]).dump().to_json_dict(),
        }
        for group in distribution
    ]
