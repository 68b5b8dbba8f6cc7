"""
Schemas
File: rewards.py

Purpose: Boundary shapes exchanged with file, CLI and HTTP adapters.

- Distribution record: [{token, operators: [{operator, reward}]}]
- Tree record list: [{token, tree: <serialized tree>}]
- Root / proof results

Token ids are opaque and never case-folded. Reward rows are kept as
supplied here; leaf validation happens when a tree is built so that a
bad row fails its own token group rather than the whole record.
"""

from typing import Any, NewType

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from .versioning import LEAF_ENCODING, TREE_FORMAT


TokenId = NewType("TokenId", str)
OperatorAddress = NewType("OperatorAddress", str)


class OperatorReward(BaseModel):
    """
    One row of a reward table: an operator and its reward amount.

    Both fields are kept as supplied. A missing, null, float or otherwise
    malformed value is rejected as MALFORMED_LEAF when the token's tree is
    built, so one bad row only fails its own token group.
    """

    model_config = ConfigDict(extra="forbid")

    operator: Any = Field(default=None, description="Operator address (0x + 40 hex chars)")
    reward: Any = Field(default=None, description="Reward amount as a base-10 integer string")

    @field_validator("reward", mode="before")
    @classmethod
    def _reward_to_string(cls, v: Any) -> Any:
        # JSON tables sometimes carry small rewards as numbers
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class TokenDistribution(BaseModel):
    """All reward rows for a single token group."""

    model_config = ConfigDict(extra="forbid")

    token: str = Field(..., description="Opaque token identifier", min_length=1)
    operators: list[OperatorReward] = Field(
        default_factory=list,
        description="Reward rows, in caller order",
    )


class DistributionRecord(RootModel[list[TokenDistribution]]):
    """Ordered list of token groups, as stored in distribution.json."""

    def tokens(self) -> list[str]:
        return [group.token for group in self.root]


class TreeValue(BaseModel):
    """A leaf tuple and its position in the flat node array."""

    model_config = ConfigDict(populate_by_name=True)

    value: list[str] = Field(..., description="[address, amount] as strings")
    tree_index: int = Field(..., alias="treeIndex", description="Index into the node array")


class TreeRecord(BaseModel):
    """
    Serialized Merkle tree.

    Field names follow the @openzeppelin/merkle-tree "standard-v1" dump so
    records written here load there and vice versa.
    """

    model_config = ConfigDict(populate_by_name=True)

    format: str = Field(default=TREE_FORMAT, description="Tree format version")
    leaf_encoding: list[str] = Field(
        default_factory=lambda: list(LEAF_ENCODING),
        alias="leafEncoding",
        description="ABI types of each leaf tuple",
    )
    tree: list[str] = Field(..., description="Flat node array, root first")
    values: list[TreeValue] = Field(..., description="Leaf tuples in caller order")

    @property
    def root(self) -> str | None:
        """Root hash as stated by the record (not re-verified)."""
        return self.tree[0] if self.tree else None

    def to_json_dict(self) -> dict[str, Any]:
        """Dump using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True)


class TokenTreeRecord(BaseModel):
    """A token id and its serialized tree, as stored in trees.json."""

    token: str = Field(..., description="Opaque token identifier", min_length=1)
    tree: dict[str, Any] = Field(..., description="Serialized tree (standard-v1)")


class TreeRecordList(RootModel[list[TokenTreeRecord]]):
    """Ordered list of serialized trees, one per token."""

    def tokens(self) -> list[str]:
        return [item.token for item in self.root]


class RootResult(BaseModel):
    """Root hash for one token group."""

    token: str
    root: str


class ProofResult(BaseModel):
    """Inclusion proof for one (operator, reward) leaf in one token tree."""

    token: str
    operator: str
    reward: str
    proof: list[str] = Field(default_factory=list)


__all__ = [
    "TokenId",
    "OperatorAddress",
    "OperatorReward",
    "TokenDistribution",
    "DistributionRecord",
    "TreeValue",
    "TreeRecord",
    "TokenTreeRecord",
    "TreeRecordList",
    "RootResult",
    "ProofResult",
]
