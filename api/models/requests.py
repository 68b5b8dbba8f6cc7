"""
API Request Models

Pydantic models for API request validation.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field, model_validator

from core.schemas.rewards import TokenDistribution, TokenTreeRecord


class TreesRequest(BaseModel):
    """Request body for POST /trees endpoint."""

    distribution: list[TokenDistribution] = Field(
        ...,
        description="Reward rows grouped by token",
    )


class SourceRequest(BaseModel):
    """Requests that accept either a distribution or serialized trees."""

    distribution: Optional[list[TokenDistribution]] = Field(
        default=None,
        description="Build trees from these reward rows",
    )
    trees: Optional[list[TokenTreeRecord]] = Field(
        default=None,
        description="Load these serialized trees instead",
    )

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "SourceRequest":
        if (self.distribution is None) == (self.trees is None):
            raise ValueError("Provide exactly one of 'distribution' or 'trees'")
        return self


class RootsRequest(SourceRequest):
    """Request body for POST /roots endpoint."""


class ProofsRequest(SourceRequest):
    """Request body for POST /proofs endpoint."""

    operator: str = Field(..., description="Operator address (0x + 40 hex chars)")
    reward: Optional[Union[str, int]] = Field(
        default=None,
        description="Only prove the leaf with this exact reward",
    )


class VerifyRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    root: str = Field(..., description="Expected root (0x + 64 hex chars)")
    operator: str = Field(..., description="Operator address")
    reward: Union[str, int] = Field(..., description="Reward amount")
    proof: list[str] = Field(default_factory=list, description="Sibling hashes, leaf to root")
