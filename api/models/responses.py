"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.schemas.rewards import ProofResult, RootResult, TokenTreeRecord


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "operator-rewards-api"
    version: str = "v1"


class TokenFailureInfo(BaseModel):
    """A token group that could not be built or loaded."""

    token: str
    error: dict[str, Any] = Field(..., description="code, message, details, retryable")


class TreesResponse(BaseModel):
    """Response for POST /trees endpoint."""

    ok: bool = Field(..., description="True when every token produced a tree")
    trees: list[TokenTreeRecord] = Field(default_factory=list)
    failures: list[TokenFailureInfo] = Field(default_factory=list)


class RootsResponse(BaseModel):
    """Response for POST /roots endpoint."""

    ok: bool = Field(..., description="True when every token produced a tree")
    roots: list[RootResult] = Field(default_factory=list)
    failures: list[TokenFailureInfo] = Field(default_factory=list)


class ProofsResponse(BaseModel):
    """Response for POST /proofs endpoint."""

    ok: bool = Field(..., description="True when every token produced a tree")
    operator: str
    proofs: list[ProofResult] = Field(default_factory=list)
    missing_tokens: list[str] = Field(
        default_factory=list,
        description="Tokens whose tree does not hold the requested leaf",
    )
    failures: list[TokenFailureInfo] = Field(default_factory=list)


class VerifyResponse(BaseModel):
    """Response for POST /verify endpoint."""

    ok: bool = True
    valid: bool = Field(..., description="Whether the proof reproduces the root")


class ErrorDetail(BaseModel):
    """Error details."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail
