"""API request and response models."""

from api.models.requests import (
    ProofsRequest,
    RootsRequest,
    SourceRequest,
    TreesRequest,
    VerifyRequest,
)
from api.models.responses import (
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ProofsResponse,
    RootsResponse,
    TokenFailureInfo,
    TreesResponse,
    VerifyResponse,
)

__all__ = [
    "TreesRequest",
    "SourceRequest",
    "RootsRequest",
    "ProofsRequest",
    "VerifyRequest",
    "HealthResponse",
    "TokenFailureInfo",
    "TreesResponse",
    "RootsResponse",
    "ProofsResponse",
    "VerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
]
