"""
Trees and Roots Routes

Build per-token trees from a distribution and report their roots.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.deps import get_pipeline, resolve_trees
from api.models.requests import RootsRequest, TreesRequest
from api.models.responses import RootsResponse, TokenFailureInfo, TreesResponse
from orchestrator.pipeline import BatchResult, compute_roots, tree_records


logger = logging.getLogger(__name__)

router = APIRouter(tags=["trees"])


def failure_infos(result: BatchResult) -> list[TokenFailureInfo]:
    return [TokenFailureInfo(**failure.to_dict()) for failure in result.failures]


@router.post("/trees", response_model=TreesResponse, response_model_by_alias=True)
def build_trees(request: TreesRequest) -> TreesResponse:
    """
    Build one tree per token.

    Tokens that fail (malformed row, empty group, duplicate leaf, repeated
    token id) are reported under ``failures``; the rest still get a tree.
    """
    result = get_pipeline().build_trees(request.distribution)
    return TreesResponse(
        ok=result.ok,
        trees=tree_records(result.trees).root,
        failures=failure_infos(result),
    )


@router.post("/roots", response_model=RootsResponse)
def roots(request: RootsRequest) -> RootsResponse:
    """Root hash of every token tree, from a distribution or serialized trees."""
    result = resolve_trees(get_pipeline(), request.distribution, request.trees)
    return RootsResponse(
        ok=result.ok,
        roots=compute_roots(result.trees),
        failures=failure_infos(result),
    )
