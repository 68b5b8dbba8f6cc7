"""
Proofs Routes

Generate inclusion proofs and check them against a root.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from api.deps import get_pipeline, resolve_trees
from api.models.requests import ProofsRequest, VerifyRequest
from api.models.responses import ProofsResponse, VerifyResponse
from api.routes.trees import failure_infos
from core.merkle.standard_tree import StandardMerkleTree
from orchestrator.pipeline import find_proofs, prove_leaf


logger = logging.getLogger(__name__)

router = APIRouter(tags=["proofs"])


@router.post("/proofs", response_model=ProofsResponse)
def proofs(request: ProofsRequest) -> ProofsResponse:
    """
    Proofs for an operator in every token tree.

    A malformed operator or reward is rejected with MALFORMED_LEAF before
    any tree is touched.
    """
    result = resolve_trees(get_pipeline(), request.distribution, request.trees)
    if request.reward is not None:
        scan = prove_leaf(result.trees, request.operator, request.reward)
    else:
        scan = find_proofs(result.trees, request.operator)

    return ProofsResponse(
        ok=result.ok,
        operator=scan.operator,
        proofs=scan.proofs,
        missing_tokens=scan.missing_tokens,
        failures=failure_infos(result),
    )


@router.post("/verify", response_model=VerifyResponse)
def verify(request: VerifyRequest) -> VerifyResponse:
    """Check a proof offline. Malformed input verifies as false."""
    valid = StandardMerkleTree.verify(
        request.root,
        (request.operator, request.reward),
        request.proof,
    )
    logger.debug(f"Verify {request.operator} against {request.root}: {valid}")
    return VerifyResponse(ok=True, valid=valid)
