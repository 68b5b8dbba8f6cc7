"""
Distribution Pipeline (In-Process Runtime Wiring)

Composes the Merkle engine into per-token batch operations.

Public API:
- RewardsPipeline: builds/loads per-token trees with failure isolation
- BatchResult / TokenOutcome / TokenFailure / TokenTree: batch results
- ProofScan: proofs for one operator across tokens
- tree_records / distribution_from_trees / compute_roots: conversions
- find_proofs / prove_leaf: proof queries
"""

from orchestrator.pipeline import (
    BatchResult,
    ProofScan,
    RewardsPipeline,
    TokenFailure,
    TokenOutcome,
    TokenTree,
    compute_roots,
    create_pipeline,
    distribution_from_trees,
    find_proofs,
    prove_leaf,
    tree_records,
)


__all__ = [
    "RewardsPipeline",
    "BatchResult",
    "TokenOutcome",
    "TokenFailure",
    "TokenTree",
    "ProofScan",
    "tree_records",
    "distribution_from_trees",
    "compute_roots",
    "find_proofs",
    "prove_leaf",
    "create_pipeline",
]
