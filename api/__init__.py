"""
Operator Rewards API (FastAPI)

HTTP API for operator reward Merkle trees:
- POST /trees - Build per-token trees from a distribution
- POST /roots - Root hash per token
- POST /proofs - Inclusion proofs for an operator
- POST /verify - Check a proof against a root
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
