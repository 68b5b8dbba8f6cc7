"""API route handlers."""

from api.routes import health, proofs, trees

__all__ = ["health", "proofs", "trees"]
