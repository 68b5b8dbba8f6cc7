"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.routes import health, proofs, trees
from api.errors import (
    APIError,
    api_error_handler,
    generic_error_handler,
    rewards_error_handler,
    validation_error_handler,
)
from core.schemas.errors import RewardsException


# Configure logging - respects REWARDS_LOG_LEVEL env var and rewards.json log_level
def _resolve_log_level() -> int:
    """Resolve log level from env var or rewards.json, defaulting to INFO."""
    raw = os.getenv("REWARDS_LOG_LEVEL")
    if raw is None:
        cfg_path = Path.cwd() / "rewards.json"
        if cfg_path.exists():
            try:
                with open(cfg_path, encoding="utf-8") as f:
                    raw = json.load(f).get("log_level")
            except (OSError, ValueError):
                raw = None
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Operator Rewards API",
        description="""
HTTP API for operator reward Merkle trees.

## Endpoints

- **POST /trees** - Build one tree per token from a distribution
- **POST /roots** - Root hash per token (distribution or serialized trees)
- **POST /proofs** - Inclusion proofs for an operator
- **POST /verify** - Check a proof against a root
- **GET /health** - Health check

## Tree Format

Trees use the `standard-v1` layout: sorted double-keccak leaves over
`abi.encode(address, uint256)`, sorted-pair hashing, and a flat node
array with the root first.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RewardsException, rewards_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(trees.router)
    app.include_router(proofs.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
