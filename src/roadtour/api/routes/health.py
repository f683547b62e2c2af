"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/limits", status_code=status.HTTP_200_OK)
def health_limits() -> dict:
    """Report the configured exact-search bounds."""
    return {
        "max_exact_nodes": settings.max_exact_nodes,
        "solver_timeout_seconds": settings.solver_timeout_seconds,
    }
