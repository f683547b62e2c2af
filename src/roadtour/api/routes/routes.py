"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import TourRequest, TourResponse
from ...services.errors import SolverCancelledError
from ...services.routing.service import optimize_tour

router = APIRouter(prefix="/routes", tags=["routes"])

logger = logging.getLogger(__name__)


@router.post("/optimize", response_model=TourResponse, status_code=status.HTTP_200_OK)
def optimize(payload: TourRequest) -> TourResponse:
    try:
        return optimize_tour(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SolverCancelledError as exc:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc)) from exc
    except Exception as exc:
        # Log the full error for debugging
        logger.exception(f"Error optimizing tour: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize tour: {str(exc)}",
        ) from exc
