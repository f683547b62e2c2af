"""Network loading and projection endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.network import NetworkInput, NetworkParseResponse, ProjectionResponse
from ...services.network.service import parse_inputs, project_inputs

router = APIRouter(prefix="/network", tags=["network"])

logger = logging.getLogger(__name__)


@router.post("/parse", response_model=NetworkParseResponse, status_code=status.HTTP_200_OK)
def parse(payload: NetworkInput) -> NetworkParseResponse:
    """Parse the network and points and report accepted/discarded rows."""
    try:
        return parse_inputs(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error parsing network input: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to parse input: {str(exc)}",
        ) from exc


@router.post("/project", response_model=ProjectionResponse, status_code=status.HTTP_200_OK)
def project(payload: NetworkInput) -> ProjectionResponse:
    """Snap every point onto its nearest segment."""
    try:
        return project_inputs(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error projecting points: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to project points: {str(exc)}",
        ) from exc
