"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .network import NetworkInput, ProjectedNodeModel


class TourRequest(NetworkInput):
    origin_id: Optional[str] = Field(
        default=None,
        description="Point id used as the tour start and end. Defaults to the first point.",
    )
    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Overrides the configured search budget for this run.",
    )
    persist: bool = True
    run_label: Optional[str] = Field(default=None, description="Friendly name for persisted outputs.")
    notes: Optional[str] = Field(default=None, description="Free-form notes captured with the run.")


class TourStopModel(BaseModel):
    node_id: str
    sequence: int
    latitude: float
    longitude: float
    distance_from_prev: float


class TourResponse(BaseModel):
    origin_id: str
    order: List[int]
    total_distance: float
    total_distance_km: float
    node_count: int
    elapsed_ms: float
    evaluated: int
    nodes: List[ProjectedNodeModel]
    stops: List[TourStopModel]
    metadata: dict
