"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class TourResult:
    """Closed tour over matrix indices, starting and ending at index 0."""

    order: List[int]
    length: float
    evaluated: int = 0
    elapsed_ms: float = 0.0


@dataclass(slots=True)
class TourStop:
    node_id: str
    sequence: int
    latitude: float
    longitude: float
    distance_from_prev: float


@dataclass(slots=True)
class TourPlan:
    origin_id: str
    order: List[int]
    total_distance: float
    total_distance_km: float
    node_count: int
    stops: List[TourStop]
    metadata: dict = field(default_factory=dict)
