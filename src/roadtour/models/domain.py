"""Domain models for road segments and points of interest."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Segment:
    """A directed road edge between two planar (lat, lon) endpoints."""

    segment_id: str
    lat1: float
    lon1: float
    lat2: float
    lon2: float


@dataclass(frozen=True, slots=True)
class RawPoint:
    """A point of interest as read from the source file."""

    point_id: str
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class ProjectedNode:
    """A point of interest relocated onto its nearest segment.

    ``segment_id``, ``offset`` and ``snap_distance`` record which segment
    was chosen, the interpolation fraction along it and how far the source
    point moved.
    """

    node_id: str
    latitude: float
    longitude: float
    segment_id: Optional[str] = None
    offset: float = 0.0
    snap_distance: float = 0.0
