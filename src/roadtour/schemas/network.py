"""Network loading and projection schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class NetworkInput(BaseModel):
    network_csv: Optional[str] = Field(
        default=None,
        description="Network CSV text (id,lat1,lon1,lat2,lon2). Falls back to the configured file when omitted.",
    )
    points_csv: Optional[str] = Field(
        default=None,
        description="Points CSV text (id,lat,lon). Falls back to the configured file when omitted.",
    )


class NetworkParseResponse(BaseModel):
    segments: int
    points: int
    discarded_segments: Optional[int] = None
    discarded_points: Optional[int] = None


class ProjectedNodeModel(BaseModel):
    node_id: str
    latitude: float
    longitude: float
    segment_id: Optional[str] = None
    offset: float = Field(0.0, ge=0.0, le=1.0)
    snap_distance: float = Field(0.0, ge=0.0)


class ProjectionResponse(BaseModel):
    nodes: List[ProjectedNodeModel]
    metadata: dict
