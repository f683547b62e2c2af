"""Network loading and projection orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ...data.network_repository import load_network, load_points, parse_network_csv, parse_points_csv
from ...models.domain import ProjectedNode, RawPoint, Segment
from ...schemas.network import NetworkInput, NetworkParseResponse, ProjectedNodeModel, ProjectionResponse
from ..errors import PreconditionError
from .projector import project_points

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NetworkInputs:
    segments: Sequence[Segment]
    points: Sequence[RawPoint]
    discarded_segments: Optional[int] = None
    discarded_points: Optional[int] = None


def load_inputs(payload: NetworkInput) -> NetworkInputs:
    """Parse inline CSV text, or fall back to the configured files."""

    if payload.network_csv is not None:
        segments, discarded_segments = parse_network_csv(payload.network_csv)
    else:
        try:
            segments, discarded_segments = load_network()
        except FileNotFoundError as exc:
            raise PreconditionError(f"No road network loaded: {exc}") from exc

    if payload.points_csv is not None:
        points, discarded_points = parse_points_csv(payload.points_csv)
    else:
        try:
            points, discarded_points = load_points()
        except FileNotFoundError as exc:
            raise PreconditionError(f"No points loaded: {exc}") from exc

    return NetworkInputs(
        segments=segments,
        points=points,
        discarded_segments=discarded_segments,
        discarded_points=discarded_points,
    )


def to_node_models(nodes: Sequence[ProjectedNode]) -> list[ProjectedNodeModel]:
    return [
        ProjectedNodeModel(
            node_id=node.node_id,
            latitude=node.latitude,
            longitude=node.longitude,
            segment_id=node.segment_id,
            offset=node.offset,
            snap_distance=node.snap_distance,
        )
        for node in nodes
    ]


def build_network_overlay(segments: Sequence[Segment]) -> list[dict]:
    """Polylines for drawing the network, one per segment."""
    return [
        {
            "segment_id": segment.segment_id,
            "coordinates": [[segment.lat1, segment.lon1], [segment.lat2, segment.lon2]],
        }
        for segment in segments
    ]


def network_center(segments: Sequence[Segment]) -> list[float] | None:
    """Midpoint of the first segment, used to centre a map view."""
    if not segments:
        return None
    first = segments[0]
    return [(first.lat1 + first.lat2) / 2, (first.lon1 + first.lon2) / 2]


def parse_inputs(payload: NetworkInput) -> NetworkParseResponse:
    inputs = load_inputs(payload)
    return NetworkParseResponse(
        segments=len(inputs.segments),
        points=len(inputs.points),
        discarded_segments=inputs.discarded_segments,
        discarded_points=inputs.discarded_points,
    )


def project_inputs(payload: NetworkInput) -> ProjectionResponse:
    inputs = load_inputs(payload)
    nodes = project_points(inputs.segments, inputs.points)
    return ProjectionResponse(
        nodes=to_node_models(nodes),
        metadata={
            "segments": len(inputs.segments),
            "points": len(inputs.points),
            "discarded_segments": inputs.discarded_segments,
            "discarded_points": inputs.discarded_points,
            "map_overlays": {
                "center": network_center(inputs.segments),
                "network": build_network_overlay(inputs.segments),
            },
        },
    )
