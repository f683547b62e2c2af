"""Snap points of interest onto their nearest road segment."""

from __future__ import annotations

import logging
from typing import Sequence

from ...models.domain import ProjectedNode, RawPoint, Segment
from ..errors import PreconditionError
from ..geospatial import SegmentProjection, project_point_onto_segment

logger = logging.getLogger(__name__)


def nearest_segment(point: RawPoint, segments: Sequence[Segment]) -> tuple[Segment, SegmentProjection]:
    """Return the closest segment to ``point`` and the projection onto it.

    Ties keep the first segment in ``segments`` order.
    """
    if not segments:
        raise PreconditionError("No road network loaded. Load the network before the points.")

    best_segment: Segment | None = None
    best: SegmentProjection | None = None
    for segment in segments:
        result = project_point_onto_segment(
            point.latitude,
            point.longitude,
            segment.lat1,
            segment.lon1,
            segment.lat2,
            segment.lon2,
        )
        if best is None or result.distance < best.distance:
            best_segment = segment
            best = result
    return best_segment, best


def project_points(segments: Sequence[Segment], points: Sequence[RawPoint]) -> list[ProjectedNode]:
    """Project every point onto the network, preserving input order."""
    if not segments:
        raise PreconditionError("No road network loaded. Load the network before the points.")

    nodes: list[ProjectedNode] = []
    for point in points:
        segment, projection = nearest_segment(point, segments)
        nodes.append(
            ProjectedNode(
                node_id=point.point_id,
                latitude=projection.proj_x,
                longitude=projection.proj_y,
                segment_id=segment.segment_id,
                offset=projection.t,
                snap_distance=projection.distance,
            )
        )
        logger.debug(
            f"Point {point.point_id} snapped to segment {segment.segment_id} "
            f"(t={projection.t:.4f}, distance={projection.distance:.6f})"
        )

    logger.info(f"Integrated {len(nodes)} points into a network of {len(segments)} segments")
    return nodes
