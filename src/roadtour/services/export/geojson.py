"""GeoJSON/WKT export utilities for closed tours."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence

from shapely.geometry import LineString, Point, mapping

from ...models.domain import ProjectedNode


def tour_coordinates(order: Sequence[int], nodes: Sequence[ProjectedNode]) -> List[List[float]]:
    """Return ``[lat, lon]`` pairs in visiting order."""
    return [[nodes[idx].latitude, nodes[idx].longitude] for idx in order]


def tour_to_linestring(order: Sequence[int], nodes: Sequence[ProjectedNode]) -> LineString:
    """Build a LineString over the tour in lon,lat (x,y) order."""
    coordinates = tour_coordinates(order, nodes)
    if len(coordinates) < 2:
        raise ValueError("LineString must have at least 2 coordinates")
    return LineString([(lon, lat) for lat, lon in coordinates])


def tour_to_wkt(order: Sequence[int], nodes: Sequence[ProjectedNode]) -> str:
    """Convert a tour to a WKT LINESTRING string."""
    return tour_to_linestring(order, nodes).wkt


def tour_to_feature_collection(
    order: Sequence[int],
    nodes: Sequence[ProjectedNode],
    *,
    total_distance: float,
    properties: Dict[str, Any] | None = None,
) -> Dict[str, Any]:
    """Convert a tour into a GeoJSON FeatureCollection.

    The first feature is the route LineString; one Point feature follows for
    every stop, carrying its position in the tour.
    """
    line = tour_to_linestring(order, nodes)
    features: List[Dict[str, Any]] = [
        {
            "type": "Feature",
            "geometry": mapping(line),
            "properties": {
                "kind": "tour",
                "origin_id": nodes[order[0]].node_id,
                "node_ids": [nodes[idx].node_id for idx in order],
                "total_distance": total_distance,
                **(properties or {}),
            },
        }
    ]
    for sequence, idx in enumerate(order[:-1]):
        node = nodes[idx]
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(Point(node.longitude, node.latitude)),
                "properties": {
                    "kind": "stop",
                    "node_id": node.node_id,
                    "sequence": sequence,
                    "segment_id": node.segment_id,
                },
            }
        )
    return {"type": "FeatureCollection", "features": features}


def save_geojson(collection: Dict[str, Any], output_path: Path) -> None:
    """Save a FeatureCollection to disk."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(collection, f, indent=2, ensure_ascii=False)
