"""Serializers for tour outputs."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ..routing.models import TourPlan


def tour_plan_to_json(plan: TourPlan) -> dict:
    return {
        "origin_id": plan.origin_id,
        "order": list(plan.order),
        "total_distance": plan.total_distance,
        "total_distance_km": plan.total_distance_km,
        "node_count": plan.node_count,
        "metadata": plan.metadata,
        "stops": [asdict(stop) for stop in plan.stops],
    }


def tour_plan_to_csv(plan: TourPlan) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "node_id",
        "latitude",
        "longitude",
        "distance_from_prev",
        "total_distance",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames, lineterminator="\n")
    writer.writeheader()
    for stop in plan.stops:
        writer.writerow(
            {
                "sequence": stop.sequence,
                "node_id": stop.node_id,
                "latitude": stop.latitude,
                "longitude": stop.longitude,
                "distance_from_prev": stop.distance_from_prev,
                "total_distance": plan.total_distance,
            }
        )
    return buffer.getvalue()
