"""Tour orchestration service."""

from __future__ import annotations

import logging
import re
import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Sequence

from ...config import settings
from ...models.domain import ProjectedNode
from ...persistence.filesystem import FileStorage
from ...schemas.routing import TourRequest, TourResponse, TourStopModel
from ..errors import PreconditionError, SizeLimitExceededError, SolverCancelledError
from ..export.geojson import save_geojson, tour_coordinates, tour_to_feature_collection, tour_to_wkt
from ..geospatial import haversine_km
from ..network.projector import project_points
from ..network.service import build_network_overlay, load_inputs, network_center, to_node_models
from ..outputs.routing_formatter import tour_plan_to_csv, tour_plan_to_json
from .matrix import DistanceMatrix, build_distance_matrix
from .models import TourPlan, TourResult, TourStop
from .solver import candidate_count, solve_exact_tour

logger = logging.getLogger(__name__)


def ensure_exact_size(node_count: int, limit: int | None = None) -> None:
    """Reject instances too large for exhaustive search."""
    limit = limit if limit is not None else settings.max_exact_nodes
    if node_count > limit:
        raise SizeLimitExceededError(node_count, limit)


def move_origin_first(nodes: Sequence[ProjectedNode], origin_id: str | None) -> list[ProjectedNode]:
    """Return ``nodes`` with the node named ``origin_id`` at index 0.

    The relative order of the other nodes is kept.
    """
    nodes = list(nodes)
    if origin_id is None:
        return nodes
    for idx, node in enumerate(nodes):
        if node.node_id == origin_id:
            return [node, *nodes[:idx], *nodes[idx + 1:]]
    raise PreconditionError(f"Origin point '{origin_id}' is not among the loaded points.")


def run_solver(matrix: DistanceMatrix, timeout_seconds: float | None = None) -> TourResult:
    """Run the exhaustive search on a worker thread with a wall-clock budget."""
    timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.solver_timeout_seconds
    cancel_event = threading.Event()
    started = time.perf_counter()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tour-solver")
    try:
        future = executor.submit(
            solve_exact_tour,
            matrix,
            cancel_event=cancel_event,
            timeout_seconds=timeout_seconds,
        )
        try:
            return future.result(timeout=timeout_seconds)
        except FutureTimeoutError:
            cancel_event.set()
            raise SolverCancelledError(
                f"Exact search exceeded {timeout_seconds:.1f}s for {len(matrix)} points.",
                elapsed_ms=(time.perf_counter() - started) * 1000.0,
            ) from None
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def build_tour_plan(nodes: Sequence[ProjectedNode], result: TourResult, matrix: DistanceMatrix) -> TourPlan:
    stops: list[TourStop] = []
    total_km = 0.0
    prev: int | None = None
    for sequence, idx in enumerate(result.order):
        node = nodes[idx]
        step = matrix[prev][idx] if prev is not None else 0.0
        if prev is not None:
            total_km += haversine_km(
                nodes[prev].latitude, nodes[prev].longitude, node.latitude, node.longitude
            )
        stops.append(
            TourStop(
                node_id=node.node_id,
                sequence=sequence,
                latitude=node.latitude,
                longitude=node.longitude,
                distance_from_prev=step,
            )
        )
        prev = idx

    return TourPlan(
        origin_id=nodes[0].node_id,
        order=list(result.order),
        total_distance=result.length,
        total_distance_km=total_km,
        node_count=len(nodes),
        stops=stops,
    )


def _warn_duplicate_ids(nodes: Sequence[ProjectedNode]) -> None:
    duplicates = [node_id for node_id, count in Counter(n.node_id for n in nodes).items() if count > 1]
    if duplicates:
        logger.warning(f"Duplicate point ids kept as separate stops: {duplicates}")


def _persist_outputs(plan: TourPlan, nodes: Sequence[ProjectedNode], label: str | None) -> Path:
    storage = FileStorage()
    prefix = f"tour_{re.sub(r'[^A-Za-z0-9_-]+', '_', label)}" if label else "tour"
    run_dir = storage.make_run_directory(prefix=prefix)
    storage.write_json(run_dir / "summary.json", tour_plan_to_json(plan))
    storage.write_text(run_dir / "tour.csv", tour_plan_to_csv(plan))
    try:
        collection = tour_to_feature_collection(plan.order, nodes, total_distance=plan.total_distance)
        save_geojson(collection, run_dir / "tour.geojson")
        storage.write_text(run_dir / "tour.wkt", tour_to_wkt(plan.order, nodes))
    except ValueError as exc:
        logger.warning(f"Failed to generate geometry export: {exc}")
    return run_dir


def optimize_tour(payload: TourRequest) -> TourResponse:
    inputs = load_inputs(payload)
    nodes = project_points(inputs.segments, inputs.points)
    if not nodes:
        raise PreconditionError("No projected points to route. Load the network and the points first.")
    _warn_duplicate_ids(nodes)

    nodes = move_origin_first(nodes, payload.origin_id)
    ensure_exact_size(len(nodes))

    matrix = build_distance_matrix(nodes)
    logger.info(
        f"Solving exact tour over {len(nodes)} points ({candidate_count(len(nodes))} candidate tours)"
    )
    result = run_solver(matrix, payload.timeout_seconds)
    plan = build_tour_plan(nodes, result, matrix)

    metadata = plan.metadata
    metadata["status"] = "optimal"
    metadata["algorithm"] = "exhaustive"
    metadata["candidates"] = candidate_count(len(nodes))
    metadata["segments"] = len(inputs.segments)
    metadata["discarded_segments"] = inputs.discarded_segments
    metadata["discarded_points"] = inputs.discarded_points
    if payload.run_label:
        metadata["run_label"] = payload.run_label
    if payload.notes:
        metadata["notes"] = payload.notes
    metadata["map_overlays"] = {
        "center": network_center(inputs.segments),
        "network": build_network_overlay(inputs.segments),
        "nodes": [
            {"node_id": node.node_id, "coordinates": [node.latitude, node.longitude]}
            for node in nodes
        ],
        "route": tour_coordinates(plan.order, nodes),
    }

    if payload.persist:
        run_dir = _persist_outputs(plan, nodes, payload.run_label)
        metadata["output_dir"] = str(run_dir)
        logger.info(f"Tour outputs written to {run_dir}")

    return TourResponse(
        origin_id=plan.origin_id,
        order=plan.order,
        total_distance=plan.total_distance,
        total_distance_km=plan.total_distance_km,
        node_count=plan.node_count,
        elapsed_ms=result.elapsed_ms,
        evaluated=result.evaluated,
        nodes=to_node_models(nodes),
        stops=[
            TourStopModel(
                node_id=stop.node_id,
                sequence=stop.sequence,
                latitude=stop.latitude,
                longitude=stop.longitude,
                distance_from_prev=stop.distance_from_prev,
            )
            for stop in plan.stops
        ],
        metadata=metadata,
    )
