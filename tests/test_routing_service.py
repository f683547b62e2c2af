import json
import logging
import math
import threading
from pathlib import Path

import pytest

from roadtour.config import settings
from roadtour.models.domain import ProjectedNode
from roadtour.schemas.routing import TourRequest
from roadtour.services.errors import PreconditionError, SizeLimitExceededError, SolverCancelledError
from roadtour.services.routing import service as routing_service


@pytest.fixture(autouse=True)
def clear_loader_cache():
    from roadtour.data.network_repository import clear_loader_cache as clear

    clear()
    yield
    clear()


# A 10 x 10 square of roads with one point just outside each side.
SQUARE_NETWORK = """id,lat1,lon1,lat2,lon2
S1,0,0,0,10
S2,0,10,10,10
S3,10,10,10,0
S4,10,0,0,0
"""

SQUARE_POINTS = """id,lat,lon
A,-1,2
B,5,11
C,11,5
D,5,-1
"""

SQUARE_LENGTH = math.hypot(5, 8) + math.hypot(5, 5) + math.hypot(5, 5) + math.hypot(5, 2)


def _request(**overrides) -> TourRequest:
    values = {"network_csv": SQUARE_NETWORK, "points_csv": SQUARE_POINTS, "persist": False}
    values.update(overrides)
    return TourRequest(**values)


def _node(nid: str) -> ProjectedNode:
    return ProjectedNode(node_id=nid, latitude=0.0, longitude=0.0)


def test_optimize_tour_snaps_and_solves():
    response = routing_service.optimize_tour(_request())

    assert response.origin_id == "A"
    assert response.order in ([0, 1, 2, 3, 0], [0, 3, 2, 1, 0])
    assert response.total_distance == pytest.approx(SQUARE_LENGTH)
    assert response.evaluated == 6
    assert response.node_count == 4
    assert [node.segment_id for node in response.nodes] == ["S1", "S2", "S3", "S4"]
    assert response.stops[0].node_id == "A"
    assert response.stops[-1].node_id == "A"
    assert response.metadata["status"] == "optimal"
    assert len(response.metadata["map_overlays"]["route"]) == 5
    assert len(response.metadata["map_overlays"]["network"]) == 4
    assert "output_dir" not in response.metadata


def test_projected_coordinates():
    response = routing_service.optimize_tour(_request())

    coords = [coord for node in response.nodes for coord in (node.latitude, node.longitude)]
    assert coords == pytest.approx([0.0, 2.0, 5.0, 10.0, 10.0, 5.0, 5.0, 0.0])


def test_origin_id_moves_node_to_front():
    response = routing_service.optimize_tour(_request(origin_id="C"))

    assert response.origin_id == "C"
    assert [node.node_id for node in response.nodes] == ["C", "A", "B", "D"]
    assert response.stops[0].node_id == "C"
    assert response.stops[-1].node_id == "C"
    assert response.total_distance == pytest.approx(SQUARE_LENGTH)


def test_unknown_origin_id_raises():
    with pytest.raises(PreconditionError):
        routing_service.optimize_tour(_request(origin_id="Z"))


def test_missing_network_raises_precondition():
    with pytest.raises(PreconditionError):
        routing_service.optimize_tour(_request(network_csv="id,lat1,lon1,lat2,lon2\n"))


def test_missing_points_raises_precondition():
    with pytest.raises(PreconditionError):
        routing_service.optimize_tour(_request(points_csv="id,lat,lon\n"))


def test_missing_network_file_raises_precondition(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(settings, "network_file", tmp_path / "absent.csv")

    with pytest.raises(PreconditionError):
        routing_service.optimize_tour(_request(network_csv=None))


def test_size_limit_is_enforced(monkeypatch):
    monkeypatch.setattr(settings, "max_exact_nodes", 3)

    with pytest.raises(SizeLimitExceededError) as excinfo:
        routing_service.optimize_tour(_request())

    assert excinfo.value.node_count == 4
    assert excinfo.value.limit == 3


def test_move_origin_first_keeps_relative_order():
    nodes = [_node("A"), _node("B"), _node("C"), _node("D")]

    reordered = routing_service.move_origin_first(nodes, "C")

    assert [node.node_id for node in reordered] == ["C", "A", "B", "D"]
    assert [node.node_id for node in routing_service.move_origin_first(nodes, None)] == ["A", "B", "C", "D"]


def test_run_solver_cancels_on_timeout(monkeypatch):
    seen: dict[str, threading.Event] = {}
    started = threading.Event()

    def slow_solver(matrix, *, cancel_event, timeout_seconds):
        seen["event"] = cancel_event
        started.set()
        cancel_event.wait(5)
        raise SolverCancelledError("stopped")

    monkeypatch.setattr(routing_service, "solve_exact_tour", slow_solver)

    with pytest.raises(SolverCancelledError) as excinfo:
        routing_service.run_solver([[0.0]], timeout_seconds=0.2)

    assert started.wait(1)
    assert seen["event"].is_set()
    assert excinfo.value.elapsed_ms >= 150.0


def test_duplicate_point_ids_are_kept_and_logged(caplog):
    points = """id,lat,lon
A,-1,2
A,5,11
C,11,5
D,5,-1
"""

    with caplog.at_level(logging.WARNING, logger="roadtour.services.routing.service"):
        response = routing_service.optimize_tour(_request(points_csv=points))

    assert [node.node_id for node in response.nodes] == ["A", "A", "C", "D"]
    assert response.node_count == 4
    assert len(response.stops) == 5
    assert response.total_distance == pytest.approx(SQUARE_LENGTH)
    assert "Duplicate point ids kept as separate stops: ['A']" in caplog.text


def test_run_solver_returns_result():
    result = routing_service.run_solver([[0.0, 1.0], [1.0, 0.0]], timeout_seconds=5)

    assert result.order == [0, 1, 0]
    assert result.length == 2.0


def test_optimize_tour_persists_outputs(monkeypatch, tmp_path: Path):
    real_storage = routing_service.FileStorage
    monkeypatch.setattr(routing_service, "FileStorage", lambda: real_storage(root=tmp_path))

    response = routing_service.optimize_tour(_request(persist=True, run_label="square demo"))

    run_dirs = list((tmp_path / "outputs").iterdir())
    assert len(run_dirs) == 1
    run_dir = run_dirs[0]
    assert run_dir.name.startswith("tour_square_demo_")
    assert response.metadata["output_dir"] == str(run_dir)
    for name in ("summary.json", "tour.csv", "tour.geojson", "tour.wkt"):
        assert (run_dir / name).exists()

    summary = json.loads((run_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["order"] == response.order
    assert summary["metadata"]["run_label"] == "square demo"
    assert (run_dir / "tour.wkt").read_text(encoding="utf-8").startswith("LINESTRING")
