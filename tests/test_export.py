import json
from pathlib import Path

import pytest
from shapely import wkt as shapely_wkt

from roadtour.models.domain import ProjectedNode
from roadtour.services.export.geojson import (
    save_geojson,
    tour_coordinates,
    tour_to_feature_collection,
    tour_to_linestring,
    tour_to_wkt,
)
from roadtour.services.outputs.routing_formatter import tour_plan_to_csv, tour_plan_to_json
from roadtour.services.routing.models import TourPlan, TourStop


def _node(nid: str, lat: float, lon: float, segment_id: str | None = None) -> ProjectedNode:
    return ProjectedNode(node_id=nid, latitude=lat, longitude=lon, segment_id=segment_id)


NODES = [_node("O", 4.65, -74.10, "E1"), _node("A", 4.65, -74.09, "E2"), _node("B", 4.66, -74.09, "E3")]
ORDER = [0, 2, 1, 0]


def test_tour_coordinates_follow_visiting_order():
    assert tour_coordinates(ORDER, NODES) == [
        [4.65, -74.10],
        [4.66, -74.09],
        [4.65, -74.09],
        [4.65, -74.10],
    ]


def test_linestring_uses_lon_lat_axis_order():
    line = tour_to_linestring(ORDER, NODES)

    assert list(line.coords) == [(-74.10, 4.65), (-74.09, 4.66), (-74.09, 4.65), (-74.10, 4.65)]
    assert line.is_ring


def test_wkt_round_trip():
    text = tour_to_wkt(ORDER, NODES)

    assert text.startswith("LINESTRING")
    parsed = shapely_wkt.loads(text)
    expected = [value for coord in tour_to_linestring(ORDER, NODES).coords for value in coord]
    assert [value for coord in parsed.coords for value in coord] == pytest.approx(expected)


def test_linestring_requires_two_coordinates():
    with pytest.raises(ValueError):
        tour_to_linestring([], NODES)


def test_feature_collection_contains_route_and_stops():
    collection = tour_to_feature_collection(ORDER, NODES, total_distance=0.03, properties={"run": "demo"})

    assert collection["type"] == "FeatureCollection"
    route, *stops = collection["features"]
    assert route["geometry"]["type"] == "LineString"
    assert len(route["geometry"]["coordinates"]) == 4
    assert route["properties"]["node_ids"] == ["O", "B", "A", "O"]
    assert route["properties"]["origin_id"] == "O"
    assert route["properties"]["run"] == "demo"
    assert [stop["properties"]["node_id"] for stop in stops] == ["O", "B", "A"]
    assert [stop["properties"]["sequence"] for stop in stops] == [0, 1, 2]
    assert stops[1]["geometry"]["coordinates"] == (-74.09, 4.66)


def test_save_geojson_writes_valid_json(tmp_path: Path):
    collection = tour_to_feature_collection(ORDER, NODES, total_distance=0.03)
    target = tmp_path / "nested" / "tour.geojson"

    save_geojson(collection, target)

    loaded = json.loads(target.read_text(encoding="utf-8"))
    assert loaded["features"][0]["geometry"]["coordinates"][0] == [-74.10, 4.65]


def _plan() -> TourPlan:
    return TourPlan(
        origin_id="O",
        order=[0, 1, 0],
        total_distance=2.0,
        total_distance_km=222.4,
        node_count=2,
        stops=[
            TourStop(node_id="O", sequence=0, latitude=0.0, longitude=0.0, distance_from_prev=0.0),
            TourStop(node_id="A", sequence=1, latitude=1.0, longitude=0.0, distance_from_prev=1.0),
            TourStop(node_id="O", sequence=2, latitude=0.0, longitude=0.0, distance_from_prev=1.0),
        ],
        metadata={"status": "optimal"},
    )


def test_tour_plan_to_json():
    payload = tour_plan_to_json(_plan())

    assert payload["order"] == [0, 1, 0]
    assert payload["metadata"] == {"status": "optimal"}
    assert payload["stops"][1] == {
        "node_id": "A",
        "sequence": 1,
        "latitude": 1.0,
        "longitude": 0.0,
        "distance_from_prev": 1.0,
    }


def test_tour_plan_to_csv():
    lines = tour_plan_to_csv(_plan()).splitlines()

    assert lines[0] == "sequence,node_id,latitude,longitude,distance_from_prev,total_distance"
    assert lines[1] == "0,O,0.0,0.0,0.0,2.0"
    assert len(lines) == 4
