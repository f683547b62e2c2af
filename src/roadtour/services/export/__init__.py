"""Export services."""

from .geojson import (
    save_geojson,
    tour_to_feature_collection,
    tour_to_linestring,
    tour_to_wkt,
)

__all__ = [
    "tour_to_linestring",
    "tour_to_wkt",
    "tour_to_feature_collection",
    "save_geojson",
]
