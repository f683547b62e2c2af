"""Network projection services."""

from .projector import nearest_segment, project_points
from .service import load_inputs, parse_inputs, project_inputs

__all__ = [
    "nearest_segment",
    "project_points",
    "load_inputs",
    "parse_inputs",
    "project_inputs",
]
