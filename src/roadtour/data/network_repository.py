"""Data access helpers for loading road networks and points of interest."""

from __future__ import annotations

import csv
import functools
import io
import logging
import math
from pathlib import Path
from typing import Callable, Optional, Sequence, TypeVar

from ..config import settings
from ..models.domain import RawPoint, Segment
from ..services.errors import InputMalformedError

SEGMENT_FIELDS = 5
POINT_FIELDS = 3

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _coerce_float(value: str, line_number: int) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise InputMalformedError(
            f"Unable to parse float from value '{value}'", line_number=line_number
        ) from exc
    if not math.isfinite(number):
        raise InputMalformedError(f"Coordinate '{value}' is not finite", line_number=line_number)
    return number


def parse_segment_row(row: Sequence[str], line_number: int = 0) -> Segment:
    """Build a segment from ``[id, lat1, lon1, lat2, lon2]``."""
    if len(row) < SEGMENT_FIELDS:
        raise InputMalformedError(
            f"Expected {SEGMENT_FIELDS} fields, got {len(row)}", line_number=line_number
        )
    return Segment(
        segment_id=row[0].strip(),
        lat1=_coerce_float(row[1], line_number),
        lon1=_coerce_float(row[2], line_number),
        lat2=_coerce_float(row[3], line_number),
        lon2=_coerce_float(row[4], line_number),
    )


def parse_point_row(row: Sequence[str], line_number: int = 0) -> RawPoint:
    """Build a point from ``[id, lat, lon]``."""
    if len(row) < POINT_FIELDS:
        raise InputMalformedError(
            f"Expected {POINT_FIELDS} fields, got {len(row)}", line_number=line_number
        )
    return RawPoint(
        point_id=row[0].strip(),
        latitude=_coerce_float(row[1], line_number),
        longitude=_coerce_float(row[2], line_number),
    )


def _parse_rows(text: str, build: Callable[[Sequence[str], int], T], label: str) -> tuple[list[T], int]:
    """Parse CSV text, skipping the header and any malformed row.

    Returns the accepted records and the number of discarded rows.
    """
    records: list[T] = []
    discarded = 0
    reader = csv.reader(io.StringIO((text or "").strip()))
    for line_number, row in enumerate(reader, start=1):
        if line_number == 1:
            continue  # header
        try:
            records.append(build(row, line_number))
        except InputMalformedError as exc:
            discarded += 1
            logger.debug(f"Skipping {label} line {exc.line_number}: {exc}")

    if discarded:
        logger.warning(f"Discarded {discarded} malformed {label} rows")
    return records, discarded


def parse_network_csv(text: str) -> tuple[list[Segment], int]:
    """Parse a network CSV with columns ``id,lat1,lon1,lat2,lon2``."""
    segments, discarded = _parse_rows(text, parse_segment_row, "network")
    logger.info(f"Network loaded. Segments: {len(segments)}")
    return segments, discarded


def parse_points_csv(text: str) -> tuple[list[RawPoint], int]:
    """Parse a points CSV with columns ``id,lat,lon``."""
    points, discarded = _parse_rows(text, parse_point_row, "points")
    logger.info(f"Points loaded: {len(points)}")
    return points, discarded


def _read_text(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with path.open(mode="r", encoding="utf-8-sig", newline="") as handle:
        return handle.read()


@functools.lru_cache(maxsize=4)
def read_network_file(path: Path) -> tuple[tuple[Segment, ...], int]:
    """Parse a network CSV file, cached per resolved path."""

    segments, discarded = parse_network_csv(_read_text(path))
    return tuple(segments), discarded


@functools.lru_cache(maxsize=4)
def read_points_file(path: Path) -> tuple[tuple[RawPoint, ...], int]:
    """Parse a points CSV file, cached per resolved path."""

    points, discarded = parse_points_csv(_read_text(path))
    return tuple(points), discarded


def load_network(source: Optional[Path] = None) -> tuple[tuple[Segment, ...], int]:
    """Load road segments and the discarded row count from ``source`` or the configured file."""
    return read_network_file(Path(source or settings.network_file).resolve())


def load_points(source: Optional[Path] = None) -> tuple[tuple[RawPoint, ...], int]:
    """Load points of interest and the discarded row count from ``source`` or the configured file."""
    return read_points_file(Path(source or settings.points_file).resolve())


def clear_loader_cache() -> None:
    read_network_file.cache_clear()
    read_points_file.cache_clear()
