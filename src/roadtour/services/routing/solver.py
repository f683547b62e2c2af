"""Exact closed-tour solver by exhaustive permutation search."""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Iterable, Iterator

from ..errors import SolverCancelledError
from .matrix import DistanceMatrix
from .models import TourResult

# How many permutations are evaluated between two cancellation checks.
CANCEL_CHECK_INTERVAL = 4096

logger = logging.getLogger(__name__)


def candidate_count(node_count: int) -> int:
    """Number of tours the exhaustive search evaluates for ``node_count`` nodes."""
    if node_count <= 1:
        return 1 if node_count == 1 else 0
    return math.factorial(node_count - 1)


def iter_permutations(items: Iterable[int]) -> Iterator[list[int]]:
    """Yield every permutation of ``items`` by in-place swap backtracking.

    The same working list is yielded each time and is mutated afterwards;
    copy it to keep a permutation. An empty input yields one empty
    permutation.
    """
    buffer = list(items)
    yield from _permute(buffer, 0, len(buffer) - 1)


def _permute(buffer: list[int], left: int, right: int) -> Iterator[list[int]]:
    if left >= right:
        yield buffer
        return
    for i in range(left, right + 1):
        buffer[left], buffer[i] = buffer[i], buffer[left]
        yield from _permute(buffer, left + 1, right)
        buffer[left], buffer[i] = buffer[i], buffer[left]


def closed_tour_length(permutation: list[int], matrix: DistanceMatrix) -> float:
    """Length of the tour 0 -> permutation... -> 0."""
    length = 0.0
    prev = 0
    for curr in permutation:
        length += matrix[prev][curr]
        prev = curr
    return length + matrix[prev][0]


def solve_exact_tour(
    matrix: DistanceMatrix,
    *,
    cancel_event: threading.Event | None = None,
    timeout_seconds: float | None = None,
) -> TourResult:
    """Return the shortest closed tour through every node of ``matrix``.

    Node 0 is the fixed start and end. Every permutation of the remaining
    nodes is evaluated; on equal lengths the first tour found is kept.
    ``cancel_event`` and ``timeout_seconds`` are polled every
    ``CANCEL_CHECK_INTERVAL`` permutations and stop the search with
    ``SolverCancelledError``.
    """
    started = time.perf_counter()
    n = len(matrix)
    if n == 0:
        return TourResult(order=[], length=0.0, evaluated=0, elapsed_ms=0.0)

    deadline = started + timeout_seconds if timeout_seconds is not None else None
    best_length = math.inf
    best_order: list[int] | None = None
    evaluated = 0

    for permutation in iter_permutations(range(1, n)):
        length = closed_tour_length(permutation, matrix)
        evaluated += 1
        if length < best_length:
            best_length = length
            best_order = [0, *permutation, 0]

        if evaluated % CANCEL_CHECK_INTERVAL == 0:
            cancelled = cancel_event is not None and cancel_event.is_set()
            expired = deadline is not None and time.perf_counter() >= deadline
            if cancelled or expired:
                elapsed_ms = (time.perf_counter() - started) * 1000.0
                reason = "timed out" if expired else "was cancelled"
                raise SolverCancelledError(
                    f"Exact search {reason} after {evaluated} of {candidate_count(n)} tours.",
                    evaluated=evaluated,
                    elapsed_ms=elapsed_ms,
                )

    elapsed_ms = (time.perf_counter() - started) * 1000.0
    if best_order is None:
        # Only reachable with NaN distances.
        raise ValueError("Distance matrix produced no comparable tour length.")

    logger.info(f"Optimal order (exhaustive search): {best_order}")
    logger.info(f"Total length: {best_length:.6f}, evaluated {evaluated} tours in {elapsed_ms:.3f} ms")
    return TourResult(order=best_order, length=best_length, evaluated=evaluated, elapsed_ms=elapsed_ms)
