"""Pairwise distance matrix over projected nodes."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import ProjectedNode
from ..geospatial import euclidean_distance

DistanceMatrix = list[list[float]]


def build_distance_matrix(nodes: Sequence[ProjectedNode]) -> DistanceMatrix:
    """Return the symmetric, zero-diagonal Euclidean matrix for ``nodes``.

    Row and column ``i`` correspond to ``nodes[i]``.
    """
    n = len(nodes)
    matrix: DistanceMatrix = [[0.0] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            d = euclidean_distance(
                nodes[i].latitude, nodes[i].longitude,
                nodes[j].latitude, nodes[j].longitude,
            )
            matrix[i][j] = d
            matrix[j][i] = d
    return matrix
