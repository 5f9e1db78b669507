"""Cluster maps and density-based clustering (DBSCAN)."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from itertools import combinations

import numpy as np

Metric = Callable[[Sequence[float], Sequence[float]], float]


class ClusterMap(dict):
    """Mapping of cluster id to the list of point indices in that cluster."""

    def invert(self) -> dict[int, int]:
        """Return a mapping of point index to cluster id."""
        inverse: dict[int, int] = {}
        for cluster, points in self.items():
            for point in points:
                if point in inverse:
                    raise ValueError(
                        "not a valid cluster map (points appear in more than one cluster)"
                    )
                inverse[point] = cluster
        return inverse

    def equals(self, other: ClusterMap) -> bool:
        """Return True if the clusters of ``other`` are a relabelling of these.

        Raises ValueError describing the first difference found.
        """
        if len(self) != len(other):
            raise ValueError(
                f"maps do not contain the same number of clusters ({len(self)} and {len(other)})"
            )
        try:
            ref_inv = self.invert()
        except ValueError as exc:
            raise ValueError(f"ref: {exc}") from exc
        try:
            other_inv = ClusterMap(other).invert()
        except ValueError as exc:
            raise ValueError(f"other: {exc}") from exc

        relabel: dict[int, int] = {}
        for point, c1 in ref_inv.items():
            if point not in other_inv:
                raise ValueError(f"failed to find reference point {point} in other")
            c2 = other_inv[point]
            c3 = relabel.setdefault(c2, c1)
            if c3 != c1:
                raise ValueError(
                    f"ref point {point} (cluster {c2}) is assigned to a different cluster ({c1})"
                )

        for c_old, points in other.items():
            c_new = relabel.get(c_old)
            ref_points = set(self.get(c_new, ())) if c_new is not None else set()
            if not set(points) <= ref_points:
                raise ValueError(
                    f"re-labelled cluster {c_old} => {c_new} doesn't contain the same points "
                    f"({sorted(ref_points)}, {list(points)})"
                )
        return True


@dataclass
class DBSCANParameters:
    """Neighbourhood radius, minimum cluster size and distance metric."""

    eps: float
    min_count: int
    metric: Metric = field(default=math.dist)


def pairwise_distances(points: Sequence[Sequence[float]], metric: Metric = math.dist) -> np.ndarray:
    """Return the symmetric matrix of distances between all points."""
    rows = [tuple(float(x) for x in p) for p in points]
    n = len(rows)
    dist = np.zeros((n, n))
    for i, j in combinations(range(n), 2):
        d = metric(rows[i], rows[j])
        dist[i, j] = d
        dist[j, i] = d
    return dist


def region_query(point: int, distances: np.ndarray, eps: float) -> set[int]:
    """Return the indices within ``eps`` of ``point``, the point itself included."""
    return {j for j, d in enumerate(distances[point]) if d <= eps}


def dbscan(points: Sequence[Sequence[float]], params: DBSCANParameters) -> ClusterMap:
    """Cluster ``points`` with DBSCAN; noise points belong to no cluster.

    Clusters are numbered from 1 in discovery order.
    """
    dist = pairwise_distances(points, params.metric)
    rows = len(dist)
    clusters: dict[int, list[int]] = {}
    visited: set[int] = set()
    clustered: set[int] = set()

    def expand(p: int, neighbours: set[int], c: int) -> None:
        if p in clustered:
            raise RuntimeError(f"point {p} is already assigned to a cluster")
        members = clusters.setdefault(c, [])
        members.append(p)
        clustered.add(p)
        visited.add(p)

        i = 0
        while i < rows:
            if i in neighbours and i not in visited:
                visited.add(i)
                found = region_query(i, dist, params.eps)
                grow = len(found) >= params.min_count
                if grow:
                    neighbours |= found
                if i not in clustered:
                    members.append(i)
                    clustered.add(i)
                # After growing, the scan restarts from index 1.
                i = 1 if grow else i + 1
            else:
                i += 1

    c = 0
    for i in range(rows):
        if i in visited:
            continue
        visited.add(i)
        neighbours = region_query(i, dist, params.eps)
        if len(neighbours) < params.min_count:
            clustered |= neighbours
            continue
        c += 1
        expand(i, neighbours, c)

    return ClusterMap(
        {cid: members for cid, members in clusters.items() if len(members) >= params.min_count}
    )