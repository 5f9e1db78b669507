"""A k-d tree for k-nearest-neighbour search under any distance function."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from itertools import takewhile

from gridlearn.heap import DistanceHeap

Distance = Callable[[Sequence[float], Sequence[float]], float]


@dataclass
class _Node:
    value: tuple[float, ...]
    src_row: int
    feature: int | None = None  # None marks a leaf
    left: _Node | None = None
    right: _Node | None = None


class KDTree:
    """k-d tree over rows of equal-length float vectors."""

    def __init__(self) -> None:
        self._root: _Node | None = None
        self._data: list[tuple[float, ...]] = []

    def build(self, data: Sequence[Sequence[float]]) -> None:
        """Build the tree from ``data``; row indices become source rows."""
        rows = [tuple(float(x) for x in row) for row in data]
        if not rows:
            raise ValueError("no input data")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("amounts of features are not the same")
        self._data = rows
        if len(rows) == 1:
            self._root = self._leaf(0)
        else:
            self._root = self._build(list(range(len(rows))), 0)

    def _leaf(self, index: int) -> _Node:
        return _Node(self._data[index], index)

    def _build(self, indices: list[int], feature: int) -> _Node:
        data = self._data
        indices = sorted(indices, key=lambda i: data[i][feature])
        middle = len(indices) // 2
        pivot = data[indices[middle]][feature]
        div = middle + sum(
            1 for _ in takewhile(lambda i: data[i][feature] == pivot, indices[middle + 1:])
        )
        next_feature = (feature + 1) % len(data[indices[0]])

        node = _Node(data[indices[div]], indices[div], feature)
        if div == 1:
            node.left = self._leaf(indices[0])
        else:
            node.left = self._build(indices[:div], next_feature)

        rest = indices[div + 1:]
        if len(rest) == 1:
            node.right = self._leaf(rest[0])
        elif rest:
            node.right = self._build(rest, next_feature)
        return node

    def search(
        self, k: int, distance: Distance, target: Sequence[float]
    ) -> tuple[list[int], list[float]]:
        """Return the source rows and distances of the ``k`` nearest rows, nearest first."""
        if k > len(self._data):
            raise ValueError("k is larger than the amount of training data")
        if k < 1:
            raise ValueError("k must be at least 1")
        point = tuple(float(x) for x in target)
        if len(point) != len(self._data[0]):
            raise ValueError("amount of features is not equal")

        heap = DistanceHeap()
        self._search(k, distance, point, heap, self._root)

        rows: list[int] = []
        lengths: list[float] = []
        while heap:
            best = heap.maximum()
            rows.append(best.src_row)
            lengths.append(best.length)
            heap.extract_max()
        rows.reverse()
        lengths.reverse()
        return rows, lengths

    def _search(
        self,
        k: int,
        distance: Distance,
        target: tuple[float, ...],
        heap: DistanceHeap,
        node: _Node | None,
    ) -> None:
        if node is None:
            return
        if node.feature is None:
            heap.insert(node.value, distance(target, node.value), node.src_row)
            return

        f = node.feature
        if target[f] <= node.value[f]:
            near, far = node.left, node.right
        else:
            near, far = node.right, node.left
        self._search(k, distance, target, heap, near)

        length = distance(target, node.value)
        if k > len(heap):
            heap.insert(node.value, length, node.src_row)
            self._search_all(k, distance, target, heap, far)
        elif heap.maximum().length > length:
            heap.extract_max()
            heap.insert(node.value, length, node.src_row)
            self._search_all(k, distance, target, heap, far)
        elif heap.maximum().length > distance((target[f],), (node.value[f],)):
            self._search_all(k, distance, target, heap, far)

    def _search_all(
        self,
        k: int,
        distance: Distance,
        target: tuple[float, ...],
        heap: DistanceHeap,
        node: _Node | None,
    ) -> None:
        if node is None:
            return
        length = distance(target, node.value)
        if k > len(heap):
            heap.insert(node.value, length, node.src_row)
        elif heap.maximum().length > length:
            heap.extract_max()
            heap.insert(node.value, length, node.src_row)
        self._search_all(k, distance, target, heap, node.left)
        self._search_all(k, distance, target, heap, node.right)