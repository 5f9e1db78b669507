"""A bounded-use max-heap of neighbour candidates ordered by distance."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class HeapNode:
    """A candidate point: its coordinates, its distance and its source row."""

    value: tuple[float, ...]
    length: float
    src_row: int


class DistanceHeap:
    """Max-heap keyed on ``HeapNode.length``."""

    def __init__(self) -> None:
        self._tree: list[HeapNode] = []

    def __len__(self) -> int:
        return len(self._tree)

    def maximum(self) -> HeapNode:
        """Return the node with the largest distance without removing it."""
        if not self._tree:
            raise IndexError("maximum of an empty heap")
        return self._tree[0]

    def insert(self, value: Sequence[float], length: float, src_row: int) -> None:
        """Add a candidate and restore the heap order."""
        tree = self._tree
        tree.append(HeapNode(tuple(value), float(length), src_row))
        pos = len(tree) - 1
        while pos > 0:
            parent = (pos - 1) // 2
            if tree[parent].length >= tree[pos].length:
                break
            tree[parent], tree[pos] = tree[pos], tree[parent]
            pos = parent

    def extract_max(self) -> None:
        """Remove the node with the largest distance; does nothing when empty."""
        tree = self._tree
        if not tree:
            return
        last = tree.pop()
        if not tree:
            return
        tree[0] = last
        pos = 0
        size = len(tree)
        while True:
            left = 2 * pos + 1
            right = left + 1
            if left >= size:
                break
            largest = pos
            if tree[left].length > tree[pos].length:
                largest = left
            if right < size and tree[right].length > tree[largest].length:
                largest = right
            if largest == pos:
                break
            tree[largest], tree[pos] = tree[pos], tree[largest]
            pos = largest