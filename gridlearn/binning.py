"""Equal-width ("histogram") binning of numeric columns."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence


class BinningFilter:
    """Discretises named numeric columns into ``bins`` equal-width intervals.

    A value at the training maximum falls into bin ``bins``, so a trained column
    has ``bins + 1`` possible bin indices.
    """

    def __init__(self, bins: int) -> None:
        if bins < 1:
            raise ValueError("bins must be at least 1")
        self.bins = bins
        self._min: dict[str, float] = {}
        self._max: dict[str, float] = {}

    def train(self, columns: Mapping[str, Sequence[float]]) -> None:
        """Record the minimum and maximum of each column."""
        for name, column in columns.items():
            values = [float(v) for v in column]
            if not values:
                raise ValueError(f"column {name!r} has no values")
            self._min[name] = min(values)
            self._max[name] = max(values)

    def _delta(self, name: str) -> float:
        return (self._max[name] - self._min[name]) / self.bins

    def transform(self, name: str, value: float) -> float | int:
        """Return the bin index of ``value``; untrained columns pass through."""
        if name not in self._min:
            return value
        low = self._min[name]
        value = float(value)
        if value <= low:
            return 0
        delta = self._delta(name)
        if delta == 0:
            # A constant training column has only one bin.
            return 0
        return math.floor((value - low) / delta + 0.0001)

    def bin_labels(self, name: str, precision: int) -> list[str]:
        """Return the lower bound of each bin of column ``name`` as text.

        Bounds that format identically are listed once.
        """
        if name not in self._min:
            raise KeyError(name)
        low = self._min[name]
        delta = self._delta(name)
        labels: list[str] = []
        for i in range(self.bins + 1):
            label = f"{i * delta + low:.{precision}f}"
            if label not in labels:
                labels.append(label)
        return labels

    def __str__(self) -> str:
        return f"BinningFilter({len(self._min)} Attribute(s), {self.bins} bin(s))"