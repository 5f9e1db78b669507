"""ChiMerge supervised discretisation of numeric columns."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field


@dataclass
class FrequencyTableEntry:
    """A distinct value and the number of times each class was seen with it."""

    value: float
    frequency: dict[str, int] = field(default_factory=dict)

    def __str__(self) -> str:
        counts = " ".join(f"{k}:{v}" for k, v in sorted(self.frequency.items()))
        return f"{self.value:.2f} map[{counts}]"


def _pow(x: float, y: float) -> float:
    if x == 0 and y < 0:
        return math.inf
    try:
        return math.pow(x, y)
    except OverflowError:
        return math.inf


def _gamma(z: float) -> float:
    if z == 0:
        return math.copysign(math.inf, z)
    try:
        return math.gamma(z)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan


def build_frequency_table(
    values: Iterable[float], classes: Iterable[str]
) -> list[FrequencyTableEntry]:
    """Tabulate class counts per distinct value, in order of first appearance."""
    values = list(values)
    classes = list(classes)
    if len(values) != len(classes):
        raise ValueError(f"{len(values)} values but {len(classes)} classes")
    table: list[FrequencyTableEntry] = []
    index: dict[float, FrequencyTableEntry] = {}
    for value, cls in zip(values, classes):
        value = float(value)
        entry = None if math.isnan(value) else index.get(value)
        if entry is None:
            entry = FrequencyTableEntry(value, {cls: 1})
            table.append(entry)
            if not math.isnan(value):
                index[value] = entry
        else:
            entry.frequency[cls] = entry.frequency.get(cls, 0) + 1
    return table


def chi_squared_pdf(k: float, x: float) -> float:
    """Density of the chi-squared distribution with ``k`` degrees of freedom."""
    if x < 0:
        return 0.0
    top = _pow(x, k / 2 - 1) * math.exp(-x / 2)
    bottom = _pow(2, k / 2) * _gamma(k / 2)
    return top / bottom


def chi_squared_percentile(k: int, x: float) -> float:
    """Cumulative chi-squared probability up to ``x`` by Boole's-rule integration."""
    steps = 32
    intervals = 4 * steps
    w = x / (4.0 * steps)
    values = [chi_squared_pdf(float(k), w * i) for i in range(intervals + 1)]

    ret1 = values[0] + values[-1]
    ret2 = sum(values[2:intervals - 1:4])
    ret3 = sum(values[4:intervals - 3:4])
    ret4 = sum(values[1:intervals:2])
    return (2.0 * w / 45) * (7 * ret1 + 12 * ret2 + 14 * ret3 + 32 * ret4)


def count_classes(entries: Iterable[FrequencyTableEntry]) -> dict[str, int]:
    """Total the class counts over all entries."""
    counter: dict[str, int] = {}
    for entry in entries:
        for cls, count in entry.frequency.items():
            counter[cls] = counter.get(cls, 0) + count
    return counter


def chi_statistic(entry1: FrequencyTableEntry, entry2: FrequencyTableEntry) -> float:
    """Chi-squared statistic of the class distributions of two adjacent entries."""
    class_counter = count_classes((entry1, entry2))
    observations1 = sum(entry1.frequency.values())
    observations2 = sum(entry2.frequency.values())
    total = observations1 + observations2

    chi_sum = 0.0
    for entry, observations in ((entry1, observations1), (entry2, observations2)):
        for cls, count in class_counter.items():
            expected = float(count) * observations / total
            numerator = (float(entry.frequency.get(cls, 0)) - expected) ** 2
            chi_sum += numerator / max(expected, 0.5)
    return chi_sum


def merge_adjacent(
    table: Sequence[FrequencyTableEntry], index: int
) -> list[FrequencyTableEntry]:
    """Merge entries ``index`` and ``index + 1``, keeping the lower value."""
    if not 0 <= index < len(table) - 1:
        raise IndexError(f"cannot merge entry {index} of a table of {len(table)}")
    first, second = table[index], table[index + 1]
    merged = FrequencyTableEntry(first.value, count_classes((first, second)))
    return [*table[:index], merged, *table[index + 2:]]


def chi_merge(
    values: Iterable[float],
    classes: Iterable[str],
    significance: float,
    min_rows: int,
    max_rows: int,
) -> list[FrequencyTableEntry]:
    """Merge adjacent intervals of sorted ``values`` while they are not significantly different.

    Merging continues while the table has more than ``max_rows`` entries or the
    smallest statistic's percentile is below ``significance``, and stops at
    ``min_rows`` entries.
    """
    if not 2 <= min_rows:
        min_rows = 2
    if not min_rows < max_rows:
        max_rows = min_rows + 1
    if significance == 0:
        significance = 10

    freq = build_frequency_table(values, classes)
    degrees_of_freedom = len(count_classes(freq)) - 1
    while len(freq) > min_rows:
        min_chi = math.inf
        min_indexes: list[int] = []
        for i, (left, right) in enumerate(zip(freq, freq[1:])):
            chi = chi_statistic(left, right)
            if chi < min_chi:
                min_chi = chi
                min_indexes = []
            if chi == min_chi:
                min_indexes.append(i)

        merge = len(freq) > max_rows
        if chi_squared_percentile(degrees_of_freedom, min_chi) < significance:
            merge = True
        if not merge or not min_indexes:
            break
        for shift, index in enumerate(min_indexes):
            freq = merge_adjacent(freq, index - shift)
    return freq


class ChiMergeFilter:
    """Discretises named numeric columns into ChiMerge intervals."""

    def __init__(self, significance: float, max_rows: int | None = None) -> None:
        self.significance = significance
        self.min_rows = 2
        self.max_rows = max_rows
        self._tables: dict[str, list[FrequencyTableEntry]] = {}

    def train(self, columns: Mapping[str, Sequence[float]], classes: Sequence[str]) -> None:
        """Compute the interval table of each column against ``classes``."""
        classes = list(classes)
        max_rows = self.max_rows if self.max_rows is not None else len(classes)
        for name, column in columns.items():
            pairs = sorted(zip(column, classes, strict=True), key=lambda p: p[0])
            self._tables[name] = chi_merge(
                (v for v, _ in pairs),
                (c for _, c in pairs),
                self.significance,
                self.min_rows,
                max_rows,
            )

    def transform(self, name: str, value: float) -> float | int:
        """Return the interval index of ``value``; untrained columns pass through."""
        table = self._tables.get(name)
        if table is None:
            return value
        position = 0
        for j, entry in enumerate(table):
            if entry.value < value:
                position = j
                continue
            break
        return position

    def bin_labels(self, name: str) -> list[str]:
        """Return the lower bound of each interval of column ``name`` as text."""
        return [f"{entry.value:f}" for entry in self._tables[name]]

    def __str__(self) -> str:
        return (
            f"ChiMergeFilter({len(self._tables)} Attributes, "
            f"{self.significance:.2f} Significance)"
        )