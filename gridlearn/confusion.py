"""Confusion matrices and the classification metrics derived from them."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence

ConfusionMatrix = dict[str, dict[str, int]]

_TAB_WIDTH = 8


def _div(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics: x/0 gives an infinity, 0/0 gives NaN."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _fmt(value: float, digits: int) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:.{digits}f}"


def _tabulate(lines: Sequence[Sequence[str]]) -> str:
    """Align tab-terminated cells into columns padded with tabs.

    Every cell of a line except the last is terminated by a tab; each column is
    padded to its widest cell rounded up to a multiple of the tab width.
    """
    widths: dict[int, int] = {}
    for line in lines:
        for j, cell in enumerate(line[:-1]):
            widths[j] = max(widths.get(j, 0), len(cell))

    out: list[str] = []
    for line in lines:
        parts: list[str] = []
        for j, cell in enumerate(line):
            parts.append(cell)
            if j < len(line) - 1:
                cell_width = -(-widths[j] // _TAB_WIDTH) * _TAB_WIDTH
                padding = cell_width - len(cell)
                parts.append("\t" * -(-padding // _TAB_WIDTH))
        out.append("".join(parts) + "\n")
    return "".join(out)


def confusion_matrix(reference: Iterable[str], predicted: Iterable[str]) -> ConfusionMatrix:
    """Count how often each reference class was predicted as each class."""
    ref = list(reference)
    gen = list(predicted)
    if len(ref) != len(gen):
        raise ValueError(
            f"Row count mismatch: ref has {len(ref)} rows, gen has {len(gen)} rows"
        )
    matrix: ConfusionMatrix = {}
    for actual, guess in zip(ref, gen):
        row = matrix.setdefault(actual, {})
        row[guess] = row.get(guess, 0) + 1
    return matrix


def true_positives(cls: str, matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Number of entries of class ``cls`` predicted as ``cls``."""
    return float(matrix.get(cls, {}).get(cls, 0))


def false_positives(cls: str, matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Number of entries of other classes predicted as ``cls``."""
    return float(sum(row.get(cls, 0) for actual, row in matrix.items() if actual != cls))


def false_negatives(cls: str, matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Number of entries of class ``cls`` predicted as something else."""
    row = matrix.get(cls, {})
    return float(sum(count for guess, count in row.items() if guess != cls))


def true_negatives(cls: str, matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Number of entries of other classes not predicted as ``cls``."""
    return float(
        sum(
            count
            for actual, row in matrix.items()
            if actual != cls
            for guess, count in row.items()
            if guess != cls
        )
    )


def precision(cls: str, matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Fraction of predictions of ``cls`` that were correct."""
    tp = true_positives(cls, matrix)
    return _div(tp, tp + false_positives(cls, matrix))


def recall(cls: str, matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Fraction of entries of ``cls`` that were predicted as ``cls``."""
    tp = true_positives(cls, matrix)
    return _div(tp, tp + false_negatives(cls, matrix))


def f1_score(cls: str, matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Harmonic mean of precision and recall for ``cls``."""
    p = precision(cls, matrix)
    r = recall(cls, matrix)
    return _div(2 * (p * r), p + r)


def accuracy(matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Fraction of all entries that were classified correctly."""
    correct = sum(row.get(actual, 0) for actual, row in matrix.items())
    total = sum(sum(row.values()) for row in matrix.values())
    return _div(float(correct), float(total))


def micro_precision(matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Precision from the true and false positives summed over all classes."""
    tp = sum(true_positives(k, matrix) for k in matrix)
    fp = sum(false_positives(k, matrix) for k in matrix)
    return _div(tp, tp + fp)


def macro_precision(matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Mean of the per-class precisions."""
    return _div(sum(precision(k, matrix) for k in matrix), float(len(matrix)))


def micro_recall(matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Recall from the true positives and false negatives summed over all classes."""
    tp = sum(true_positives(k, matrix) for k in matrix)
    fn = sum(false_negatives(k, matrix) for k in matrix)
    return _div(tp, tp + fn)


def macro_recall(matrix: Mapping[str, Mapping[str, int]]) -> float:
    """Mean of the per-class recalls."""
    return _div(sum(recall(k, matrix) for k in matrix), float(len(matrix)))


def summary(matrix: Mapping[str, Mapping[str, int]]) -> str:
    """Return a per-class table of metrics followed by the overall accuracy."""
    lines: list[list[str]] = [
        ["Reference Class", "True Positives", "False Positives", "True Negatives",
         "Precision", "Recall", "F1 Score"],
        ["---------------", "--------------", "---------------", "--------------",
         "---------", "------", "--------"],
    ]
    for k in matrix:
        lines.append([
            k,
            _fmt(true_positives(k, matrix), 0),
            _fmt(false_positives(k, matrix), 0),
            _fmt(true_negatives(k, matrix), 0),
            _fmt(precision(k, matrix), 4),
            _fmt(recall(k, matrix), 4),
            _fmt(f1_score(k, matrix), 4),
        ])
    return _tabulate(lines) + f"Overall accuracy: {_fmt(accuracy(matrix), 4)}\n"


def show_confusion_matrix(matrix: Mapping[str, Mapping[str, int]]) -> str:
    """Return the matrix as an aligned table, reference classes as rows."""
    classes = list(matrix)
    lines: list[list[str]] = [
        ["Reference Class", *classes, ""],
        ["---------------", *("-" * len(k) for k in classes), ""],
    ]
    for actual in classes:
        row = matrix[actual]
        lines.append([actual, *(str(row.get(guess, 0)) for guess in classes), ""])
    return _tabulate(lines)