"""Cross-fold validation producing one confusion matrix per fold."""

from __future__ import annotations

import math
import random
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from gridlearn.confusion import ConfusionMatrix, confusion_matrix


class _Classifier(Protocol):
    def fit(self, features: Sequence[Any], labels: Sequence[str]) -> Any: ...

    def predict(self, features: Sequence[Any]) -> Sequence[str]: ...


def cross_validated_metric(
    matrices: Sequence[ConfusionMatrix], metric: Callable[[ConfusionMatrix], float]
) -> tuple[float, float]:
    """Return the mean and population variance of ``metric`` over ``matrices``."""
    scores = [metric(m) for m in matrices]
    if not scores:
        return math.nan, math.nan
    mean = sum(scores) / len(scores)
    variance = sum((s - mean) * (s - mean) for s in scores) / len(scores)
    return mean, variance


def cross_fold_confusion_matrices(
    features: Sequence[Any],
    labels: Sequence[str],
    classifier: _Classifier,
    folds: int,
    rng: random.Random | None = None,
) -> list[ConfusionMatrix]:
    """Assign rows to random folds, then train on all but one fold and test on it.

    Returns one confusion matrix per fold, in fold order.
    """
    features = list(features)
    labels = list(labels)
    if len(features) != len(labels):
        raise ValueError(
            f"{len(features)} feature rows but {len(labels)} labels"
        )
    if folds < 1:
        raise ValueError("folds must be at least 1")
    rng = rng if rng is not None else random.Random()

    members: list[list[int]] = [[] for _ in range(folds)]
    for row in range(len(features)):
        members[rng.randrange(folds)].append(row)

    matrices: list[ConfusionMatrix] = []
    for test_fold, test_rows in enumerate(members):
        train_rows = [
            row for fold, rows in enumerate(members) if fold != test_fold for row in rows
        ]
        classifier.fit([features[r] for r in train_rows], [labels[r] for r in train_rows])
        predicted = list(classifier.predict([features[r] for r in test_rows]))
        matrices.append(confusion_matrix([labels[r] for r in test_rows], predicted))
    return matrices