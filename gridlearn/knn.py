"""k-nearest-neighbour classification and regression."""

from __future__ import annotations

import json
import math
import os
from collections.abc import Callable, Sequence

import numpy as np

from gridlearn.kdtree import KDTree

Distance = Callable[[Sequence[float], Sequence[float]], float]

_ALGORITHMS = ("linear", "kdtree")
_FORMAT_VERSION = 1
_CLASSIFIER_NAME = "KNN"
_CLASSIFIER_VERSION = "1.0"


def _euclidean(a: Sequence[float], b: Sequence[float]) -> float:
    return math.dist(a, b)


def _manhattan(a: Sequence[float], b: Sequence[float]) -> float:
    return float(sum(abs(x - y) for x, y in zip(a, b, strict=True)))


def _cosine(a: Sequence[float], b: Sequence[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b, strict=True))
    norms = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    if norms == 0:
        return 1.0
    return 1.0 - dot / norms


_DISTANCES: dict[str, Distance] = {
    "euclidean": _euclidean,
    "manhattan": _manhattan,
    "cosine": _cosine,
}


def get_distance(name: str) -> Distance:
    """Return the distance function called ``name``: euclidean, manhattan or cosine."""
    try:
        return _DISTANCES[name]
    except KeyError:
        raise ValueError(f"unsupported distance function: {name!r}") from None


def _inverse(length: float) -> float:
    return math.inf if length == 0 else 1.0 / length


def _as_matrix(rows: Sequence[Sequence[float]], width: int | None = None) -> np.ndarray:
    matrix = np.asarray(rows, dtype=float)
    if matrix.size == 0 and matrix.ndim < 2:
        matrix = matrix.reshape(0, width or 0)
    if matrix.ndim != 2:
        raise ValueError("features must be a sequence of equal-length rows")
    return matrix


class KNNClassifier:
    """Classifies rows by a vote among their nearest training rows.

    ``distance`` is one of euclidean, manhattan or cosine; ``algorithm`` is
    linear or kdtree.  With ``weighted`` set, each neighbour's vote counts the
    inverse of its distance.  Linear euclidean search takes a vectorised path
    when ``allow_optimisations`` is set; that path always votes unweighted.
    """

    def __init__(self, distance: str, algorithm: str, neighbours: int) -> None:
        self.distance = distance
        self.algorithm = algorithm
        self.neighbours = neighbours
        self.weighted = False
        self.allow_optimisations = True
        self._features: np.ndarray | None = None
        self._labels: list[str] = []

    def fit(self, features: Sequence[Sequence[float]], labels: Sequence[str]) -> None:
        """Store the training rows and their labels."""
        matrix = _as_matrix(features)
        labels = [str(label) for label in labels]
        if len(labels) != matrix.shape[0]:
            raise ValueError(f"{matrix.shape[0]} feature rows but {len(labels)} labels")
        self._features = matrix
        self._labels = labels

    def predict(self, features: Sequence[Sequence[float]]) -> list[str]:
        """Return the predicted label of each row of ``features``."""
        distance = get_distance(self.distance)
        if self.algorithm not in _ALGORITHMS:
            raise ValueError(f"unsupported searching algorithm: {self.algorithm!r}")
        if self._features is None:
            raise RuntimeError("fit() must be called before predict()")
        train = self._features
        query = _as_matrix(features, train.shape[1])
        if query.shape[1] != train.shape[1]:
            raise ValueError("attributes not compatible")
        k = self.neighbours
        if not 1 <= k <= train.shape[0]:
            raise ValueError(
                f"cannot use {k} neighbours with {train.shape[0]} training rows"
            )

        if (
            self.algorithm == "linear"
            and self.allow_optimisations
            and self.distance == "euclidean"
        ):
            return self._predict_optimised(query)

        if self.algorithm == "kdtree":
            tree = KDTree()
            tree.build(train.tolist())
            searches = (tree.search(k, distance, row) for row in query.tolist())
        else:
            train_rows = train.tolist()
            searches = (self._linear_search(k, distance, row, train_rows) for row in query.tolist())

        vote = self._weighted_vote if self.weighted else (lambda rows, _: self._vote(rows))
        return [vote(rows, lengths) for rows, lengths in searches]

    @staticmethod
    def _linear_search(
        k: int, distance: Distance, row: list[float], train_rows: list[list[float]]
    ) -> tuple[list[int], list[float]]:
        distances = [distance(row, t) for t in train_rows]
        nearest = sorted(range(len(distances)), key=distances.__getitem__)[:k]
        return nearest, [distances[i] for i in nearest]

    def _predict_optimised(self, query: np.ndarray) -> list[str]:
        train = self._features
        assert train is not None
        k = self.neighbours
        predictions = []
        for row in query:
            squared = ((train - row) ** 2).sum(axis=1)
            nearest = np.argsort(squared, kind="stable")[:k]
            predictions.append(self._vote(nearest.tolist()))
        return predictions

    def _vote(self, rows: Sequence[int]) -> str:
        counts: dict[str, int] = {}
        for row in rows:
            label = self._labels[row]
            counts[label] = counts.get(label, 0) + 1
        return max(counts, key=counts.__getitem__)

    def _weighted_vote(self, rows: Sequence[int], lengths: Sequence[float]) -> str:
        scores: dict[str, float] = {}
        for row, length in zip(rows, lengths):
            label = self._labels[row]
            scores[label] = scores.get(label, 0.0) + _inverse(length)
        return max(scores, key=scores.__getitem__)

    def __str__(self) -> str:
        return f"KNNClassifier({self.distance}, {self.neighbours})"

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the parameters and training data to ``path`` as JSON."""
        if self._features is None:
            raise RuntimeError("fit() must be called before save()")
        document = {
            "format_version": _FORMAT_VERSION,
            "classifier_name": _CLASSIFIER_NAME,
            "classifier_version": _CLASSIFIER_VERSION,
            "classifier_metadata": {
                "distance_func": self.distance,
                "algorithm": self.algorithm,
                "neighbours": self.neighbours,
                "weighted": self.weighted,
                "allow_optimizations": self.allow_optimisations,
            },
            "training": {
                "features": self._features.tolist(),
                "labels": self._labels,
            },
        }
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(document, fh)

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> KNNClassifier:
        """Read a classifier written by :meth:`save`."""
        with open(path, encoding="utf-8") as fh:
            document = json.load(fh)
        if document.get("classifier_name") != _CLASSIFIER_NAME:
            raise ValueError("this file doesn't contain a KNN classifier")
        if document.get("classifier_version") != _CLASSIFIER_VERSION:
            raise ValueError("can't understand this file format")
        metadata = document["classifier_metadata"]
        classifier = cls(
            str(metadata["distance_func"]),
            str(metadata["algorithm"]),
            int(metadata["neighbours"]),
        )
        classifier.weighted = bool(metadata["weighted"])
        classifier.allow_optimisations = bool(metadata["allow_optimizations"])
        training = document["training"]
        classifier.fit(training["features"], training["labels"])
        return classifier


class KNNRegressor:
    """Predicts the mean target value of the nearest training rows."""

    def __init__(self, distance: str) -> None:
        self.distance = distance
        self.values: list[float] = []
        self._data: np.ndarray | None = None

    def fit(
        self, values: Sequence[float], numbers: Sequence[float], rows: int, cols: int
    ) -> None:
        """Store ``numbers`` as a ``rows`` by ``cols`` matrix with one target per row."""
        if rows != len(values):
            raise ValueError(f"{rows} rows but {len(values)} values")
        flat = np.asarray(numbers, dtype=float).ravel()
        if flat.size != rows * cols:
            raise ValueError(f"{flat.size} numbers do not fill a {rows}x{cols} matrix")
        self._data = flat.reshape(rows, cols)
        self.values = [float(v) for v in values]

    def predict(self, vector: Sequence[float], k: int) -> float:
        """Return the average target of the ``k`` rows nearest ``vector``."""
        if self.distance not in ("euclidean", "manhattan"):
            raise ValueError(f"unsupported distance function: {self.distance!r}")
        if self._data is None:
            raise RuntimeError("fit() must be called before predict()")
        distance = get_distance(self.distance)
        point = [float(x) for x in np.asarray(vector, dtype=float).ravel()]
        distances = [distance(row, point) for row in self._data.tolist()]
        if not 1 <= k <= len(distances):
            raise ValueError(f"cannot use {k} neighbours with {len(distances)} rows")
        nearest = sorted(range(len(distances)), key=distances.__getitem__)[:k]
        return sum(self.values[i] for i in nearest) / k