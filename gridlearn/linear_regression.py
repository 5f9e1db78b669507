"""Ordinary least-squares linear regression solved by QR factorisation."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


class NotEnoughDataError(ValueError):
    """Raised when there are fewer rows than coefficients to estimate."""

    def __init__(self, message: str = "not enough rows to support this many variables.") -> None:
        super().__init__(message)


class NoTrainingDataError(RuntimeError):
    """Raised when predicting with a model that has not been fitted."""

    def __init__(self, message: str = "you need to fit() before you can predict()") -> None:
        super().__init__(message)


def _as_matrix(rows: Sequence[Sequence[float]]) -> np.ndarray:
    matrix = np.asarray(rows, dtype=float)
    if matrix.size == 0 and matrix.ndim < 2:
        matrix = matrix.reshape(0, 0)
    if matrix.ndim != 2:
        raise ValueError("features must be a sequence of equal-length rows")
    return matrix


class LinearRegression:
    """Fits ``y = intercept + coefficients · x`` by least squares."""

    def __init__(self) -> None:
        self.fitted = False
        self.intercept = 0.0
        self.coefficients: list[float] = []

    def fit(self, features: Sequence[Sequence[float]], targets: Sequence[float]) -> None:
        """Estimate the intercept and one coefficient per feature column."""
        x = _as_matrix(features)
        y = np.asarray(targets, dtype=float).ravel()
        rows, width = x.shape
        if len(y) != rows:
            raise ValueError(f"{rows} feature rows but {len(y)} targets")
        cols = width + 1
        if rows < cols:
            raise NotEnoughDataError()

        design = np.column_stack([np.ones(rows), x])
        q, r = np.linalg.qr(design)
        qty = q.T @ y

        coefs = np.zeros(cols)
        with np.errstate(divide="ignore", invalid="ignore"):
            for i in reversed(range(cols)):
                coefs[i] = (qty[i] - r[i, i + 1:] @ coefs[i + 1:]) / r[i, i]

        self.intercept = float(coefs[0])
        self.coefficients = coefs[1:].tolist()
        self.fitted = True

    def predict(self, features: Sequence[Sequence[float]]) -> list[float]:
        """Return the predicted target of each row of ``features``."""
        if not self.fitted:
            raise NoTrainingDataError()
        x = _as_matrix(features)
        if x.shape[0] == 0:
            return []
        if x.shape[1] != len(self.coefficients):
            raise ValueError(
                f"expected {len(self.coefficients)} features, got {x.shape[1]}"
            )
        return (self.intercept + x @ np.asarray(self.coefficients)).tolist()