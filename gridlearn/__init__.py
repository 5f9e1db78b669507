"""Nearest neighbours, kd-trees, DBSCAN clustering, linear regression, discretisation filters and evaluation metrics."""

__version__ = "0.1.0"