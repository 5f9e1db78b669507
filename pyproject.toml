[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gridlearn"
version = "0.1.0"
description = "Small machine-learning toolkit: k-nearest neighbours, kd-trees, DBSCAN, linear regression, discretisation filters and evaluation metrics."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "machine-learning",
    "knn",
    "kdtree",
    "dbscan",
    "chimerge",
    "binning",
    "discretisation",
    "linear-regression",
    "confusion-matrix",
    "cross-validation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gridlearn"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
