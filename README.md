# gridlearn

A compact machine-learning toolkit built on numpy. Data is passed in as plain
sequences: feature rows as lists of floats, class labels as strings.

## What is in it

| Module | Contents |
| --- | --- |
| `gridlearn.knn` | `KNNClassifier`, `KNNRegressor`, `get_distance` |
| `gridlearn.kdtree` | `KDTree`, a kd-tree for k-nearest-neighbour search |
| `gridlearn.heap` | `DistanceHeap` and `HeapNode`, the max-heap the kd-tree search uses |
| `gridlearn.clustering` | `dbscan`, `DBSCANParameters`, `ClusterMap`, `pairwise_distances`, `region_query` |
| `gridlearn.linear_regression` | `LinearRegression`, `NotEnoughDataError`, `NoTrainingDataError` |
| `gridlearn.chimerge` | `ChiMergeFilter`, `chi_merge` and its helpers (`FrequencyTableEntry`, `build_frequency_table`, `chi_statistic`, `chi_squared_pdf`, `chi_squared_percentile`, `count_classes`, `merge_adjacent`) |
| `gridlearn.binning` | `BinningFilter`, equal-width binning |
| `gridlearn.convert` | `BinaryConvertFilter`, `FloatConvertFilter`, `Attribute`, `AttributeKind` |
| `gridlearn.confusion` | `confusion_matrix` and the metrics derived from it, `summary`, `show_confusion_matrix` |
| `gridlearn.crossfold` | `cross_fold_confusion_matrices`, `cross_validated_metric` |

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

### Nearest-neighbour classification

```python
from gridlearn.knn import KNNClassifier
from gridlearn.confusion import confusion_matrix, summary

train_x = [[1.0, 1.0], [1.2, 0.9], [5.0, 5.0], [5.1, 4.8]]
train_y = ["blue", "blue", "red", "red"]

cls = KNNClassifier("euclidean", "kdtree", 2)
cls.fit(train_x, train_y)
predicted = cls.predict([[1.1, 1.0], [4.9, 5.2]])

print(summary(confusion_matrix(["blue", "red"], predicted)))
```

The distance is `"euclidean"`, `"manhattan"` or `"cosine"`; the algorithm is
`"linear"` or `"kdtree"`. Setting `cls.weighted = True` makes each neighbour's
vote count the inverse of its distance. With `allow_optimisations` on (the
default), linear euclidean search uses a vectorised path that always votes
unweighted.

`cls.save(path)` writes a fitted classifier, its parameters and its training
data to a JSON file; `KNNClassifier.load(path)` reads it back.

`KNNRegressor("euclidean")` (or `"manhattan"`) is fitted with
`fit(values, numbers, rows, cols)`, where `numbers` fills a `rows` × `cols`
matrix, and `predict(vector, k)` returns the mean target of the `k` nearest rows.

### kd-tree search

```python
from gridlearn.kdtree import KDTree
from gridlearn.knn import get_distance

tree = KDTree()
tree.build([[2, 3], [5, 4], [4, 7], [8, 1], [7, 2], [9, 6]])
rows, distances = tree.search(3, get_distance("euclidean"), [7, 3])
# rows are training-row indices, nearest first
```

### Clustering with DBSCAN

```python
from gridlearn.clustering import DBSCANParameters, dbscan

points = [[0, 0], [0, 1], [1, 1], [10, 10], [10, 11]]
clusters = dbscan(points, DBSCANParameters(eps=1.5, min_count=2))
```

The metric defaults to euclidean distance. The result is a `ClusterMap`
(cluster id → list of point indices); clusters are numbered from 1, noise points
are left out, and clusters smaller than `min_count` are dropped.
`ClusterMap.equals(other)` returns `True` when the two clusterings are the same
up to relabelling and raises `ValueError` describing the first difference
otherwise.

### Chi-Merge discretisation

```python
from gridlearn.chimerge import ChiMergeFilter

lengths = [4.3, 4.9, 5.0, 5.5, 5.8, 6.3, 6.7, 7.1]
species = ["a", "a", "a", "b", "b", "c", "c", "c"]

filt = ChiMergeFilter(0.90)
filt.train({"sepal_length": lengths}, species)
bin_index = filt.transform("sepal_length", 5.4)
labels = filt.bin_labels("sepal_length")
```

`max_rows` defaults to the number of training rows. Columns that were not
trained pass through `transform` unchanged.

### Equal-width binning

```python
from gridlearn.binning import BinningFilter

binner = BinningFilter(10)
binner.train({"width": [2.0, 2.5, 3.1, 4.4]})
binner.transform("width", 3.0)
binner.bin_labels("width", 2)
```

### Converting attributes

```python
from gridlearn.convert import Attribute, AttributeKind, BinaryConvertFilter

colour = Attribute("colour", AttributeKind.CATEGORICAL, ("red", "green", "blue"))
filt = BinaryConvertFilter()
filt.add_attribute(colour)
filt.train()
pairs = filt.attributes_after_filtering()   # (old, new) pairs: colour_red, colour_green, colour_blue
filt.transform(colour, pairs[1][1], 1)      # 1: value index 1 is "green"
```

Categorical attributes of at most two values become a single attribute of the
same name. `FloatConvertFilter` works the same way but produces float
attributes and the values `1.0` / `0.0`.

### Linear regression

```python
from gridlearn.linear_regression import LinearRegression

lr = LinearRegression()
lr.fit([[1.0], [2.0], [3.0]], [2.0, 4.0, 6.0])
lr.predict([[4.0]])
```

`predict` before `fit` raises `NoTrainingDataError`; `fit` with fewer rows than
coefficients (features plus intercept) raises `NotEnoughDataError`.

### Evaluation

`confusion_matrix(reference, predicted)` returns a nested dict of counts.
`true_positives`, `false_positives`, `true_negatives`, `false_negatives`,
`precision`, `recall` and `f1_score` take a class and a matrix; `accuracy`,
`micro_precision`, `macro_precision`, `micro_recall` and `macro_recall` take a
matrix. `summary` and `show_confusion_matrix` render tab-aligned tables.

`cross_fold_confusion_matrices(features, labels, classifier, folds, rng)`
assigns rows to random folds and returns one confusion matrix per fold for any
object with `fit(features, labels)` and `predict(features)`;
`cross_validated_metric(matrices, metric)` returns the mean and variance of a
metric over them.

## What it does not do

There is no dataset type and no CSV or file reader: callers load their own data
and pass rows and labels in. Filters work on named columns and single values;
they do not rewrite whole datasets. There is no command-line program.