import math

import pytest

from gridlearn.knn import KNNClassifier, KNNRegressor, get_distance

TRAIN = [
    [1.0, 1.0],
    [1.2, 0.9],
    [0.8, 1.1],
    [5.0, 5.0],
    [5.2, 4.8],
    [4.9, 5.1],
]
TRAIN_LABELS = ["blue", "blue", "blue", "red", "red", "red"]
TEST = [[1.1, 1.0], [5.0, 4.9]]

WIDE_TRAIN = [
    [5.1, 3.5, 1.4, 0.2],
    [4.9, 3.0, 1.4, 0.2],
    [4.7, 3.2, 1.3, 0.2],
    [7.0, 3.2, 4.7, 1.4],
    [6.4, 3.2, 4.5, 1.5],
    [6.9, 3.1, 4.9, 1.5],
    [6.3, 3.3, 6.0, 2.5],
    [5.8, 2.7, 5.1, 1.9],
    [7.1, 3.0, 5.9, 2.1],
]
WIDE_LABELS = ["a", "a", "a", "b", "b", "b", "c", "c", "c"]
WIDE_TEST = [[5.0, 3.4, 1.5, 0.2], [6.7, 3.1, 4.4, 1.4], [6.5, 3.0, 5.8, 2.2]]


def make(algorithm, weighted=False, optimise=False, neighbours=2):
    cls = KNNClassifier("euclidean", algorithm, neighbours)
    cls.weighted = weighted
    cls.allow_optimisations = optimise
    cls.fit(TRAIN, TRAIN_LABELS)
    return cls


@pytest.mark.parametrize(
    "algorithm,weighted,optimise",
    [
        ("linear", False, False),
        ("linear", False, True),
        ("kdtree", False, False),
        ("linear", True, False),
        ("kdtree", True, False),
    ],
)
def test_predicts_blue_then_red(algorithm, weighted, optimise):
    predictions = make(algorithm, weighted, optimise).predict(TEST)
    assert predictions == ["blue", "red"]


@pytest.mark.parametrize("algorithm", ["linear", "kdtree"])
@pytest.mark.parametrize("weighted", [False, True])
def test_templated_instances(algorithm, weighted):
    cls = KNNClassifier("euclidean", algorithm, 2)
    cls.weighted = weighted
    cls.fit(WIDE_TRAIN, WIDE_LABELS)
    predictions = cls.predict(WIDE_TEST)
    assert len(predictions) == len(WIDE_TEST)
    assert set(predictions) <= set(WIDE_LABELS)
    subset = cls.predict(WIDE_TEST[:1])
    assert subset == predictions[:1]


def test_string_form():
    assert str(KNNClassifier("euclidean", "linear", 2)) == "KNNClassifier(euclidean, 2)"
    assert str(KNNClassifier("manhattan", "kdtree", 3)) == "KNNClassifier(manhattan, 3)"


def test_save_and_reload(tmp_path):
    cls = make("linear")
    predictions = cls.predict(TEST)
    path = tmp_path / "temp.cls"
    cls.save(path)
    reloaded = KNNClassifier.load(path)
    assert str(reloaded) == str(cls)
    assert reloaded.allow_optimisations is False
    assert reloaded.predict(TEST) == predictions


def test_load_rejects_other_classifier(tmp_path):
    path = tmp_path / "other.cls"
    path.write_text('{"classifier_name": "LinearSVC", "classifier_version": "1.0"}')
    with pytest.raises(ValueError):
        KNNClassifier.load(path)


WEIGHT_TRAIN = [[0.1, 0.0], [3.0, 0.0], [0.0, 3.0], [10.0, 10.0]]
WEIGHT_LABELS = ["blue", "red", "red", "blue"]


@pytest.mark.parametrize("algorithm", ["linear", "kdtree"])
def test_weighting_changes_vote(algorithm):
    cls = KNNClassifier("euclidean", algorithm, 3)
    cls.allow_optimisations = False
    cls.fit(WEIGHT_TRAIN, WEIGHT_LABELS)
    assert cls.predict([[0.0, 0.0]]) == ["red"]
    cls.weighted = True
    assert cls.predict([[0.0, 0.0]]) == ["blue"]


def test_optimised_path_votes_unweighted():
    cls = KNNClassifier("euclidean", "linear", 3)
    cls.weighted = True
    cls.fit(WEIGHT_TRAIN, WEIGHT_LABELS)
    assert cls.predict([[0.0, 0.0]]) == ["red"]


def test_manhattan_linear():
    cls = KNNClassifier("manhattan", "linear", 1)
    cls.fit(TRAIN, TRAIN_LABELS)
    assert cls.predict(TEST) == ["blue", "red"]


def test_unsupported_distance():
    cls = KNNClassifier("chebyshev", "linear", 2)
    cls.fit(TRAIN, TRAIN_LABELS)
    with pytest.raises(ValueError, match="distance"):
        cls.predict(TEST)


def test_unsupported_algorithm():
    cls = KNNClassifier("euclidean", "balltree", 2)
    cls.fit(TRAIN, TRAIN_LABELS)
    with pytest.raises(ValueError, match="algorithm"):
        cls.predict(TEST)


def test_incompatible_attributes():
    cls = make("linear")
    with pytest.raises(ValueError, match="compatible"):
        cls.predict([[1.0, 2.0, 3.0]])


def test_too_many_neighbours():
    cls = make("kdtree", neighbours=10)
    with pytest.raises(ValueError):
        cls.predict(TEST)


def test_predict_before_fit():
    with pytest.raises(RuntimeError):
        KNNClassifier("euclidean", "linear", 2).predict(TEST)


def test_distance_functions():
    assert get_distance("euclidean")((0.0, 0.0), (3.0, 4.0)) == pytest.approx(5.0)
    assert get_distance("manhattan")((0.0, 0.0), (3.0, 4.0)) == pytest.approx(7.0)
    assert get_distance("cosine")((1.0, 2.0), (2.0, 4.0)) == pytest.approx(0.0)
    assert get_distance("cosine")((1.0, 0.0), (0.0, 1.0)) == pytest.approx(1.0)
    with pytest.raises(ValueError):
        get_distance("hamming")


def test_regressor_average():
    reg = KNNRegressor("euclidean")
    reg.fit([1.0, 2.0, 3.0, 10.0], [0, 0, 1, 0, 0, 1, 10, 10], 4, 2)
    assert reg.predict([0.1, 0.1], 1) == pytest.approx(1.0)
    assert reg.predict([0.1, 0.1], 3) == pytest.approx(2.0)
    assert reg.predict([9.0, 9.0], 1) == pytest.approx(10.0)


def test_regressor_shape_mismatch():
    reg = KNNRegressor("euclidean")
    with pytest.raises(ValueError):
        reg.fit([1.0, 2.0], [0, 0, 1, 1, 2, 2], 3, 2)


def test_regressor_unsupported_distance():
    reg = KNNRegressor("cosine")
    reg.fit([1.0], [0.0, 0.0], 1, 2)
    with pytest.raises(ValueError):
        reg.predict([1.0, 1.0], 1)


def test_regressor_manhattan():
    reg = KNNRegressor("manhattan")
    reg.fit([4.0, 8.0], [0, 0, 5, 5], 2, 2)
    result = reg.predict([4.0, 4.0], 2)
    assert math.isclose(result, 6.0)