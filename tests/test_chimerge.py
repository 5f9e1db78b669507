import pytest

from gridlearn.chimerge import (
    ChiMergeFilter,
    FrequencyTableEntry,
    build_frequency_table,
    chi_merge,
    chi_squared_pdf,
    chi_squared_percentile,
    chi_statistic,
    count_classes,
    merge_adjacent,
)

SETOSA = [
    5.1, 4.9, 4.7, 4.6, 5.0, 5.4, 4.6, 5.0, 4.4, 4.9, 5.4, 4.8, 4.8, 4.3, 5.8, 5.7, 5.4,
    5.1, 5.7, 5.1, 5.4, 5.1, 4.6, 5.1, 4.8, 5.0, 5.0, 5.2, 5.2, 4.7, 4.8, 5.4, 5.2, 5.5,
    4.9, 5.0, 5.5, 4.9, 4.4, 5.1, 5.0, 4.5, 4.4, 5.0, 5.1, 4.8, 5.1, 4.6, 5.3, 5.0,
]
VERSICOLOR = [
    7.0, 6.4, 6.9, 5.5, 6.5, 5.7, 6.3, 4.9, 6.6, 5.2, 5.0, 5.9, 6.0, 6.1, 5.6, 6.7, 5.6,
    5.8, 6.2, 5.6, 5.9, 6.1, 6.3, 6.1, 6.4, 6.6, 6.8, 6.7, 6.0, 5.7, 5.5, 5.5, 5.8, 6.0,
    5.4, 6.0, 6.7, 6.3, 5.6, 5.5, 5.5, 6.1, 5.8, 5.0, 5.6, 5.7, 5.7, 6.2, 5.1, 5.7,
]
VIRGINICA = [
    6.3, 5.8, 7.1, 6.3, 6.5, 7.6, 4.9, 7.3, 6.7, 7.2, 6.5, 6.4, 6.8, 5.7, 5.8, 6.4, 6.5,
    7.7, 7.7, 6.0, 6.9, 5.6, 7.7, 6.3, 6.7, 7.2, 6.2, 6.1, 6.4, 7.2, 7.4, 7.9, 6.4, 6.3,
    6.1, 7.7, 6.3, 6.4, 6.0, 6.9, 6.7, 6.9, 5.8, 6.8, 6.7, 6.7, 6.3, 6.5, 6.2, 5.9,
]
SEPAL_LENGTH = SETOSA + VERSICOLOR + VIRGINICA
SPECIES = (
    ["Iris-setosa"] * 50 + ["Iris-versicolor"] * 50 + ["Iris-virginica"] * 50
)


def test_chi_squared_percentiles():
    assert chi_squared_percentile(2, 4.61) == pytest.approx(0.9, abs=0.001)
    assert chi_squared_percentile(3, 7.82) == pytest.approx(0.95, abs=0.001)
    assert chi_squared_percentile(4, 13.28) == pytest.approx(0.99, abs=0.001)


def test_chi_squared_pdf_negative_is_zero():
    assert chi_squared_pdf(2, -1.0) == 0.0


def test_frequency_table_counts():
    table = build_frequency_table([1.0, 1.0, 2.0, 1.0], ["a", "b", "a", "a"])
    assert [e.value for e in table] == [1.0, 2.0]
    assert table[0].frequency == {"a": 2, "b": 1}
    assert table[1].frequency == {"a": 1}


def test_frequency_table_length_mismatch():
    with pytest.raises(ValueError):
        build_frequency_table([1.0], ["a", "b"])


def test_count_classes():
    table = build_frequency_table([1.0, 2.0, 3.0, 3.0], ["a", "b", "a", "c"])
    assert count_classes(table) == {"a": 2, "b": 1, "c": 1}


def test_chi_statistic_of_disjoint_classes():
    assert chi_statistic(
        FrequencyTableEntry(1.0, {"a": 1}), FrequencyTableEntry(2.0, {"b": 1})
    ) == pytest.approx(2.0)


def test_chi_statistic_of_identical_distributions_is_zero():
    assert chi_statistic(
        FrequencyTableEntry(1.0, {"a": 2, "b": 3}), FrequencyTableEntry(2.0, {"a": 2, "b": 3})
    ) == pytest.approx(0.0)


def test_merge_adjacent_keeps_lower_value():
    table = [
        FrequencyTableEntry(1.0, {"a": 1}),
        FrequencyTableEntry(2.0, {"a": 2, "b": 1}),
        FrequencyTableEntry(3.0, {"b": 4}),
    ]
    merged = merge_adjacent(table, 1)
    assert [e.value for e in merged] == [1.0, 2.0]
    assert merged[1].frequency == {"a": 2, "b": 5}
    assert len(table) == 3


def test_merge_adjacent_out_of_range():
    with pytest.raises(IndexError):
        merge_adjacent([FrequencyTableEntry(1.0, {"a": 1})], 0)


def test_entry_string():
    assert str(FrequencyTableEntry(1.5, {"b": 2, "a": 1})) == "1.50 map[a:1 b:2]"


def test_chi_merge_iris_sepal_length():
    pairs = sorted(zip(SEPAL_LENGTH, SPECIES), key=lambda p: p[0])
    table = chi_merge([v for v, _ in pairs], [c for _, c in pairs], 0.9, 0, len(pairs))
    assert [e.value for e in table] == [4.3, 5.5, 5.8, 6.3, 7.1]
    assert sum(sum(e.frequency.values()) for e in table) == 150


def test_chi_merge_single_class_respects_max_rows():
    values = [1.0, 2.0, 3.0, 4.0]
    classes = ["a"] * 4
    assert len(chi_merge(values, classes, 0.9, 2, 4)) == 4
    merged = chi_merge(values, classes, 0.9, 2, 2)
    assert [e.value for e in merged] == [1.0]
    assert merged[0].frequency == {"a": 4}


def test_filter_transform_and_labels():
    filt = ChiMergeFilter(0.90)
    filt.train({"Sepal length": SEPAL_LENGTH}, SPECIES)
    assert filt.bin_labels("Sepal length") == [
        "4.300000", "5.500000", "5.800000", "6.300000", "7.100000",
    ]
    assert filt.transform("Sepal length", 5.0) == 0
    assert filt.transform("Sepal length", 5.5) == 0
    assert filt.transform("Sepal length", 5.6) == 1
    assert filt.transform("Sepal length", 7.9) == 4
    assert filt.transform("Sepal width", 3.5) == 3.5
    assert str(filt) == "ChiMergeFilter(1 Attributes, 0.90 Significance)"


def test_filter_bin_labels_unknown_column():
    filt = ChiMergeFilter(0.90)
    with pytest.raises(KeyError):
        filt.bin_labels("missing")