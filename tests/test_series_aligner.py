"""Tests for the outer join of normalized series by month."""

from perfchart.agents import SeriesAligner, merge_series
from perfchart.models import AlignedRow, NormalizedPoint


def points(*pairs):
    return [NormalizedPoint(date_label=label, value=value) for label, value in pairs]


def as_tuples(rows):
    return [(row.date_label, row.values) for row in rows]


def test_disjoint_coverage_keeps_only_present_tickers():
    a = points(("2024-01", 100.0), ("2024-03", 110.0))
    b = points(("2024-02", 100.0))

    rows = merge_series([("A", a), ("B", b)])

    assert as_tuples(rows) == [
        ("2024-01", {"A": 100.0}),
        ("2024-02", {"B": 100.0}),
        ("2024-03", {"A": 110.0}),
    ]
    for row in rows:
        assert all(value is not None for value in row.values.values())


def test_merge_of_nothing_is_empty():
    assert merge_series([]) == []


def test_merge_of_empty_sequences_is_empty():
    assert merge_series([("A", []), ("B", [])]) == []


def test_overlapping_dates_share_a_row():
    a = points(("2024-01", 100.0), ("2024-02", 104.5))
    b = points(("2024-02", 100.0), ("2024-03", 97.25))

    rows = merge_series([("A", a), ("B", b)])

    assert rows == [
        AlignedRow(date_label="2024-01", values={"A": 100.0}),
        AlignedRow(date_label="2024-02", values={"A": 104.5, "B": 100.0}),
        AlignedRow(date_label="2024-03", values={"B": 97.25}),
    ]


def test_merge_is_order_independent():
    a = points(("2023-11", 100.0), ("2024-01", 120.0))
    b = points(("2023-12", 100.0), ("2024-01", 90.0))
    c = points(("2024-02", 100.0))

    forward = merge_series([("A", a), ("B", b), ("C", c)])
    backward = merge_series([("C", c), ("B", b), ("A", a)])

    assert forward == backward
    assert [row.date_label for row in forward] == ["2023-11", "2023-12", "2024-01", "2024-02"]


def test_rows_sorted_across_year_boundary():
    a = points(("2023-12", 100.0), ("2024-01", 101.0))
    b = points(("2019-06", 100.0))

    rows = merge_series([("A", a), ("B", b)])

    assert [row.date_label for row in rows] == ["2019-06", "2023-12", "2024-01"]


def test_empty_series_mixed_with_data():
    a = points(("2024-01", 100.0))

    rows = merge_series([("EMPTY", []), ("A", a)])

    assert as_tuples(rows) == [("2024-01", {"A": 100.0})]


def test_duplicate_label_keeps_last_value():
    a = points(("2024-01", 100.0), ("2024-02", 101.0), ("2024-02", 103.0))

    rows = merge_series([("A", a)])

    assert as_tuples(rows) == [("2024-01", {"A": 100.0}), ("2024-02", {"A": 103.0})]


def test_values_are_plain_floats():
    rows = merge_series([("A", points(("2024-01", 100.0)))])

    assert type(rows[0].values["A"]) is float


def test_aligner_object_delegates():
    a = points(("2024-01", 100.0))

    assert SeriesAligner().merge([("A", a)]) == merge_series([("A", a)])
