"""Unit tests for in-process aggregation helpers."""

from datetime import date

import pytest

from float_mcp.handlers.aggregations import (
    count_by,
    is_truthy_flag,
    month_key,
    parse_date,
    percentage,
    sort_by_date,
    tally,
    tally_by,
    timeoff_amount,
    to_number,
    week_key,
    working_days,
)

ENTRIES = [
    {"people_id": 1, "project_id": 10, "hours": 4, "billable": 1, "date": "2024-03-11"},
    {"people_id": 1, "project_id": 11, "hours": "2.5", "billable": 0, "date": "2024-03-12"},
    {"people_id": 2, "project_id": 10, "hours": 3, "billable": True, "date": "2024-03-18"},
    {"people_id": 2, "hours": None, "billable": "1"},
]


@pytest.mark.parametrize(
    ("value", "expected"),
    [(1, True), ("1", True), ("true", True), (True, True), (0, False), ("0", False), (None, False)],
)
def test_is_truthy_flag(value, expected):
    assert is_truthy_flag(value) is expected


@pytest.mark.parametrize(
    ("value", "expected"), [(3, 3.0), ("2.5", 2.5), (None, 0.0), ("n/a", 0.0), (True, 0.0)]
)
def test_to_number(value, expected):
    assert to_number(value) == expected


def test_tally_splits_billable_hours():
    totals = tally(ENTRIES)
    assert totals.to_dict(with_percentage=True) == {
        "total_hours": 9.5,
        "billable_hours": 7.0,
        "non_billable_hours": 2.5,
        "billable_percentage": pytest.approx(7.0 / 9.5 * 100),
    }


def test_tally_by_skips_entries_without_key():
    groups = tally_by(ENTRIES, "project_id")
    assert set(groups) == {"10", "11"}
    assert groups["10"].total_hours == 7.0


def test_count_by_uses_missing_label():
    assert count_by(ENTRIES, "project_id") == {"10": 2, "11": 1, "unknown": 1}


def test_percentage_of_zero_is_zero():
    assert percentage(5, 0) == 0.0
    assert percentage(1, 4) == 25.0


def test_working_days_excludes_weekends():
    # Monday 2024-03-11 .. Sunday 2024-03-17
    assert working_days(date(2024, 3, 11), date(2024, 3, 17)) == 5
    assert working_days(date(2024, 3, 11), date(2024, 3, 17), exclude_weekends=False) == 7
    assert working_days(date(2024, 3, 17), date(2024, 3, 11)) == 0


def test_sort_by_date_puts_undated_last():
    records = [
        {"id": "b", "start_date": "2024-05-01"},
        {"id": "none"},
        {"id": "a", "date": "2024-01-01"},
    ]
    assert [r["id"] for r in sort_by_date(records, "date", "start_date")] == ["a", "b", "none"]


def test_date_keys():
    assert parse_date("2024-03-13T09:00:00Z") == date(2024, 3, 13)
    assert parse_date("garbage") is None
    assert week_key("2024-03-13") == "2024-W11"
    assert month_key("2024-03-13") == "2024-03"
    assert week_key(None) is None


@pytest.mark.parametrize(
    ("entry", "expected"),
    [
        ({"full_day": 1}, (1.0, 8.0)),
        ({"full_day": 1, "hours": 6}, (1.0, 6.0)),
        ({"full_day": 0, "hours": 4}, (0.5, 4.0)),
        ({}, (0.0, 0.0)),
    ],
)
def test_timeoff_amount(entry, expected):
    assert timeoff_amount(entry) == expected
