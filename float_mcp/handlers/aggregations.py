"""In-process aggregation helpers for composite operations and reports."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from typing import Any

# Time off entries without explicit hours count as full working days.
HOURS_PER_DAY = 8.0


def to_number(value: Any) -> float:
    """Coerce a numeric-ish field to float; missing or garbage counts as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def is_truthy_flag(value: Any) -> bool:
    """True for the service's 1/"1"/true flag encodings."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true")
    return value is True or value == 1


def is_billable(entry: Mapping[str, Any]) -> bool:
    return is_truthy_flag(entry.get("billable"))


def key_of(value: Any) -> str | None:
    return None if value in (None, "") else str(value)


def parse_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


class HoursTally:
    """Running total / billable / non-billable hours."""

    __slots__ = ("total_hours", "billable_hours", "non_billable_hours")

    def __init__(self) -> None:
        self.total_hours = 0.0
        self.billable_hours = 0.0
        self.non_billable_hours = 0.0

    def add(self, hours: float, billable: bool) -> None:
        self.total_hours += hours
        if billable:
            self.billable_hours += hours
        else:
            self.non_billable_hours += hours

    def add_entry(self, entry: Mapping[str, Any]) -> None:
        self.add(to_number(entry.get("hours")), is_billable(entry))

    @property
    def billable_percentage(self) -> float:
        return percentage(self.billable_hours, self.total_hours)

    def to_dict(self, *, with_percentage: bool = False) -> dict[str, float]:
        data = {
            "total_hours": self.total_hours,
            "billable_hours": self.billable_hours,
            "non_billable_hours": self.non_billable_hours,
        }
        if with_percentage:
            data["billable_percentage"] = self.billable_percentage
        return data


def tally_by(
    entries: Iterable[Mapping[str, Any]],
    field: str,
) -> dict[str, HoursTally]:
    """Group hour tallies by a record field; entries without the field are skipped."""
    groups: dict[str, HoursTally] = {}
    for entry in entries:
        key = key_of(entry.get(field))
        if key is None:
            continue
        groups.setdefault(key, HoursTally()).add_entry(entry)
    return groups


def tally(entries: Iterable[Mapping[str, Any]]) -> HoursTally:
    total = HoursTally()
    for entry in entries:
        total.add_entry(entry)
    return total


def count_by(
    entries: Iterable[Mapping[str, Any]],
    field: str,
    *,
    missing: str = "unknown",
) -> dict[str, int]:
    counts: dict[str, int] = {}
    for entry in entries:
        key = key_of(entry.get(field)) or missing
        counts[key] = counts.get(key, 0) + 1
    return counts


def timeoff_amount(entry: Mapping[str, Any]) -> tuple[float, float]:
    """(days, hours) of one time off entry.

    Full-day entries without hours count as HOURS_PER_DAY; partial entries
    convert hours to days at the same rate.
    """
    full_day = is_truthy_flag(entry.get("full_day"))
    hours = to_number(entry.get("hours")) or (HOURS_PER_DAY if full_day else 0.0)
    days = 1.0 if full_day else hours / HOURS_PER_DAY
    return days, hours


def percentage(part: float, whole: float) -> float:
    return (part / whole) * 100.0 if whole > 0 else 0.0


def working_days(start: date, end: date, *, exclude_weekends: bool = True) -> int:
    """Inclusive count of days between start and end, optionally skipping weekends."""
    if end < start:
        return 0
    days = 0
    current = start
    while current <= end:
        if not exclude_weekends or current.weekday() < 5:
            days += 1
        current += timedelta(days=1)
    return days


def sort_by_date(records: list[dict[str, Any]], *fields: str) -> list[dict[str, Any]]:
    """Stable sort on the first present date field; undated records go last."""

    def sort_key(record: Mapping[str, Any]) -> tuple[int, date]:
        for field in fields:
            parsed = parse_date(record.get(field))
            if parsed is not None:
                return (0, parsed)
        return (1, date.max)

    return sorted(records, key=sort_key)


def week_key(value: Any) -> str | None:
    parsed = parse_date(value)
    if parsed is None:
        return None
    year, week, _ = parsed.isocalendar()
    return f"{year}-W{week:02d}"


def month_key(value: Any) -> str | None:
    parsed = parse_date(value)
    return parsed.strftime("%Y-%m") if parsed else None
