"""Specialized operations for logged time, time off and team holidays."""

from __future__ import annotations

from typing import Any

from ..models.params import (
    ApproveTimeOffParams,
    BulkLoggedTimeParams,
    BulkTimeOffParams,
    DateRangeParams,
    DateWindowParams,
    DepartmentScopedParams,
    ListParams,
    LoggedTimeDraft,
    PersonWindowParams,
    ProjectWindowParams,
    RejectTimeOffParams,
    TimeOffDraft,
)
from ..runtime.registry import operation_handler
from ..runtime.router import OperationContext
from .aggregations import count_by, key_of, sort_by_date, tally, tally_by, timeoff_amount
from .crud import RESOURCES

LOGGED_TIME = RESOURCES["logged-time"]
TIMEOFF = RESOURCES["timeoff"]
TEAM_HOLIDAYS = RESOURCES["team-holidays"]

TIMEOFF_STATUSES = ("pending", "approved", "rejected")


def _date_range(params: DateWindowParams) -> dict[str, str | None]:
    return {
        "start_date": params.start_date.isoformat() if params.start_date else None,
        "end_date": params.end_date.isoformat() if params.end_date else None,
    }


def _status_counts(entries: list[dict[str, Any]]) -> dict[str, int]:
    counts = dict.fromkeys(TIMEOFF_STATUSES, 0)
    for entry in entries:
        status = key_of(entry.get("status"))
        if status is not None:
            counts[status] = counts.get(status, 0) + 1
    return counts


# Logged time


@operation_handler("logged-time", "bulk-create-logged-time", params=BulkLoggedTimeParams)
async def bulk_create_logged_time(
    ctx: OperationContext, params: BulkLoggedTimeParams
) -> dict[str, Any]:
    """Log several time entries, one request per entry."""

    async def create(raw: Any) -> Any:
        draft = LoggedTimeDraft.model_validate(raw)
        body = draft.model_dump(mode="json", exclude_none=True)
        return await ctx.post(LOGGED_TIME.path, body, adapter=LOGGED_TIME.one)

    outcome = await ctx.bulk("logged-time", params.logged_time_entries, create)
    return outcome.to_dict()


@operation_handler(
    "logged-time", "get-person-logged-time-summary", params=PersonWindowParams
)
async def person_logged_time_summary(
    ctx: OperationContext, params: PersonWindowParams
) -> dict[str, Any]:
    """Hours logged by one person, split by project and by date."""
    entries = await ctx.list_all(LOGGED_TIME.path, params.filters(), adapter=LOGGED_TIME.many)
    totals = tally(entries)
    return {
        "people_id": params.people_id,
        "date_range": _date_range(params),
        **totals.to_dict(),
        "by_project": {k: v.to_dict() for k, v in tally_by(entries, "project_id").items()},
        "by_date": {k: v.to_dict() for k, v in tally_by(entries, "date").items()},
        "entries": entries,
    }


@operation_handler(
    "logged-time", "get-project-logged-time-summary", params=ProjectWindowParams
)
async def project_logged_time_summary(
    ctx: OperationContext, params: ProjectWindowParams
) -> dict[str, Any]:
    """Hours logged against one project, split by person and by date."""
    entries = await ctx.list_all(LOGGED_TIME.path, params.filters(), adapter=LOGGED_TIME.many)
    totals = tally(entries)
    return {
        "project_id": params.project_id,
        "date_range": _date_range(params),
        **totals.to_dict(),
        "by_person": {k: v.to_dict() for k, v in tally_by(entries, "people_id").items()},
        "by_date": {k: v.to_dict() for k, v in tally_by(entries, "date").items()},
        "entries": entries,
    }


@operation_handler("logged-time", "get-logged-time-timesheet", params=DateWindowParams)
async def logged_time_timesheet(
    ctx: OperationContext, params: DateWindowParams
) -> dict[str, Any]:
    """Entries grouped person -> date, with overall totals."""
    entries = await ctx.list_all(LOGGED_TIME.path, params.filters(), adapter=LOGGED_TIME.many)
    timesheet: dict[str, dict[str, list[Any]]] = {}
    for entry in entries:
        person = key_of(entry.get("people_id")) or "unknown"
        day = key_of(entry.get("date")) or "unknown"
        timesheet.setdefault(person, {}).setdefault(day, []).append(entry)
    return {
        "timesheet": timesheet,
        "totals": tally(entries).to_dict(),
        "date_range": _date_range(params),
        "total_entries": len(entries),
    }


@operation_handler("logged-time", "get-billable-time-report", params=DateWindowParams)
async def billable_time_report(ctx: OperationContext, params: DateWindowParams) -> dict[str, Any]:
    """Billable vs non-billable hours overall, per person and per project."""
    entries = await ctx.list_all(LOGGED_TIME.path, params.filters(), adapter=LOGGED_TIME.many)
    return {
        "date_range": _date_range(params),
        "summary": {
            **tally(entries).to_dict(with_percentage=True),
            "total_entries": len(entries),
        },
        "by_person": {
            k: v.to_dict(with_percentage=True) for k, v in tally_by(entries, "people_id").items()
        },
        "by_project": {
            k: v.to_dict(with_percentage=True) for k, v in tally_by(entries, "project_id").items()
        },
    }


# Time off


@operation_handler("timeoff", "bulk-create-timeoff", params=BulkTimeOffParams)
async def bulk_create_timeoff(ctx: OperationContext, params: BulkTimeOffParams) -> dict[str, Any]:
    """Create several time off entries, one request per entry."""

    async def create(raw: Any) -> Any:
        draft = TimeOffDraft.model_validate(raw)
        body = draft.model_dump(mode="json", exclude_none=True)
        return await ctx.post(TIMEOFF.path, body, adapter=TIMEOFF.one)

    outcome = await ctx.bulk("timeoff", params.timeoff_entries, create)
    return outcome.to_dict()


@operation_handler("timeoff", "approve-timeoff", params=ApproveTimeOffParams)
async def approve_timeoff(ctx: OperationContext, params: ApproveTimeOffParams) -> Any:
    return await ctx.patch(
        TIMEOFF.item_path(params.id),
        {
            "status": "approved",
            "approved_by": params.approved_by,
            "approved_at": ctx.now().isoformat(),
        },
        adapter=TIMEOFF.one,
    )


@operation_handler("timeoff", "reject-timeoff", params=RejectTimeOffParams)
async def reject_timeoff(ctx: OperationContext, params: RejectTimeOffParams) -> Any:
    return await ctx.patch(
        TIMEOFF.item_path(params.id),
        {
            "status": "rejected",
            "rejected_by": params.rejected_by,
            "rejected_at": ctx.now().isoformat(),
        },
        adapter=TIMEOFF.one,
    )


@operation_handler("timeoff", "get-timeoff-calendar", params=DateWindowParams)
async def timeoff_calendar(ctx: OperationContext, params: DateWindowParams) -> dict[str, Any]:
    """Time off entries keyed by start date, with status and type counts."""
    entries = await ctx.list_all(TIMEOFF.path, params.filters(), adapter=TIMEOFF.many)
    calendar: dict[str, list[Any]] = {}
    for entry in entries:
        calendar.setdefault(key_of(entry.get("start_date")) or "unknown", []).append(entry)
    return {
        "calendar": calendar,
        "summary": {
            "total_entries": len(entries),
            "by_status": _status_counts(entries),
            "by_type": count_by(entries, "timeoff_type_id"),
        },
        "date_range": _date_range(params),
    }


@operation_handler("timeoff", "get-person-timeoff-summary", params=PersonWindowParams)
async def person_timeoff_summary(
    ctx: OperationContext, params: PersonWindowParams
) -> dict[str, Any]:
    """Days and hours of time off for one person, by type and status."""
    entries = await ctx.list_all(TIMEOFF.path, params.filters(), adapter=TIMEOFF.many)
    total_days = 0.0
    total_hours = 0.0
    by_type: dict[str, dict[str, float]] = {}
    for entry in entries:
        days, hours = timeoff_amount(entry)
        total_hours += hours
        total_days += days
        bucket = by_type.setdefault(
            key_of(entry.get("timeoff_type_id")) or "unknown", {"days": 0.0, "hours": 0.0}
        )
        bucket["days"] += days
        bucket["hours"] += hours
    return {
        "people_id": params.people_id,
        "date_range": _date_range(params),
        "total_days": total_days,
        "total_hours": total_hours,
        "by_type": by_type,
        "by_status": _status_counts(entries),
        "entries": entries,
    }


# Team holidays


@operation_handler(
    "team-holidays", "list-team-holidays-by-department", params=DepartmentScopedParams
)
async def team_holidays_by_department(
    ctx: OperationContext, params: DepartmentScopedParams
) -> list[Any]:
    return await ctx.list_all(TEAM_HOLIDAYS.path, params.filters(), adapter=TEAM_HOLIDAYS.many)


@operation_handler("team-holidays", "list-team-holidays-by-date-range", params=DateRangeParams)
async def team_holidays_by_date_range(
    ctx: OperationContext, params: DateRangeParams
) -> list[Any]:
    return await ctx.list_all(TEAM_HOLIDAYS.path, params.filters(), adapter=TEAM_HOLIDAYS.many)


@operation_handler("team-holidays", "list-recurring-team-holidays", params=ListParams)
async def recurring_team_holidays(ctx: OperationContext, params: ListParams) -> list[Any]:
    filters = {**params.filters(), "recurring": 1}
    return await ctx.list_all(TEAM_HOLIDAYS.path, filters, adapter=TEAM_HOLIDAYS.many)


@operation_handler("team-holidays", "get-upcoming-team-holidays", params=ListParams)
async def upcoming_team_holidays(ctx: OperationContext, params: ListParams) -> list[Any]:
    """Active team holidays starting today or later, soonest first."""
    filters = {**params.filters(), "start_date": ctx.today().isoformat(), "active": 1}
    holidays = await ctx.list_all(TEAM_HOLIDAYS.path, filters, adapter=TEAM_HOLIDAYS.many)
    return sort_by_date(holidays, "start_date")
