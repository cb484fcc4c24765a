"""Report generators for the ``reports`` family.

Every report is an operation named after its report type. Reports read the
underlying collections through the pagination aggregator, forwarding the
caller's list filters, and aggregate in process.

Architecture:
    ReportParams
        -> filters() (report options stripped)
        -> ctx.list_all(...) per source collection
        -> aggregations helpers
        -> {"report_type", "generated_at", "date_range", "summary", ...}

Design Decisions:
    - Report options never reach the remote service; only list filters do
    - Windows without an explicit end use today; capacity windows without an
      explicit end span ``forecast_weeks`` from the start
    - Budget usage is billable hours times the project's hourly rate

See Also:
    - aggregations.py: tallies, working days and date keys
    - time_tracking.py: per-person and per-project summaries
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date, timedelta
from typing import Any

from ..models.params import ReportParams
from ..runtime.registry import operation_handler
from ..runtime.router import OperationContext
from .aggregations import (
    HoursTally,
    count_by,
    is_truthy_flag,
    key_of,
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
from .crud import RESOURCES

PEOPLE = RESOURCES["people"]
PROJECTS = RESOURCES["projects"]
ALLOCATIONS = RESOURCES["allocations"]
LOGGED_TIME = RESOURCES["logged-time"]
TIMEOFF = RESOURCES["timeoff"]
PHASES = RESOURCES["phases"]
MILESTONES = RESOURCES["milestones"]

OVER_UTILIZED = 100.0
UNDER_UTILIZED = 80.0


def _header(report_type: str, ctx: OperationContext, params: ReportParams) -> dict[str, Any]:
    return {
        "report_type": report_type,
        "generated_at": ctx.now().isoformat(),
        "date_range": {
            "start_date": params.start_date.isoformat() if params.start_date else None,
            "end_date": params.end_date.isoformat() if params.end_date else None,
        },
    }


def _window(ctx: OperationContext, params: ReportParams) -> tuple[date, date]:
    today = ctx.today()
    start = params.start_date or today
    end = params.end_date or today
    return start, max(start, end)


def _clipped_working_days(
    record: Mapping[str, Any],
    window: tuple[date, date] | None,
    *,
    exclude_weekends: bool,
) -> int:
    """Working days a dated record covers, clipped to the window when given."""
    start = parse_date(record.get("start_date"))
    end = parse_date(record.get("end_date")) or start
    if start is None:
        return 0
    if window is not None:
        start = max(start, window[0])
        end = min(end, window[1])
    return working_days(start, end, exclude_weekends=exclude_weekends)


def _scheduled_hours(
    allocation: Mapping[str, Any],
    window: tuple[date, date] | None,
    *,
    exclude_weekends: bool,
) -> float:
    """Allocated hours per day times the working days the allocation spans."""
    days = _clipped_working_days(allocation, window, exclude_weekends=exclude_weekends)
    return to_number(allocation.get("hours")) * days


def _with_percentages(groups: dict[str, dict[str, Any]], total: float) -> None:
    for group in groups.values():
        group["percentage_of_total"] = percentage(group["total_hours"], total)


def _index(records: list[dict[str, Any]], field: str) -> dict[str, dict[str, Any]]:
    indexed = {}
    for record in records:
        key = key_of(record.get(field))
        if key is not None:
            indexed[key] = record
    return indexed


async def _group_key(
    ctx: OperationContext, group_by: str
) -> Callable[[Mapping[str, Any]], str | None]:
    """Resolve a group_by option to a key function over logged time entries."""
    if group_by == "person":
        return lambda entry: key_of(entry.get("people_id"))
    if group_by == "project":
        return lambda entry: key_of(entry.get("project_id"))
    if group_by == "date":
        return lambda entry: key_of(entry.get("date"))
    if group_by == "week":
        return lambda entry: week_key(entry.get("date"))
    if group_by == "month":
        return lambda entry: month_key(entry.get("date"))
    if group_by == "client":
        projects = await ctx.list_all(PROJECTS.path, {}, adapter=PROJECTS.many)
        by_id = _index(projects, "project_id")

        def client_of(entry: Mapping[str, Any]) -> str | None:
            project = by_id.get(key_of(entry.get("project_id")) or "", {})
            return key_of(entry.get("client_id")) or key_of(project.get("client_id"))

        return client_of
    people = await ctx.list_all(PEOPLE.path, {}, adapter=PEOPLE.many)
    departments = {
        key: key_of((person.get("department") or {}).get("department_id"))
        or key_of(person.get("department_id"))
        for key, person in _index(people, "people_id").items()
    }
    return lambda entry: departments.get(key_of(entry.get("people_id")) or "")


@operation_handler("reports", "time-report", params=ReportParams)
async def time_report(ctx: OperationContext, params: ReportParams) -> dict[str, Any]:
    """Logged hours with an optional breakdown by person, project, client,
    department, date, week or month."""
    entries = await ctx.list_all(LOGGED_TIME.path, params.filters(), adapter=LOGGED_TIME.many)
    totals = tally(entries)
    report = {
        **_header("time-report", ctx, params),
        "summary": {
            "total_entries": len(entries),
            **totals.to_dict(with_percentage=params.include_percentages),
            "unique_people": len({key_of(e.get("people_id")) for e in entries} - {None}),
            "unique_projects": len({key_of(e.get("project_id")) for e in entries} - {None}),
        },
    }

    if params.group_by:
        key_fn = await _group_key(ctx, params.group_by)
        groups: dict[str, HoursTally] = {}
        counts: dict[str, int] = {}
        for entry in entries:
            key = key_fn(entry) or "unassigned"
            groups.setdefault(key, HoursTally()).add_entry(entry)
            counts[key] = counts.get(key, 0) + 1
        breakdown = {
            key: {**group.to_dict(), "entries": counts[key]} for key, group in groups.items()
        }
        if params.include_percentages:
            _with_percentages(breakdown, totals.total_hours)
        report["group_by"] = params.group_by
        report["breakdown"] = breakdown

    if params.include_details:
        report["data"] = entries
    return report


def _project_performance(
    project: Mapping[str, Any],
    entries: list[dict[str, Any]],
    params: ReportParams,
) -> dict[str, Any]:
    hours = tally(entries)
    performance: dict[str, Any] = {
        **hours.to_dict(with_percentage=params.include_percentages),
        "team_size": len({key_of(e.get("people_id")) for e in entries} - {None}),
        "total_entries": len(entries),
    }
    budget = to_number(project.get("budget_total") or project.get("budget"))
    budget_used = hours.billable_hours * to_number(project.get("hourly_rate"))
    performance["budget_total"] = budget
    performance["budget_used"] = budget_used
    performance["budget_remaining"] = budget - budget_used
    if params.include_budget_variance and budget > 0:
        used = percentage(budget_used, budget)
        performance["budget_used_percentage"] = used
        performance["budget_variance_percentage"] = used - 100.0
        performance["over_budget"] = budget_used > budget
        performance["budget_warning"] = used >= params.budget_warning_threshold
    return performance


async def _projects_with_hours(
    ctx: OperationContext, params: ReportParams
) -> tuple[list[dict[str, Any]], dict[str, list[dict[str, Any]]]]:
    projects = await ctx.list_all(PROJECTS.path, params.filters(), adapter=PROJECTS.many)
    entries = await ctx.list_all(LOGGED_TIME.path, params.filters(), adapter=LOGGED_TIME.many)
    by_project: dict[str, list[dict[str, Any]]] = {}
    for entry in entries:
        key = key_of(entry.get("project_id"))
        if key is not None:
            by_project.setdefault(key, []).append(entry)
    return projects, by_project


@operation_handler("reports", "project-report", params=ReportParams)
async def project_report(ctx: OperationContext, params: ReportParams) -> dict[str, Any]:
    """Projects with team size, hours and budget usage from logged time."""
    projects, by_project = await _projects_with_hours(ctx, params)
    rows = []
    for project in projects:
        entries = by_project.get(key_of(project.get("project_id")) or "", [])
        rows.append({**project, "performance": _project_performance(project, entries, params)})

    return {
        **_header("project-report", ctx, params),
        "summary": {
            "total_projects": len(rows),
            "active_projects": sum(1 for p in projects if is_truthy_flag(p.get("active"))),
            "total_hours": sum(r["performance"]["total_hours"] for r in rows),
            "total_budget": sum(r["performance"]["budget_total"] for r in rows),
            "total_budget_used": sum(r["performance"]["budget_used"] for r in rows),
            "over_budget": sum(1 for r in rows if r["performance"].get("over_budget")),
        },
        "data": rows,
    }


@operation_handler("reports", "budget-report", params=ReportParams)
async def budget_report(ctx: OperationContext, params: ReportParams) -> dict[str, Any]:
    """Budget used vs budget total per project, with a status per project."""
    projects, by_project = await _projects_with_hours(ctx, params)
    rows = []
    statuses = {"over_budget": 0, "warning": 0, "on_track": 0, "no_budget": 0}
    for project in projects:
        entries = by_project.get(key_of(project.get("project_id")) or "", [])
        performance = _project_performance(project, entries, params)
        budget = performance["budget_total"]
        used = percentage(performance["budget_used"], budget)
        if budget <= 0:
            status = "no_budget"
        elif performance["budget_used"] > budget:
            status = "over_budget"
        elif used >= params.budget_warning_threshold:
            status = "warning"
        else:
            status = "on_track"
        statuses[status] += 1
        rows.append(
            {
                "project_id": project.get("project_id"),
                "name": project.get("name"),
                "budget_total": budget,
                "budget_used": performance["budget_used"],
                "budget_remaining": performance["budget_remaining"],
                "budget_used_percentage": used,
                "billable_hours": performance["billable_hours"],
                "status": status,
            }
        )

    total_budget = sum(r["budget_total"] for r in rows)
    total_used = sum(r["budget_used"] for r in rows)
    return {
        **_header("budget-report", ctx, params),
        "summary": {
            "total_projects": len(rows),
            "total_budget": total_budget,
            "total_budget_used": total_used,
            "total_budget_remaining": total_budget - total_used,
            "budget_used_percentage": percentage(total_used, total_budget),
            "by_status": statuses,
        },
        "data": rows,
    }


@operation_handler("reports", "people-utilization-report", params=ReportParams)
async def people_utilization_report(
    ctx: OperationContext, params: ReportParams
) -> dict[str, Any]:
    """Logged and allocated hours per person against working-day capacity.

    People above 100% are over-utilized, below 80% under-utilized.
    """
    people = await ctx.list_all(PEOPLE.path, params.filters(), adapter=PEOPLE.many)
    entries = await ctx.list_all(LOGGED_TIME.path, params.filters(), adapter=LOGGED_TIME.many)
    allocations = await ctx.list_all(ALLOCATIONS.path, params.filters(), adapter=ALLOCATIONS.many)

    start, end = _window(ctx, params)
    days = working_days(start, end, exclude_weekends=params.exclude_weekends)
    target_hours = days * params.target_hours_per_day

    logged = tally_by(entries, "people_id")
    allocated: dict[str, float] = {}
    for allocation in allocations:
        key = key_of(allocation.get("people_id"))
        if key is not None:
            allocated[key] = allocated.get(key, 0.0) + to_number(allocation.get("hours"))

    rows = []
    for person in people:
        key = key_of(person.get("people_id")) or ""
        hours = logged.get(key, HoursTally())
        utilization = percentage(hours.total_hours, target_hours)
        rows.append(
            {
                "people_id": person.get("people_id"),
                "name": person.get("name"),
                **hours.to_dict(with_percentage=params.include_percentages),
                "allocated_hours": allocated.get(key, 0.0),
                "target_hours": target_hours,
                "utilization_percentage": utilization,
                "status": (
                    "over_utilized"
                    if utilization > OVER_UTILIZED
                    else "under_utilized" if utilization < UNDER_UTILIZED else "optimal"
                ),
            }
        )

    utilizations = [r["utilization_percentage"] for r in rows]
    return {
        **_header("people-utilization-report", ctx, params),
        "summary": {
            "total_people": len(rows),
            "working_days": days,
            "target_hours_per_person": target_hours,
            "average_utilization": sum(utilizations) / len(utilizations) if rows else 0.0,
            "over_utilized": sum(1 for r in rows if r["status"] == "over_utilized"),
            "under_utilized": sum(1 for r in rows if r["status"] == "under_utilized"),
        },
        "data": rows,
    }


@operation_handler("reports", "capacity-report", params=ReportParams)
async def capacity_report(ctx: OperationContext, params: ReportParams) -> dict[str, Any]:
    """Scheduled hours per person over the forecast window against capacity.

    The window starts at start_date (default today) and ends at end_date, or
    ``forecast_weeks`` later when no end is given.
    """
    start = params.start_date or ctx.today()
    end = params.end_date or start + timedelta(weeks=params.forecast_weeks, days=-1)
    filters = {
        **params.filters(),
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
    }
    people = await ctx.list_all(PEOPLE.path, params.filters(), adapter=PEOPLE.many)
    allocations = await ctx.list_all(ALLOCATIONS.path, filters, adapter=ALLOCATIONS.many)

    days = working_days(start, end, exclude_weekends=params.exclude_weekends)
    capacity = days * params.target_hours_per_day

    scheduled: dict[str, float] = {}
    for allocation in allocations:
        key = key_of(allocation.get("people_id"))
        if key is not None:
            scheduled[key] = scheduled.get(key, 0.0) + _scheduled_hours(
                allocation, (start, end), exclude_weekends=params.exclude_weekends
            )

    rows = []
    for person in people:
        key = key_of(person.get("people_id")) or ""
        hours = scheduled.get(key, 0.0)
        load = percentage(hours, capacity)
        rows.append(
            {
                "people_id": person.get("people_id"),
                "name": person.get("name"),
                "capacity_hours": capacity,
                "scheduled_hours": hours,
                "available_hours": max(capacity - hours, 0.0),
                "capacity_percentage": load,
                "over_capacity": load > params.capacity_threshold,
            }
        )

    total_capacity = capacity * len(rows)
    total_scheduled = sum(r["scheduled_hours"] for r in rows)
    return {
        **_header("capacity-report", ctx, params),
        "forecast": {
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
            "weeks": params.forecast_weeks,
            "working_days": days,
        },
        "summary": {
            "total_people": len(rows),
            "total_capacity_hours": total_capacity,
            "total_scheduled_hours": total_scheduled,
            "total_available_hours": sum(r["available_hours"] for r in rows),
            "capacity_percentage": percentage(total_scheduled, total_capacity),
            "over_capacity": sum(1 for r in rows if r["over_capacity"]),
        },
        "data": rows,
    }


@operation_handler("reports", "milestone-report", params=ReportParams)
async def milestone_report(ctx: OperationContext, params: ReportParams) -> dict[str, Any]:
    """Completed, overdue and upcoming milestone counts, overall and per project."""
    milestones = await ctx.list_all(MILESTONES.path, params.filters(), adapter=MILESTONES.many)
    today = ctx.today()

    def state(milestone: Mapping[str, Any]) -> str:
        if is_truthy_flag(milestone.get("completed")):
            return "completed"
        due = parse_date(milestone.get("date")) or parse_date(milestone.get("end_date"))
        if due is None:
            return "unscheduled"
        return "overdue" if due < today else "upcoming"

    counts = {"completed": 0, "overdue": 0, "upcoming": 0, "unscheduled": 0}
    by_project: dict[str, dict[str, int]] = {}
    for milestone in milestones:
        current = state(milestone)
        counts[current] += 1
        project = by_project.setdefault(
            key_of(milestone.get("project_id")) or "unassigned", dict.fromkeys(counts, 0)
        )
        project[current] += 1

    summary: dict[str, Any] = {"total_milestones": len(milestones), **counts}
    if params.include_percentages:
        summary["completion_percentage"] = percentage(counts["completed"], len(milestones))
    report = {
        **_header("milestone-report", ctx, params),
        "summary": summary,
        "by_project": by_project,
    }
    if params.include_details:
        report["data"] = [
            {**m, "state": state(m)} for m in sort_by_date(milestones, "date", "end_date")
        ]
    return report


@operation_handler("reports", "timeoff-report", params=ReportParams)
async def timeoff_report(ctx: OperationContext, params: ReportParams) -> dict[str, Any]:
    """Time off days and hours by type, by person, and entry counts by status."""
    entries = await ctx.list_all(TIMEOFF.path, params.filters(), adapter=TIMEOFF.many)
    total_days = 0.0
    total_hours = 0.0
    by_type: dict[str, dict[str, float]] = {}
    by_person: dict[str, dict[str, float]] = {}
    for entry in entries:
        days, hours = timeoff_amount(entry)
        total_days += days
        total_hours += hours
        for groups, field in ((by_type, "timeoff_type_id"), (by_person, "people_id")):
            bucket = groups.setdefault(
                key_of(entry.get(field)) or "unknown", {"days": 0.0, "hours": 0.0}
            )
            bucket["days"] += days
            bucket["hours"] += hours

    report = {
        **_header("timeoff-report", ctx, params),
        "summary": {
            "total_entries": len(entries),
            "total_days": total_days,
            "total_hours": total_hours,
            "by_status": count_by(entries, "status"),
        },
        "by_type": by_type,
        "by_person": by_person,
    }
    if params.include_details:
        report["data"] = entries
    return report


@operation_handler("reports", "team-performance-report", params=ReportParams)
async def team_performance_report(
    ctx: OperationContext, params: ReportParams
) -> dict[str, Any]:
    """Hours, billable share and project spread per person, busiest first."""
    people = await ctx.list_all(PEOPLE.path, params.filters(), adapter=PEOPLE.many)
    entries = await ctx.list_all(LOGGED_TIME.path, params.filters(), adapter=LOGGED_TIME.many)

    projects_by_person: dict[str, set[str]] = {}
    for entry in entries:
        person = key_of(entry.get("people_id"))
        project = key_of(entry.get("project_id"))
        if person is not None and project is not None:
            projects_by_person.setdefault(person, set()).add(project)

    logged = tally_by(entries, "people_id")
    rows = []
    for person in people:
        key = key_of(person.get("people_id")) or ""
        hours = logged.get(key, HoursTally())
        rows.append(
            {
                "people_id": person.get("people_id"),
                "name": person.get("name"),
                **hours.to_dict(with_percentage=True),
                "projects_count": len(projects_by_person.get(key, ())),
            }
        )
    rows.sort(key=lambda row: row["total_hours"], reverse=True)

    totals = tally(entries)
    return {
        **_header("team-performance-report", ctx, params),
        "summary": {
            "total_people": len(rows),
            **totals.to_dict(with_percentage=True),
            "average_hours_per_person": totals.total_hours / len(rows) if rows else 0.0,
        },
        "data": rows,
    }


@operation_handler("reports", "resource-allocation-report", params=ReportParams)
async def resource_allocation_report(
    ctx: OperationContext, params: ReportParams
) -> dict[str, Any]:
    """Scheduled hours grouped by person and by project."""
    allocations = await ctx.list_all(ALLOCATIONS.path, params.filters(), adapter=ALLOCATIONS.many)
    window = None
    if params.start_date or params.end_date:
        window = (params.start_date or date.min, params.end_date or date.max)

    by_person: dict[str, dict[str, Any]] = {}
    by_project: dict[str, dict[str, Any]] = {}
    total = 0.0
    for allocation in allocations:
        hours = _scheduled_hours(allocation, window, exclude_weekends=params.exclude_weekends)
        total += hours
        for groups, field in ((by_person, "people_id"), (by_project, "project_id")):
            bucket = groups.setdefault(
                key_of(allocation.get(field)) or "unassigned",
                {"allocations": 0, "total_hours": 0.0},
            )
            bucket["allocations"] += 1
            bucket["total_hours"] += hours

    if params.include_percentages:
        _with_percentages(by_person, total)
        _with_percentages(by_project, total)

    report = {
        **_header("resource-allocation-report", ctx, params),
        "summary": {
            "total_allocations": len(allocations),
            "total_scheduled_hours": total,
            "people": len(by_person),
            "projects": len(by_project),
        },
        "by_person": by_person,
        "by_project": by_project,
    }
    if params.include_details:
        report["data"] = allocations
    return report


@operation_handler("reports", "project-timeline-report", params=ReportParams)
async def project_timeline_report(
    ctx: OperationContext, params: ReportParams
) -> dict[str, Any]:
    """Projects in start order, each with its phases in start order."""
    projects = await ctx.list_all(PROJECTS.path, params.filters(), adapter=PROJECTS.many)
    phases = await ctx.list_all(PHASES.path, params.filters(), adapter=PHASES.many)

    phases_by_project: dict[str, list[dict[str, Any]]] = {}
    for phase in sort_by_date(phases, "start_date"):
        key = key_of(phase.get("project_id"))
        if key is not None:
            phases_by_project.setdefault(key, []).append(phase)

    rows = []
    for project in sort_by_date(projects, "start_date"):
        project_phases = phases_by_project.get(key_of(project.get("project_id")) or "", [])
        start = parse_date(project.get("start_date"))
        end = parse_date(project.get("end_date"))
        rows.append(
            {
                **project,
                "phases": project_phases,
                "phase_count": len(project_phases),
                "duration_days": (end - start).days + 1 if start and end else None,
            }
        )

    starts = [d for d in (parse_date(p.get("start_date")) for p in projects) if d]
    ends = [d for d in (parse_date(p.get("end_date")) for p in projects) if d]
    return {
        **_header("project-timeline-report", ctx, params),
        "summary": {
            "total_projects": len(rows),
            "total_phases": len(phases),
            "projects_with_phases": sum(1 for r in rows if r["phases"]),
            "earliest_start": min(starts).isoformat() if starts else None,
            "latest_end": max(ends).isoformat() if ends else None,
        },
        "data": rows,
    }


@operation_handler("reports", "billable-analysis-report", params=ReportParams)
async def billable_analysis_report(
    ctx: OperationContext, params: ReportParams
) -> dict[str, Any]:
    """Billable share of logged hours overall, per person, per project and per week."""
    entries = await ctx.list_all(LOGGED_TIME.path, params.filters(), adapter=LOGGED_TIME.many)

    weekly: dict[str, HoursTally] = {}
    for entry in entries:
        key = week_key(entry.get("date"))
        if key is not None:
            weekly.setdefault(key, HoursTally()).add_entry(entry)

    def render(groups: dict[str, HoursTally]) -> dict[str, dict[str, float]]:
        return {key: groups[key].to_dict(with_percentage=True) for key in sorted(groups)}

    report = {
        **_header("billable-analysis-report", ctx, params),
        "summary": {
            "total_entries": len(entries),
            **tally(entries).to_dict(with_percentage=True),
        },
        "by_person": render(tally_by(entries, "people_id")),
        "by_project": render(tally_by(entries, "project_id")),
        "by_week": render(weekly),
    }
    if params.include_details:
        report["data"] = entries
    return report
