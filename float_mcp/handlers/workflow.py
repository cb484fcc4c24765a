"""Specialized operations for phases, milestones and project tasks.

Derived reads pre-populate server-side filters (active only, date windows
relative to today) before delegating to the list endpoint. Composite reads
sort or filter client-side on fields the service cannot order by.
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.exceptions import NotFoundError
from ..models.params import (
    BulkProjectTasksParams,
    DateRangeParams,
    IdParams,
    ListParams,
    PhaseScopedParams,
    ProjectScopedParams,
    ProjectTaskDraft,
    ReorderProjectTasksParams,
    TaskOrder,
)
from ..runtime.registry import operation_handler
from ..runtime.router import OperationContext
from .aggregations import parse_date, sort_by_date
from .crud import RESOURCES

logger = logging.getLogger(__name__)

PHASES = RESOURCES["phases"]
MILESTONES = RESOURCES["milestones"]
PROJECT_TASKS = RESOURCES["project-tasks"]


# Phases


@operation_handler("phases", "list-phases-by-project", params=ProjectScopedParams)
async def phases_by_project(ctx: OperationContext, params: ProjectScopedParams) -> list[Any]:
    return await ctx.list_all(PHASES.path, params.filters(), adapter=PHASES.many)


@operation_handler("phases", "get-phases-by-date-range", params=DateRangeParams)
async def phases_by_date_range(ctx: OperationContext, params: DateRangeParams) -> list[Any]:
    """List phases overlapping a date range."""
    return await ctx.list_all(PHASES.path, params.filters(), adapter=PHASES.many)


@operation_handler("phases", "get-active-phases", params=ListParams)
async def active_phases(ctx: OperationContext, params: ListParams) -> list[Any]:
    filters = {**params.filters(), "active": 1}
    return await ctx.list_all(PHASES.path, filters, adapter=PHASES.many)


@operation_handler("phases", "get-phase-schedule", params=ProjectScopedParams)
async def phase_schedule(ctx: OperationContext, params: ProjectScopedParams) -> list[Any]:
    """List a project's phases in start-date order."""
    phases = await ctx.list_all(PHASES.path, params.filters(), adapter=PHASES.many)
    return sort_by_date(phases, "start_date")


# Milestones


@operation_handler("milestones", "get-project-milestones", params=ProjectScopedParams)
async def project_milestones(ctx: OperationContext, params: ProjectScopedParams) -> list[Any]:
    return await ctx.list_all(MILESTONES.path, params.filters(), adapter=MILESTONES.many)


@operation_handler("milestones", "get-upcoming-milestones", params=ListParams)
async def upcoming_milestones(ctx: OperationContext, params: ListParams) -> list[Any]:
    """Open milestones from today onward, soonest first."""
    filters = {**params.filters(), "date_from": ctx.today().isoformat(), "completed": 0}
    milestones = await ctx.list_all(MILESTONES.path, filters, adapter=MILESTONES.many)
    return sort_by_date(milestones, "date", "start_date")


@operation_handler("milestones", "get-overdue-milestones", params=ListParams)
async def overdue_milestones(ctx: OperationContext, params: ListParams) -> list[Any]:
    """Open milestones dated before today."""
    today = ctx.today()
    filters = {**params.filters(), "date_to": today.isoformat(), "completed": 0}
    milestones = await ctx.list_all(MILESTONES.path, filters, adapter=MILESTONES.many)
    overdue = []
    for milestone in milestones:
        due = parse_date(milestone.get("date")) or parse_date(milestone.get("end_date"))
        if due is not None and due < today:
            overdue.append(milestone)
    return overdue


@operation_handler("milestones", "complete-milestone", params=IdParams)
async def complete_milestone(ctx: OperationContext, params: IdParams) -> Any:
    return await ctx.patch(
        MILESTONES.item_path(params.id),
        {"completed": 1, "completed_date": ctx.today().isoformat()},
        adapter=MILESTONES.one,
    )


@operation_handler("milestones", "get-milestone-reminders", params=ListParams)
async def milestone_reminders(ctx: OperationContext, params: ListParams) -> list[Any]:
    """Milestones whose reminder has not been sent yet."""
    filters = {"reminder_sent": 0, **params.filters()}
    return await ctx.list_all(MILESTONES.path, filters, adapter=MILESTONES.many)


# Project tasks


@operation_handler("project-tasks", "get-project-tasks-by-project", params=ProjectScopedParams)
async def project_tasks_by_project(
    ctx: OperationContext, params: ProjectScopedParams
) -> list[Any]:
    return await ctx.list_all(PROJECT_TASKS.path, params.filters(), adapter=PROJECT_TASKS.many)


@operation_handler("project-tasks", "get-project-tasks-by-phase", params=PhaseScopedParams)
async def project_tasks_by_phase(ctx: OperationContext, params: PhaseScopedParams) -> list[Any]:
    return await ctx.list_all(PROJECT_TASKS.path, params.filters(), adapter=PROJECT_TASKS.many)


@operation_handler("project-tasks", "bulk-create-project-tasks", params=BulkProjectTasksParams)
async def bulk_create_project_tasks(
    ctx: OperationContext, params: BulkProjectTasksParams
) -> dict[str, Any]:
    """Create several project tasks under one project."""

    async def create(raw: Any) -> Any:
        draft = ProjectTaskDraft.model_validate(raw)
        body = {**draft.model_dump(mode="json", exclude_none=True), "project_id": params.project_id}
        return await ctx.post(PROJECT_TASKS.path, body, adapter=PROJECT_TASKS.one)

    outcome = await ctx.bulk("project-tasks", params.project_tasks, create)
    return outcome.to_dict()


@operation_handler("project-tasks", "reorder-project-tasks", params=ReorderProjectTasksParams)
async def reorder_project_tasks(
    ctx: OperationContext, params: ReorderProjectTasksParams
) -> dict[str, Any]:
    """Set sort_order on each listed project task."""

    async def move(raw: Any) -> Any:
        order = TaskOrder.model_validate(raw)
        return await ctx.patch(
            PROJECT_TASKS.item_path(order.project_task_id),
            {"sort_order": order.sort_order},
            adapter=PROJECT_TASKS.one,
        )

    outcome = await ctx.bulk("reorder-project-tasks", params.task_order, move)
    return outcome.to_dict()


@operation_handler("project-tasks", "archive-project-task", params=IdParams)
async def archive_project_task(ctx: OperationContext, params: IdParams) -> Any:
    return await ctx.patch(
        PROJECT_TASKS.item_path(params.id), {"active": 0}, adapter=PROJECT_TASKS.one
    )


@operation_handler("project-tasks", "get-project-task-dependencies", params=IdParams)
async def project_task_dependencies(ctx: OperationContext, params: IdParams) -> dict[str, Any]:
    """Resolve a project task's dependency ids to records.

    Dependencies that no longer exist are listed in ``missing`` instead of
    failing the whole read.
    """
    task = await ctx.get(PROJECT_TASKS.item_path(params.id), adapter=PROJECT_TASKS.one) or {}
    dependencies = task.get("dependencies") or []

    details: list[Any] = []
    missing: list[Any] = []
    for dependency_id in dependencies:
        try:
            details.append(
                await ctx.get(PROJECT_TASKS.item_path(dependency_id), adapter=PROJECT_TASKS.one)
            )
        except NotFoundError:
            logger.debug(
                "dependency_missing",
                extra={"project_task_id": params.id, "dependency_id": dependency_id},
            )
            missing.append(dependency_id)

    return {"dependencies": dependencies, "dependency_details": details, "missing": missing}
