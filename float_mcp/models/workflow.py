"""Phases, milestones, project tasks and allocations."""

from typing import Any, Optional

from .base import Flag, FloatRecord, Id, Number


class Phase(FloatRecord):
    phase_id: Optional[Id] = None
    project_id: Optional[Id] = None
    name: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    notes: Optional[str] = None
    budget: Optional[Number] = None
    color: Optional[str] = None
    active: Optional[Flag] = None


class Milestone(FloatRecord):
    milestone_id: Optional[Id] = None
    project_id: Optional[Id] = None
    phase_id: Optional[Id] = None
    name: Optional[str] = None
    date: Optional[str] = None
    end_date: Optional[str] = None
    completed: Optional[Flag] = None
    completed_date: Optional[str] = None
    reminder_sent: Optional[Flag] = None


class ProjectTask(FloatRecord):
    project_task_id: Optional[Id] = None
    project_id: Optional[Id] = None
    phase_id: Optional[Id] = None
    task_name: Optional[str] = None
    task_names: Optional[str] = None
    sort_order: Optional[Number] = None
    billable: Optional[Flag] = None
    estimated_hours: Optional[Number] = None
    dependencies: Optional[list[Any]] = None
    active: Optional[Flag] = None


class Allocation(FloatRecord):
    task_id: Optional[Id] = None
    project_id: Optional[Id] = None
    people_id: Optional[Id] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    hours: Optional[Number] = None
    status: Optional[Any] = None
