"""People, projects, tasks, clients, departments, roles, accounts, statuses."""

from typing import Any, Optional

from .base import Flag, FloatRecord, Id, Number


class Person(FloatRecord):
    people_id: Optional[Id] = None
    name: Optional[str] = None
    email: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[Any] = None
    default_hourly_rate: Optional[Number] = None
    employee_type: Optional[Flag] = None
    people_type_id: Optional[Id] = None
    active: Optional[Flag] = None
    tags: Optional[list[Any]] = None


class Project(FloatRecord):
    project_id: Optional[Id] = None
    name: Optional[str] = None
    client_id: Optional[Id] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    notes: Optional[str] = None
    budget: Optional[Number] = None
    budget_total: Optional[Number] = None
    hourly_rate: Optional[Number] = None
    color: Optional[str] = None
    non_billable: Optional[Flag] = None
    tentative: Optional[Flag] = None
    active: Optional[Flag] = None


class Task(FloatRecord):
    """Scheduled task (an allocation of a person to a project)."""

    task_id: Optional[Id] = None
    project_id: Optional[Id] = None
    people_id: Optional[Id] = None
    phase_id: Optional[Id] = None
    name: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    hours: Optional[Number] = None
    status: Optional[Any] = None
    billable: Optional[Flag] = None
    notes: Optional[str] = None


class Client(FloatRecord):
    client_id: Optional[Id] = None
    name: Optional[str] = None
    active: Optional[Flag] = None


class Department(FloatRecord):
    department_id: Optional[Id] = None
    name: Optional[str] = None
    parent_id: Optional[Id] = None


class Role(FloatRecord):
    role_id: Optional[Id] = None
    name: Optional[str] = None
    description: Optional[str] = None
    permissions: Optional[list[Any]] = None
    level: Optional[Number] = None
    is_system_role: Optional[Flag] = None


class Account(FloatRecord):
    account_id: Optional[Id] = None
    name: Optional[str] = None
    email: Optional[str] = None
    timezone: Optional[str] = None
    avatar: Optional[str] = None
    account_type: Optional[Id] = None
    access: Optional[Any] = None
    department_filter_id: Optional[Id] = None
    view_rights: Optional[Any] = None
    edit_rights: Optional[Any] = None
    active: Optional[Flag] = None


class Status(FloatRecord):
    status_id: Optional[Id] = None
    name: Optional[str] = None
    status_type: Optional[str] = None
    color: Optional[str] = None
    position: Optional[Number] = None
    is_default: Optional[Flag] = None
