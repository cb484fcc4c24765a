"""Logged time, time off and holidays."""

from typing import Any, Optional

from .base import Flag, FloatRecord, Id, Number


class LoggedTime(FloatRecord):
    logged_time_id: Optional[Id] = None
    people_id: Optional[Id] = None
    project_id: Optional[Id] = None
    task_id: Optional[Id] = None
    phase_id: Optional[Id] = None
    date: Optional[str] = None
    hours: Optional[Number] = None
    billable: Optional[Flag] = None
    locked: Optional[Flag] = None
    note: Optional[str] = None


class TimeOff(FloatRecord):
    timeoff_id: Optional[Id] = None
    people_id: Optional[Id] = None
    people_ids: Optional[list[Id]] = None
    timeoff_type_id: Optional[Id] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    hours: Optional[Number] = None
    full_day: Optional[Flag] = None
    status: Optional[Any] = None
    notes: Optional[str] = None


class TimeOffType(FloatRecord):
    timeoff_type_id: Optional[Id] = None
    timeoff_type_name: Optional[str] = None
    color: Optional[str] = None
    active: Optional[Flag] = None


class PublicHoliday(FloatRecord):
    holiday_id: Optional[Id] = None
    name: Optional[str] = None
    date: Optional[str] = None
    end_date: Optional[str] = None
    region: Optional[Any] = None


class TeamHoliday(FloatRecord):
    holiday_id: Optional[Id] = None
    team_holiday_id: Optional[Id] = None
    name: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    department_id: Optional[Id] = None
    recurring: Optional[Flag] = None
    active: Optional[Flag] = None
