"""Parameter models for router operations.

Each operation declares the model its parameters must satisfy. Generic CRUD
operations share ListParams / IdParams / CreateParams / UpdateParams;
specialized operations narrow these with the fields they require.

Bulk item models (LoggedTimeDraft, TimeOffDraft, ...) are validated per item
inside the bulk run, so one malformed item fails alone instead of rejecting
the whole batch.
"""

import datetime as dt
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from .base import Id


class ListParams(BaseModel):
    """Filters for list endpoints. Unknown keys are forwarded as query filters."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    page: Optional[int] = Field(None, ge=1)
    per_page: Optional[int] = Field(None, ge=1, alias="per-page")

    def filters(self, *, exclude: tuple[str, ...] = ()) -> Dict[str, Any]:
        """Query filters with wire names, dropping unset values."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude=set(exclude) or None,
        )


class NoParams(BaseModel):
    """Operation without parameters; stray keys are ignored."""


class IdParams(BaseModel):
    id: Id


class CreateParams(BaseModel):
    """Create payload. All fields are forwarded to the remote service."""

    model_config = ConfigDict(extra="allow")

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class UpdateParams(CreateParams):
    id: Id

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True, exclude={"id"})

    @model_validator(mode="after")
    def _require_changes(self) -> "UpdateParams":
        if not self.payload():
            raise ValueError("update requires at least one field besides 'id'")
        return self


# Scoped list reads


class ProjectScopedParams(ListParams):
    project_id: Id


class PhaseScopedParams(ListParams):
    phase_id: Id


class PersonScopedParams(ListParams):
    people_id: Id


class DepartmentScopedParams(ListParams):
    department_id: Id


class DateWindowParams(ListParams):
    """List filters with an optional date window."""

    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def _check_order(self) -> "DateWindowParams":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class DateRangeParams(DateWindowParams):
    start_date: dt.date
    end_date: dt.date


class PersonWindowParams(DateWindowParams):
    people_id: Id


class ProjectWindowParams(DateWindowParams):
    project_id: Id


# Roles


class RolePermissionFilterParams(ListParams):
    permission: str = Field(..., min_length=1)


class RolePermissionsUpdateParams(BaseModel):
    id: Id
    role_permissions: List[str] = Field(
        ..., validation_alias=AliasChoices("role_permissions", "permissions")
    )


class RoleAccessParams(BaseModel):
    id: Id
    permission: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("permission", "permission_name")
    )


# Accounts


class AccountTimezoneParams(BaseModel):
    id: Id
    timezone: str = Field(..., min_length=1)


class AccountDepartmentFilterParams(BaseModel):
    id: Id
    department_filter_id: Optional[Id]


class AccountPermissionsParams(BaseModel):
    id: Id
    permissions_data: Dict[str, Any] = Field(..., min_length=1)


class AccountPermissionUpdate(BaseModel):
    account_id: Id
    permissions: Dict[str, Any] = Field(..., min_length=1)


class BulkAccountPermissionsParams(BaseModel):
    accounts: List[Any]


# Statuses


class StatusTypeParams(ListParams):
    status_type: Optional[Literal["project", "task"]] = None


class StatusesByTypeParams(ListParams):
    status_type: Literal["project", "task"]


class SetDefaultStatusParams(BaseModel):
    default_status_id: Id = Field(..., validation_alias=AliasChoices("default_status_id", "id"))


# Project tasks


class ProjectTaskDraft(BaseModel):
    model_config = ConfigDict(extra="allow")

    task_names: str = Field(..., min_length=1)
    phase_id: Optional[Id] = None
    estimated_hours: Optional[float] = Field(None, ge=0)


class BulkProjectTasksParams(BaseModel):
    project_id: Id
    project_tasks: List[Any]


class TaskOrder(BaseModel):
    project_task_id: Id
    sort_order: int


class ReorderProjectTasksParams(BaseModel):
    task_order: List[Any]


# Logged time and time off


class LoggedTimeDraft(BaseModel):
    model_config = ConfigDict(extra="allow")

    people_id: Id
    project_id: Id
    date: dt.date
    hours: float = Field(..., gt=0, le=24)


class BulkLoggedTimeParams(BaseModel):
    logged_time_entries: List[Any]


class TimeOffDraft(BaseModel):
    model_config = ConfigDict(extra="allow")

    people_id: Id
    timeoff_type_id: Id
    start_date: dt.date
    end_date: dt.date
    hours: Optional[float] = Field(None, gt=0)
    full_day: Optional[int] = None

    @model_validator(mode="after")
    def _check_order(self) -> "TimeOffDraft":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class BulkTimeOffParams(BaseModel):
    timeoff_entries: List[Any]


class ApproveTimeOffParams(BaseModel):
    id: Id
    approved_by: Id = 1


class RejectTimeOffParams(BaseModel):
    id: Id
    rejected_by: Id = 1


# Reports

REPORT_OPTIONS = (
    "group_by",
    "include_details",
    "include_percentages",
    "target_hours_per_day",
    "exclude_weekends",
    "include_budget_variance",
    "budget_warning_threshold",
    "forecast_weeks",
    "capacity_threshold",
)


class ReportParams(DateWindowParams):
    """Report options plus list filters forwarded to every underlying read."""

    group_by: Optional[
        Literal["person", "project", "client", "department", "date", "week", "month"]
    ] = None
    include_details: bool = False
    include_percentages: bool = True
    target_hours_per_day: float = Field(8, gt=0, le=24)
    exclude_weekends: bool = True
    include_budget_variance: bool = True
    budget_warning_threshold: float = Field(80, ge=0)
    forecast_weeks: int = Field(4, ge=1, le=52)
    capacity_threshold: float = Field(100, gt=0)

    def filters(self, *, exclude: tuple[str, ...] = ()) -> Dict[str, Any]:
        return super().filters(exclude=REPORT_OPTIONS + exclude)
