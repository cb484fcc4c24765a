"""Direct CRUD handlers shared by every resource family.

Every family supports list, get, create, update (PATCH) and delete. The
handlers differ only in path, record model and the wording of the delete
confirmation, so they are generated from the RESOURCES table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..models import (
    Account,
    Allocation,
    Client,
    Department,
    FloatRecord,
    LoggedTime,
    Milestone,
    Person,
    Phase,
    Project,
    ProjectTask,
    PublicHoliday,
    Role,
    Status,
    Task,
    TeamHoliday,
    TimeOff,
    TimeOffType,
)
from ..models.params import CreateParams, IdParams, ListParams, UpdateParams
from ..runtime.registry import OperationRegistry
from ..runtime.rest import ModelAdapter
from ..runtime.router import OperationContext


@dataclass(frozen=True)
class Resource:
    """One resource family exposed by the remote service.

    Attributes:
        family: Router family name
        path: Collection path
        model: Record model used to check responses
        label: Human-readable singular name
        archives: True when delete archives instead of removing
    """

    family: str
    path: str
    model: type[FloatRecord]
    label: str
    archives: bool = False

    def item_path(self, record_id: Any) -> str:
        return f"{self.path}/{record_id}"

    @property
    def one(self) -> ModelAdapter:
        return ModelAdapter(self.model)

    @property
    def many(self) -> ModelAdapter:
        return ModelAdapter(self.model, many=True)


RESOURCES: dict[str, Resource] = {
    r.family: r
    for r in (
        Resource("people", "/people", Person, "Person", archives=True),
        Resource("projects", "/projects", Project, "Project", archives=True),
        Resource("tasks", "/tasks", Task, "Task"),
        Resource("clients", "/clients", Client, "Client", archives=True),
        Resource("departments", "/departments", Department, "Department"),
        Resource("roles", "/roles", Role, "Role"),
        Resource("accounts", "/accounts", Account, "Account"),
        Resource("statuses", "/statuses", Status, "Status"),
        Resource("phases", "/phases", Phase, "Phase"),
        Resource("milestones", "/milestones", Milestone, "Milestone"),
        Resource("project-tasks", "/project_tasks", ProjectTask, "Project task"),
        Resource("allocations", "/tasks", Allocation, "Allocation"),
        Resource("logged-time", "/logged-time", LoggedTime, "Logged time entry"),
        Resource("timeoff", "/timeoff", TimeOff, "Time off entry"),
        Resource("timeoff-types", "/timeoff-types", TimeOffType, "Time off type"),
        Resource("public-holidays", "/public-holidays", PublicHoliday, "Public holiday"),
        Resource("team-holidays", "/team-holidays", TeamHoliday, "Team holiday"),
    )
}


def register_crud(registry: OperationRegistry, resource: Resource) -> None:
    """Register list/get/create/update/delete for one resource."""

    async def list_records(ctx: OperationContext, params: ListParams) -> list[Any]:
        return await ctx.list_all(resource.path, params.filters(), adapter=resource.many)

    async def get_record(ctx: OperationContext, params: IdParams) -> Any:
        return await ctx.get(resource.item_path(params.id), adapter=resource.one)

    async def create_record(ctx: OperationContext, params: CreateParams) -> Any:
        return await ctx.post(resource.path, params.payload(), adapter=resource.one)

    async def update_record(ctx: OperationContext, params: UpdateParams) -> Any:
        return await ctx.patch(
            resource.item_path(params.id), params.payload(), adapter=resource.one
        )

    async def delete_record(ctx: OperationContext, params: IdParams) -> dict[str, Any]:
        await ctx.delete(resource.item_path(params.id))
        verb = "archived" if resource.archives else "deleted"
        return {"success": True, "message": f"{resource.label} {verb} successfully"}

    family = resource.family
    noun = resource.label.lower()
    registry.register(family, "list", list_records, params=ListParams, description=f"List {family}")
    registry.register(family, "get", get_record, params=IdParams, description=f"Get a {noun}")
    registry.register(
        family, "create", create_record, params=CreateParams, description=f"Create a {noun}"
    )
    registry.register(
        family, "update", update_record, params=UpdateParams, description=f"Update a {noun}"
    )
    registry.register(
        family, "delete", delete_record, params=IdParams, description=f"Delete a {noun}"
    )


def register_all_crud(registry: OperationRegistry) -> None:
    for resource in RESOURCES.values():
        register_crud(registry, resource)
