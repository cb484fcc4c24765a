"""Core enumerations shared by the gateway, router and tool surface.

Design Decisions:
    - String enums: values travel unchanged through tool parameters and logs
    - ResponseFormat.coerce() is the single place "csv" is downgraded to JSON
"""

from __future__ import annotations

from enum import Enum


class HttpMethod(str, Enum):
    """HTTP methods accepted by the request executor."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def carries_body(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class ResponseFormat(str, Enum):
    """Response encodings negotiated with the remote service."""

    JSON = "json"
    XML = "xml"

    @property
    def media_type(self) -> str:
        return "application/xml" if self is ResponseFormat.XML else "application/json"

    @classmethod
    def coerce(cls, value: str | ResponseFormat | None) -> ResponseFormat:
        """Resolve a caller-supplied format.

        The remote service has no CSV support, so "csv" is accepted and
        treated as JSON. Unknown values raise ValueError.
        """
        if value is None:
            return cls.JSON
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized in ("", "csv"):
            return cls.JSON
        return cls(normalized)


class ToolName(str, Enum):
    """Consolidated tools exposed to the agent."""

    MANAGE_ENTITY = "manage-entity"
    MANAGE_PROJECT_WORKFLOW = "manage-project-workflow"
    MANAGE_TIME_TRACKING = "manage-time-tracking"
    GENERATE_REPORT = "generate-report"


# Resource families reachable through each consolidated tool.
TOOL_FAMILIES: dict[ToolName, tuple[str, ...]] = {
    ToolName.MANAGE_ENTITY: (
        "people",
        "projects",
        "tasks",
        "clients",
        "departments",
        "roles",
        "accounts",
        "statuses",
    ),
    ToolName.MANAGE_PROJECT_WORKFLOW: (
        "phases",
        "milestones",
        "project-tasks",
        "allocations",
    ),
    ToolName.MANAGE_TIME_TRACKING: (
        "logged-time",
        "timeoff",
        "timeoff-types",
        "public-holidays",
        "team-holidays",
    ),
    ToolName.GENERATE_REPORT: ("reports",),
}
