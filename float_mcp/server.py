"""FastMCP server exposing the four consolidated tools.

The server speaks MCP over stdio, so logging is configured to stderr before
anything else runs. The gateway (admission sweep and HTTP session) is
closed by the server lifespan when the transport shuts down.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Union

from fastmcp import FastMCP

from .api import FloatAPI
from .config import load_settings
from .core.enums import ToolName
from .core.exceptions import ConfigurationError
from .tools import invoke_tool
from .utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

SERVER_NAME = "float-mcp"

INSTRUCTIONS = (
    "Tools for the Float resource-scheduling service. Pick the tool by resource "
    "family, then pass the operation and its parameters. Every result is "
    "{success, data, format} or {success: false, error}."
)


def create_server(api: FloatAPI) -> FastMCP:
    """Build the MCP server around an existing FloatAPI.

    Args:
        api: Gateway facade shared by every tool call; closed on shutdown
    """

    @asynccontextmanager
    async def lifespan(app: FastMCP) -> AsyncIterator[None]:
        logger.info("server_started", extra={"server": SERVER_NAME})
        try:
            yield
        finally:
            await api.close()
            logger.info("server_stopped", extra={"server": SERVER_NAME})

    mcp = FastMCP(name=SERVER_NAME, instructions=INSTRUCTIONS, lifespan=lifespan)

    @mcp.tool(name=ToolName.MANAGE_ENTITY.value)
    async def manage_entity(
        entity_type: str,
        operation: str,
        id: Optional[Union[int, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        format: str = "json",
    ) -> Dict[str, Any]:
        """Manage core entities: people, projects, tasks, clients, departments,
        roles, accounts and statuses.

        Operations: list, get, create, update, delete, plus
        get-current-account, deactivate-account, reactivate-account,
        update-account-timezone, set-account-department-filter,
        manage-account-permissions, bulk-update-account-permissions,
        get-default-status, set-default-status, get-statuses-by-type,
        get-roles-by-permission, get-role-permissions, update-role-permissions,
        get-role-hierarchy, check-role-access.

        Args:
            entity_type: Resource family
            operation: Operation to perform
            id: Record id for get, update, delete and single-record operations
            params: Filters for list operations or fields for create/update
            format: json or xml (csv is treated as json)
        """
        return await invoke_tool(
            api, ToolName.MANAGE_ENTITY, entity_type, operation, params, id=id, format=format
        )

    @mcp.tool(name=ToolName.MANAGE_PROJECT_WORKFLOW.value)
    async def manage_project_workflow(
        entity_type: str,
        operation: str,
        id: Optional[Union[int, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        format: str = "json",
    ) -> Dict[str, Any]:
        """Manage project workflow: phases, milestones, project-tasks and
        allocations.

        Operations: list, get, create, update, delete, plus
        list-phases-by-project, get-phases-by-date-range, get-active-phases,
        get-phase-schedule, get-project-milestones, get-upcoming-milestones,
        get-overdue-milestones, complete-milestone, get-milestone-reminders,
        get-project-tasks-by-project, get-project-tasks-by-phase,
        bulk-create-project-tasks, reorder-project-tasks, archive-project-task,
        get-project-task-dependencies.

        Args:
            entity_type: Resource family
            operation: Operation to perform
            id: Record id for get, update, delete and single-record operations
            params: Filters for list operations or fields for create/update
            format: json or xml (csv is treated as json)
        """
        return await invoke_tool(
            api,
            ToolName.MANAGE_PROJECT_WORKFLOW,
            entity_type,
            operation,
            params,
            id=id,
            format=format,
        )

    @mcp.tool(name=ToolName.MANAGE_TIME_TRACKING.value)
    async def manage_time_tracking(
        entity_type: str,
        operation: str,
        id: Optional[Union[int, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        format: str = "json",
    ) -> Dict[str, Any]:
        """Manage time tracking: logged-time, timeoff, timeoff-types,
        public-holidays and team-holidays.

        Operations: list, get, create, update, delete, plus
        bulk-create-logged-time, get-person-logged-time-summary,
        get-project-logged-time-summary, get-logged-time-timesheet,
        get-billable-time-report, bulk-create-timeoff, approve-timeoff,
        reject-timeoff, get-timeoff-calendar, get-person-timeoff-summary,
        list-team-holidays-by-department, list-team-holidays-by-date-range,
        list-recurring-team-holidays, get-upcoming-team-holidays.

        Args:
            entity_type: Resource family
            operation: Operation to perform
            id: Record id for get, update, delete and single-record operations
            params: Filters for list operations or fields for create/update
            format: json or xml (csv is treated as json)
        """
        return await invoke_tool(
            api,
            ToolName.MANAGE_TIME_TRACKING,
            entity_type,
            operation,
            params,
            id=id,
            format=format,
        )

    @mcp.tool(name=ToolName.GENERATE_REPORT.value)
    async def generate_report(
        report_type: str,
        params: Optional[Dict[str, Any]] = None,
        format: str = "json",
    ) -> Dict[str, Any]:
        """Generate a report: time-report, project-report,
        people-utilization-report, capacity-report, budget-report,
        milestone-report, timeoff-report, team-performance-report,
        resource-allocation-report, project-timeline-report or
        billable-analysis-report.

        Args:
            report_type: Report to generate
            params: start_date, end_date, group_by (person, project, client,
                department, date, week, month), include_details,
                include_percentages, target_hours_per_day, exclude_weekends,
                include_budget_variance, budget_warning_threshold,
                forecast_weeks, capacity_threshold, plus list filters such as
                people_id or project_id
            format: json or xml (csv is treated as json)
        """
        return await invoke_tool(
            api, ToolName.GENERATE_REPORT, "reports", report_type, params, format=format
        )

    logger.debug(
        "tools_registered",
        extra={"tools": [tool.value for tool in ToolName], "operations": len(api.registry)},
    )
    return mcp


def main() -> None:
    """Console entry point: load settings, then serve over stdio."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        raise SystemExit(1) from e

    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    api = FloatAPI.from_settings(settings)
    create_server(api).run()


if __name__ == "__main__":
    main()
