"""Consolidated tool dispatch.

Each MCP tool covers a fixed set of resource families. A call names the
family (entity_type or report_type) and the operation; the tool checks the
family belongs to it, routes through FloatAPI and wraps the outcome in a
structured result.

Result shapes:
    {"success": True, "data": ..., "format": "json"}
    {"success": False, "error": {"kind": ..., "message": ..., ...}}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .core.enums import TOOL_FAMILIES, ResponseFormat, ToolName
from .core.exceptions import GatewayError, ValidationError

if TYPE_CHECKING:
    from .api import FloatAPI

logger = logging.getLogger(__name__)


def resolve_tool(tool: ToolName | str) -> ToolName:
    try:
        return ToolName(tool)
    except ValueError as e:
        raise ValidationError(f"Unknown tool '{tool}'") from e


def check_family(tool: ToolName, family: str) -> None:
    """Raise ValidationError when the family is not served by the tool."""
    allowed = TOOL_FAMILIES[tool]
    if family not in allowed:
        raise ValidationError(
            f"Unsupported entity type '{family}' for tool '{tool.value}'; "
            f"expected one of: {', '.join(allowed)}",
            family=family,
        )


async def invoke_tool(
    api: FloatAPI,
    tool: ToolName | str,
    family: str,
    operation: str,
    params: Mapping[str, Any] | None = None,
    *,
    id: Any = None,
    format: str | None = None,
) -> dict[str, Any]:
    """Run one tool call and return its structured result.

    Gateway errors become ``{"success": False, "error": ...}``; anything
    else propagates.

    Args:
        api: Gateway facade
        tool: Consolidated tool name
        family: Resource family (or "reports")
        operation: Operation within the family (the report type for reports)
        params: Operation parameters
        id: Record id, merged into params when given
        format: json, xml or csv
    """
    call = dict(params or {})
    if id is not None:
        call["id"] = id

    try:
        resolved = resolve_tool(tool)
        check_family(resolved, family)
        data = await api.route(family, operation, call, response_format=format)
    except GatewayError as e:
        logger.warning(
            "tool_call_failed",
            extra={
                "tool": str(tool.value if isinstance(tool, ToolName) else tool),
                "family": family,
                "operation": operation,
                "kind": e.kind,
                "status_code": e.status_code,
            },
        )
        return {"success": False, "error": e.to_dict()}

    return {
        "success": True,
        "data": data,
        "format": ResponseFormat.coerce(format).value,
    }
