"""Specialized operations for roles, accounts and statuses."""

from __future__ import annotations

from typing import Any

from ..models.params import (
    AccountDepartmentFilterParams,
    AccountPermissionsParams,
    AccountPermissionUpdate,
    AccountTimezoneParams,
    BulkAccountPermissionsParams,
    IdParams,
    ListParams,
    NoParams,
    RoleAccessParams,
    RolePermissionFilterParams,
    RolePermissionsUpdateParams,
    SetDefaultStatusParams,
    StatusesByTypeParams,
    StatusTypeParams,
)
from ..runtime.registry import operation_handler
from ..runtime.router import OperationContext
from .aggregations import is_truthy_flag, to_number
from .crud import RESOURCES

ROLES = RESOURCES["roles"]
ACCOUNTS = RESOURCES["accounts"]
STATUSES = RESOURCES["statuses"]


# Roles


@operation_handler("roles", "get-roles-by-permission", params=RolePermissionFilterParams)
async def roles_by_permission(ctx: OperationContext, params: RolePermissionFilterParams) -> Any:
    """List roles granting a permission."""
    return await ctx.list_all(ROLES.path, params.filters(), adapter=ROLES.many)


@operation_handler("roles", "get-role-permissions", params=IdParams)
async def role_permissions(ctx: OperationContext, params: IdParams) -> dict[str, Any]:
    """Get the permission list of one role."""
    role = await ctx.get(ROLES.item_path(params.id), adapter=ROLES.one) or {}
    return {"role_id": params.id, "permissions": role.get("permissions") or []}


@operation_handler("roles", "update-role-permissions", params=RolePermissionsUpdateParams)
async def update_role_permissions(
    ctx: OperationContext, params: RolePermissionsUpdateParams
) -> Any:
    """Replace the permission list of one role."""
    return await ctx.patch(
        ROLES.item_path(params.id),
        {"permissions": params.role_permissions},
        adapter=ROLES.one,
    )


@operation_handler("roles", "get-role-hierarchy", params=ListParams)
async def role_hierarchy(ctx: OperationContext, params: ListParams) -> list[Any]:
    """List roles ordered by level, lowest first."""
    roles = await ctx.list_all(ROLES.path, params.filters(), adapter=ROLES.many)
    return sorted(roles, key=lambda role: to_number(role.get("level")))


@operation_handler("roles", "check-role-access", params=RoleAccessParams)
async def check_role_access(ctx: OperationContext, params: RoleAccessParams) -> dict[str, Any]:
    """Check whether a role carries a permission."""
    role = await ctx.get(ROLES.item_path(params.id), adapter=ROLES.one) or {}
    permissions = role.get("permissions") or []
    return {
        "role_id": params.id,
        "permission": params.permission,
        "has_permission": params.permission in permissions,
        "permissions": permissions,
    }


# Accounts


@operation_handler("accounts", "get-current-account", params=NoParams)
async def current_account(ctx: OperationContext, params: NoParams) -> Any:
    """Get the account owning the API token."""
    return await ctx.get(f"{ACCOUNTS.path}/current", adapter=ACCOUNTS.one)


@operation_handler("accounts", "deactivate-account", params=IdParams)
async def deactivate_account(ctx: OperationContext, params: IdParams) -> Any:
    return await ctx.patch(ACCOUNTS.item_path(params.id), {"active": 0}, adapter=ACCOUNTS.one)


@operation_handler("accounts", "reactivate-account", params=IdParams)
async def reactivate_account(ctx: OperationContext, params: IdParams) -> Any:
    return await ctx.patch(ACCOUNTS.item_path(params.id), {"active": 1}, adapter=ACCOUNTS.one)


@operation_handler("accounts", "update-account-timezone", params=AccountTimezoneParams)
async def update_account_timezone(ctx: OperationContext, params: AccountTimezoneParams) -> Any:
    return await ctx.patch(
        ACCOUNTS.item_path(params.id), {"timezone": params.timezone}, adapter=ACCOUNTS.one
    )


@operation_handler(
    "accounts", "set-account-department-filter", params=AccountDepartmentFilterParams
)
async def set_account_department_filter(
    ctx: OperationContext, params: AccountDepartmentFilterParams
) -> Any:
    """Restrict (or, with null, unrestrict) the departments an account sees."""
    return await ctx.patch(
        ACCOUNTS.item_path(params.id),
        {"department_filter_id": params.department_filter_id},
        adapter=ACCOUNTS.one,
    )


@operation_handler("accounts", "manage-account-permissions", params=AccountPermissionsParams)
async def manage_account_permissions(
    ctx: OperationContext, params: AccountPermissionsParams
) -> Any:
    return await ctx.patch(
        ACCOUNTS.item_path(params.id), params.permissions_data, adapter=ACCOUNTS.one
    )


@operation_handler(
    "accounts", "bulk-update-account-permissions", params=BulkAccountPermissionsParams
)
async def bulk_update_account_permissions(
    ctx: OperationContext, params: BulkAccountPermissionsParams
) -> dict[str, Any]:
    """Apply permission updates to several accounts, one at a time."""

    async def apply(raw: Any) -> Any:
        update = AccountPermissionUpdate.model_validate(raw)
        return await ctx.patch(
            ACCOUNTS.item_path(update.account_id), update.permissions, adapter=ACCOUNTS.one
        )

    outcome = await ctx.bulk("account-permissions", params.accounts, apply)
    return outcome.to_dict()


# Statuses


@operation_handler("statuses", "get-default-status", params=StatusTypeParams)
async def default_status(ctx: OperationContext, params: StatusTypeParams) -> Any:
    """Get the default status, or None when no status is flagged default."""
    statuses = await ctx.list_all(STATUSES.path, params.filters(), adapter=STATUSES.many)
    return next((s for s in statuses if is_truthy_flag(s.get("is_default"))), None)


@operation_handler("statuses", "set-default-status", params=SetDefaultStatusParams)
async def set_default_status(ctx: OperationContext, params: SetDefaultStatusParams) -> Any:
    return await ctx.patch(
        STATUSES.item_path(params.default_status_id), {"is_default": True}, adapter=STATUSES.one
    )


@operation_handler("statuses", "get-statuses-by-type", params=StatusesByTypeParams)
async def statuses_by_type(ctx: OperationContext, params: StatusesByTypeParams) -> list[Any]:
    return await ctx.list_all(STATUSES.path, params.filters(), adapter=STATUSES.many)
