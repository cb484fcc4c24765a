"""Operation registry mapping (family, operation) keys to handlers.

Architecture:
    This module implements the Registry pattern for the operation router.
    Every concrete action the gateway can perform is an OperationHandler:
    an async function, the pydantic model describing its parameters and a
    one-line description. The router performs a single lookup per call.

Design Decisions:
    - Lookup table built once at initialization instead of nested switches
    - Per-operation parameter models, so each key declares exactly the
      fields it accepts
    - Decorator-based handlers: @operation_handler stores metadata on the
      function and collect_operation_handlers() scans a module for it
    - Duplicate keys are a programming error and raise immediately

Handler Signature:
    async def handler(ctx: OperationContext, params: ParamsModel) -> Any

See Also:
    - OperationRouter: Uses the registry for dispatch
    - registration.build_default_registry: Assembles the default table
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from types import ModuleType
from typing import Any, NamedTuple

from pydantic import BaseModel

HandlerFunc = Callable[..., Awaitable[Any]]


class OperationKey(NamedTuple):
    family: str
    operation: str

    def __str__(self) -> str:
        return f"{self.family}/{self.operation}"


@dataclass(frozen=True)
class OperationHandler:
    """Metadata for a registered operation."""

    key: OperationKey
    func: HandlerFunc
    params_model: type[BaseModel]
    description: str = ""


class OperationRegistry:
    """Lookup table of operation handlers."""

    def __init__(self) -> None:
        self._handlers: dict[OperationKey, OperationHandler] = {}

    def register(
        self,
        family: str,
        operation: str,
        func: HandlerFunc,
        *,
        params: type[BaseModel],
        description: str = "",
    ) -> OperationHandler:
        """Register a handler.

        Raises:
            ValueError: If the key is already registered
        """
        key = OperationKey(family, operation)
        if key in self._handlers:
            raise ValueError(f"Operation '{key}' is already registered")
        handler = OperationHandler(
            key=key,
            func=func,
            params_model=params,
            description=description or (func.__doc__ or "").strip().split("\n")[0],
        )
        self._handlers[key] = handler
        return handler

    def add(self, handler: OperationHandler) -> None:
        self.register(
            handler.key.family,
            handler.key.operation,
            handler.func,
            params=handler.params_model,
            description=handler.description,
        )

    def get(self, family: str, operation: str) -> OperationHandler | None:
        return self._handlers.get(OperationKey(family, operation))

    def families(self) -> list[str]:
        """Registered families in registration order."""
        return list(dict.fromkeys(key.family for key in self._handlers))

    def operations(self, family: str) -> list[str]:
        return [key.operation for key in self._handlers if key.family == family]

    def describe(self, family: str) -> list[dict[str, str]]:
        """Operations of a family with their one-line descriptions."""
        return [
            {"operation": h.key.operation, "description": h.description}
            for h in self._handlers.values()
            if h.key.family == family
        ]

    def __contains__(self, key: object) -> bool:
        return key in self._handlers

    def __iter__(self) -> Iterator[OperationHandler]:
        return iter(self._handlers.values())

    def __len__(self) -> int:
        return len(self._handlers)


def operation_handler(
    family: str,
    operation: str,
    *,
    params: type[BaseModel],
    description: str = "",
) -> Callable[[HandlerFunc], HandlerFunc]:
    """Decorator marking a module-level coroutine as an operation handler.

    Usage:
        @operation_handler("roles", "get-role-hierarchy", params=ListParams)
        async def role_hierarchy(ctx, params):
            ...

    The function is returned unchanged; metadata is stored on it and picked
    up by collect_operation_handlers(). A function may carry several
    registrations.
    """

    def decorator(func: HandlerFunc) -> HandlerFunc:
        if not hasattr(func, "_operation_handlers"):
            func._operation_handlers = []  # type: ignore[attr-defined]
        func._operation_handlers.append(  # type: ignore[attr-defined]
            OperationHandler(
                key=OperationKey(family, operation),
                func=func,
                params_model=params,
                description=description or (func.__doc__ or "").strip().split("\n")[0],
            )
        )
        return func

    return decorator


def collect_operation_handlers(module: ModuleType) -> list[OperationHandler]:
    """Collect decorated handlers from a module, in definition order."""
    handlers: list[OperationHandler] = []
    for obj in vars(module).values():
        if callable(obj) and hasattr(obj, "_operation_handlers"):
            handlers.extend(obj._operation_handlers)
    return handlers
