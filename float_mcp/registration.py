"""Operation registration utilities.

Builds the lookup table the router dispatches through: generated CRUD
handlers for every resource family plus the decorated handlers from each
handler module.
"""

from __future__ import annotations

import logging

from .handlers import HANDLER_MODULES, register_all_crud
from .runtime.registry import OperationRegistry, collect_operation_handlers

__all__ = ["build_default_registry", "register_handler_modules"]

logger = logging.getLogger(__name__)


def register_handler_modules(registry: OperationRegistry) -> None:
    """Register every @operation_handler function from the handler modules.

    Args:
        registry: Registry to populate
    """
    for module in HANDLER_MODULES:
        for handler in collect_operation_handlers(module):
            registry.add(handler)


def build_default_registry() -> OperationRegistry:
    """Create a registry holding the full operation catalogue."""
    registry = OperationRegistry()
    register_all_crud(registry)
    register_handler_modules(registry)
    logger.debug(
        "registry_built",
        extra={"families": len(registry.families()), "operations": len(registry)},
    )
    return registry
