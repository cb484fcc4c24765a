"""Operation handlers, one module per group of resource families.

Modules:
    - crud: list/get/create/update/delete for every family
    - entities: roles, accounts, statuses
    - workflow: phases, milestones, project tasks
    - time_tracking: logged time, time off, team holidays
    - reports: the reports family
"""

from . import entities, reports, time_tracking, workflow
from .crud import RESOURCES, Resource, register_all_crud, register_crud

# Modules whose @operation_handler functions are collected at registration.
HANDLER_MODULES = (entities, workflow, time_tracking, reports)

__all__ = [
    "HANDLER_MODULES",
    "RESOURCES",
    "Resource",
    "register_all_crud",
    "register_crud",
]
