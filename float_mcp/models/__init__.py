"""Resource and parameter models.

Architecture:
    Resource models validate payloads returned by the remote service. They
    are permissive (extra="allow"): declared fields are type-checked, every
    other field is kept so records come back unmodified.

    Parameter models (params.py) describe what each router operation
    accepts, one model per operation shape.

Model Categories:
    - Entities: Person, Project, Task, Client, Department, Role, Account, Status
    - Workflow: Phase, Milestone, ProjectTask, Allocation
    - Time tracking: LoggedTime, TimeOff, TimeOffType, PublicHoliday, TeamHoliday
"""

from .base import FloatRecord
from .entities import Account, Client, Department, Person, Project, Role, Status, Task
from .time_tracking import LoggedTime, PublicHoliday, TeamHoliday, TimeOff, TimeOffType
from .workflow import Allocation, Milestone, Phase, ProjectTask

__all__ = [
    "FloatRecord",
    "Person",
    "Project",
    "Task",
    "Client",
    "Department",
    "Role",
    "Account",
    "Status",
    "Phase",
    "Milestone",
    "ProjectTask",
    "Allocation",
    "LoggedTime",
    "TimeOff",
    "TimeOffType",
    "PublicHoliday",
    "TeamHoliday",
]
