"""Project status transitions.

OmniFocus does not accept a project status as a plain value: ``completed``
and ``dropped`` are boolean flags, ``active`` and ``on hold`` are status
object references. Reactivating a dropped or completed project is rejected
unless both flags are cleared before the status reference is set.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from .script_builder import AssignField, bool_literal


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    DROPPED = "dropped"


@dataclass(frozen=True)
class FlagStep:
    flag: str
    value: bool


@dataclass(frozen=True)
class StatusReferenceStep:
    reference: str


TransitionStep = Union[FlagStep, StatusReferenceStep]

_TRANSITIONS = {
    ProjectStatus.DROPPED: (FlagStep("dropped", True),),
    ProjectStatus.COMPLETED: (FlagStep("completed", True),),
    ProjectStatus.ACTIVE: (
        FlagStep("dropped", False),
        FlagStep("completed", False),
        StatusReferenceStep("active status"),
    ),
    ProjectStatus.ON_HOLD: (StatusReferenceStep("on hold status"),),
}


def plan_status_transition(status: Union[ProjectStatus, str]) -> List[TransitionStep]:
    """Ordered steps reaching *status*; flag steps always come first."""
    steps: Tuple[TransitionStep, ...] = _TRANSITIONS[ProjectStatus(status)]
    return sorted(steps, key=lambda step: isinstance(step, StatusReferenceStep))


def status_statements(target: str, status: Union[ProjectStatus, str]) -> List[AssignField]:
    statements = []
    for step in plan_status_transition(status):
        if isinstance(step, FlagStep):
            statements.append(AssignField(target, step.flag, bool_literal(step.value)))
        else:
            statements.append(AssignField(target, "status", step.reference))
    return statements


def status_label(status: Union[ProjectStatus, str]) -> str:
    return ProjectStatus(status).value.upper()
