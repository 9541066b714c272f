import dataclasses
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .step import PlanStep


class PlanStatus(str, Enum):
    """Lifecycle of a plan. The planner only ever produces CREATED."""
    CREATED = "CREATED"
    EXECUTING = "EXECUTING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class Plan:
    """An ordered, immutable list of steps realizing one action on one entity.

    The order of ``steps`` is the execution order. Status changes produce a
    new value through ``with_status``.
    """
    entity_type_id: str
    entity_id: str
    action_id: str
    steps: tuple[PlanStep, ...] = ()
    status: PlanStatus = PlanStatus.CREATED
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        object.__setattr__(self, 'steps', tuple(self.steps))
        object.__setattr__(self, 'status', PlanStatus(self.status))

    def with_status(self, status: PlanStatus) -> 'Plan':
        return dataclasses.replace(self, status=status)

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'entity_type_id': self.entity_type_id,
            'entity_id': self.entity_id,
            'action_id': self.action_id,
            'status': self.status.value,
            'steps': [step.to_dict() for step in self.steps],
        }
