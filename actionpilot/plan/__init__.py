from .plan import Plan, PlanStatus
from .repository import MemoryPlanRepository, PlanRepository
from .request import ExecutionRequest
from .step import PlanStep, StepType, action_target, parse_action_target

__all__ = [
    'ExecutionRequest',
    'MemoryPlanRepository',
    'Plan',
    'PlanRepository',
    'PlanStatus',
    'PlanStep',
    'StepType',
    'action_target',
    'parse_action_target',
]
