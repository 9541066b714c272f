from .executor import NOT_EXECUTED_ERROR, PlanExecutor
from .repository import ExecutionResultRepository, MemoryExecutionResultRepository
from .types import ExecutionLogEntry, PlanExecutionResult, StepOutcome, StepRunner

__all__ = [
    'ExecutionLogEntry',
    'ExecutionResultRepository',
    'MemoryExecutionResultRepository',
    'NOT_EXECUTED_ERROR',
    'PlanExecutionResult',
    'PlanExecutor',
    'StepOutcome',
    'StepRunner',
]
