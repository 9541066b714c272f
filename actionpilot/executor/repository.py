from abc import ABC, abstractmethod

from .types import PlanExecutionResult


class ExecutionResultRepository(ABC):
    """Stores the latest execution result of each plan."""

    @abstractmethod
    async def save(self, result: PlanExecutionResult) -> None:
        """Store the result, replacing any earlier result of the same plan."""
        pass

    @abstractmethod
    async def find_by_plan_id(self, plan_id: str) -> PlanExecutionResult | None:
        pass


class MemoryExecutionResultRepository(ExecutionResultRepository):
    def __init__(self) -> None:
        self.results: dict[str, PlanExecutionResult] = {}

    async def save(self, result: PlanExecutionResult) -> None:
        self.results[result.plan_id] = result

    async def find_by_plan_id(self, plan_id: str) -> PlanExecutionResult | None:
        return self.results.get(plan_id)
