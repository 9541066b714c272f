import logging

from actionpilot.exceptions import ExecutorNotConfiguredError, PlanNotFoundError
from actionpilot.executor import (
    ExecutionResultRepository,
    MemoryExecutionResultRepository,
    PlanExecutionResult,
    PlanExecutor,
)
from actionpilot.plan import ExecutionRequest, Plan, PlanRepository
from actionpilot.planner import Planner

logger = logging.getLogger(__name__)


class ExecutionService:
    """Entry point for callers: creates, stores, looks up and executes plans.

    Plans are stored exactly as the planner created them. Status transitions
    beyond CREATED are left to the orchestration layer that owns them. The
    latest execution result of each plan is stored in ``result_repository``.
    """

    def __init__(
            self,
            planner: Planner,
            repository: PlanRepository,
            executor: PlanExecutor | None = None,
            result_repository: ExecutionResultRepository | None = None,
    ):
        self.planner = planner
        self.repository = repository
        self.executor = executor
        self.result_repository = result_repository or MemoryExecutionResultRepository()

    async def create_plan(self, request: ExecutionRequest) -> Plan:
        plan = await self.planner.create_plan(request)
        await self.repository.save(plan)
        logger.debug("Stored plan %s", plan.id)
        return plan

    async def get_plan(self, plan_id: str) -> Plan | None:
        return await self.repository.get(plan_id)

    async def execute_plan(self, plan_id: str) -> PlanExecutionResult:
        if self.executor is None:
            raise ExecutorNotConfiguredError()
        plan = await self.repository.get(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        result = await self.executor.execute(plan)
        await self.result_repository.save(result)
        logger.debug("Stored execution result of plan %s", plan_id)
        return result

    async def get_execution_result(self, plan_id: str) -> PlanExecutionResult | None:
        return await self.result_repository.find_by_plan_id(plan_id)
