import logging

from actionpilot.plan import Plan
from .types import ExecutionLogEntry, PlanExecutionResult, StepOutcome, StepRunner, utc_now

logger = logging.getLogger(__name__)

NOT_EXECUTED_ERROR = "Step was not executed by agent (no result returned)"


class PlanExecutor:
    """Drives a plan through a step runner and reconciles the reported outcomes.

    The log of every result has exactly one entry per planned step, in plan
    order: missing outcomes are recorded as synthetic failures and outcomes
    beyond the last step are dropped.
    """

    def __init__(self, step_runner: StepRunner):
        if step_runner is None:
            raise ValueError("step_runner cannot be None")
        self.step_runner = step_runner

    async def execute(self, plan: Plan) -> PlanExecutionResult:
        if plan is None:
            raise ValueError("plan cannot be None")
        logger.info("Executing plan %s for entity_type=%s entity_id=%s action=%s",
                    plan.id, plan.entity_type_id, plan.entity_id, plan.action_id)

        started_at = utc_now()
        outcomes = list(await self.step_runner.run_plan(plan.steps, plan.id))
        log_entries = self._reconcile(plan, outcomes)

        success = all(entry.outcome.success for entry in log_entries)
        finished_at = max(utc_now(), started_at)
        logger.info("Plan %s execution finished with status=%s, steps=%d",
                    plan.id, "SUCCESS" if success else "FAILED", len(log_entries))
        return PlanExecutionResult(plan.id, success, started_at, finished_at, tuple(log_entries))

    @staticmethod
    def _reconcile(plan: Plan, outcomes: list[StepOutcome]) -> list[ExecutionLogEntry]:
        steps = plan.steps
        if len(outcomes) > len(steps):
            logger.warning("Agent reported %d outcomes for %d steps of plan %s, dropping the extra outcomes",
                           len(outcomes), len(steps), plan.id)

        log_entries: list[ExecutionLogEntry] = []
        for index, step in enumerate(steps):
            if index < len(outcomes):
                outcome = outcomes[index]
            else:
                outcome = StepOutcome.failed(
                    NOT_EXECUTED_ERROR,
                    duration_ms=0,
                    step_type=step.type.value,
                    step_target=step.target,
                )
            logger.debug("Plan %s step %d (%s) success=%s", plan.id, index, step.type.value, outcome.success)
            log_entries.append(ExecutionLogEntry(plan.id, index, step, outcome))
        return log_entries
