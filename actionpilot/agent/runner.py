import logging
import time
from typing import Sequence

from actionpilot.executor import StepOutcome
from actionpilot.plan import PlanStep, StepType, parse_action_target
from actionpilot.resolver import Resolver
from .client import AgentClient, elapsed_ms
from .command import AgentCommand

logger = logging.getLogger(__name__)

DEFAULT_WAIT_TIMEOUT_MS = 5000


class AgentStepRunner:
    """Runs plan steps one by one through the interaction agent.

    Steps targeting ``action(<id>)`` are resolved to the selector of the
    action's UI binding at run time.
    """

    def __init__(self, client: AgentClient, resolver: Resolver, app_base_url: str, headless: bool = True):
        self.client = client
        self.resolver = resolver
        self.app_base_url = app_base_url
        self.headless = headless

    async def run_plan(self, steps: Sequence[PlanStep], plan_id: str | None = None) -> list[StepOutcome]:
        logger.info("Starting execution of %d steps of plan %s", len(steps), plan_id)
        outcomes: list[StepOutcome] = []

        init_response = await self.client.initialize(self.app_base_url, self.headless)
        if not init_response.success:
            logger.error("Failed to initialize agent: %s", init_response.error)
            outcomes.append(StepOutcome.failed(init_response.error or "Agent initialization failed",
                                               step_type='initialize', step_target='browser'))
            return outcomes

        try:
            for step in steps:
                outcome = await self._run_step(step)
                outcomes.append(outcome)
                if not outcome.success:
                    logger.error("Step %s failed: %s", step.type.value, outcome.error)
        except Exception as e:
            logger.exception("Plan execution failed")
            outcomes.append(StepOutcome.failed(f"Plan execution failed: {e}",
                                               step_type='plan', step_target=plan_id))
            return outcomes

        logger.info("Execution completed: %d steps executed", len(outcomes))
        return outcomes

    async def close(self) -> None:
        response = await self.client.close()
        if response.success:
            logger.info("Agent closed successfully")
        else:
            logger.error("Failed to close agent: %s", response.error)

    async def _run_step(self, step: PlanStep) -> StepOutcome:
        start = time.monotonic()
        step_type = step.type.value
        command = await self.to_command(step)
        if command is None:
            return StepOutcome.failed(f"Unknown step type: {step_type}", elapsed_ms(start),
                                      step_type=step_type, step_target=step.target)

        response = await self.client.execute(command)
        duration_ms = elapsed_ms(start)
        if response.success:
            screenshot = response.data.get('screenshot')
            return StepOutcome.succeeded(response.message, duration_ms,
                                         artifact_ref=screenshot if isinstance(screenshot, str) else None,
                                         step_type=step_type, step_target=step.target)
        return StepOutcome.failed(response.error or "Agent reported a failure", duration_ms,
                                  step_type=step_type, step_target=step.target)

    async def to_command(self, step: PlanStep) -> AgentCommand | None:
        """Translate a plan step into an agent command, or None for unsupported steps."""
        match step.type:
            case StepType.OPEN_PAGE:
                return AgentCommand.open_page(step.target, step.explanation)
            case StepType.CLICK:
                return AgentCommand.click(await self._resolve_selector(step.target), step.explanation)
            case StepType.HOVER:
                return AgentCommand.hover(await self._resolve_selector(step.target), step.explanation)
            case StepType.HIGHLIGHT:
                return AgentCommand.highlight(await self._resolve_selector(step.target), step.explanation)
            case StepType.TYPE:
                text = step.parameters.get('text', '')
                return AgentCommand.type_text(await self._resolve_selector(step.target), str(text), step.explanation)
            case StepType.WAIT:
                timeout = step.parameters.get('timeout', DEFAULT_WAIT_TIMEOUT_MS)
                return AgentCommand.wait(step.target, step.explanation, int(timeout))
            case StepType.EXPLAIN:
                return AgentCommand.explain(step.explanation)
            case StepType.SCREENSHOT:
                return AgentCommand.screenshot(step.explanation)
        logger.warning("Unknown step type: %s", step.type)
        return None

    async def _resolve_selector(self, target: str | None) -> str | None:
        action_id = parse_action_target(target)
        if action_id is None:
            return target
        binding = await self.resolver.find_ui_binding(action_id)
        if binding is None:
            logger.warning("UIBinding not found for action: %s, using target as selector", action_id)
            return target
        return binding.selector

