"""Core data structures of plan execution."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol, Sequence

from actionpilot.plan import PlanStep


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StepOutcome:
    """The outcome the interaction agent reported for one step."""
    success: bool
    message: str | None = None
    error: str | None = None
    duration_ms: int = 0
    artifact_ref: str | None = None  # e.g. screenshot path
    step_type: str | None = None
    step_target: str | None = None
    executed_at: datetime = field(default_factory=utc_now)

    @classmethod
    def succeeded(cls, message: str | None = None, duration_ms: int = 0, artifact_ref: str | None = None,
                  step_type: str | None = None, step_target: str | None = None) -> 'StepOutcome':
        return cls(True, message=message, duration_ms=duration_ms, artifact_ref=artifact_ref,
                   step_type=step_type, step_target=step_target)

    @classmethod
    def failed(cls, error: str, duration_ms: int = 0,
               step_type: str | None = None, step_target: str | None = None) -> 'StepOutcome':
        return cls(False, error=error, duration_ms=duration_ms, step_type=step_type, step_target=step_target)

    def to_dict(self) -> dict[str, Any]:
        return {
            'success': self.success,
            'message': self.message,
            'error': self.error,
            'duration_ms': self.duration_ms,
            'artifact_ref': self.artifact_ref,
            'step_type': self.step_type,
            'step_target': self.step_target,
            'executed_at': self.executed_at.isoformat(),
        }


@dataclass(frozen=True)
class ExecutionLogEntry:
    """One entry of the execution log, at the same index as its step in the plan."""
    plan_id: str
    step_index: int
    step: PlanStep
    outcome: StepOutcome
    logged_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            'plan_id': self.plan_id,
            'step_index': self.step_index,
            'step': self.step.to_dict(),
            'outcome': self.outcome.to_dict(),
            'logged_at': self.logged_at.isoformat(),
        }


@dataclass(frozen=True)
class PlanExecutionResult:
    plan_id: str
    success: bool
    started_at: datetime
    finished_at: datetime
    log_entries: tuple[ExecutionLogEntry, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'log_entries', tuple(self.log_entries))

    @property
    def step_outcomes(self) -> list[StepOutcome]:
        return [entry.outcome for entry in self.log_entries]

    @property
    def failed_entries(self) -> list[ExecutionLogEntry]:
        return [entry for entry in self.log_entries if not entry.outcome.success]

    def to_dict(self) -> dict[str, Any]:
        return {
            'plan_id': self.plan_id,
            'success': self.success,
            'started_at': self.started_at.isoformat(),
            'finished_at': self.finished_at.isoformat(),
            'log_entries': [entry.to_dict() for entry in self.log_entries],
        }


class StepRunner(Protocol):
    async def run_plan(self, steps: Sequence[PlanStep], plan_id: str | None = None) -> list[StepOutcome]:
        """Run the steps in order against the interaction agent.

        ``plan_id`` identifies the plan the steps belong to, for logging and
        for outcomes that concern the whole run.

        Returns one outcome per step the agent reported on, in step order. The
        list may be shorter than ``steps`` if the agent stopped early.
        """
        ...
