from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from actionpilot.executor import ExecutionLogEntry, ExecutionResultRepository, PlanExecutionResult, StepOutcome
from actionpilot.plan import PlanStep
from .models import ExecutionLogEntryRow, ExecutionResultRow


class SqlExecutionResultRepository(ExecutionResultRepository):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def save(self, result: PlanExecutionResult) -> None:
        async with self.session_factory() as session, session.begin():
            row = await self._find_row(session, result.plan_id)
            if row is None:
                row = ExecutionResultRow(plan_id=result.plan_id)
                session.add(row)
            row.success = result.success
            row.started_at = result.started_at
            row.finished_at = result.finished_at
            row.log_entries = [_to_log_entry_row(entry) for entry in result.log_entries]

    async def find_by_plan_id(self, plan_id: str) -> PlanExecutionResult | None:
        async with self.session_factory() as session:
            row = await self._find_row(session, plan_id)
            return _to_result(row) if row is not None else None

    @staticmethod
    async def _find_row(session: AsyncSession, plan_id: str) -> ExecutionResultRow | None:
        stmt = (
            select(ExecutionResultRow)
            .where(ExecutionResultRow.plan_id == plan_id)
            .options(selectinload(ExecutionResultRow.log_entries))
        )
        return await session.scalar(stmt)


def _utc(value: datetime) -> datetime:
    # SQLite drops the offset; values are always written in UTC.
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _to_log_entry_row(entry: ExecutionLogEntry) -> ExecutionLogEntryRow:
    step, outcome = entry.step, entry.outcome
    return ExecutionLogEntryRow(
        plan_id=entry.plan_id,
        step_index=entry.step_index,
        step_type=step.type.value,
        step_target=step.target,
        step_explanation=step.explanation,
        step_parameters=dict(step.parameters),
        success=outcome.success,
        message=outcome.message,
        error=outcome.error,
        duration_ms=outcome.duration_ms,
        artifact_ref=outcome.artifact_ref,
        outcome_step_type=outcome.step_type,
        outcome_step_target=outcome.step_target,
        executed_at=outcome.executed_at,
        logged_at=entry.logged_at,
    )


def _to_result(row: ExecutionResultRow) -> PlanExecutionResult:
    entries = [
        ExecutionLogEntry(
            plan_id=entry.plan_id,
            step_index=entry.step_index,
            step=PlanStep(entry.step_type, entry.step_target, entry.step_explanation,
                          dict(entry.step_parameters or {})),
            outcome=StepOutcome(
                success=entry.success,
                message=entry.message,
                error=entry.error,
                duration_ms=entry.duration_ms,
                artifact_ref=entry.artifact_ref,
                step_type=entry.outcome_step_type,
                step_target=entry.outcome_step_target,
                executed_at=_utc(entry.executed_at),
            ),
            logged_at=_utc(entry.logged_at),
        )
        for entry in sorted(row.log_entries, key=lambda e: e.step_index)
    ]
    return PlanExecutionResult(
        plan_id=row.plan_id,
        success=row.success,
        started_at=_utc(row.started_at),
        finished_at=_utc(row.finished_at),
        log_entries=tuple(entries),
    )
