from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from actionpilot.plan import Plan, PlanRepository, PlanStatus, PlanStep
from .models import PlanRow, PlanStepRow


class SqlPlanRepository(PlanRepository):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def save(self, plan: Plan) -> None:
        async with self.session_factory() as session, session.begin():
            row = await session.get(PlanRow, plan.id, options=[selectinload(PlanRow.steps)])
            if row is None:
                row = PlanRow(id=plan.id)
                session.add(row)
            row.entity_type_id = plan.entity_type_id
            row.entity_id = plan.entity_id
            row.action_id = plan.action_id
            row.status = plan.status.value
            row.steps = [
                PlanStepRow(
                    step_index=index,
                    type=step.type.value,
                    target=step.target,
                    explanation=step.explanation,
                    parameters=dict(step.parameters),
                )
                for index, step in enumerate(plan.steps)
            ]

    async def get(self, plan_id: str) -> Plan | None:
        async with self.session_factory() as session:
            row = await session.get(PlanRow, plan_id, options=[selectinload(PlanRow.steps)])
            return _to_plan(row) if row is not None else None

    async def list_plans(self) -> list[Plan]:
        async with self.session_factory() as session:
            result = await session.scalars(select(PlanRow).options(selectinload(PlanRow.steps)))
            return [_to_plan(row) for row in result]


def _to_plan(row: PlanRow) -> Plan:
    steps = [
        PlanStep(step.type, step.target, step.explanation, dict(step.parameters or {}))
        for step in sorted(row.steps, key=lambda s: s.step_index)
    ]
    return Plan(
        entity_type_id=row.entity_type_id,
        entity_id=row.entity_id,
        action_id=row.action_id,
        steps=tuple(steps),
        status=PlanStatus(row.status),
        id=row.id,
    )
