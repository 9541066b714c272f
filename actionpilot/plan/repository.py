from abc import ABC, abstractmethod

from .plan import Plan


class PlanRepository(ABC):
    @abstractmethod
    async def save(self, plan: Plan) -> None:
        """Store the plan, replacing any stored plan with the same id."""
        pass

    @abstractmethod
    async def get(self, plan_id: str) -> Plan | None:
        pass

    @abstractmethod
    async def list_plans(self) -> list[Plan]:
        pass


class MemoryPlanRepository(PlanRepository):
    def __init__(self, plans: list[Plan] | None = None) -> None:
        self.plans: dict[str, Plan] = {plan.id: plan for plan in plans or []}

    async def save(self, plan: Plan) -> None:
        self.plans[plan.id] = plan

    async def get(self, plan_id: str) -> Plan | None:
        return self.plans.get(plan_id)

    async def list_plans(self) -> list[Plan]:
        return list(self.plans.values())
