from abc import ABC, abstractmethod

from actionpilot.metadata import Action, EntityType, UIBinding


class Resolver(ABC):
    """Read-only lookup of the metadata a plan is built from.

    Implementations may keep the metadata in memory or in a database; callers
    only depend on this contract. Lookups have no side effects.
    """

    @abstractmethod
    async def find_entity_type(self, entity_type_id: str) -> EntityType | None:
        pass

    @abstractmethod
    async def find_action(self, action_id: str) -> Action | None:
        pass

    @abstractmethod
    async def find_ui_binding(self, action_id: str) -> UIBinding | None:
        pass

    async def is_action_applicable(self, action_id: str, entity_type_id: str) -> bool:
        """Whether the action exists and applies to the entity type."""
        action = await self.find_action(action_id)
        if action is None:
            return False
        return action.is_applicable_to(entity_type_id)
