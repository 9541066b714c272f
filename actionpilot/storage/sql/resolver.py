import logging

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from actionpilot.exceptions import MetadataError
from actionpilot.metadata import Action, EntityType, SelectorKind, UIBinding
from actionpilot.resolver import Resolver
from .models import ActionRow, EntityTypeRow, UIBindingRow

logger = logging.getLogger(__name__)


class SqlResolver(Resolver):
    """Resolver reading metadata from the relational store.

    Every lookup runs in its own short session, so registrations committed by
    other sessions are visible to the next lookup.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def find_entity_type(self, entity_type_id: str) -> EntityType | None:
        async with self.session_factory() as session:
            row = await session.get(EntityTypeRow, entity_type_id)
        if row is None:
            return None
        try:
            return _to_entity_type(row)
        except ValidationError as e:
            raise MetadataError(f"Stored entity type '{entity_type_id}' is invalid: {e}") from e

    async def find_action(self, action_id: str) -> Action | None:
        async with self.session_factory() as session:
            row = await session.get(ActionRow, action_id)
            return _to_action(row) if row is not None else None

    async def find_ui_binding(self, action_id: str) -> UIBinding | None:
        async with self.session_factory() as session:
            row = await session.get(UIBindingRow, action_id)
            return _to_ui_binding(row) if row is not None else None

    async def register_entity_type(self, entity_type: EntityType) -> None:
        async with self.session_factory() as session, session.begin():
            await session.merge(EntityTypeRow(
                id=entity_type.id,
                name=entity_type.display_name,
                entity_meta=dict(entity_type.metadata),
            ))
        logger.debug("Registered entity type %s", entity_type.id)

    async def register_action(self, action: Action) -> None:
        async with self.session_factory() as session, session.begin():
            await session.merge(ActionRow(
                id=action.id,
                name=action.display_name,
                description=action.description,
                applicable_entity_types=sorted(action.applicable_entity_type_ids),
                action_meta=dict(action.metadata),
            ))
        logger.debug("Registered action %s", action.id)

    async def register_ui_binding(self, ui_binding: UIBinding) -> None:
        async with self.session_factory() as session, session.begin():
            await session.merge(UIBindingRow(
                action_id=ui_binding.action_id,
                selector=ui_binding.selector,
                selector_type=ui_binding.selector_kind.value,
                binding_meta=dict(ui_binding.metadata),
            ))
        logger.debug("Registered ui binding for action %s", ui_binding.action_id)


def _to_entity_type(row: EntityTypeRow) -> EntityType:
    return EntityType(id=row.id, display_name=row.name, metadata=dict(row.entity_meta or {}))


def _to_action(row: ActionRow) -> Action:
    return Action(
        id=row.id,
        display_name=row.name,
        description=row.description,
        applicable_entity_type_ids=frozenset(row.applicable_entity_types or []),
        metadata=dict(row.action_meta or {}),
    )


def _to_ui_binding(row: UIBindingRow) -> UIBinding:
    return UIBinding(
        action_id=row.action_id,
        selector=row.selector,
        selector_kind=SelectorKind(row.selector_type),
        metadata=dict(row.binding_meta or {}),
    )
