import logging
import threading
from typing import Any

import yaml
from pydantic import ValidationError

from actionpilot.exceptions import MetadataError
from actionpilot.metadata import Action, EntityType, MetadataDocument, UIBinding
from .types import Resolver

logger = logging.getLogger(__name__)


class MemoryResolver(Resolver):
    """Resolver keeping metadata in process memory.

    Values are immutable, so a registration is a single dictionary assignment:
    readers never take the lock and observe either the previous or the new
    value for a key. The lock only serializes writers.
    """

    def __init__(
            self,
            entity_types: list[EntityType] | None = None,
            actions: list[Action] | None = None,
            ui_bindings: list[UIBinding] | None = None,
    ):
        self._lock = threading.Lock()
        self._entity_types: dict[str, EntityType] = {}
        self._actions: dict[str, Action] = {}
        self._ui_bindings: dict[str, UIBinding] = {}
        for entity_type in entity_types or []:
            self.register_entity_type(entity_type)
        for action in actions or []:
            self.register_action(action)
        for binding in ui_bindings or []:
            self.register_ui_binding(binding)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'MemoryResolver':
        try:
            document = MetadataDocument.model_validate(data)
        except ValidationError as e:
            raise MetadataError(f"Invalid metadata document: {e}") from e
        return cls(document.entity_types, document.actions, document.ui_bindings)

    @classmethod
    def from_file(cls, path: str) -> 'MemoryResolver':
        """Build a resolver from a YAML metadata file.

        The file holds three optional lists, ``entity_types``, ``actions`` and
        ``ui_bindings``, whose items follow the metadata model fields.
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise MetadataError(f"Failed to load metadata file '{path}': {e}") from e
        if not isinstance(data, dict):
            raise MetadataError(f"Metadata file '{path}' must contain a mapping")
        resolver = cls.from_dict(data)
        logger.info("Loaded metadata from %s: %d entity types, %d actions, %d ui bindings",
                    path, len(resolver.entity_types()), len(resolver.actions()), len(resolver.ui_bindings()))
        return resolver

    def register_entity_type(self, entity_type: EntityType) -> None:
        with self._lock:
            self._entity_types[entity_type.id] = entity_type

    def register_action(self, action: Action) -> None:
        with self._lock:
            self._actions[action.id] = action

    def register_ui_binding(self, ui_binding: UIBinding) -> None:
        with self._lock:
            self._ui_bindings[ui_binding.action_id] = ui_binding

    def entity_types(self) -> list[EntityType]:
        return list(self._entity_types.values())

    def actions(self) -> list[Action]:
        return list(self._actions.values())

    def ui_bindings(self) -> list[UIBinding]:
        return list(self._ui_bindings.values())

    async def find_entity_type(self, entity_type_id: str) -> EntityType | None:
        return self._entity_types.get(entity_type_id)

    async def find_action(self, action_id: str) -> Action | None:
        return self._actions.get(action_id)

    async def find_ui_binding(self, action_id: str) -> UIBinding | None:
        return self._ui_bindings.get(action_id)
