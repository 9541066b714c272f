"""Declared metadata the planner works from: entity types, actions and UI bindings."""

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import Annotated

PAGE_URL_METADATA_KEY = 'page_url'


def format_page_url(template: str, entity_type_id: str, entity_id: str) -> str:
    """Render a ``page_url`` template.

    Raises:
        ValueError: The template uses a placeholder other than ``{entity_type_id}``
            and ``{entity_id}``, or its braces are unbalanced.
    """
    try:
        return template.format(entity_type_id=entity_type_id, entity_id=entity_id)
    except (KeyError, IndexError, AttributeError, ValueError) as e:
        raise ValueError(f"Invalid page_url template {template!r}: {e!r}") from e


def _read_only(value: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(value))


class SelectorKind(str, Enum):
    CSS = "CSS"
    XPATH = "XPATH"
    TEXT = "TEXT"
    ACTION_ID = "ACTION_ID"  # semantic action handle resolved by the agent


class EntityType(BaseModel):
    id: Annotated[str, Field(min_length=1, description='Unique id of the entity type, e.g. "Building"')]
    display_name: Annotated[str, Field(min_length=1, description='Human readable name of the entity type')]
    metadata: Annotated[Mapping[str, Any], Field(
        default_factory=dict,
        validate_default=True,
        description='Free-form attributes; "page_url" overrides the entity page path',
    )]

    model_config = ConfigDict(frozen=True)

    @field_validator('metadata')
    @classmethod
    def _check_metadata(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        template = value.get(PAGE_URL_METADATA_KEY)
        if template is not None:
            if not isinstance(template, str) or not template:
                raise ValueError("page_url must be a non-empty string")
            format_page_url(template, 'entity_type', 'entity')
        return _read_only(value)

    def __eq__(self, other):
        return isinstance(other, EntityType) and other.id == self.id

    def __hash__(self):
        return hash(self.id)


class Action(BaseModel):
    id: Annotated[str, Field(min_length=1, description='Unique id of the action')]
    display_name: Annotated[str, Field(min_length=1, description='Human readable name of the action')]
    description: Annotated[str | None, Field(default=None, description='What the action does, shown to the user')]
    applicable_entity_type_ids: Annotated[frozenset[str], Field(
        default_factory=frozenset,
        description='Ids of the entity types this action can be performed on',
    )]
    metadata: Annotated[Mapping[str, Any], Field(default_factory=dict, validate_default=True)]

    model_config = ConfigDict(frozen=True)

    @field_validator('metadata')
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _read_only(value)

    def is_applicable_to(self, entity_type_id: str) -> bool:
        return entity_type_id in self.applicable_entity_type_ids

    def __eq__(self, other):
        return isinstance(other, Action) and other.id == self.id

    def __hash__(self):
        return hash(self.id)


class UIBinding(BaseModel):
    action_id: Annotated[str, Field(min_length=1, description='Id of the bound action, one binding per action')]
    selector: Annotated[str, Field(min_length=1, description='Locator used to trigger the action in the live UI')]
    selector_kind: Annotated[SelectorKind, Field(default=SelectorKind.CSS)]
    metadata: Annotated[Mapping[str, Any], Field(default_factory=dict, validate_default=True)]

    model_config = ConfigDict(frozen=True)

    @field_validator('metadata')
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _read_only(value)

    def __eq__(self, other):
        return isinstance(other, UIBinding) and other.action_id == self.action_id

    def __hash__(self):
        return hash(self.action_id)


class MetadataDocument(BaseModel):
    """Shape of a YAML metadata file."""
    entity_types: Annotated[list[EntityType], Field(default_factory=list)]
    actions: Annotated[list[Action], Field(default_factory=list)]
    ui_bindings: Annotated[list[UIBinding], Field(default_factory=list)]

    model_config = ConfigDict(extra='forbid')
