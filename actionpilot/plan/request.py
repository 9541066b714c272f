from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from actionpilot.exceptions import InvalidRequestError


@dataclass(frozen=True)
class ExecutionRequest:
    """A caller's request to perform one action on one entity."""
    entity_type_id: str
    entity_id: str
    action_id: str
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        for name in ('entity_type_id', 'entity_id', 'action_id'):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise InvalidRequestError(name)
        object.__setattr__(self, 'parameters', MappingProxyType(dict(self.parameters or {})))
