"""Plan steps: the fixed vocabulary of UI interactions a plan is made of."""

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

_ACTION_TARGET = re.compile(r'^action\((?P<action_id>.+)\)$')


class StepType(str, Enum):
    OPEN_PAGE = "open_page"
    EXPLAIN = "explain"
    HOVER = "hover"
    CLICK = "click"
    TYPE = "type"
    WAIT = "wait"
    HIGHLIGHT = "highlight"
    SCREENSHOT = "screenshot"


def action_target(action_id: str) -> str:
    """Encode a semantic action reference as a step target."""
    return f'action({action_id})'


def parse_action_target(target: str | None) -> str | None:
    """Return the action id of an ``action(<id>)`` target, or None for raw targets."""
    if not target:
        return None
    match = _ACTION_TARGET.match(target)
    return match.group('action_id') if match else None


@dataclass(frozen=True)
class PlanStep:
    type: StepType
    target: str | None = None
    explanation: str | None = None
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'type', StepType(self.type))
        object.__setattr__(self, 'parameters', MappingProxyType(dict(self.parameters or {})))

    @classmethod
    def open_page(cls, url: str, explanation: str | None = None) -> 'PlanStep':
        return cls(StepType.OPEN_PAGE, url, explanation)

    @classmethod
    def explain(cls, message: str) -> 'PlanStep':
        return cls(StepType.EXPLAIN, None, message)

    @classmethod
    def hover(cls, action_id: str, explanation: str | None = None) -> 'PlanStep':
        return cls(StepType.HOVER, action_target(action_id), explanation)

    @classmethod
    def click(cls, action_id: str, explanation: str | None = None) -> 'PlanStep':
        return cls(StepType.CLICK, action_target(action_id), explanation)

    @classmethod
    def highlight(cls, action_id: str, explanation: str | None = None) -> 'PlanStep':
        return cls(StepType.HIGHLIGHT, action_target(action_id), explanation)

    @classmethod
    def type_text(cls, selector: str, text: str, explanation: str | None = None) -> 'PlanStep':
        return cls(StepType.TYPE, selector, explanation, {'text': text})

    @classmethod
    def wait(cls, condition: str, explanation: str | None = None) -> 'PlanStep':
        return cls(StepType.WAIT, condition, explanation)

    @classmethod
    def screenshot(cls, explanation: str | None = None) -> 'PlanStep':
        return cls(StepType.SCREENSHOT, None, explanation)

    @property
    def action_id(self) -> str | None:
        return parse_action_target(self.target)

    def to_dict(self) -> dict[str, Any]:
        return {
            'type': self.type.value,
            'target': self.target,
            'explanation': self.explanation,
            'parameters': dict(self.parameters),
        }
