"""Wire models exchanged with the interaction agent."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import Annotated


class CommandType(str, Enum):
    OPEN_PAGE = "OPEN_PAGE"
    CLICK = "CLICK"
    TYPE = "TYPE"
    HOVER = "HOVER"
    WAIT = "WAIT"
    EXPLAIN = "EXPLAIN"
    HIGHLIGHT = "HIGHLIGHT"
    SCREENSHOT = "SCREENSHOT"


class AgentCommand(BaseModel):
    type: Annotated[CommandType, Field(description='Interaction to perform')]
    target: Annotated[str | None, Field(default=None, description='URL, selector or wait condition')]
    explanation: Annotated[str | None, Field(default=None, description='Text shown to the user while running')]
    parameters: Annotated[dict[str, Any], Field(default_factory=dict)]

    model_config = ConfigDict(frozen=True)

    @classmethod
    def open_page(cls, url: str, explanation: str | None = None) -> 'AgentCommand':
        return cls(type=CommandType.OPEN_PAGE, target=url, explanation=explanation)

    @classmethod
    def click(cls, selector: str, explanation: str | None = None) -> 'AgentCommand':
        return cls(type=CommandType.CLICK, target=selector, explanation=explanation)

    @classmethod
    def type_text(cls, selector: str, text: str, explanation: str | None = None) -> 'AgentCommand':
        return cls(type=CommandType.TYPE, target=selector, explanation=explanation, parameters={'text': text})

    @classmethod
    def hover(cls, selector: str, explanation: str | None = None) -> 'AgentCommand':
        return cls(type=CommandType.HOVER, target=selector, explanation=explanation)

    @classmethod
    def wait(cls, condition: str | None, explanation: str | None = None, timeout_ms: int = 5000) -> 'AgentCommand':
        return cls(type=CommandType.WAIT, target=condition, explanation=explanation, parameters={'timeout': timeout_ms})

    @classmethod
    def explain(cls, message: str | None) -> 'AgentCommand':
        return cls(type=CommandType.EXPLAIN, explanation=message)

    @classmethod
    def highlight(cls, selector: str, explanation: str | None = None) -> 'AgentCommand':
        return cls(type=CommandType.HIGHLIGHT, target=selector, explanation=explanation)

    @classmethod
    def screenshot(cls, explanation: str | None = None) -> 'AgentCommand':
        return cls(type=CommandType.SCREENSHOT, explanation=explanation)


class AgentResponse(BaseModel):
    success: bool
    message: str | None = None
    error: str | None = None
    data: Annotated[dict[str, Any], Field(default_factory=dict)]
    execution_time_ms: Annotated[int, Field(default=0, alias='executionTimeMs')]

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    @field_validator('data', mode='before')
    @classmethod
    def _null_data(cls, value):
        return {} if value is None else value

    @classmethod
    def failure(cls, error: str, execution_time_ms: int = 0) -> 'AgentResponse':
        return cls(success=False, error=error, execution_time_ms=execution_time_ms)
