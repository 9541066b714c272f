from .client import AgentClient
from .command import AgentCommand, AgentResponse, CommandType
from .runner import AgentStepRunner

__all__ = [
    'AgentClient',
    'AgentCommand',
    'AgentResponse',
    'AgentStepRunner',
    'CommandType',
]
