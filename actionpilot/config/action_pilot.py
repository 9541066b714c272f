import os

from pyaml_env import parse_config as parse_config_with_env
from pydantic import BaseModel, Field
from typing_extensions import Annotated

from actionpilot.config.agent import AgentConfig
from actionpilot.config.storage import StorageConfig


class ActionPilotConfig(BaseModel):
    agent: Annotated[AgentConfig | None, Field(default=None, description='Interaction agent; plans are only created when absent')]
    storage: Annotated[StorageConfig | None, Field(default=None, description='Relational store for metadata and plans')]
    metadata: Annotated[str | None, Field(default=None, description='Path to a YAML metadata file loaded into memory')]


def load_config(path: str) -> ActionPilotConfig:
    """Load the configuration file, substituting ``${ENV_VAR}`` references.

    A relative ``metadata`` path is resolved against the config file's directory.
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = parse_config_with_env(data=f, tag=None)
    config = ActionPilotConfig.model_validate(data or {})
    if config.metadata and not os.path.isabs(config.metadata):
        config = config.model_copy(update={
            'metadata': os.path.join(os.path.dirname(os.path.abspath(path)), config.metadata),
        })
    return config
