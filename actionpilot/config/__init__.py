from .action_pilot import ActionPilotConfig, load_config
from .agent import AgentConfig
from .storage import StorageConfig

__all__ = ['ActionPilotConfig', 'AgentConfig', 'StorageConfig', 'load_config']
