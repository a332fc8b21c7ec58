"""Model endpoint settings and their persistence."""

from .models import ModelConfig, default_model_config
from .store import ConfigStore, default_config_path

__all__ = [
    "ConfigStore",
    "ModelConfig",
    "default_config_path",
    "default_model_config",
]
