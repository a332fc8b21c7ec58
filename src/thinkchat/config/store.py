"""JSON persistence for ModelConfig.

Stored settings are an opaque blob to everything but this module. A blob that
is missing, is not JSON, or does not validate is treated as absent and the
process defaults are used instead.
"""

import json
import logging
import os
from pathlib import Path

from .models import ModelConfig, default_model_config

logger = logging.getLogger(__name__)


def default_config_path() -> Path:
    """Location of the stored settings.

    Environment variables:
        THINKCHAT_CONFIG_PATH: Override the settings file path
    """
    override = os.getenv("THINKCHAT_CONFIG_PATH")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "thinkchat" / "config.json"


class ConfigStore:
    """Load, save and reset the persisted ModelConfig."""

    def __init__(self, path: str | Path | None = None):
        self._path = Path(path) if path is not None else default_config_path()

    @property
    def path(self) -> Path:
        return self._path

    def has_stored(self) -> bool:
        """Whether a settings blob exists on disk."""
        return self._path.exists()

    def load(self) -> ModelConfig:
        """Return the stored config, or the process defaults."""
        if not self._path.exists():
            return default_model_config()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return ModelConfig.model_validate(data)
        except (OSError, ValueError) as e:
            # ValueError covers JSONDecodeError, UnicodeDecodeError and ValidationError
            logger.warning("Ignoring unreadable settings at %s: %s", self._path, e)
            return default_model_config()

    def save(self, config: ModelConfig) -> None:
        """Persist ``config``, replacing any stored settings."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(self._path)

    def reset(self) -> None:
        """Forget stored settings so the defaults apply again."""
        self._path.unlink(missing_ok=True)
