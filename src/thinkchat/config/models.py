"""Model endpoint configuration."""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:11434"
DEFAULT_MODEL = "qwen3:0.6b"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000


class ModelConfig(BaseModel):
    """Settings bound to the model client.

    Frozen: a config is replaced as a whole, never patched in place.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Model server root URL")
    model: str = Field(default=DEFAULT_MODEL, min_length=1, description="Model identifier")
    temperature: float = Field(
        default=DEFAULT_TEMPERATURE,
        ge=0.0,
        le=2.0,
        description="Sampling temperature"
    )
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0, description="Maximum tokens to generate")
    show_thinking: bool = Field(default=False, description="Request and display the reasoning trace")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Require an http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("endpoint must be an http:// or https:// URL")
        return v


def _env_number(name: str, default: float, cast: type) -> float:
    # Unset, unparsable and zero values all fall back to the default
    raw = os.getenv(name, "").strip()
    try:
        value = cast(raw)
    except ValueError:
        return default
    return value or default


def default_model_config() -> ModelConfig:
    """Build the process-default config from the environment.

    Environment variables:
        OLLAMA_BASE_URL: Server root URL (default: http://localhost:11434)
        OLLAMA_MODEL: Model identifier (default: qwen3:0.6b)
        OLLAMA_TEMPERATURE: Sampling temperature (default: 0.7)
        OLLAMA_MAX_TOKENS: Maximum tokens (default: 1000)
        SHOW_THINKING: "true" enables the reasoning trace (default: off)
    """
    load_dotenv()
    try:
        return ModelConfig(
            endpoint=os.getenv("OLLAMA_BASE_URL") or DEFAULT_ENDPOINT,
            model=os.getenv("OLLAMA_MODEL") or DEFAULT_MODEL,
            temperature=_env_number("OLLAMA_TEMPERATURE", DEFAULT_TEMPERATURE, float),
            max_tokens=int(_env_number("OLLAMA_MAX_TOKENS", DEFAULT_MAX_TOKENS, int)),
            show_thinking=os.getenv("SHOW_THINKING") == "true",
        )
    except ValidationError as e:
        logger.warning("Ignoring invalid model settings in environment: %s", e)
        return ModelConfig()
