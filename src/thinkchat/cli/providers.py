"""Factory functions for CLI.

Centralizes creation of the settings store, session and logging from the
environment. Hides configuration details from command implementations.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from ..config import ConfigStore, ModelConfig
from ..session import ChatSession, ClientHandle, SessionListener


def setup_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route log records through Rich.

    Args:
        verbose: Show DEBUG records instead of only warnings and errors
        console: Console to log to (default: stderr)
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), show_path=False)],
        force=True,
    )


def get_store() -> ConfigStore:
    """Create the settings store.

    Environment variables:
        THINKCHAT_CONFIG_PATH: Settings file (default: ~/.config/thinkchat/config.json)
    """
    return ConfigStore()


def get_config(store: ConfigStore | None = None) -> ModelConfig:
    """Load stored settings, falling back to environment defaults."""
    return (store or get_store()).load()


def build_session(
    config: ModelConfig | None = None,
    listener: SessionListener | None = None,
) -> ChatSession:
    """Create a chat session bound to ``config`` (or the stored settings)."""
    client = ClientHandle(config or get_config())
    return ChatSession(client, listener=listener)
