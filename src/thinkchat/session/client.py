"""Explicit handle binding a model client to the current ModelConfig."""

import asyncio
import logging
from collections import Counter
from collections.abc import Callable

from ..config import ModelConfig
from ..llm import LLMProvider, create_llm_provider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ModelConfig], LLMProvider]


def ollama_provider_for(config: ModelConfig) -> LLMProvider:
    """Build an Ollama provider for ``config``."""
    return create_llm_provider(
        "ollama",
        model=config.model,
        base_url=config.endpoint,
        think=config.show_thinking,
    )


class ClientHandle:
    """Owns the ModelConfig and a lazily built provider for it.

    Replacing the config retires the current provider; the next call to
    ``provider()`` builds a fresh one. A retired provider is closed as soon
    as no request holds it: immediately if it is idle, otherwise when the
    last request that acquired it calls ``release()``.
    """

    def __init__(
        self,
        config: ModelConfig,
        provider_factory: ProviderFactory = ollama_provider_for,
    ):
        self._config = config
        self._factory = provider_factory
        self._provider: LLMProvider | None = None
        self._leases: Counter[LLMProvider] = Counter()
        self._retired: list[LLMProvider] = []
        self._closing: set[asyncio.Task] = set()

    @property
    def config(self) -> ModelConfig:
        return self._config

    def provider(self) -> LLMProvider:
        """Return the provider for the current config, building it on first use."""
        if self._provider is None:
            logger.debug("Building client for %s at %s", self._config.model, self._config.endpoint)
            self._provider = self._factory(self._config)
        return self._provider

    def acquire(self) -> LLMProvider:
        """Resolve the current provider and hold it for one request."""
        provider = self.provider()
        self._leases[provider] += 1
        return provider

    async def release(self, provider: LLMProvider) -> None:
        """End a request's hold on ``provider``, closing it if it was retired."""
        self._leases[provider] -= 1
        if self._leases[provider] > 0:
            return
        del self._leases[provider]
        if provider in self._retired:
            self._retired.remove(provider)
            await provider.close()

    def replace_config(self, config: ModelConfig) -> None:
        """Swap in a new config as a whole; the client is rebuilt on next use."""
        self._config = config
        old, self._provider = self._provider, None
        if old is None:
            return
        if self._leases[old] > 0:
            self._retired.append(old)
            return
        self._schedule_close(old)

    def _schedule_close(self, provider: LLMProvider) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop to close on; close() picks it up
            self._retired.append(provider)
            return
        task = loop.create_task(provider.close())
        self._closing.add(task)
        task.add_done_callback(self._closed)

    def _closed(self, task: asyncio.Task) -> None:
        self._closing.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Closing retired client failed: %s", task.exception())

    async def close(self) -> None:
        """Close the current provider and any retired ones still open."""
        if self._closing:
            await asyncio.gather(*self._closing, return_exceptions=True)
        providers = self._retired + ([self._provider] if self._provider else [])
        self._retired = []
        self._provider = None
        self._leases.clear()
        for provider in providers:
            await provider.close()
