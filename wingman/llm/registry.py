"""
Provider Registry

Holds every registered provider, tracks the active one, and offers two
ways to chat:
- chat(): single shot against the active provider
- chat_with_fallback(): try providers in fallback order until one answers

The active provider and the fallback order are independent settings. The
active provider is what the user picked; the fallback order is only used
by the resilient path.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .base import LLMProvider
from .errors import (
    AllProvidersFailedError,
    NoActiveProviderError,
    UnknownProviderError,
)
from .types import ChatOptions, ConnectionResult, ModelInfo

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Registry of LLM providers keyed by provider id.

    Usage:
        registry = ProviderRegistry()
        registry.register(GeminiProvider(api_key))
        registry.register(OllamaProvider())

        reply = await registry.chat("Summarize this")
        reply = await registry.chat_with_fallback("Summarize this")
    """

    def __init__(self):
        self._providers: Dict[str, LLMProvider] = {}
        self._active_id: Optional[str] = None
        self._fallback_order: List[str] = []

    def register(self, provider: LLMProvider) -> None:
        """
        Register a provider, replacing any provider with the same id.

        The first provider registered becomes active.
        """
        provider_id = provider.config.id
        replaced = provider_id in self._providers
        self._providers[provider_id] = provider

        if self._active_id is None:
            self._active_id = provider_id

        logger.info(
            f"{'Replaced' if replaced else 'Registered'} provider: {provider_id} "
            f"(model: {provider.config.model})"
        )

    def get_provider(self, provider_id: str) -> Optional[LLMProvider]:
        return self._providers.get(provider_id)

    def provider_ids(self) -> List[str]:
        """Registered ids in registration order."""
        return list(self._providers.keys())

    def providers(self) -> List[LLMProvider]:
        return list(self._providers.values())

    @property
    def active_provider_id(self) -> Optional[str]:
        return self._active_id

    @property
    def active_provider(self) -> Optional[LLMProvider]:
        if self._active_id is None:
            return None
        return self._providers.get(self._active_id)

    def set_active_provider(self, provider_id: str) -> None:
        """
        Make a registered provider the active one.

        Raises:
            UnknownProviderError: provider_id is not registered. The
                active provider is left unchanged.
        """
        if provider_id not in self._providers:
            raise UnknownProviderError(provider_id)
        self._active_id = provider_id
        logger.info(f"Active provider: {provider_id}")

    def set_fallback_order(self, order: List[str]) -> None:
        self._fallback_order = list(order)

    @property
    def fallback_order(self) -> List[str]:
        return list(self._fallback_order)

    def _attempt_order(self) -> List[str]:
        """Fallback order if set, else registration order, each id once."""
        order = self._fallback_order or self.provider_ids()
        seen = set()
        attempts = []
        for provider_id in order:
            if provider_id in seen:
                continue
            seen.add(provider_id)
            attempts.append(provider_id)
        return attempts

    async def chat(self, message: str, options: Optional[ChatOptions] = None) -> str:
        """
        Chat with the active provider.

        Raises:
            NoActiveProviderError: nothing is registered.
            ProviderError: the active provider's call failed.
        """
        provider = self.active_provider
        if provider is None:
            raise NoActiveProviderError()
        return await provider.chat(message, options)

    async def chat_with_fallback(
        self,
        message: str,
        options: Optional[ChatOptions] = None,
    ) -> str:
        """
        Try each provider in fallback order and return the first reply.

        Ids in the fallback order that are not registered are skipped.

        Raises:
            AllProvidersFailedError: every attempted provider failed.
        """
        reply, _ = await self.chat_with_fallback_source(message, options)
        return reply

    async def chat_with_fallback_source(
        self,
        message: str,
        options: Optional[ChatOptions] = None,
    ) -> Tuple[str, str]:
        """Like chat_with_fallback, but returns (reply, id of the provider that answered)."""
        failures: List[Tuple[str, str]] = []

        for provider_id in self._attempt_order():
            provider = self._providers.get(provider_id)
            if provider is None:
                logger.debug(f"Skipping unregistered provider in fallback order: {provider_id}")
                continue

            try:
                reply = await provider.chat(message, options)
            except Exception as e:
                logger.warning(f"Provider {provider_id} failed, trying next: {e}")
                failures.append((provider_id, str(e)))
                continue

            if failures:
                logger.info(f"Fallback succeeded with {provider_id} after {len(failures)} failure(s)")
            return reply, provider_id

        logger.error(f"All providers failed ({len(failures)} attempted)")
        raise AllProvidersFailedError(failures)

    async def test_connection(self) -> ConnectionResult:
        provider = self.active_provider
        if provider is None:
            return ConnectionResult.failed("No active provider")
        return await provider.test_connection()

    async def list_models(self) -> Dict[str, List[ModelInfo]]:
        """Model catalog of every registered provider, keyed by id."""
        catalog: Dict[str, List[ModelInfo]] = {}
        for provider_id, provider in self._providers.items():
            try:
                catalog[provider_id] = await provider.get_available_models()
            except Exception as e:
                logger.warning(f"Could not list models for {provider_id}: {e}")
                catalog[provider_id] = []
        return catalog

    async def aclose(self) -> None:
        for provider in self._providers.values():
            await provider.aclose()
