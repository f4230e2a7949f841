"""
Application context.

One AppContext is built at process start and handed to everything that
needs the registry, the meeting manager or the coaching engine. Nothing
in the package keeps module-level state, so tests can build as many
independent contexts as they like.
"""

import logging
from typing import Optional

from .coaching import CoachingEngine, PlaybookLibrary
from .config import Settings, load_settings
from .conversation import ConversationHistory
from .llm import (
    LLMProvider,
    MissingCredentialsError,
    OllamaProvider,
    ProviderRegistry,
    UnknownProviderError,
)
from .meeting import MeetingManager, MeetingMetadata, SQLiteMeetingStore

logger = logging.getLogger(__name__)

CLOUD_PROVIDERS = ("gemini", "openai", "claude")


class AppContext:
    """
    Everything a running assistant needs, wired together.

    Usage:
        context = AppContext(load_settings())
        context.register_providers()
        await context.initialize()
        ...
        await context.aclose()
    """

    def __init__(self, settings: Optional[Settings] = None, registry: Optional[ProviderRegistry] = None):
        self.settings = settings or load_settings()
        self.settings.data_path.mkdir(parents=True, exist_ok=True)

        self.registry = registry or ProviderRegistry()
        self.store = SQLiteMeetingStore(str(self.settings.db_path))
        self.playbooks = PlaybookLibrary(self.settings.playbooks_dir)
        self.conversation = ConversationHistory(self.settings.conversation_path)
        self.meetings = MeetingManager(self.store, self.registry.chat)
        self.coach = CoachingEngine(
            self.registry.chat,
            cooldown_seconds=self.settings.coaching_cooldown_seconds,
        )

    def build_provider(self, provider_id: str, model: Optional[str] = None) -> Optional[LLMProvider]:
        """
        Create a provider from settings.

        Returns None when the provider is unknown or its API key is missing.
        """
        s = self.settings
        try:
            if provider_id == "gemini":
                from .llm.gemini import GeminiProvider, DEFAULT_MODEL
                return GeminiProvider(s.gemini_api_key, model or DEFAULT_MODEL)
            if provider_id == "openai":
                from .llm.openai_provider import OpenAIProvider, DEFAULT_MODEL
                return OpenAIProvider(s.openai_api_key, model or DEFAULT_MODEL)
            if provider_id == "claude":
                from .llm.claude import ClaudeProvider, DEFAULT_MODEL
                return ClaudeProvider(s.anthropic_api_key, model or DEFAULT_MODEL)
            if provider_id == "ollama":
                return OllamaProvider(model=model or s.ollama_model, url=s.ollama_url)
        except MissingCredentialsError as e:
            logger.warning(f"Skipping provider {provider_id}: {e}")
            return None

        logger.warning(f"Unknown provider id: {provider_id}")
        return None

    def register_providers(self) -> None:
        """Register every configured provider and apply the active/fallback settings."""
        s = self.settings
        wanted = list(CLOUD_PROVIDERS)
        if s.use_ollama:
            wanted.append("ollama")

        for provider_id in wanted:
            if provider_id in CLOUD_PROVIDERS and not self._api_key(provider_id):
                continue
            model = s.active_model if provider_id == s.active_provider else None
            provider = self.build_provider(provider_id, model)
            if provider:
                self.registry.register(provider)

        if s.fallback_order:
            self.registry.set_fallback_order(s.fallback_order)

        if self.registry.get_provider(s.active_provider):
            self.registry.set_active_provider(s.active_provider)
        elif self.registry.active_provider_id:
            logger.warning(
                f"Configured provider {s.active_provider} is not available, "
                f"using {self.registry.active_provider_id}"
            )
        else:
            logger.warning("No LLM providers configured")

    async def initialize(self) -> None:
        """Run async start-up work. Safe to call with no providers registered."""
        ollama = self.registry.get_provider("ollama")
        if isinstance(ollama, OllamaProvider):
            await ollama.initialize()

    async def switch_provider(self, provider_id: str, model: Optional[str] = None) -> LLMProvider:
        """
        Activate a provider, optionally on a different model.

        Raises:
            UnknownProviderError: the provider is neither registered nor
                buildable from the current settings.
        """
        provider = self.registry.get_provider(provider_id)

        if isinstance(provider, OllamaProvider):
            if model:
                provider.select_model(model)
                await provider.refresh_capabilities()
        elif provider is None or (model and model != provider.config.model):
            replacement = self.build_provider(provider_id, model)
            if replacement is None:
                raise UnknownProviderError(provider_id)
            if provider is not None:
                await provider.aclose()
            self.registry.register(replacement)

        self.registry.set_active_provider(provider_id)
        return self.registry.get_provider(provider_id)

    def meeting_metadata(self, playbook: Optional[str] = None) -> MeetingMetadata:
        active = self.registry.active_provider
        return MeetingMetadata(
            language=self.settings.speech_language,
            provider_id=active.config.id if active else "",
            model_id=active.config.model if active else "",
            playbook=playbook,
        )

    async def aclose(self) -> None:
        await self.registry.aclose()

    def _api_key(self, provider_id: str) -> Optional[str]:
        return {
            "gemini": self.settings.gemini_api_key,
            "openai": self.settings.openai_api_key,
            "claude": self.settings.anthropic_api_key,
        }.get(provider_id)
