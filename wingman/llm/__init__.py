"""
LLM provider layer.

Components:
- LLMProvider: uniform chat/vision interface over one backend
- ProviderRegistry: active provider + ordered fallback chat
- GeminiProvider, OpenAIProvider, ClaudeProvider: cloud backends
- OllamaProvider: local inference server
"""

from .types import ProviderConfig, ModelInfo, ChatOptions, ConnectionResult
from .errors import (
    LLMError,
    ProviderError,
    UnsupportedCapabilityError,
    MissingCredentialsError,
    NoActiveProviderError,
    UnknownProviderError,
    AllProvidersFailedError,
)
from .base import LLMProvider
from .registry import ProviderRegistry
from .ollama import OllamaProvider


def __getattr__(name):
    """Lazy load cloud providers so their SDKs are only imported when used."""
    if name == "GeminiProvider":
        from .gemini import GeminiProvider
        return GeminiProvider
    if name == "OpenAIProvider":
        from .openai_provider import OpenAIProvider
        return OpenAIProvider
    if name == "ClaudeProvider":
        from .claude import ClaudeProvider
        return ClaudeProvider
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "ProviderConfig",
    "ModelInfo",
    "ChatOptions",
    "ConnectionResult",
    "LLMError",
    "ProviderError",
    "UnsupportedCapabilityError",
    "MissingCredentialsError",
    "NoActiveProviderError",
    "UnknownProviderError",
    "AllProvidersFailedError",
    "LLMProvider",
    "ProviderRegistry",
    "OllamaProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "ClaudeProvider",
]
