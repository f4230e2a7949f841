"""Exception types for the provider layer."""

from typing import List, Optional, Tuple


class LLMError(Exception):
    """Base class for provider and registry failures."""


class ProviderError(LLMError):
    """A provider's remote call failed."""

    def __init__(self, provider_id: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.provider_id = provider_id
        self.cause = cause


class UnsupportedCapabilityError(LLMError):
    """The provider does not implement the requested capability."""

    def __init__(self, provider_id: str, capability: str):
        super().__init__(f"Provider '{provider_id}' does not support {capability}")
        self.provider_id = provider_id
        self.capability = capability


class MissingCredentialsError(LLMError):
    """A cloud provider was constructed without an API key."""

    def __init__(self, provider_id: str):
        super().__init__(f"No API key configured for provider '{provider_id}'")
        self.provider_id = provider_id


class NoActiveProviderError(LLMError):
    def __init__(self):
        super().__init__("No active provider")


class UnknownProviderError(LLMError):
    def __init__(self, provider_id: str):
        super().__init__(f"Provider '{provider_id}' is not registered")
        self.provider_id = provider_id


class AllProvidersFailedError(LLMError):
    """Every provider in the fallback order failed.

    ``failures`` keeps each provider's reason, in the order they were tried.
    """

    def __init__(self, failures: List[Tuple[str, str]]):
        self.failures = list(failures)
        joined = "; ".join(f"{provider_id}: {message}" for provider_id, message in self.failures)
        super().__init__(f"All providers failed: {joined}")
