"""
LLM Provider Types

Shared value types for the provider layer. Vendor response shapes never
leave the provider modules; everything crossing the provider boundary is
one of these.
"""

from dataclasses import dataclass, replace
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class ProviderConfig:
    """Immutable descriptor for one registered provider."""
    id: str
    name: str
    model: str
    supports_chat: bool = True
    supports_vision: bool = False
    supports_audio: bool = False
    supports_streaming: bool = False

    def with_model(self, model: str) -> "ProviderConfig":
        return replace(self, model=model)

    def with_vision(self, supports_vision: bool) -> "ProviderConfig":
        return replace(self, supports_vision=supports_vision)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "model": self.model,
            "supports_chat": self.supports_chat,
            "supports_vision": self.supports_vision,
            "supports_audio": self.supports_audio,
            "supports_streaming": self.supports_streaming,
        }


@dataclass(frozen=True)
class ModelInfo:
    """One entry of a provider's model catalog."""
    id: str
    name: str
    supports_vision: bool = False
    supports_audio: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "supports_vision": self.supports_vision,
            "supports_audio": self.supports_audio,
        }


@dataclass
class ChatOptions:
    """Per-call generation options."""
    system_prompt: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclass
class ConnectionResult:
    """Outcome of a provider connection test."""
    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ConnectionResult":
        return cls(success=True)

    @classmethod
    def failed(cls, error: str) -> "ConnectionResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.error is not None:
            data["error"] = self.error
        return data
