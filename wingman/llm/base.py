"""
Base LLM Provider Interface

Provides a uniform interface over every chat/vision backend so the
registry, the summarizer and the coaching engine never touch a vendor
SDK directly.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from .errors import UnsupportedCapabilityError
from .types import ChatOptions, ConnectionResult, ModelInfo, ProviderConfig

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Each provider wraps one backend and provides:
    - chat(): text in, text out
    - analyze_image() / analyze_audio() when the capability flags allow it
    - test_connection(): structured health check that never raises
    - get_available_models(): catalog used to populate model pickers
    """

    @property
    @abstractmethod
    def config(self) -> ProviderConfig:
        """Current descriptor for this provider."""
        pass

    @property
    def id(self) -> str:
        return self.config.id

    @abstractmethod
    async def chat(self, message: str, options: Optional[ChatOptions] = None) -> str:
        """
        Send a single user message and return the reply text.

        Raises:
            ProviderError: the remote call failed. An empty payload
                yields "" rather than an error.
        """
        pass

    async def analyze_image(self, image_data: bytes, mime_type: str, prompt: str) -> str:
        raise UnsupportedCapabilityError(self.id, "vision")

    async def analyze_audio(self, audio_data: bytes, mime_type: str, prompt: str) -> str:
        raise UnsupportedCapabilityError(self.id, "audio")

    async def test_connection(self) -> ConnectionResult:
        """Run a trivial chat and report the outcome instead of raising."""
        try:
            await self.chat("Hello")
            return ConnectionResult.ok()
        except Exception as e:
            logger.warning(f"[{self.id}] Connection test failed: {e}")
            return ConnectionResult.failed(str(e))

    @abstractmethod
    async def get_available_models(self) -> List[ModelInfo]:
        """Model catalog. Network failures yield an empty list."""
        pass

    async def aclose(self) -> None:
        """Release network resources. Default: nothing to clean up."""
        return None
