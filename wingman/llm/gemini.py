"""
Google Gemini provider.

Chat, vision and audio through the google-genai SDK. Each provider holds
its own Client, so two instances with different keys never share state.
"""

import logging
from typing import Any, List, Optional, Union

from google import genai
from google.genai import types

from .base import LLMProvider
from .errors import MissingCredentialsError, ProviderError
from .types import ChatOptions, ConnectionResult, ModelInfo, ProviderConfig

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

MODELS = [
    ModelInfo(id="gemini-2.5-flash", name="Gemini 2.5 Flash", supports_vision=True, supports_audio=True),
    ModelInfo(id="gemini-2.5-pro", name="Gemini 2.5 Pro", supports_vision=True, supports_audio=True),
]


class GeminiProvider(LLMProvider):
    """
    Google Gemini via google-genai.

    Supports chat, image analysis and audio analysis with inline byte parts.
    """

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL):
        if not api_key:
            raise MissingCredentialsError("gemini")

        self.client = genai.Client(api_key=api_key)
        self._config = ProviderConfig(
            id="gemini",
            name="Google Gemini",
            model=model,
            supports_chat=True,
            supports_vision=True,
            supports_audio=True,
            supports_streaming=True,
        )

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def chat(self, message: str, options: Optional[ChatOptions] = None) -> str:
        return await self.generate(message, options)

    async def analyze_image(self, image_data: bytes, mime_type: str, prompt: str) -> str:
        return await self.generate([prompt, types.Part.from_bytes(data=image_data, mime_type=mime_type)])

    async def analyze_audio(self, audio_data: bytes, mime_type: str, prompt: str) -> str:
        return await self.generate([prompt, types.Part.from_bytes(data=audio_data, mime_type=mime_type)])

    async def test_connection(self) -> ConnectionResult:
        try:
            text = await self.generate("Hello")
        except Exception as e:
            logger.warning(f"[gemini] Connection test failed: {e}")
            return ConnectionResult.failed(str(e))
        if text:
            return ConnectionResult.ok()
        return ConnectionResult.failed("Empty response from Gemini")

    async def get_available_models(self) -> List[ModelInfo]:
        return list(MODELS)

    async def generate(
        self,
        contents: Union[str, List[Any]],
        options: Optional[ChatOptions] = None,
    ) -> str:
        """Run generate_content with text or multi-part contents."""
        options = options or ChatOptions()

        config = types.GenerateContentConfig(
            system_instruction=options.system_prompt,
            temperature=options.temperature,
            max_output_tokens=options.max_tokens,
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=self._config.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            raise ProviderError("gemini", f"Gemini API error: {e}", e) from e

        # Blocked or empty candidates come back with text None
        return response.text or ""
