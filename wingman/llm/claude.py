"""
Anthropic Claude provider.

Chat and vision through the async Anthropic client. Images are sent as
base64 ``image`` source blocks ahead of the prompt text.
"""

import base64
import logging
from typing import Any, Dict, List, Optional

import anthropic

from .base import LLMProvider
from .errors import MissingCredentialsError, ProviderError
from .types import ChatOptions, ModelInfo, ProviderConfig

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-6"
DEFAULT_MAX_TOKENS = 4096

MODELS = [
    ModelInfo(id="claude-sonnet-4-6", name="Claude Sonnet 4.6", supports_vision=True),
    ModelInfo(id="claude-haiku-4-5", name="Claude Haiku 4.5", supports_vision=True),
    ModelInfo(id="claude-opus-4-6", name="Claude Opus 4.6", supports_vision=True),
]


class ClaudeProvider(LLMProvider):
    """Anthropic Messages API (text + vision)."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        client: Optional[anthropic.AsyncAnthropic] = None,
    ):
        if not api_key:
            raise MissingCredentialsError("claude")

        self.client = client or anthropic.AsyncAnthropic(api_key=api_key)
        self._config = ProviderConfig(
            id="claude",
            name="Anthropic Claude",
            model=model,
            supports_chat=True,
            supports_vision=True,
            supports_audio=False,
            supports_streaming=True,
        )

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def chat(self, message: str, options: Optional[ChatOptions] = None) -> str:
        return await self._create(message, options)

    async def analyze_image(self, image_data: bytes, mime_type: str, prompt: str) -> str:
        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": mime_type,
                    "data": base64.b64encode(image_data).decode("utf-8"),
                },
            },
            {"type": "text", "text": prompt},
        ]
        return await self._create(content)

    async def get_available_models(self) -> List[ModelInfo]:
        return list(MODELS)

    async def _create(self, content: Any, options: Optional[ChatOptions] = None) -> str:
        options = options or ChatOptions()

        kwargs: Dict[str, Any] = {}
        if options.system_prompt:
            kwargs["system"] = options.system_prompt
        if options.temperature is not None:
            kwargs["temperature"] = options.temperature

        try:
            message = await self.client.messages.create(
                model=self._config.model,
                max_tokens=options.max_tokens or DEFAULT_MAX_TOKENS,
                messages=[{"role": "user", "content": content}],
                **kwargs,
            )
        except anthropic.APIError as e:
            raise ProviderError("claude", f"Claude API error: {e}", e) from e

        if not message.content:
            return ""
        block = message.content[0]
        return block.text if block.type == "text" else ""

    async def aclose(self) -> None:
        await self.client.close()
