"""
OpenAI provider.

Chat and vision through the async OpenAI client. Images are sent as
base64 data-URL ``image_url`` parts.
"""

import base64
import logging
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from .base import LLMProvider
from .errors import MissingCredentialsError, ProviderError
from .types import ChatOptions, ModelInfo, ProviderConfig

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"

MODELS = [
    ModelInfo(id="gpt-4o", name="GPT-4o", supports_vision=True),
    ModelInfo(id="gpt-4o-mini", name="GPT-4o Mini", supports_vision=True),
    ModelInfo(id="gpt-5-mini", name="GPT-5 Mini", supports_vision=True),
]


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions (text + vision)."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, client: Optional[AsyncOpenAI] = None):
        if not api_key:
            raise MissingCredentialsError("openai")

        self.client = client or AsyncOpenAI(api_key=api_key)
        self._config = ProviderConfig(
            id="openai",
            name="OpenAI",
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
        return await self._complete(message, options)

    async def analyze_image(self, image_data: bytes, mime_type: str, prompt: str) -> str:
        image_b64 = base64.b64encode(image_data).decode("utf-8")
        content = [
            {"type": "text", "text": prompt},
            {
                "type": "image_url",
                "image_url": {"url": f"data:{mime_type};base64,{image_b64}"},
            },
        ]
        return await self._complete(content)

    async def get_available_models(self) -> List[ModelInfo]:
        return list(MODELS)

    async def _complete(self, content: Any, options: Optional[ChatOptions] = None) -> str:
        options = options or ChatOptions()

        messages: List[Dict[str, Any]] = []
        if options.system_prompt:
            messages.append({"role": "system", "content": options.system_prompt})
        messages.append({"role": "user", "content": content})

        kwargs: Dict[str, Any] = {}
        if options.temperature is not None:
            kwargs["temperature"] = options.temperature
        if options.max_tokens is not None:
            kwargs["max_tokens"] = options.max_tokens

        try:
            response = await self.client.chat.completions.create(
                model=self._config.model,
                messages=messages,
                **kwargs,
            )
        except openai.OpenAIError as e:
            raise ProviderError("openai", f"OpenAI API error: {e}", e) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        await self.client.close()
