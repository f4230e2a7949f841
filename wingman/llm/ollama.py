"""
Ollama provider - local inference over the loopback HTTP API.

Endpoints used:
    GET  /api/tags       installed models
    POST /api/generate   {model, prompt, stream: false} -> {response, done}

The installed model list is discovered at runtime and may be empty. Vision
support depends on which model is selected, so the descriptor is
recomputed (never mutated) whenever the model or the probe result changes.
"""

import base64
import logging
from typing import Any, Dict, List, Optional

import httpx

from .base import LLMProvider
from .errors import ProviderError, UnsupportedCapabilityError
from .types import ChatOptions, ConnectionResult, ModelInfo, ProviderConfig

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3.2"
DEFAULT_URL = "http://localhost:11434"
VISION_MARKERS = ("vision", "llava")


def is_vision_model(name: str) -> bool:
    """Heuristic used by the model catalog: vision models say so in their name."""
    lowered = name.lower()
    return any(marker in lowered for marker in VISION_MARKERS)


class OllamaProvider(LLMProvider):
    """
    Locally hosted models through Ollama.

    Usage:
        provider = OllamaProvider(model="llama3.2")
        await provider.initialize()   # pick an installed model, warm it up
        reply = await provider.chat("Hello")
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        url: str = DEFAULT_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 120.0,
    ):
        self.url = url.rstrip("/")
        self._client = client or httpx.AsyncClient(base_url=self.url, timeout=timeout)
        self._config = ProviderConfig(
            id="ollama",
            name="Ollama (Local)",
            model=model,
            supports_chat=True,
            supports_vision=is_vision_model(model),
            supports_audio=False,
            supports_streaming=True,
        )

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def chat(self, message: str, options: Optional[ChatOptions] = None) -> str:
        return await self._generate(message, options)

    async def analyze_image(self, image_data: bytes, mime_type: str, prompt: str) -> str:
        if not self._config.supports_vision:
            raise UnsupportedCapabilityError(self.id, "vision")
        image_b64 = base64.b64encode(image_data).decode("utf-8")
        return await self._generate(prompt, images=[image_b64])

    async def test_connection(self) -> ConnectionResult:
        try:
            response = await self._client.get("/api/tags")
            if response.status_code != 200:
                return ConnectionResult.failed(f"Ollama not available at {self.url}")
            await self.chat("Hello")
            return ConnectionResult.ok()
        except Exception as e:
            logger.warning(f"[ollama] Connection test failed: {e}")
            return ConnectionResult.failed(str(e))

    async def get_available_models(self) -> List[ModelInfo]:
        """Installed models, or [] when the server is unreachable."""
        try:
            response = await self._client.get("/api/tags")
            if response.status_code != 200:
                return []
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"[ollama] Model discovery failed: {e}")
            return []

        models = []
        for entry in data.get("models") or []:
            name = entry.get("name")
            if not name:
                continue
            models.append(ModelInfo(
                id=name,
                name=name,
                supports_vision=is_vision_model(name),
                supports_audio=False,
            ))
        return models

    def select_model(self, model: str) -> ProviderConfig:
        """Switch to another installed model and return the new descriptor."""
        self._config = self._config.with_model(model).with_vision(is_vision_model(model))
        return self._config

    async def refresh_capabilities(self) -> ProviderConfig:
        """
        Re-probe the server and return a descriptor with up-to-date flags.

        The previous descriptor object is left untouched, so a reader that
        grabbed it before the probe keeps a consistent view.
        """
        models = await self.get_available_models()
        current = next((m for m in models if m.id == self._config.model), None)
        supports_vision = current.supports_vision if current else is_vision_model(self._config.model)
        self._config = self._config.with_vision(supports_vision)
        return self._config

    async def initialize(self) -> ProviderConfig:
        """
        Make sure an installed model is selected and warmed up.

        Failures are logged; the provider stays registered and usable
        once the local server comes up.
        """
        try:
            models = await self.get_available_models()
            if not models:
                logger.warning("[ollama] No Ollama models found")
                return self._config

            if not any(m.id == self._config.model for m in models):
                self.select_model(models[0].id)
                logger.info(f"[ollama] Auto-selected first available model: {models[0].id}")

            await self.chat("Hello")
            logger.info(f"[ollama] Initialized with model: {self._config.model}")
        except ProviderError as e:
            logger.error(f"[ollama] Failed to initialize model {self._config.model}: {e}")
            models = await self.get_available_models()
            if models:
                self.select_model(models[0].id)
                logger.info(f"[ollama] Fallback to: {models[0].id}")

        return await self.refresh_capabilities()

    async def _generate(
        self,
        prompt: str,
        options: Optional[ChatOptions] = None,
        images: Optional[List[str]] = None,
    ) -> str:
        options = options or ChatOptions()

        generation: Dict[str, Any] = {
            "temperature": options.temperature if options.temperature is not None else 0.7,
            "top_p": 0.9,
        }
        if options.max_tokens is not None:
            generation["num_predict"] = options.max_tokens

        payload: Dict[str, Any] = {
            "model": self._config.model,
            "prompt": prompt,
            "stream": False,
            "options": generation,
        }
        if options.system_prompt:
            payload["system"] = options.system_prompt
        if images:
            payload["images"] = images

        try:
            response = await self._client.post("/api/generate", json=payload)
        except httpx.HTTPError as e:
            raise ProviderError("ollama", f"Ollama request failed: {e}", e) from e

        if response.status_code != 200:
            raise ProviderError(
                "ollama",
                f"Ollama API error: {response.status_code} {response.reason_phrase}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("ollama", f"Ollama returned invalid JSON: {e}", e) from e

        return data.get("response") or ""

    async def aclose(self) -> None:
        await self._client.aclose()
