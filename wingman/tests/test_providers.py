"""
Tests for the concrete providers.

Vendor SDK clients are replaced with mocks and the Ollama HTTP API with an
httpx.MockTransport, so nothing here touches the network.

Run with:
    pytest wingman/tests/test_providers.py -v
"""

import base64
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import anthropic
import httpx
import openai
import pytest

from wingman.llm import (
    ChatOptions,
    MissingCredentialsError,
    OllamaProvider,
    ProviderError,
    UnsupportedCapabilityError,
)
from wingman.llm.claude import ClaudeProvider
from wingman.llm.gemini import GeminiProvider
from wingman.llm.ollama import is_vision_model
from wingman.llm.openai_provider import OpenAIProvider

pytestmark = pytest.mark.asyncio


# ==================== Ollama ====================

def ollama_with(handler) -> OllamaProvider:
    transport = httpx.MockTransport(handler)
    client = httpx.AsyncClient(transport=transport, base_url="http://localhost:11434")
    return OllamaProvider(model="llama3.2", client=client)


def tags_response(*names):
    return httpx.Response(200, json={"models": [{"name": n} for n in names]})


class TestOllamaProvider:

    async def test_chat_posts_generate_request(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": "Hi from llama", "done": True})

        provider = ollama_with(handler)
        reply = await provider.chat("Hello", ChatOptions(system_prompt="Be terse", max_tokens=64))

        assert reply == "Hi from llama"
        assert seen["path"] == "/api/generate"
        assert seen["body"]["model"] == "llama3.2"
        assert seen["body"]["prompt"] == "Hello"
        assert seen["body"]["stream"] is False
        assert seen["body"]["system"] == "Be terse"
        assert seen["body"]["options"]["num_predict"] == 64

    async def test_missing_response_field_is_empty_text(self):
        provider = ollama_with(lambda request: httpx.Response(200, json={"done": True}))
        assert await provider.chat("Hello") == ""

    async def test_http_error_status_raises_provider_error(self):
        provider = ollama_with(lambda request: httpx.Response(500))

        with pytest.raises(ProviderError, match="Ollama API error: 500"):
            await provider.chat("Hello")

    async def test_transport_failure_raises_provider_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        provider = ollama_with(handler)

        with pytest.raises(ProviderError) as exc_info:
            await provider.chat("Hello")
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    async def test_model_discovery(self):
        provider = ollama_with(lambda request: tags_response("llama3.2:latest", "llava:7b"))

        models = await provider.get_available_models()

        assert [m.id for m in models] == ["llama3.2:latest", "llava:7b"]
        assert [m.supports_vision for m in models] == [False, True]

    async def test_model_discovery_failure_is_empty_list(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        assert await ollama_with(handler).get_available_models() == []

    async def test_connection_test_reports_unreachable_server(self):
        provider = ollama_with(lambda request: httpx.Response(503))

        result = await provider.test_connection()

        assert result.success is False
        assert "Ollama not available at http://localhost:11434" in result.error

    async def test_connection_test_success(self):
        def handler(request):
            if request.url.path == "/api/tags":
                return tags_response("llama3.2")
            return httpx.Response(200, json={"response": "Hello!", "done": True})

        result = await ollama_with(handler).test_connection()

        assert result.success is True

    async def test_select_model_swaps_descriptor(self):
        provider = ollama_with(lambda request: tags_response())
        before = provider.config

        after = provider.select_model("llama3.2-vision")

        assert after.supports_vision is True
        assert after.model == "llama3.2-vision"
        assert before.supports_vision is False
        assert before.model == "llama3.2"
        assert provider.config is after

    async def test_image_analysis_requires_vision_model(self):
        provider = ollama_with(lambda request: httpx.Response(200, json={"response": "x"}))

        with pytest.raises(UnsupportedCapabilityError):
            await provider.analyze_image(b"\x89PNG", "image/png", "What is this?")

    async def test_image_analysis_sends_base64_images(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": "A cat", "done": True})

        provider = ollama_with(handler)
        provider.select_model("llava")

        reply = await provider.analyze_image(b"imagebytes", "image/png", "What is this?")

        assert reply == "A cat"
        assert seen["body"]["images"] == [base64.b64encode(b"imagebytes").decode()]

    async def test_initialize_selects_first_installed_model(self):
        def handler(request):
            if request.url.path == "/api/tags":
                return tags_response("mistral:latest", "llava:13b")
            return httpx.Response(200, json={"response": "warm", "done": True})

        provider = ollama_with(handler)

        config = await provider.initialize()

        assert config.model == "mistral:latest"
        assert config.supports_vision is False

    async def test_initialize_without_server_does_not_raise(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        provider = ollama_with(handler)

        config = await provider.initialize()

        assert config.model == "llama3.2"

    async def test_refresh_capabilities_from_catalog(self):
        provider = ollama_with(lambda request: tags_response("llama3.2"))
        config = await provider.refresh_capabilities()
        assert config.supports_vision is False

    async def test_is_vision_model(self):
        assert is_vision_model("llama3.2-vision:11b")
        assert is_vision_model("LLaVA")
        assert not is_vision_model("mistral")


# ==================== OpenAI ====================

def openai_completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


class TestOpenAIProvider:

    def make(self, create: AsyncMock) -> OpenAIProvider:
        client = MagicMock()
        client.chat.completions.create = create
        client.close = AsyncMock()
        return OpenAIProvider(api_key="sk-test", client=client)

    async def test_requires_api_key(self):
        with pytest.raises(MissingCredentialsError):
            OpenAIProvider(api_key="")

    async def test_chat_sends_system_and_user_messages(self):
        create = AsyncMock(return_value=openai_completion("Hello!"))
        provider = self.make(create)

        reply = await provider.chat("Hi", ChatOptions(system_prompt="Be nice", temperature=0.2))

        assert reply == "Hello!"
        kwargs = create.await_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["messages"] == [
            {"role": "system", "content": "Be nice"},
            {"role": "user", "content": "Hi"},
        ]
        assert kwargs["temperature"] == 0.2

    async def test_no_choices_is_empty_text(self):
        provider = self.make(AsyncMock(return_value=SimpleNamespace(choices=[])))
        assert await provider.chat("Hi") == ""

    async def test_sdk_error_is_wrapped(self):
        provider = self.make(AsyncMock(side_effect=openai.OpenAIError("invalid key")))

        with pytest.raises(ProviderError, match="invalid key") as exc_info:
            await provider.chat("Hi")
        assert exc_info.value.provider_id == "openai"

    async def test_image_is_sent_as_data_url(self):
        create = AsyncMock(return_value=openai_completion("A chart"))
        provider = self.make(create)

        await provider.analyze_image(b"png", "image/png", "Describe")

        content = create.await_args.kwargs["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "Describe"}
        assert content[1]["image_url"]["url"] == f"data:image/png;base64,{base64.b64encode(b'png').decode()}"

    async def test_audio_is_unsupported(self):
        provider = self.make(AsyncMock())
        with pytest.raises(UnsupportedCapabilityError):
            await provider.analyze_audio(b"wav", "audio/wav", "Transcribe")

    async def test_connection_test_never_raises(self):
        provider = self.make(AsyncMock(side_effect=openai.OpenAIError("boom")))

        result = await provider.test_connection()

        assert result.success is False
        assert "boom" in result.error


# ==================== Claude ====================

def claude_message(text):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


class TestClaudeProvider:

    def make(self, create: AsyncMock) -> ClaudeProvider:
        client = MagicMock()
        client.messages.create = create
        client.close = AsyncMock()
        return ClaudeProvider(api_key="sk-ant-test", client=client)

    async def test_requires_api_key(self):
        with pytest.raises(MissingCredentialsError):
            ClaudeProvider(api_key=None)

    async def test_chat_passes_system_and_default_max_tokens(self):
        create = AsyncMock(return_value=claude_message("Hello!"))
        provider = self.make(create)

        reply = await provider.chat("Hi", ChatOptions(system_prompt="Be brief"))

        assert reply == "Hello!"
        kwargs = create.await_args.kwargs
        assert kwargs["system"] == "Be brief"
        assert kwargs["max_tokens"] == 4096
        assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]

    async def test_empty_content_is_empty_text(self):
        provider = self.make(AsyncMock(return_value=SimpleNamespace(content=[])))
        assert await provider.chat("Hi") == ""

    async def test_sdk_error_is_wrapped(self):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        provider = self.make(AsyncMock(side_effect=anthropic.APIConnectionError(request=request)))

        with pytest.raises(ProviderError) as exc_info:
            await provider.chat("Hi")
        assert exc_info.value.provider_id == "claude"

    async def test_image_is_sent_as_base64_block(self):
        create = AsyncMock(return_value=claude_message("A diagram"))
        provider = self.make(create)

        await provider.analyze_image(b"jpg", "image/jpeg", "Explain")

        content = create.await_args.kwargs["messages"][0]["content"]
        assert content[0]["source"] == {
            "type": "base64",
            "media_type": "image/jpeg",
            "data": base64.b64encode(b"jpg").decode(),
        }
        assert content[1] == {"type": "text", "text": "Explain"}


# ==================== Gemini ====================

@pytest.fixture
def genai_sdk():
    """google-genai with a mocked Client whose generate_content answers "Hi from Gemini"."""
    with patch("wingman.llm.gemini.genai") as genai:
        genai.Client.return_value.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(text="Hi from Gemini")
        )
        yield genai


class TestGeminiProvider:

    async def test_requires_api_key(self):
        with pytest.raises(MissingCredentialsError):
            GeminiProvider(api_key="")

    async def test_chat_runs_generate_content(self, genai_sdk):
        provider = GeminiProvider(api_key="key")

        reply = await provider.chat("Hello", ChatOptions(system_prompt="Be nice", temperature=0.2))

        assert reply == "Hi from Gemini"
        genai_sdk.Client.assert_called_once_with(api_key="key")
        call = provider.client.aio.models.generate_content.await_args
        assert call.kwargs["model"] == "gemini-2.5-flash"
        assert call.kwargs["contents"] == "Hello"
        assert call.kwargs["config"].system_instruction == "Be nice"
        assert call.kwargs["config"].temperature == 0.2

    async def test_each_provider_has_its_own_client(self, genai_sdk):
        genai_sdk.Client.side_effect = lambda api_key: MagicMock(name=api_key)

        first = GeminiProvider(api_key="k1")
        second = GeminiProvider(api_key="k2")

        assert first.client is not second.client
        assert [c.kwargs["api_key"] for c in genai_sdk.Client.call_args_list] == ["k1", "k2"]

    async def test_audio_is_sent_as_inline_part(self, genai_sdk):
        provider = GeminiProvider(api_key="key")

        await provider.analyze_audio(b"wav", "audio/wav", "Transcribe")

        contents = provider.client.aio.models.generate_content.await_args.kwargs["contents"]
        assert contents[0] == "Transcribe"
        assert contents[1].inline_data.data == b"wav"
        assert contents[1].inline_data.mime_type == "audio/wav"

    async def test_image_is_sent_as_inline_part(self, genai_sdk):
        provider = GeminiProvider(api_key="key")

        await provider.analyze_image(b"png", "image/png", "Describe")

        contents = provider.client.aio.models.generate_content.await_args.kwargs["contents"]
        assert contents[1].inline_data.mime_type == "image/png"

    async def test_sdk_error_is_wrapped(self, genai_sdk):
        provider = GeminiProvider(api_key="key")
        provider.client.aio.models.generate_content.side_effect = RuntimeError("quota")

        with pytest.raises(ProviderError, match="quota"):
            await provider.chat("Hello")

    async def test_empty_reply_fails_connection_test(self, genai_sdk):
        provider = GeminiProvider(api_key="key")
        provider.client.aio.models.generate_content.return_value = SimpleNamespace(text=None)

        result = await provider.test_connection()

        assert result.success is False
        assert result.error == "Empty response from Gemini"
