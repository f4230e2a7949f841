"""
Shared test fixtures.

Provides:
- Mock providers (no network, AsyncMock chat)
- Mock chat function for the summarizer, manager and coach
- Controllable clocks
- SQLite store and settings rooted in tmp_path
"""

from typing import Callable, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from wingman.config import ENV_VARS, Settings
from wingman.llm import ConnectionResult, LLMProvider, ModelInfo, ProviderConfig
from wingman.meeting import SQLiteMeetingStore, Speaker, TranscriptEntry

MINUTE_MS = 60 * 1000


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, amount: float):
        self.now += amount


def _mock_provider(
    provider_id: str,
    reply: str = "ok",
    error: Optional[Exception] = None,
    model: str = "test-model",
) -> MagicMock:
    """Mock LLMProvider whose chat returns reply, or raises error when given."""
    provider = MagicMock(spec=LLMProvider)
    provider.config = ProviderConfig(id=provider_id, name=provider_id.title(), model=model)
    provider.id = provider_id
    if error is not None:
        provider.chat = AsyncMock(side_effect=error)
    else:
        provider.chat = AsyncMock(return_value=reply)
    provider.analyze_image = AsyncMock(return_value=f"{provider_id} sees an image")
    provider.analyze_audio = AsyncMock(return_value=f"{provider_id} hears audio")
    provider.test_connection = AsyncMock(return_value=ConnectionResult.ok())
    provider.get_available_models = AsyncMock(return_value=[ModelInfo(id=model, name=model)])
    provider.aclose = AsyncMock()
    return provider


def _entries(count: int, spacing_ms: int = MINUTE_MS, start: int = 0) -> List[TranscriptEntry]:
    """Alternating-speaker entries spaced evenly in time."""
    return [
        TranscriptEntry(
            speaker=Speaker.YOU if i % 2 == 0 else Speaker.SPEAKER,
            text=f"Statement number {i}",
            timestamp=start + i * spacing_ms,
        )
        for i in range(count)
    ]


@pytest.fixture
def make_provider() -> Callable[..., MagicMock]:
    """Factory for mock providers: make_provider("a", reply=..., error=...)."""
    return _mock_provider


@pytest.fixture
def make_entries() -> Callable[..., List[TranscriptEntry]]:
    """Factory for evenly spaced entries: make_entries(count, spacing_ms)."""
    return _entries


@pytest.fixture
def mock_chat() -> AsyncMock:
    """Chat function that always answers "Summary text"."""
    return AsyncMock(return_value="Summary text")


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(tmp_path) -> SQLiteMeetingStore:
    return SQLiteMeetingStore(str(tmp_path / "meetings.db"))


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the settings loader reads."""
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.delenv("WINGMAN_DATA_DIR", raising=False)
    return monkeypatch


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with no API keys, storing everything under tmp_path."""
    return Settings(data_dir=str(tmp_path / "data"))
