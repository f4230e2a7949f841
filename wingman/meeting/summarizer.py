"""
Meeting Summarizer - map-reduce summarization over a chat function.

Handles:
- Time-window chunking of transcripts (15 minute windows)
- Single-pass summary when the whole meeting fits one window
- Map (one call per chunk, sequential) + reduce (one combining call)
- Action item extraction from free-form LLM JSON

Chunk calls run one after another: rate limits stay predictable and the
chunk summaries keep transcript order.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional

from .models import ActionItem, TranscriptEntry
from .prompts import (
    build_action_items_prompt,
    build_chunk_summary_prompt,
    build_combine_summary_prompt,
    build_summary_prompt,
)

logger = logging.getLogger(__name__)

CHUNK_DURATION_MS = 15 * 60 * 1000

ChatFn = Callable[[str], Awaitable[str]]

_CODE_FENCE = re.compile(r"^```(?:json)?\s*\n?|\n?```\s*$")


@dataclass
class SummaryResult:
    """Final summary plus the per-chunk summaries it was built from."""
    summary: str
    chunk_summaries: List[str] = field(default_factory=list)


def format_transcript(entries: List[TranscriptEntry]) -> str:
    """Render entries as "[speaker] text" lines in transcript order."""
    return "\n".join(f"[{entry.speaker.value}] {entry.text}" for entry in entries)


def chunk_entries(
    entries: List[TranscriptEntry],
    chunk_duration_ms: int = CHUNK_DURATION_MS,
) -> List[List[TranscriptEntry]]:
    """
    Split entries into contiguous time windows.

    A new chunk starts when an entry is chunk_duration_ms or more after
    the first entry of the current chunk. Concatenating the chunks gives
    back the input unchanged.
    """
    if not entries:
        return []

    chunks: List[List[TranscriptEntry]] = []
    current: List[TranscriptEntry] = []
    chunk_start = entries[0].timestamp

    for entry in entries:
        if current and entry.timestamp - chunk_start >= chunk_duration_ms:
            chunks.append(current)
            current = []
            chunk_start = entry.timestamp
        current.append(entry)

    if current:
        chunks.append(current)

    return chunks


def _strip_code_fence(text: str) -> str:
    return _CODE_FENCE.sub("", text.strip()).strip()


def _optional_str(value: Any) -> Optional[str]:
    if not value:
        return None
    return str(value)


class MeetingSummarizer:
    """
    Summaries and action items for arbitrary-length transcripts.

    Args:
        chat: async function taking a prompt and returning the reply text.
            Errors from it propagate to the caller.
        chunk_duration_ms: width of a map-phase window.
    """

    def __init__(self, chat: ChatFn, chunk_duration_ms: int = CHUNK_DURATION_MS):
        self._chat = chat
        self.chunk_duration_ms = chunk_duration_ms

    async def summarize(
        self,
        entries: List[TranscriptEntry],
        language: Optional[str] = None,
    ) -> Optional[SummaryResult]:
        """
        Summarize a transcript.

        Returns None for an empty transcript without calling the model.
        """
        if not entries:
            return None

        chunks = chunk_entries(entries, self.chunk_duration_ms)

        if len(chunks) == 1:
            logger.info(f"Summarizing {len(entries)} entries in a single pass")
            summary = await self._chat(build_summary_prompt(format_transcript(entries), language))
            return SummaryResult(summary=summary)

        logger.info(f"Summarizing {len(entries)} entries in {len(chunks)} chunks")

        chunk_summaries: List[str] = []
        for index, chunk in enumerate(chunks, start=1):
            prompt = build_chunk_summary_prompt(format_transcript(chunk), index, len(chunks))
            chunk_summaries.append(await self._chat(prompt))
            logger.debug(f"Chunk {index}/{len(chunks)} summarized")

        summary = await self._chat(build_combine_summary_prompt(chunk_summaries, language))
        return SummaryResult(summary=summary, chunk_summaries=chunk_summaries)

    async def extract_action_items(self, entries: List[TranscriptEntry]) -> List[ActionItem]:
        """
        Extract action items as structured data.

        Returns [] for an empty transcript (no model call) and whenever the
        reply is not a JSON array. Extracted items are never completed.
        """
        if not entries:
            return []

        response = await self._chat(build_action_items_prompt(format_transcript(entries)))

        try:
            parsed = json.loads(_strip_code_fence(response))
        except (json.JSONDecodeError, TypeError):
            logger.warning("Action item reply was not valid JSON, ignoring it")
            return []

        if not isinstance(parsed, list):
            logger.warning(f"Action item reply was {type(parsed).__name__}, expected a list")
            return []

        items = []
        for raw in parsed:
            if not isinstance(raw, dict):
                continue
            items.append(ActionItem(
                text=str(raw.get("text") or ""),
                owner=_optional_str(raw.get("owner")),
                deadline=_optional_str(raw.get("deadline")),
                completed=False,
            ))

        return items
