"""
Meeting Mode - transcripts, summaries and action items.

Components:
- MeetingSummarizer: chunked map-reduce summaries over any chat function
- MeetingManager: single active meeting, end-of-meeting summary
- SQLiteMeetingStore: persisted meeting records
- meeting_to_markdown / meeting_to_json: export
"""

from .models import (
    Speaker,
    TranscriptEntry,
    ActionItem,
    MeetingMetadata,
    MeetingRecord,
)
from .errors import (
    MeetingError,
    MeetingInProgressError,
    NoActiveMeetingError,
    MeetingNotFoundError,
    ActionItemNotFoundError,
)
from .summarizer import (
    CHUNK_DURATION_MS,
    MeetingSummarizer,
    SummaryResult,
    chunk_entries,
    format_transcript,
)
from .store import MeetingStore, SQLiteMeetingStore
from .manager import MeetingManager
from .export import meeting_to_markdown, meeting_to_json

__all__ = [
    "Speaker",
    "TranscriptEntry",
    "ActionItem",
    "MeetingMetadata",
    "MeetingRecord",
    "MeetingError",
    "MeetingInProgressError",
    "NoActiveMeetingError",
    "MeetingNotFoundError",
    "ActionItemNotFoundError",
    "CHUNK_DURATION_MS",
    "MeetingSummarizer",
    "SummaryResult",
    "chunk_entries",
    "format_transcript",
    "MeetingStore",
    "SQLiteMeetingStore",
    "MeetingManager",
    "meeting_to_markdown",
    "meeting_to_json",
]
