"""
Meeting Manager - owns the single active meeting.

Handles:
- Meeting start/end with one active-meeting slot
- Appending transcript entries to the active meeting
- Summary generation on end and on demand
- Action item extraction and completion toggling
"""

import logging
from typing import Callable, List, Optional

from .errors import (
    ActionItemNotFoundError,
    MeetingInProgressError,
    MeetingNotFoundError,
    NoActiveMeetingError,
)
from .models import ActionItem, MeetingMetadata, MeetingRecord, TranscriptEntry
from .store import MeetingStore, now_ms
from .summarizer import ChatFn, MeetingSummarizer

logger = logging.getLogger(__name__)


class MeetingManager:
    """
    Meeting lifecycle on top of a MeetingStore.

    Errors from the chat function propagate out of end_meeting,
    generate_summary and extract_action_items. If summarizing fails during
    end_meeting the meeting stays active so the caller can retry.
    """

    def __init__(
        self,
        store: MeetingStore,
        chat: ChatFn,
        clock: Callable[[], int] = now_ms,
        summarizer: Optional[MeetingSummarizer] = None,
    ):
        self.store = store
        self.summarizer = summarizer or MeetingSummarizer(chat)
        self._clock = clock
        self._current_id: Optional[str] = None
        self._ending = False

    @property
    def current_meeting_id(self) -> Optional[str]:
        return self._current_id

    def start_meeting(
        self,
        title: Optional[str] = None,
        metadata: Optional[MeetingMetadata] = None,
    ) -> MeetingRecord:
        if self._current_id is not None:
            raise MeetingInProgressError()

        record = self.store.create_meeting(title, metadata, started_at=self._clock())
        self._current_id = record.id
        logger.info(f"Started meeting {record.id} ({record.title})")
        return record

    def current_meeting(self) -> Optional[MeetingRecord]:
        if self._current_id is None:
            return None
        return self.store.get_meeting(self._current_id)

    def add_entry(self, entry: TranscriptEntry) -> None:
        """Append to the active meeting. Rejected while the meeting is ending."""
        if self._current_id is None or self._ending:
            raise NoActiveMeetingError()
        self.store.add_entry(self._current_id, entry)

    async def end_meeting(self) -> MeetingRecord:
        """
        Finalize the active meeting, summarizing it when it has entries.

        While the summary is being generated the meeting is ending: new
        entries and a second end_meeting raise NoActiveMeetingError.
        """
        if self._current_id is None or self._ending:
            raise NoActiveMeetingError()

        meeting_id = self._current_id
        self._ending = True
        try:
            record = self._load(meeting_id)
            ended_at = self._clock()

            result = None
            if record.entries:
                result = await self.summarizer.summarize(record.entries, record.metadata.language)

            changes = {"ended_at": ended_at}
            if result:
                changes["summary"] = result.summary
                changes["chunk_summaries"] = result.chunk_summaries
            record = self._update(meeting_id, **changes)
            self._current_id = None
        finally:
            self._ending = False

        logger.info(
            f"Ended meeting {record.id}: "
            f"{len(record.entries)} entries, "
            f"{len(record.chunk_summaries)} chunk summaries"
        )
        return record

    async def generate_summary(self, meeting_id: str) -> Optional[str]:
        """(Re)generate and store the summary. None for an empty meeting."""
        record = self._load(meeting_id)

        result = await self.summarizer.summarize(record.entries, record.metadata.language)
        if result is None:
            return None

        self._update(meeting_id, summary=result.summary, chunk_summaries=result.chunk_summaries)
        return result.summary

    async def extract_action_items(self, meeting_id: str) -> List[ActionItem]:
        """Extract action items, replacing any previously stored ones."""
        record = self._load(meeting_id)

        items = await self.summarizer.extract_action_items(record.entries)
        self._update(meeting_id, action_items=items)

        logger.info(f"Extracted {len(items)} action items for meeting {meeting_id}")
        return items

    def set_action_item_completed(
        self,
        meeting_id: str,
        item_id: str,
        completed: bool = True,
    ) -> ActionItem:
        record = self._load(meeting_id)

        for item in record.action_items:
            if item.id == item_id:
                item.completed = completed
                self.store.save_meeting(record)
                return item

        raise ActionItemNotFoundError(meeting_id, item_id)

    def _load(self, meeting_id: str) -> MeetingRecord:
        record = self.store.get_meeting(meeting_id)
        if record is None:
            raise MeetingNotFoundError(meeting_id)
        return record

    def _update(self, meeting_id: str, **fields) -> MeetingRecord:
        """Reload the record and write back only the given fields.

        Entries appended while a model call was in flight are kept.
        """
        record = self._load(meeting_id)
        for name, value in fields.items():
            setattr(record, name, value)
        self.store.save_meeting(record)
        return record
