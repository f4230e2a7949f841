"""
MeetingStore: persistence for meeting records.

The meeting manager only needs create/get/save/add_entry. The SQLite
implementation adds listing, search and deletion for the history view.
"""

import json
import logging
import os
import sqlite3
import time
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from .errors import MeetingNotFoundError
from .models import (
    ActionItem,
    MeetingMetadata,
    MeetingRecord,
    TranscriptEntry,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Meeting"


def now_ms() -> int:
    return int(time.time() * 1000)


class MeetingStore(ABC):
    """Key-value store of meeting records keyed by meeting id."""

    @abstractmethod
    def create_meeting(
        self,
        title: Optional[str] = None,
        metadata: Optional[MeetingMetadata] = None,
        started_at: Optional[int] = None,
    ) -> MeetingRecord:
        pass

    @abstractmethod
    def get_meeting(self, meeting_id: str) -> Optional[MeetingRecord]:
        pass

    @abstractmethod
    def save_meeting(self, record: MeetingRecord) -> None:
        pass

    @abstractmethod
    def add_entry(self, meeting_id: str, entry: TranscriptEntry) -> None:
        """Append an entry. Raises MeetingNotFoundError for unknown ids."""
        pass


class SQLiteMeetingStore(MeetingStore):
    """
    Meeting records in SQLite.

    One row per meeting; entries, chunk summaries, action items and
    metadata are JSON-encoded columns.
    """

    def __init__(self, db_path: str = None):
        """
        Initialize the store.

        Args:
            db_path: Path to SQLite database file
        """
        if db_path is None:
            db_path = os.getenv("WINGMAN_DB_PATH", "meetings.db")

        self.db_path = str(db_path)
        self._init_db()

    def _init_db(self):
        """Create the database tables if they don't exist."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS meetings (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    started_at INTEGER NOT NULL,
                    ended_at INTEGER,
                    summary TEXT,
                    entries TEXT NOT NULL DEFAULT '[]',
                    chunk_summaries TEXT NOT NULL DEFAULT '[]',
                    action_items TEXT NOT NULL DEFAULT '[]',
                    metadata TEXT NOT NULL DEFAULT '{}'
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_meetings_started ON meetings(started_at)")

    def create_meeting(
        self,
        title: Optional[str] = None,
        metadata: Optional[MeetingMetadata] = None,
        started_at: Optional[int] = None,
    ) -> MeetingRecord:
        record = MeetingRecord(
            id=str(uuid.uuid4()),
            title=title or DEFAULT_TITLE,
            started_at=started_at if started_at is not None else now_ms(),
            metadata=metadata or MeetingMetadata(),
        )
        self.save_meeting(record)
        return record

    def get_meeting(self, meeting_id: str) -> Optional[MeetingRecord]:
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute("SELECT * FROM meetings WHERE id = ?", (meeting_id,)).fetchone()

        if row is None:
            return None
        return self._row_to_record(row)

    def save_meeting(self, record: MeetingRecord) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO meetings
                    (id, title, started_at, ended_at, summary, entries,
                     chunk_summaries, action_items, metadata)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.title,
                    record.started_at,
                    record.ended_at,
                    record.summary,
                    json.dumps([e.to_dict() for e in record.entries]),
                    json.dumps(record.chunk_summaries),
                    json.dumps([a.to_dict() for a in record.action_items]),
                    json.dumps(record.metadata.to_dict()),
                ),
            )

    def add_entry(self, meeting_id: str, entry: TranscriptEntry) -> None:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute(
                "SELECT entries FROM meetings WHERE id = ?", (meeting_id,)
            ).fetchone()
            if row is None:
                raise MeetingNotFoundError(meeting_id)

            entries = json.loads(row[0])
            entries.append(entry.to_dict())
            conn.execute(
                "UPDATE meetings SET entries = ? WHERE id = ?",
                (json.dumps(entries), meeting_id),
            )

    def list_meetings(self) -> List[MeetingRecord]:
        """All meetings, newest first."""
        with sqlite3.connect(self.db_path) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute("SELECT * FROM meetings ORDER BY started_at DESC").fetchall()

        records = []
        for row in rows:
            try:
                records.append(self._row_to_record(row))
            except (ValueError, KeyError) as e:
                logger.warning(f"Skipping unreadable meeting {row['id']}: {e}")
        return records

    def delete_meeting(self, meeting_id: str) -> bool:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM meetings WHERE id = ?", (meeting_id,))
            return cursor.rowcount > 0

    def search_meetings(self, query: str) -> List[MeetingRecord]:
        """Case-insensitive match on title, summary or any entry text."""
        q = query.lower()
        results = []
        for record in self.list_meetings():
            if q in record.title.lower():
                results.append(record)
            elif record.summary and q in record.summary.lower():
                results.append(record)
            elif any(q in entry.text.lower() for entry in record.entries):
                results.append(record)
        return results

    def _row_to_record(self, row: sqlite3.Row) -> MeetingRecord:
        return MeetingRecord(
            id=row["id"],
            title=row["title"],
            started_at=row["started_at"],
            ended_at=row["ended_at"],
            summary=row["summary"],
            entries=[TranscriptEntry.from_dict(e) for e in json.loads(row["entries"])],
            chunk_summaries=json.loads(row["chunk_summaries"]),
            action_items=[ActionItem.from_dict(a) for a in json.loads(row["action_items"])],
            metadata=MeetingMetadata.from_dict(json.loads(row["metadata"])),
        )
