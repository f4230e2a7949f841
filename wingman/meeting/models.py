"""
Meeting Data Models

Defines the transcript, action item and meeting record structures shared
by the summarizer, the meeting manager and the store.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any
import uuid


class Speaker(Enum):
    """Who said a transcript line."""
    YOU = "you"             # The person running the assistant
    SPEAKER = "speaker"     # Remote party / other participants


@dataclass(frozen=True)
class TranscriptEntry:
    """One transcribed statement. timestamp is wall-clock milliseconds."""
    speaker: Speaker
    text: str
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speaker": self.speaker.value,
            "text": self.text,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranscriptEntry":
        return cls(
            speaker=Speaker(data["speaker"]),
            text=data["text"],
            timestamp=int(data["timestamp"]),
        )


@dataclass
class ActionItem:
    """A follow-up extracted from a meeting."""
    text: str
    owner: Optional[str] = None
    deadline: Optional[str] = None
    completed: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "owner": self.owner,
            "deadline": self.deadline,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionItem":
        return cls(
            id=data["id"],
            text=data["text"],
            owner=data.get("owner"),
            deadline=data.get("deadline"),
            completed=bool(data.get("completed", False)),
        )


@dataclass
class MeetingMetadata:
    """Context recorded alongside a meeting."""
    language: str = "en-US"
    provider_id: str = ""
    model_id: str = ""
    playbook: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "language": self.language,
            "provider_id": self.provider_id,
            "model_id": self.model_id,
            "playbook": self.playbook,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MeetingMetadata":
        return cls(
            language=data.get("language", "en-US"),
            provider_id=data.get("provider_id", ""),
            model_id=data.get("model_id", ""),
            playbook=data.get("playbook"),
        )


@dataclass
class MeetingRecord:
    """
    A meeting and everything produced from it.

    entries only ever grow by append. chunk_summaries is filled only when
    the summary was built chunk by chunk.
    """
    id: str
    title: str
    started_at: int
    ended_at: Optional[int] = None
    entries: List[TranscriptEntry] = field(default_factory=list)
    summary: Optional[str] = None
    chunk_summaries: List[str] = field(default_factory=list)
    action_items: List[ActionItem] = field(default_factory=list)
    metadata: MeetingMetadata = field(default_factory=MeetingMetadata)

    @property
    def is_active(self) -> bool:
        return self.ended_at is None

    @property
    def duration_minutes(self) -> Optional[int]:
        if self.ended_at is None:
            return None
        return round((self.ended_at - self.started_at) / 60000)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "entries": [e.to_dict() for e in self.entries],
            "summary": self.summary,
            "chunk_summaries": list(self.chunk_summaries),
            "action_items": [a.to_dict() for a in self.action_items],
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MeetingRecord":
        return cls(
            id=data["id"],
            title=data["title"],
            started_at=int(data["started_at"]),
            ended_at=data.get("ended_at"),
            entries=[TranscriptEntry.from_dict(e) for e in data.get("entries", [])],
            summary=data.get("summary"),
            chunk_summaries=list(data.get("chunk_summaries", [])),
            action_items=[ActionItem.from_dict(a) for a in data.get("action_items", [])],
            metadata=MeetingMetadata.from_dict(data.get("metadata", {})),
        )
