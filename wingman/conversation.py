"""
Conversation history for the chat panel.

Keeps the newest messages in a JSON file so context survives restarts.
"""

import json
import logging
import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

MAX_MESSAGES = 50
ROLES = ("user", "assistant")


@dataclass
class ConversationMessage:
    role: str
    content: str
    timestamp: int


class ConversationHistory:
    """Bounded, file-backed list of chat messages. Oldest are dropped first."""

    def __init__(self, path, max_messages: int = MAX_MESSAGES):
        self.path = Path(path)
        self.max_messages = max_messages
        self._messages: List[ConversationMessage] = self._load()

    def _load(self) -> List[ConversationMessage]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [ConversationMessage(**m) for m in raw][-self.max_messages:]
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Could not read conversation history, starting fresh: {e}")
            return []

    def _save(self):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps([asdict(m) for m in self._messages], indent=2),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error(f"Failed to save conversation history: {e}")

    def add_message(self, role: str, content: str) -> ConversationMessage:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")

        message = ConversationMessage(role=role, content=content, timestamp=int(time.time() * 1000))
        self._messages.append(message)
        if len(self._messages) > self.max_messages:
            self._messages = self._messages[-self.max_messages:]

        self._save()
        return message

    def messages(self, limit: Optional[int] = None) -> List[ConversationMessage]:
        if limit is None:
            return list(self._messages)
        if limit <= 0:
            return []
        return self._messages[-limit:]

    def context_string(self, limit: int = MAX_MESSAGES) -> str:
        return "\n".join(f"[{m.role}] {m.content}" for m in self.messages(limit))

    def clear(self):
        self._messages = []
        self._save()
