"""
Coaching Engine - best-effort live advice during a meeting.

Handles:
- Cooldown-throttled statement evaluation against a playbook
- Quick response suggestions for a question

Nothing here raises on model failure: advice is optional and must never
interrupt the meeting flow.
"""

import logging
import re
import time
from typing import Callable, List, Optional

from ..meeting.prompts import build_coaching_prompt, build_quick_response_prompt
from ..meeting.summarizer import ChatFn
from .playbooks import Playbook

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 10.0
MAX_QUICK_RESPONSES = 3

_BULLET = re.compile(r"^[-•*]\s*")


class CoachingEngine:
    """
    Coaching advice and quick responses.

    At most one evaluation reaches the model per cooldown window. The
    window restarts on every evaluation that is not suppressed, whether or
    not the model call succeeds.
    """

    def __init__(
        self,
        chat: ChatFn,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._chat = chat
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._last_eval: Optional[float] = None

    async def evaluate_statement(self, statement: str, playbook: Playbook) -> Optional[str]:
        """Return advice for the statement, or None if suppressed or nothing to add."""
        now = self._clock()
        if self._last_eval is not None and now - self._last_eval < self.cooldown_seconds:
            logger.debug("Coaching evaluation suppressed by cooldown")
            return None
        self._last_eval = now

        try:
            prompt = build_coaching_prompt(statement, playbook.id, playbook.guidelines)
            response = await self._chat(prompt)
        except Exception as e:
            logger.error(f"Coaching evaluation failed: {e}")
            return None

        advice = (response or "").strip()
        return advice or None

    async def generate_quick_responses(self, question: str, recent_context: str) -> List[str]:
        try:
            response = await self._chat(build_quick_response_prompt(question, recent_context))
        except Exception as e:
            logger.error(f"Quick response generation failed: {e}")
            return []

        if not response or not response.strip():
            return []

        suggestions = []
        for line in response.split("\n"):
            cleaned = _BULLET.sub("", line.strip()).strip()
            if cleaned:
                suggestions.append(cleaned)

        return suggestions[:MAX_QUICK_RESPONSES]
