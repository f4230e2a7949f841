"""
Coaching - playbooks and live meeting advice.

Components:
- Playbook / PlaybookLibrary: built-in and custom coaching playbooks
- CoachingEngine: cooldown-throttled advice and quick responses
"""

from .playbooks import Playbook, PlaybookLibrary, BUILT_IN_PLAYBOOKS
from .coach import CoachingEngine

__all__ = [
    "Playbook",
    "PlaybookLibrary",
    "BUILT_IN_PLAYBOOKS",
    "CoachingEngine",
]
