"""
Coaching playbooks.

Built-in playbooks are fixed. Custom playbooks live as one JSON file each
under the library directory and can be created, updated and deleted.
"""

import json
import logging
import uuid
from dataclasses import dataclass, asdict, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "description",
    "icon",
    "guidelines",
    "response_style",
    "summary_format",
)


@dataclass(frozen=True)
class Playbook:
    """A named set of coaching guidelines and output preferences."""
    id: str
    name: str
    description: str = ""
    icon: str = ""
    is_built_in: bool = False
    guidelines: str = ""
    response_style: str = ""
    summary_format: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Playbook":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            icon=data.get("icon", ""),
            is_built_in=bool(data.get("is_built_in", False)),
            guidelines=data.get("guidelines", ""),
            response_style=data.get("response_style", ""),
            summary_format=data.get("summary_format", ""),
        )


BUILT_IN_PLAYBOOKS: List[Playbook] = [
    Playbook(
        id="technical-interview",
        name="Technical Interview",
        description="Coaching for technical coding interviews",
        icon="💻",
        is_built_in=True,
        guidelines=(
            "Focus on problem-solving approach, time/space complexity analysis, "
            "and clear communication of thought process. Suggest clarifying "
            "questions before diving into code."
        ),
        response_style="structured, step-by-step",
        summary_format="Problems discussed, approaches taken, areas for improvement",
    ),
    Playbook(
        id="sales-call",
        name="Sales Call",
        description="Real-time coaching for sales conversations",
        icon="💰",
        is_built_in=True,
        guidelines=(
            "Identify customer pain points, suggest value propositions, note "
            "objections and provide rebuttal suggestions. Focus on active "
            "listening cues and closing opportunities."
        ),
        response_style="persuasive, empathetic",
        summary_format="Key pain points, objections raised, next steps, deal probability",
    ),
    Playbook(
        id="team-standup",
        name="Team Standup",
        description="Daily standup and team sync meetings",
        icon="🤝",
        is_built_in=True,
        guidelines=(
            "Track blockers, action items, and commitments. Flag when discussions "
            "go off-topic or exceed time limits. Note dependencies between team "
            "members."
        ),
        response_style="concise, action-oriented",
        summary_format="Per-person updates, blockers, action items with owners",
    ),
    Playbook(
        id="vc-pitch",
        name="VC Pitch",
        description="Investor pitch and fundraising meetings",
        icon="🚀",
        is_built_in=True,
        guidelines=(
            "Track investor questions and concerns. Suggest data points to "
            "strengthen arguments. Note follow-up items and commitment signals. "
            "Flag unclear or weak responses."
        ),
        response_style="confident, data-driven",
        summary_format=(
            "Key questions asked, concerns raised, follow-up commitments, "
            "investor sentiment"
        ),
    ),
    Playbook(
        id="customer-success",
        name="Customer Success",
        description="Customer onboarding and success calls",
        icon="🎯",
        is_built_in=True,
        guidelines=(
            "Track customer goals, feature adoption progress, and satisfaction "
            "signals. Identify upsell opportunities and churn risks. Note "
            "technical issues to escalate."
        ),
        response_style="supportive, solution-focused",
        summary_format="Customer health score factors, feature requests, escalation items",
    ),
    Playbook(
        id="general",
        name="General",
        description="General-purpose meeting coaching",
        icon="📋",
        is_built_in=True,
        guidelines=(
            "Track key discussion points, decisions made, and action items. "
            "Flag when topics seem unresolved or need follow-up."
        ),
        response_style="neutral, balanced",
        summary_format="Topics discussed, decisions made, action items, open questions",
    ),
]

_BUILT_IN_BY_ID = {p.id: p for p in BUILT_IN_PLAYBOOKS}


class PlaybookLibrary:
    """
    Built-in plus custom playbooks.

    Built-ins can never be updated or deleted; update_playbook and
    delete_playbook only act on custom ids.
    """

    def __init__(self, directory):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._custom: Dict[str, Playbook] = {}
        self._load_custom()

    def _load_custom(self):
        for path in sorted(self.directory.glob("*.json")):
            try:
                playbook = Playbook.from_dict(json.loads(path.read_text(encoding="utf-8")))
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.warning(f"Skipping corrupt playbook file {path.name}: {e}")
                continue
            self._custom[playbook.id] = replace(playbook, is_built_in=False)

        if self._custom:
            logger.info(f"Loaded {len(self._custom)} custom playbooks")

    def list_playbooks(self) -> List[Playbook]:
        return list(BUILT_IN_PLAYBOOKS) + list(self._custom.values())

    def get_playbook(self, playbook_id: str) -> Optional[Playbook]:
        builtin = _BUILT_IN_BY_ID.get(playbook_id)
        if builtin:
            return builtin
        return self._custom.get(playbook_id)

    def create_playbook(self, name: str, **fields) -> Playbook:
        values = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
        playbook = Playbook(id=str(uuid.uuid4()), name=name, is_built_in=False, **values)
        self._custom[playbook.id] = playbook
        self._save(playbook)
        return playbook

    def update_playbook(self, playbook_id: str, **changes) -> Optional[Playbook]:
        existing = self._custom.get(playbook_id)
        if existing is None:
            return None

        values = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS and v is not None}
        updated = replace(existing, **values)
        self._custom[playbook_id] = updated
        self._save(updated)
        return updated

    def delete_playbook(self, playbook_id: str) -> bool:
        if playbook_id not in self._custom:
            return False

        del self._custom[playbook_id]
        path = self._path(playbook_id)
        if path.exists():
            path.unlink()
        return True

    def _path(self, playbook_id: str) -> Path:
        return self.directory / f"{playbook_id}.json"

    def _save(self, playbook: Playbook):
        self._path(playbook.id).write_text(
            json.dumps(playbook.to_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
