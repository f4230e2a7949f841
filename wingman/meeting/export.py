"""Render meeting records for sharing."""

import json
from datetime import datetime

from .models import MeetingRecord


def meeting_to_markdown(record: MeetingRecord) -> str:
    lines = [f"# {record.title}", ""]

    started = datetime.fromtimestamp(record.started_at / 1000)
    lines.append(f"**Date:** {started.strftime('%Y-%m-%d %H:%M')}")
    if record.duration_minutes is not None:
        lines.append(f"**Duration:** {record.duration_minutes} minutes")
    lines.append("")

    if record.summary:
        lines.extend(["## Summary", "", record.summary, ""])

    if record.action_items:
        lines.extend(["## Action Items", ""])
        for item in record.action_items:
            check = "[x]" if item.completed else "[ ]"
            line = f"- {check} {item.text}"
            if item.owner:
                line += f" (@{item.owner})"
            if item.deadline:
                line += f" - due {item.deadline}"
            lines.append(line)
        lines.append("")

    if record.entries:
        lines.extend(["## Transcript", ""])
        for entry in record.entries:
            lines.append(f"**[{entry.speaker.value}]** {entry.text}")
        lines.append("")

    return "\n".join(lines)


def meeting_to_json(record: MeetingRecord) -> str:
    return json.dumps(record.to_dict(), indent=2)
