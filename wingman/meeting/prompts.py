"""
Prompt templates for meeting summarization, action items and coaching.
"""

from typing import List, Optional


def build_summary_prompt(transcript: str, language: Optional[str] = None) -> str:
    lang_note = f"\nRespond in the language: {language}" if language else ""
    return f"""Summarize the following meeting transcript concisely. Focus on key decisions, topics discussed, and outcomes.{lang_note}

Transcript:
{transcript}"""


def build_chunk_summary_prompt(transcript: str, chunk_index: int, total_chunks: int) -> str:
    return f"""This is section {chunk_index} of {total_chunks} from a longer meeting. Summarize this section concisely, preserving key points and context.

Transcript:
{transcript}"""


def build_combine_summary_prompt(chunk_summaries: List[str], language: Optional[str] = None) -> str:
    sections = "\n\n".join(
        f"Section {i}:\n{summary}" for i, summary in enumerate(chunk_summaries, start=1)
    )
    lang_note = f"\nRespond in the language: {language}" if language else ""
    return f"""Combine these meeting section summaries into a single cohesive summary. Remove redundancy, maintain chronological flow, and highlight key decisions and action items.{lang_note}

{sections}"""


def build_action_items_prompt(transcript: str) -> str:
    return f"""Extract action items from this meeting transcript. Return a JSON array where each item has:
- "text" (string): the action to be taken
- "owner" (string or null): person responsible
- "deadline" (string or null): when it should be done

Return ONLY the JSON array, no markdown fences or explanation. If no action items found, return [].

Transcript:
{transcript}"""


def build_quick_response_prompt(question: str, recent_context: str) -> str:
    return f"""Based on the meeting context below, suggest 2-3 brief response options for this question.

Recent context:
{recent_context}

Question: {question}

Provide 2-3 concise response suggestions, each on a new line prefixed with "- "."""


def build_coaching_prompt(statement: str, playbook_id: str, guidelines: str = "") -> str:
    guideline_note = f"\nPlaybook guidelines: {guidelines}\n" if guidelines else ""
    return f"""You are a real-time meeting coach using the "{playbook_id}" playbook. Based on the following recent statement, provide brief coaching advice if relevant. If no coaching is needed, respond with an empty string.
{guideline_note}
Recent statement: "{statement}"

Keep advice to 1-2 sentences maximum."""
