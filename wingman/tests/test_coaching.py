"""
Tests for live coaching and quick responses.

Run with:
    pytest wingman/tests/test_coaching.py -v
"""

from unittest.mock import AsyncMock

import pytest

from wingman.coaching import BUILT_IN_PLAYBOOKS, CoachingEngine
from wingman.llm import ProviderError

pytestmark = pytest.mark.asyncio

SALES = next(p for p in BUILT_IN_PLAYBOOKS if p.id == "sales-call")


class TestEvaluateStatement:
    """Cooldown-throttled advice."""

    async def test_first_call_is_never_suppressed(self, fake_clock):
        chat = AsyncMock(return_value="Ask about their budget.")
        fake_clock.now = 0.0
        coach = CoachingEngine(chat, clock=fake_clock)

        advice = await coach.evaluate_statement("We might be interested", SALES)

        assert advice == "Ask about their budget."
        chat.assert_awaited_once()

    async def test_second_call_inside_cooldown_is_suppressed(self, fake_clock):
        chat = AsyncMock(return_value="advice")
        coach = CoachingEngine(chat, clock=fake_clock)

        await coach.evaluate_statement("one", SALES)
        fake_clock.advance(5)
        second = await coach.evaluate_statement("two", SALES)

        assert second is None
        assert chat.await_count == 1

    async def test_call_after_cooldown_proceeds(self, fake_clock):
        chat = AsyncMock(return_value="advice")
        coach = CoachingEngine(chat, clock=fake_clock)

        await coach.evaluate_statement("one", SALES)
        fake_clock.advance(5)
        await coach.evaluate_statement("suppressed", SALES)
        fake_clock.advance(5)
        third = await coach.evaluate_statement("three", SALES)

        assert third == "advice"
        assert chat.await_count == 2

    async def test_failed_attempt_still_starts_cooldown(self, fake_clock):
        chat = AsyncMock(side_effect=ProviderError("gemini", "timeout"))
        coach = CoachingEngine(chat, clock=fake_clock)

        assert await coach.evaluate_statement("one", SALES) is None
        fake_clock.advance(1)
        assert await coach.evaluate_statement("two", SALES) is None

        assert chat.await_count == 1

    async def test_cooldown_is_adjustable(self, fake_clock):
        chat = AsyncMock(return_value="advice")
        coach = CoachingEngine(chat, cooldown_seconds=10.0, clock=fake_clock)
        coach.cooldown_seconds = 2.0

        await coach.evaluate_statement("one", SALES)
        fake_clock.advance(2)
        await coach.evaluate_statement("two", SALES)

        assert chat.await_count == 2

    async def test_blank_reply_means_no_advice(self, fake_clock):
        coach = CoachingEngine(AsyncMock(return_value="   \n"), clock=fake_clock)
        assert await coach.evaluate_statement("ok", SALES) is None

    async def test_reply_is_trimmed(self, fake_clock):
        coach = CoachingEngine(AsyncMock(return_value="  Mention ROI.  \n"), clock=fake_clock)
        assert await coach.evaluate_statement("ok", SALES) == "Mention ROI."

    async def test_prompt_carries_statement_and_playbook(self, fake_clock):
        chat = AsyncMock(return_value="advice")
        coach = CoachingEngine(chat, clock=fake_clock)

        await coach.evaluate_statement("Your price is too high", SALES)

        prompt = chat.await_args.args[0]
        assert "Your price is too high" in prompt
        assert "sales-call" in prompt
        assert SALES.guidelines in prompt


class TestQuickResponses:
    """Bullet parsing of quick response suggestions."""

    async def test_bullets_are_stripped_and_capped_at_three(self):
        reply = "- First option\n• Second option\n\n* Third option\n- Fourth option"
        coach = CoachingEngine(AsyncMock(return_value=reply))

        suggestions = await coach.generate_quick_responses("When can you start?", "")

        assert suggestions == ["First option", "Second option", "Third option"]

    async def test_plain_lines_are_kept(self):
        coach = CoachingEngine(AsyncMock(return_value="Next week\n  \nIn a month"))

        assert await coach.generate_quick_responses("When?", "") == ["Next week", "In a month"]

    async def test_empty_reply_gives_empty_list(self):
        coach = CoachingEngine(AsyncMock(return_value="  "))
        assert await coach.generate_quick_responses("When?", "") == []

    async def test_chat_failure_gives_empty_list(self):
        coach = CoachingEngine(AsyncMock(side_effect=ProviderError("openai", "down")))
        assert await coach.generate_quick_responses("When?", "") == []

    async def test_not_throttled_by_cooldown(self, fake_clock):
        chat = AsyncMock(return_value="- yes")
        coach = CoachingEngine(chat, clock=fake_clock)

        await coach.generate_quick_responses("a?", "")
        await coach.generate_quick_responses("b?", "")

        assert chat.await_count == 2

    async def test_context_reaches_prompt(self):
        chat = AsyncMock(return_value="- yes")
        coach = CoachingEngine(chat)

        await coach.generate_quick_responses("Can we ship?", "[speaker] QA is done")

        prompt = chat.await_args.args[0]
        assert "Can we ship?" in prompt
        assert "[speaker] QA is done" in prompt
