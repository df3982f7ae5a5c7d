"""Unit tests for assistant strategies and fallback"""

import asyncio
import random
from lendmatch.domain.assistant import FallbackAssistant, RuleBasedAssistant
from lendmatch.domain.conversation import WELCOME_RESPONSES
from lendmatch.domain.exceptions import AssistantAPIError
from lendmatch.domain.models import ApplicantProfile, ChatTurn


class FailingAssistant:
    """Remote assistant stand-in that is always down"""

    def __init__(self):
        self.calls = 0

    async def extract(self, history):
        self.calls += 1
        raise AssistantAPIError("model unavailable")

    async def reply(self, history, profile, matches, partners):
        self.calls += 1
        raise AssistantAPIError("model unavailable")


class CannedAssistant:
    """Remote assistant stand-in with fixed answers"""

    async def extract(self, history):
        return ApplicantProfile(credit_score=710)

    async def reply(self, history, profile, matches, partners):
        return "canned reply"


def test_rule_based_assistant_extracts_from_history():
    assistant = RuleBasedAssistant(rng=random.Random(0))
    history = [ChatTurn(role="user", content="We have a credit score of 705")]

    profile = asyncio.run(assistant.extract(history))

    assert profile.credit_score == 705


def test_fallback_used_when_primary_fails():
    primary = FailingAssistant()
    assistant = FallbackAssistant(primary=primary, fallback=RuleBasedAssistant(rng=random.Random(0)))
    history = [ChatTurn(role="user", content="We have been open 4 years")]

    profile = asyncio.run(assistant.extract(history))
    reply = asyncio.run(assistant.reply([], None, [], []))

    assert profile.years_in_business == 4.0
    assert reply in WELCOME_RESPONSES
    assert primary.calls == 2


def test_primary_answer_used_when_available():
    assistant = FallbackAssistant(primary=CannedAssistant(), fallback=RuleBasedAssistant())

    assert asyncio.run(assistant.extract([])).credit_score == 710
    assert asyncio.run(assistant.reply([], None, [], [])) == "canned reply"
