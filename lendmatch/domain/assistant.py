"""Assistant capability: profile extraction and reply generation"""

import logging
import random
from typing import Optional, Protocol, Sequence

from lendmatch.domain.conversation import extract_profile, generate_reply
from lendmatch.domain.exceptions import AssistantAPIError
from lendmatch.domain.models import ApplicantProfile, ChatTurn, PartnerCriteria, PartnerMatch
from lendmatch.infrastructure.observability.metrics import assistant_fallback_counter

logger = logging.getLogger(__name__)


class Assistant(Protocol):
    """Conversation history in, partial profile or reply text out"""

    async def extract(self, history: Sequence[ChatTurn]) -> ApplicantProfile:
        ...

    async def reply(
        self,
        history: Sequence[ChatTurn],
        profile: Optional[ApplicantProfile],
        matches: Sequence[PartnerMatch],
        partners: Sequence[PartnerCriteria],
    ) -> str:
        ...


class RuleBasedAssistant:
    """Deterministic keyword/regex assistant, always available"""

    def __init__(self, rng: random.Random | None = None, top_n: int = 3):
        self.rng = rng or random.Random()
        self.top_n = top_n

    async def extract(self, history: Sequence[ChatTurn]) -> ApplicantProfile:
        return extract_profile(history)

    async def reply(
        self,
        history: Sequence[ChatTurn],
        profile: Optional[ApplicantProfile],
        matches: Sequence[PartnerMatch],
        partners: Sequence[PartnerCriteria],
    ) -> str:
        return generate_reply(history, profile, matches, self.rng, top_n=self.top_n)


class FallbackAssistant:
    """Use the primary assistant, dropping to the fallback when it fails"""

    def __init__(self, primary: Assistant, fallback: Assistant):
        self.primary = primary
        self.fallback = fallback

    async def extract(self, history: Sequence[ChatTurn]) -> ApplicantProfile:
        try:
            return await self.primary.extract(history)
        except AssistantAPIError as e:
            assistant_fallback_counter.labels(operation="extract").inc()
            logger.warning(f"Falling back to rule-based extraction: {e}")
            return await self.fallback.extract(history)

    async def reply(
        self,
        history: Sequence[ChatTurn],
        profile: Optional[ApplicantProfile],
        matches: Sequence[PartnerMatch],
        partners: Sequence[PartnerCriteria],
    ) -> str:
        try:
            return await self.primary.reply(history, profile, matches, partners)
        except AssistantAPIError as e:
            assistant_fallback_counter.labels(operation="reply").inc()
            logger.warning(f"Falling back to rule-based reply: {e}")
            return await self.fallback.reply(history, profile, matches, partners)
