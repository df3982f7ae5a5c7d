"""Remote language model assistant over an OpenAI-compatible chat completions API"""

import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

import httpx

from lendmatch.config import settings
from lendmatch.domain.exceptions import AssistantAPIError
from lendmatch.domain.models import ApplicantProfile, ChatTurn, PartnerCriteria, PartnerMatch
from lendmatch.infrastructure.observability.metrics import llm_latency_histogram

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = (
    "Extract structured information about a business loan applicant from the conversation. "
    "Return ONLY a JSON object with the following fields if mentioned in the conversation: "
    "businessType, yearsInBusiness, annualRevenue, requestedAmount, loanPurpose, creditScore, "
    "businessName, email, phone. If a field is not mentioned, exclude it from the JSON. "
    "Do NOT include any explanation or additional text outside the JSON object."
)

BROKER_PROMPT = """You are a loan broker assistant that helps qualify business loan applicants and match them with appropriate lending partners.
Your job is to gather information about the business through conversation, and then recommend lending partners that match their profile.

Here's the information you need to collect:
1. Business type/industry
2. Years in business
3. Annual revenue
4. Requested loan amount
5. Loan purpose
6. Credit score (excellent: 750+, good: 700-749, fair: 650-699, or below 650)

Ask for one piece of information at a time. Do not invent lending partners that are not listed below.
If no partner matches, say so honestly and explain which requirement is not met.
"""

# JSON keys returned by the model -> profile attributes
PROFILE_KEYS = {
    "businessType": "business_type",
    "yearsInBusiness": "years_in_business",
    "annualRevenue": "annual_revenue",
    "requestedAmount": "requested_amount",
    "loanPurpose": "loan_purpose",
    "creditScore": "credit_score",
    "businessName": "business_name",
    "email": "email",
    "phone": "phone",
}

JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def _range(low: Any, high: Any, unit: Optional[str] = None) -> str:
    if low is None or high is None:
        return unit or "N/A"
    return f"{low} - {high}{' ' + unit if unit else ''}"


def describe_partner(partner: PartnerCriteria) -> str:
    return (
        f"- {partner.name} ({partner.loan_type})\n"
        f"  - Loan amount: ${partner.min_loan_amount:,.0f} - ${partner.max_loan_amount:,.0f}\n"
        f"  - Required minimum credit score: {partner.min_credit_score}\n"
        f"  - Required minimum annual revenue: ${partner.min_annual_revenue:,.0f}\n"
        f"  - Required minimum years in business: {partner.min_years_in_business:g}\n"
        f"  - Interest rate: {_range(partner.interest_rate_min, partner.interest_rate_max, '%')}\n"
        f"  - Term: {_range(partner.term_length_min, partner.term_length_max, partner.term_unit)}\n"
        f"  - Funding time: {_range(partner.funding_time_min, partner.funding_time_max, partner.funding_time_unit)}"
    )


def build_system_prompt(partners: Sequence[PartnerCriteria], matches: Sequence[PartnerMatch]) -> str:
    """Broker instructions plus the partner catalog and current matches"""
    prompt = BROKER_PROMPT
    if partners:
        prompt += "\nHere are the available lending partners and their requirements:\n"
        prompt += "\n".join(describe_partner(partner) for partner in partners)
    if matches:
        prompt += "\n\nBased on the user's information, these are the matching lending partners:\n"
        prompt += "\n".join(
            f"- {match.partner.name} ({match.partner.loan_type}): Match Score {match.score}%" for match in matches
        )
    return prompt


def parse_profile_payload(content: str) -> ApplicantProfile:
    """
    Build a profile from the model's JSON answer.

    The JSON object may be wrapped in extra text; unknown keys are ignored.

    Raises:
        AssistantAPIError: No JSON object in the content, or it does not decode
    """
    json_match = JSON_OBJECT_RE.search(content)
    if not json_match:
        raise AssistantAPIError("No JSON object found in model response")

    try:
        data = json.loads(json_match.group(0))
    except json.JSONDecodeError as e:
        raise AssistantAPIError(f"Model returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise AssistantAPIError("Model returned JSON that is not an object")

    values = {attr: data[key] for key, attr in PROFILE_KEYS.items() if data.get(key) not in (None, "")}
    return ApplicantProfile(**values)


class LLMAssistant:
    """Assistant backed by a remote chat completions endpoint"""

    def __init__(
        self,
        api_base: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = (api_base or settings.llm_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.llm_api_key
        self.model = model or settings.llm_model
        self.timeout = timeout or settings.llm_timeout_seconds
        self.max_retries = settings.llm_max_retries
        self.backoff_base = settings.llm_backoff_base
        self.transport = transport

    async def _complete(self, messages: List[Dict[str, str]], temperature: float, json_mode: bool = False) -> str:
        """
        POST a chat completion and return the first choice's text.

        Retry strategy:
        - Up to max_retries retries after the first attempt on 5xx errors and
          network failures, backoff base * 2^attempt
        - 4xx errors fail immediately

        Raises:
            AssistantAPIError: On timeout, HTTP errors, or an unusable response
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": 500,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with llm_latency_histogram.time():
                        response = await client.post(
                            f"{self.api_base}/chat/completions",
                            json=payload,
                            headers={"Authorization": f"Bearer {self.api_key}"},
                        )
                    response.raise_for_status()
                    content = response.json()["choices"][0]["message"]["content"]
                    if not content:
                        raise AssistantAPIError("Empty completion from model")
                    return content

                except httpx.HTTPStatusError as e:
                    if e.response.status_code < 500 or attempt >= self.max_retries:
                        raise AssistantAPIError(f"Model API error: {e.response.status_code}") from e
                except httpx.TimeoutException as e:
                    if attempt >= self.max_retries:
                        raise AssistantAPIError(f"Model API timeout after {self.timeout}s") from e
                except httpx.RequestError as e:
                    if attempt >= self.max_retries:
                        raise AssistantAPIError(f"Model API unreachable: {e}") from e
                except (KeyError, IndexError, TypeError, ValueError) as e:
                    raise AssistantAPIError(f"Invalid completion payload: {e}") from e

                attempt += 1
                backoff = self.backoff_base * (2 ** (attempt - 1))
                logger.info(f"Retrying model call in {backoff}s (attempt {attempt + 1})")
                await asyncio.sleep(backoff)

    @staticmethod
    def _history(history: Sequence[ChatTurn]) -> List[Dict[str, str]]:
        return [
            {"role": "user" if turn.role == "user" else "assistant", "content": turn.content}
            for turn in history
        ]

    async def extract(self, history: Sequence[ChatTurn]) -> ApplicantProfile:
        messages = [{"role": "system", "content": EXTRACTION_PROMPT}] + self._history(history)
        content = await self._complete(messages, temperature=0.1, json_mode=True)
        return parse_profile_payload(content)

    async def reply(
        self,
        history: Sequence[ChatTurn],
        profile: Optional[ApplicantProfile],
        matches: Sequence[PartnerMatch],
        partners: Sequence[PartnerCriteria],
    ) -> str:
        system_prompt = build_system_prompt(partners, matches if profile else [])
        messages = [{"role": "system", "content": system_prompt}] + self._history(history)
        content = await self._complete(messages, temperature=0.7)
        return content.strip()
