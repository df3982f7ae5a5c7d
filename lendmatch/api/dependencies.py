"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from lendmatch.config import settings
from lendmatch.domain.assistant import Assistant, FallbackAssistant, RuleBasedAssistant
from lendmatch.domain.models import ScoringVariant
from lendmatch.infrastructure.clients.llm import LLMAssistant
from lendmatch.infrastructure.clients.sheets import SheetsClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_scoring_variant() -> ScoringVariant:
    """Scoring formula configured for this deployment"""
    return ScoringVariant(settings.scoring_variant)


def get_assistant() -> Assistant:
    """Provide the configured assistant; the remote one always has a rule-based fallback"""
    rule_based = RuleBasedAssistant(top_n=settings.match_reply_top_n)
    if settings.assistant_backend == "llm":
        return FallbackAssistant(primary=LLMAssistant(), fallback=rule_based)
    return rule_based


def get_sheets_client() -> SheetsClient:
    """Provide Google Sheets client instance"""
    return SheetsClient()
