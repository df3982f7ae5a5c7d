"""Rule-based lead qualification: keyword extraction and scripted replies"""

import random
import re
from typing import List, Optional, Sequence

from lendmatch.domain.models import ApplicantProfile, ChatTurn, PartnerMatch
from lendmatch.utils.number_utils import apply_multiplier, parse_number

WELCOME_RESPONSES = [
    "Welcome to LendMatch! I'm here to help match your business with suitable lending partners. "
    "To get started, could you tell me what type of business you run?",
    "Hi there! I'm your LendMatch assistant. I'd love to help find the right loan for your business. "
    "What industry is your business in?",
    "Welcome! I'm here to help you find the right lending partner. First, I'd like to learn about "
    "your business. What type of business do you operate?",
]

QUESTIONS = {
    "years_in_business": [
        "Great! How many years have you been in business?",
        "Thank you for that information. How long has your business been operating?",
        "I appreciate you sharing that. Can you tell me how many years your business has been established?",
    ],
    "annual_revenue": [
        "Excellent. What's your approximate annual revenue?",
        "Thanks. Could you share your business's annual revenue?",
        "That's helpful to know. What is your business's yearly revenue?",
    ],
    "requested_amount": [
        "Thank you. How much funding are you looking for?",
        "Great. What loan amount are you interested in?",
        "Perfect. What amount of funding do you need for your business?",
    ],
    "loan_purpose": [
        "What would be the primary purpose for this loan?",
        "How do you plan to use these funds?",
        "What is the main reason you're seeking this funding?",
    ],
    "credit_score": [
        "Last question - what's your approximate credit score range? "
        "(excellent: 750+, good: 700-749, fair: 650-699, or below 650)",
        "One final question - could you share your credit score range? "
        "(excellent: 750+, good: 700-749, fair: 650-699, or below 650)",
        "To finalize our matching process - what would you say your credit score is? "
        "(excellent: 750+, good: 700-749, fair: 650-699, or below 650)",
    ],
}

ALL_COLLECTED_RESPONSE = (
    "Thank you for providing all that information. Let me analyze the best matches for your business."
)

NO_MATCH_RESPONSES = [
    "Based on the information you've provided, I don't see any matching lending partners at this time. "
    "This could be due to credit requirements, business tenure, or loan amount requirements. "
    "Would you like to discuss alternative options?",
    "I've reviewed your information against our lending partners, but I don't have any matches right now. "
    "This is typically related to minimum requirements for credit, time in business, or revenue. "
    "Would you like to explore other financing options?",
    "Unfortunately, I couldn't find matching lending partners with the information provided. "
    "This is usually due to minimum thresholds for credit score, years in business, or annual revenue. "
    "Would you like to discuss what might help improve your chances?",
]

MATCH_FOUND_RESPONSES = [
    "Good news! Based on the information you've provided, I've found {count} lending partners that "
    "might be a good fit. Would you like me to tell you more about them?",
    "Great! I've identified {count} lending partners that match your criteria. "
    "Would you like to hear the details about these options?",
    "I've found {count} lending options that might work well for your business. "
    "Would you like me to share more information about these matches?",
]

# First matching category wins
BUSINESS_TYPE_PATTERNS = [
    (r"\b(restaurant|cafe|café|catering|food|bakery|bar)\b", "Food & Beverage"),
    (r"\b(retail|shop|store|boutique|e-?commerce)", "Retail"),
    (r"\b(tech|software|saas|apps?|development)\b", "Technology"),
    (r"\b(construct|build|contractor|remodel)", "Construction"),
    (r"\b(health|medical|doctor|clinic|wellness)", "Healthcare"),
    (r"\b(manufactur|factory|production)", "Manufacturing"),
    (r"\b(service|consult|professional)", "Professional Services"),
]

LOAN_PURPOSE_PATTERNS = [
    (r"\b(equipment|machinery|tools)\b", "Equipment Purchase"),
    (r"\b(expansion|expand|grow|growth|scale)", "Business Expansion"),
    (r"\b(inventory|stock|supplies)\b", "Inventory Purchase"),
    (r"\b(working capital|work capital|day-to-day|operations)\b", "Working Capital"),
    (r"\b(refinanc|consolidat)", "Debt Refinancing"),
    (r"\b(renovat|remodel|improve)", "Renovation"),
    (r"\b(hire|hiring|staff|employee|personnel)", "Hiring Staff"),
]

_NUMBER = r"\$?\d[\d,]*(?:\.\d+)?"
_SUFFIX = r"(thousand|million|billion|k|m|b)?\b"

YEARS_RE = re.compile(r"(\d+(?:\.\d+)?)[\s-]*(?:year|yr)s?\b", re.IGNORECASE)
REVENUE_RE = re.compile(
    rf"(?:revenue|make|earn|annual|yearly|turnover).*?(?:is|of|about|around)?\s*({_NUMBER})\s*{_SUFFIX}"
    rf"|({_NUMBER})\s*{_SUFFIX}(?:\s*(?:annual|yearly|per year|a year|revenue|in revenue|turnover))",
    re.IGNORECASE,
)
LOAN_RE = re.compile(
    rf"({_NUMBER})\s*{_SUFFIX}(?:\s*(?:in|of)?\s*(?:loan|funding|money|financing|capital|amount))",
    re.IGNORECASE,
)
CREDIT_RE = re.compile(r"(?:credit|score|fico)(?:\s+(?:is|of|around|about))?\s+(\d{3,})", re.IGNORECASE)


def _first_label(text: str, patterns) -> Optional[str]:
    for pattern, label in patterns:
        if re.search(pattern, text, re.IGNORECASE):
            return label
    return None


def _credit_from_band(lowered: str) -> Optional[int]:
    if "excellent" in lowered or "750+" in lowered:
        return 750
    if "good" in lowered or ("700" in lowered and "749" in lowered):
        return 700
    if "fair" in lowered or ("650" in lowered and "699" in lowered):
        return 650
    if "poor" in lowered or "below 650" in lowered or "under 650" in lowered:
        return 600
    return None


def extract_profile_from_text(text: str) -> ApplicantProfile:
    """Pull whatever profile fields can be recognised from free text"""
    profile = ApplicantProfile()
    lowered = text.lower()

    profile.business_type = _first_label(text, BUSINESS_TYPE_PATTERNS)
    profile.loan_purpose = _first_label(text, LOAN_PURPOSE_PATTERNS)

    years_match = YEARS_RE.search(text)
    if years_match:
        profile.years_in_business = parse_number(years_match.group(1))

    revenue_match = REVENUE_RE.search(text)
    if revenue_match:
        value = revenue_match.group(1) or revenue_match.group(3)
        suffix = revenue_match.group(2) if revenue_match.group(1) else revenue_match.group(4)
        profile.annual_revenue = apply_multiplier(parse_number(value), suffix)

    loan_match = LOAN_RE.search(text)
    if loan_match:
        profile.requested_amount = apply_multiplier(parse_number(loan_match.group(1)), loan_match.group(2))

    credit_match = CREDIT_RE.search(text)
    if credit_match:
        profile.credit_score = int(credit_match.group(1))
    else:
        profile.credit_score = _credit_from_band(lowered)

    return profile


def extract_profile(history: Sequence[ChatTurn]) -> ApplicantProfile:
    """Extract from everything the user has said so far"""
    user_text = " ".join(turn.content for turn in history if turn.role == "user")
    return extract_profile_from_text(user_text)


def next_question(profile: ApplicantProfile, rng: random.Random) -> str:
    """Ask for the first piece of qualification data still missing"""
    missing = profile.missing_fields()
    if not missing:
        return ALL_COLLECTED_RESPONSE
    if missing[0] == "business_type":
        return rng.choice(WELCOME_RESPONSES)
    return rng.choice(QUESTIONS[missing[0]])


def _format_amount(value) -> str:
    return f"${parse_number(value):,.0f}"


def _format_rate(value) -> str:
    return f"{parse_number(value):g}%"


def format_match_reply(matches: Sequence[PartnerMatch], rng: random.Random, top_n: int = 3) -> str:
    """Render the top matches as a chat message"""
    if not matches:
        return rng.choice(NO_MATCH_RESPONSES)

    lines: List[str] = [rng.choice(MATCH_FOUND_RESPONSES).format(count=len(matches)), "", "Here are your top options:", ""]

    for index, match in enumerate(matches[:top_n], start=1):
        partner = match.partner
        lines.append(f"{index}. {partner.name} ({partner.loan_type})")
        lines.append(f"   - Match Score: {match.score}%")
        lines.append(
            f"   - Loan Amount: {_format_amount(partner.min_loan_amount)} - {_format_amount(partner.max_loan_amount)}"
        )
        if partner.interest_rate_min is not None and partner.interest_rate_max is not None:
            lines.append(
                f"   - Interest Rate: {_format_rate(partner.interest_rate_min)} - {_format_rate(partner.interest_rate_max)}"
            )
        if partner.term_length_min and partner.term_length_max and partner.term_unit:
            lines.append(f"   - Term: {partner.term_length_min} - {partner.term_length_max} {partner.term_unit}")
        if partner.funding_time_min and partner.funding_time_max and partner.funding_time_unit:
            lines.append(
                f"   - Funding Time: {partner.funding_time_min} - {partner.funding_time_max} {partner.funding_time_unit}"
            )
        lines.append("")

    lines.append("Would you like to proceed with one of these options or explore more alternatives?")
    return "\n".join(lines)


def generate_reply(
    history: Sequence[ChatTurn],
    profile: Optional[ApplicantProfile],
    matches: Sequence[PartnerMatch],
    rng: random.Random,
    top_n: int = 3,
) -> str:
    """
    Pick the next assistant message.

    - No user messages yet: welcome
    - Profile complete: present matches (or explain there are none)
    - Otherwise: ask for the next missing field
    """
    if not any(turn.role == "user" for turn in history):
        return rng.choice(WELCOME_RESPONSES)

    profile = profile or ApplicantProfile()
    if profile.is_complete():
        return format_match_reply(matches, rng, top_n=top_n)

    return next_question(profile, rng)
