"""Unit tests for rule-based extraction and replies"""

import random
import pytest
from dataclasses import replace
from lendmatch.domain.conversation import (
    NO_MATCH_RESPONSES,
    QUESTIONS,
    WELCOME_RESPONSES,
    extract_profile,
    extract_profile_from_text,
    format_match_reply,
    generate_reply,
    next_question,
)
from lendmatch.domain.models import ApplicantProfile, ChatTurn, PartnerCriteria, PartnerMatch


@pytest.fixture
def rng() -> random.Random:
    return random.Random(0)


def test_extracts_complete_profile_from_one_message():
    profile = extract_profile_from_text(
        "I run a bakery, 5 years in business, we make $400k annual revenue and need a "
        "$100k loan for equipment. Credit score is 700"
    )

    assert profile.business_type == "Food & Beverage"
    assert profile.years_in_business == 5.0
    assert profile.annual_revenue == 400_000
    assert profile.requested_amount == 100_000
    assert profile.loan_purpose == "Equipment Purchase"
    assert profile.credit_score == 700
    assert profile.is_complete()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("We make about $500k in annual revenue", 500_000),
        ("Our revenue is 1.2 million", 1_200_000),
        ("around 750,000 per year in turnover", 750_000),
    ],
)
def test_extracts_revenue_with_multipliers(text: str, expected: float):
    assert extract_profile_from_text(text).annual_revenue == pytest.approx(expected)


def test_extracts_requested_amount():
    assert extract_profile_from_text("Looking for 250 thousand in funding").requested_amount == 250_000


@pytest.mark.parametrize(
    "text, expected",
    [
        ("My credit score is 720", 720),
        ("fico around 690", 690),
        ("I'd say excellent", 750),
        ("it's fair I think", 650),
        ("probably below 650", 600),
    ],
)
def test_extracts_credit_score(text: str, expected: int):
    assert extract_profile_from_text(text).credit_score == expected


def test_unrecognised_text_extracts_nothing():
    assert extract_profile_from_text("Hello there").is_empty()


def test_extract_profile_uses_only_user_turns():
    history = [
        ChatTurn(role="assistant", content="We work with restaurants and retail shops."),
        ChatTurn(role="user", content="We have been operating for 3 years"),
    ]
    profile = extract_profile(history)

    assert profile.business_type is None
    assert profile.years_in_business == 3.0


def test_next_question_follows_collection_order(rng: random.Random):
    assert next_question(ApplicantProfile(), rng) in WELCOME_RESPONSES
    assert next_question(ApplicantProfile(business_type="Retail"), rng) in QUESTIONS["years_in_business"]

    profile = ApplicantProfile(business_type="Retail", years_in_business=2, annual_revenue=100_000)
    assert next_question(profile, rng) in QUESTIONS["requested_amount"]


def test_format_match_reply_lists_top_matches(rng: random.Random, term_loan_partner: PartnerCriteria):
    matches = [PartnerMatch(partner=replace(term_loan_partner, id=i, name=f"Lender {i}"), score=90 - i) for i in range(5)]

    reply = format_match_reply(matches, rng, top_n=3)

    assert "5 lend" in reply
    assert "1. Lender 0 (Term Loan)" in reply
    assert "3. Lender 2 (Term Loan)" in reply
    assert "Lender 3" not in reply
    assert "Match Score: 90%" in reply
    assert "Loan Amount: $50,000 - $250,000" in reply
    assert "Interest Rate: 8% - 12%" in reply
    assert "Term: 1 - 5 years" in reply
    assert "Funding Time: 3 - 5 days" in reply


def test_format_match_reply_without_matches(rng: random.Random):
    assert format_match_reply([], rng) in NO_MATCH_RESPONSES


def test_generate_reply_welcomes_empty_conversation(rng: random.Random):
    assert generate_reply([], None, [], rng) in WELCOME_RESPONSES


def test_generate_reply_presents_matches_once_complete(
    rng: random.Random, strong_applicant: ApplicantProfile, term_loan_partner: PartnerCriteria
):
    history = [ChatTurn(role="user", content="...")]
    reply = generate_reply(history, strong_applicant, [PartnerMatch(term_loan_partner, 85)], rng)

    assert "Here are your top options:" in reply
    assert "Small Business Capital" in reply


def test_generate_reply_asks_next_question_when_incomplete(rng: random.Random):
    history = [ChatTurn(role="user", content="I own a retail store")]
    reply = generate_reply(history, ApplicantProfile(business_type="Retail"), [], rng)
    assert reply in QUESTIONS["years_in_business"]
