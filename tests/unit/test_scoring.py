"""Unit tests for match scoring logic"""

import pytest
from dataclasses import replace
from lendmatch.domain.models import ApplicantProfile, PartnerCriteria, ScoringVariant
from lendmatch.domain.scoring import (
    amount_proximity_score,
    bonus_points,
    calculate_match_score,
    explain_score,
    factor_scores,
    score_variant_a,
    score_variant_b,
)


def test_variant_b_scenario_scores(strong_applicant: ApplicantProfile, term_loan_partner: PartnerCriteria):
    """
    780 credit (+100 margin) -> 100, 6 years (+4) -> 70,
    3x revenue -> 100, 100k in a 50k-250k range (50% off mid) -> 70
    """
    assert calculate_match_score(strong_applicant, term_loan_partner, ScoringVariant.B) == 85


def test_lower_credit_scores_lower(strong_applicant: ApplicantProfile, term_loan_partner: PartnerCriteria):
    weaker = replace(strong_applicant, credit_score=690)
    for variant in ScoringVariant:
        strong = calculate_match_score(strong_applicant, term_loan_partner, variant)
        weak = calculate_match_score(weaker, term_loan_partner, variant)
        assert strong > weak > 0

    assert calculate_match_score(weaker, term_loan_partner, ScoringVariant.B) == 70
    assert calculate_match_score(weaker, term_loan_partner, ScoringVariant.A) == 85


def test_variant_a_bonuses(strong_applicant: ApplicantProfile, term_loan_partner: PartnerCriteria):
    assert bonus_points(strong_applicant, term_loan_partner) == {
        "credit_score": 15,
        "annual_revenue": 15,
        "years_in_business": 10,
    }
    assert score_variant_a(strong_applicant, term_loan_partner) == 100


def test_variant_a_clamps_to_100(term_loan_partner: PartnerCriteria):
    partner = replace(term_loan_partner, min_credit_score=300, min_annual_revenue=0, min_years_in_business=0)
    applicant = ApplicantProfile(credit_score=850, annual_revenue=1_000_000, years_in_business=30)
    assert score_variant_a(applicant, partner) == 100


def test_variant_a_base_score_without_bonuses(term_loan_partner: PartnerCriteria):
    applicant = ApplicantProfile(credit_score=690, annual_revenue=120_000, years_in_business=3)
    assert calculate_match_score(applicant, term_loan_partner, ScoringVariant.A) == 60


@pytest.mark.parametrize(
    "credit, expected",
    [(780, 100), (730, 80), (700, 60), (699, 40), (680, 40)],
)
def test_variant_b_credit_bands(term_loan_partner: PartnerCriteria, credit: int, expected: int):
    assert factor_scores(ApplicantProfile(credit_score=credit), term_loan_partner) == {"credit_score": expected}


@pytest.mark.parametrize("years, expected", [(7, 100), (4, 70), (3, 40)])
def test_variant_b_years_bands(term_loan_partner: PartnerCriteria, years: float, expected: int):
    assert factor_scores(ApplicantProfile(years_in_business=years), term_loan_partner) == {
        "years_in_business": expected
    }


@pytest.mark.parametrize("revenue, expected", [(300_000, 100), (200_000, 80), (150_000, 60), (120_000, 40)])
def test_variant_b_revenue_bands(term_loan_partner: PartnerCriteria, revenue: float, expected: int):
    assert factor_scores(ApplicantProfile(annual_revenue=revenue), term_loan_partner) == {
        "annual_revenue": expected
    }


def test_amount_proximity_midpoint_and_edges():
    assert amount_proximity_score(150_000, 50_000, 250_000) == 100
    assert amount_proximity_score(50_000, 50_000, 250_000) == 40
    assert amount_proximity_score(250_000, 50_000, 250_000) == 40
    assert amount_proximity_score(100_000, 50_000, 250_000) == 70


def test_amount_proximity_zero_width_range():
    assert amount_proximity_score(100_000, 100_000, 100_000) == 100
    assert amount_proximity_score(90_000, 100_000, 100_000) == 0


def test_zero_width_range_partner_scores(term_loan_partner: PartnerCriteria):
    fixed = replace(term_loan_partner, min_loan_amount=100_000, max_loan_amount=100_000)
    assert calculate_match_score(ApplicantProfile(requested_amount=100_000), fixed) == 100
    assert calculate_match_score(ApplicantProfile(requested_amount=120_000), fixed) == 0


def test_variant_b_rounds_half_up(term_loan_partner: PartnerCriteria):
    """Averages landing on .5 round up, not to even"""
    applicant = ApplicantProfile(credit_score=700, requested_amount=125_000)
    # (60 + 85) / 2 = 72.5
    assert score_variant_b(applicant, term_loan_partner) == 73


def test_variant_b_no_factors_scores_zero(term_loan_partner: PartnerCriteria):
    assert score_variant_b(ApplicantProfile(business_type="Retail"), term_loan_partner) == 0


def test_ineligible_scores_zero_for_both_variants(term_loan_partner: PartnerCriteria):
    applicant = ApplicantProfile(credit_score=600, annual_revenue=1_000_000)
    for variant in ScoringVariant:
        assert calculate_match_score(applicant, term_loan_partner, variant) == 0


def test_score_never_decreases_as_credit_rises(strong_applicant: ApplicantProfile, term_loan_partner: PartnerCriteria):
    for variant in ScoringVariant:
        previous = 0
        for credit in range(550, 851, 5):
            score = calculate_match_score(replace(strong_applicant, credit_score=credit), term_loan_partner, variant)
            assert score >= previous
            assert 0 <= score <= 100
            previous = score


def test_eligible_scores_are_positive(term_loan_partner: PartnerCriteria):
    profiles = [
        ApplicantProfile(credit_score=680),
        ApplicantProfile(requested_amount=50_000),
        ApplicantProfile(credit_score=681, annual_revenue=100_000, years_in_business=2, requested_amount=250_000),
    ]
    for profile in profiles:
        for variant in ScoringVariant:
            assert 0 < calculate_match_score(profile, term_loan_partner, variant) <= 100


def test_explain_score_matches_variant(strong_applicant: ApplicantProfile, term_loan_partner: PartnerCriteria):
    assert explain_score(strong_applicant, term_loan_partner, ScoringVariant.A) == {
        "credit_score": 15.0,
        "annual_revenue": 15.0,
        "years_in_business": 10.0,
    }
    factors = explain_score(strong_applicant, term_loan_partner, ScoringVariant.B)
    assert set(factors) == {"credit_score", "years_in_business", "annual_revenue", "requested_amount"}
