"""Unit tests for the eligibility filter"""

import pytest
from dataclasses import replace
from lendmatch.domain.eligibility import is_eligible
from lendmatch.domain.models import ApplicantProfile, PartnerCriteria, ScoringVariant
from lendmatch.domain.ranking import rank_partner_results
from lendmatch.domain.scoring import calculate_match_score
from lendmatch.utils.number_utils import is_present, parse_number


def test_strong_applicant_is_eligible(strong_applicant: ApplicantProfile, term_loan_partner: PartnerCriteria):
    assert is_eligible(strong_applicant, term_loan_partner) is True


def test_credit_below_minimum_is_ineligible(term_loan_partner: PartnerCriteria):
    applicant = ApplicantProfile(credit_score=600)
    assert is_eligible(applicant, term_loan_partner) is False


@pytest.mark.parametrize(
    "field, value",
    [
        ("annual_revenue", 99_999),
        ("years_in_business", 1.5),
        ("requested_amount", 49_999),
        ("requested_amount", 250_001),
    ],
)
def test_each_threshold_can_disqualify(term_loan_partner: PartnerCriteria, field: str, value: float):
    """A single failing criterion is enough to reject"""
    applicant = ApplicantProfile(credit_score=800, **{field: value})
    assert is_eligible(applicant, term_loan_partner) is False


def test_amount_bounds_are_inclusive(term_loan_partner: PartnerCriteria):
    assert is_eligible(ApplicantProfile(requested_amount=50_000), term_loan_partner) is True
    assert is_eligible(ApplicantProfile(requested_amount=250_000), term_loan_partner) is True


def test_thresholds_met_exactly_pass(term_loan_partner: PartnerCriteria):
    applicant = ApplicantProfile(credit_score=680, annual_revenue=100_000, years_in_business=2)
    assert is_eligible(applicant, term_loan_partner) is True


def test_missing_fields_are_skipped(term_loan_partner: PartnerCriteria):
    """Only credit score given: revenue, years and amount minimums are not checked"""
    demanding = replace(
        term_loan_partner,
        min_annual_revenue=10_000_000,
        min_years_in_business=50,
        min_loan_amount=1_000_000,
        max_loan_amount=2_000_000,
    )
    assert is_eligible(ApplicantProfile(credit_score=700), demanding) is True


def test_empty_profile_is_eligible(term_loan_partner: PartnerCriteria):
    assert is_eligible(ApplicantProfile(), term_loan_partner) is True


def test_numeric_strings_are_parsed(term_loan_partner: PartnerCriteria):
    applicant = ApplicantProfile(credit_score="720", annual_revenue="$150,000", years_in_business="3")
    assert is_eligible(applicant, term_loan_partner) is True


def test_unparseable_value_counts_as_zero(term_loan_partner: PartnerCriteria):
    applicant = ApplicantProfile(credit_score="excellent")
    assert is_eligible(applicant, term_loan_partner) is False


@pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-Infinity"])
def test_non_finite_value_counts_as_zero(term_loan_partner: PartnerCriteria, value: str):
    applicant = ApplicantProfile(credit_score=value)

    assert parse_number(value) == 0.0
    assert is_eligible(applicant, term_loan_partner) is False
    assert calculate_match_score(applicant, term_loan_partner, ScoringVariant.A) == 0
    assert calculate_match_score(applicant, term_loan_partner, ScoringVariant.B) == 0
    assert rank_partner_results(applicant, [term_loan_partner]) == []


def test_blank_string_counts_as_missing(term_loan_partner: PartnerCriteria):
    applicant = ApplicantProfile(credit_score="  ", annual_revenue=150_000)
    assert is_eligible(applicant, term_loan_partner) is True


def test_parse_number_coercion():
    assert parse_number(42) == 42.0
    assert parse_number(0.5) == 0.5
    assert parse_number("1,250.75") == 1250.75
    assert parse_number("$300000") == 300000.0
    assert parse_number("n/a") == 0.0
    assert parse_number(None) == 0.0


def test_is_present():
    assert is_present(0) is True
    assert is_present("0") is True
    assert is_present(None) is False
    assert is_present("") is False
