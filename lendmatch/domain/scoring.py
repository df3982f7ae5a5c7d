"""Match scoring engine - core business logic for lead/partner fit"""

import math
from typing import Dict

from lendmatch.domain.eligibility import is_eligible
from lendmatch.domain.models import ApplicantProfile, PartnerCriteria, ScoringVariant
from lendmatch.utils.number_utils import is_present, parse_number

BASE_SCORE_VARIANT_A = 60
MAX_SCORE = 100


def bonus_points(applicant: ApplicantProfile, partner: PartnerCriteria) -> Dict[str, int]:
    """
    Variant A bonuses for how far the applicant clears each minimum.

    Bonus table:
    - Credit margin:  >=100 -> +15, >=50 -> +10, >=20 -> +5
    - Revenue ratio:  >=3x  -> +15, >=2x -> +10, >=1.5x -> +5
    - Years ratio:    >=3x  -> +10, >=2x -> +5

    Ratios are compared as `value >= minimum * ratio` so a zero minimum
    always earns the top bonus instead of dividing by zero.
    """
    bonuses: Dict[str, int] = {}

    if is_present(applicant.credit_score):
        credit = parse_number(applicant.credit_score)
        min_credit = parse_number(partner.min_credit_score)
        if credit >= min_credit + 100:
            bonuses["credit_score"] = 15
        elif credit >= min_credit + 50:
            bonuses["credit_score"] = 10
        elif credit >= min_credit + 20:
            bonuses["credit_score"] = 5
        else:
            bonuses["credit_score"] = 0

    if is_present(applicant.annual_revenue):
        revenue = parse_number(applicant.annual_revenue)
        min_revenue = parse_number(partner.min_annual_revenue)
        if revenue >= min_revenue * 3:
            bonuses["annual_revenue"] = 15
        elif revenue >= min_revenue * 2:
            bonuses["annual_revenue"] = 10
        elif revenue >= min_revenue * 1.5:
            bonuses["annual_revenue"] = 5
        else:
            bonuses["annual_revenue"] = 0

    if is_present(applicant.years_in_business):
        years = parse_number(applicant.years_in_business)
        min_years = parse_number(partner.min_years_in_business)
        if years >= min_years * 3:
            bonuses["years_in_business"] = 10
        elif years >= min_years * 2:
            bonuses["years_in_business"] = 5
        else:
            bonuses["years_in_business"] = 0

    return bonuses


def score_variant_a(applicant: ApplicantProfile, partner: PartnerCriteria) -> int:
    """Additive model: 60 plus bonuses, clamped to 100. Assumes eligibility already passed."""
    return min(BASE_SCORE_VARIANT_A + sum(bonus_points(applicant, partner).values()), MAX_SCORE)


def amount_proximity_score(amount: float, min_amount: float, max_amount: float) -> float:
    """
    Score 40-100 for how close the requested amount sits to the range midpoint.

    A zero-width range has a single valid amount: hitting it scores 100,
    anything else scores 0.
    """
    loan_range = max_amount - min_amount
    if loan_range <= 0:
        return 100.0 if amount == min_amount else 0.0

    midpoint = min_amount + loan_range / 2
    percentage_from_mid = abs(amount - midpoint) / (loan_range / 2) * 100
    return 100 - min(100.0, percentage_from_mid) * 0.6


def factor_scores(applicant: ApplicantProfile, partner: PartnerCriteria) -> Dict[str, float]:
    """
    Variant B sub-scores (0-100) for every factor the applicant provided.

    Bands:
    - Credit margin:        >=100 -> 100, >=50 -> 80, >=20 -> 60, else 40
    - Years margin (years): >=5   -> 100, >=2  -> 70, else 40
    - Revenue ratio:        >=3x  -> 100, >=2x -> 80, >=1.5x -> 60, else 40
    - Requested amount:     proximity to the partner range midpoint
    """
    factors: Dict[str, float] = {}

    if is_present(applicant.credit_score):
        credit_diff = parse_number(applicant.credit_score) - parse_number(partner.min_credit_score)
        if credit_diff >= 100:
            factors["credit_score"] = 100
        elif credit_diff >= 50:
            factors["credit_score"] = 80
        elif credit_diff >= 20:
            factors["credit_score"] = 60
        else:
            factors["credit_score"] = 40

    if is_present(applicant.years_in_business):
        years_diff = parse_number(applicant.years_in_business) - parse_number(partner.min_years_in_business)
        if years_diff >= 5:
            factors["years_in_business"] = 100
        elif years_diff >= 2:
            factors["years_in_business"] = 70
        else:
            factors["years_in_business"] = 40

    if is_present(applicant.annual_revenue):
        revenue = parse_number(applicant.annual_revenue)
        min_revenue = parse_number(partner.min_annual_revenue)
        if revenue >= min_revenue * 3:
            factors["annual_revenue"] = 100
        elif revenue >= min_revenue * 2:
            factors["annual_revenue"] = 80
        elif revenue >= min_revenue * 1.5:
            factors["annual_revenue"] = 60
        else:
            factors["annual_revenue"] = 40

    if is_present(applicant.requested_amount):
        factors["requested_amount"] = amount_proximity_score(
            parse_number(applicant.requested_amount),
            parse_number(partner.min_loan_amount),
            parse_number(partner.max_loan_amount),
        )

    return factors


def score_variant_b(applicant: ApplicantProfile, partner: PartnerCriteria) -> int:
    """Averaged-factor model, rounded half up. Assumes eligibility already passed."""
    factors = factor_scores(applicant, partner)
    if not factors:
        return 0
    return int(math.floor(sum(factors.values()) / len(factors) + 0.5))


def explain_score(
    applicant: ApplicantProfile,
    partner: PartnerCriteria,
    variant: ScoringVariant = ScoringVariant.B,
) -> Dict[str, float]:
    """Per-factor contributions behind a score, keyed by profile field"""
    if variant == ScoringVariant.A:
        return {name: float(points) for name, points in bonus_points(applicant, partner).items()}
    return factor_scores(applicant, partner)


def calculate_match_score(
    applicant: ApplicantProfile,
    partner: PartnerCriteria,
    variant: ScoringVariant = ScoringVariant.B,
) -> int:
    """
    Main entry point: 0 for an ineligible pair, otherwise a 1-100 fit score.

    Variant A never goes below its base of 60 and variant B never below 40
    for an eligible pair, so a zero score always means "does not qualify".
    Variant B with no usable fields is the one exception and also yields 0.
    """
    if not is_eligible(applicant, partner):
        return 0

    if variant == ScoringVariant.A:
        return score_variant_a(applicant, partner)
    return score_variant_b(applicant, partner)
