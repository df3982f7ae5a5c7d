"""Ranking orchestrator - scores a partner catalog for one applicant"""

from typing import Iterable, List

from lendmatch.domain.models import ApplicantProfile, MatchResult, PartnerCriteria, PartnerMatch, ScoringVariant
from lendmatch.domain.scoring import calculate_match_score
from lendmatch.utils.number_utils import is_present

SCORED_FIELDS = ("credit_score", "annual_revenue", "years_in_business", "requested_amount")


def has_scorable_data(applicant: ApplicantProfile) -> bool:
    return any(is_present(getattr(applicant, name)) for name in SCORED_FIELDS)


def rank_partners(
    applicant: ApplicantProfile,
    partners: Iterable[PartnerCriteria],
    variant: ScoringVariant = ScoringVariant.B,
) -> List[PartnerMatch]:
    """
    Score every partner and return the qualifying ones, best first.

    - Partners scoring 0 (ineligible) are dropped
    - Sort is stable: equal scores keep catalog order, so callers that
      pass the catalog ordered by partner id get id-ascending tie-breaks
    - Empty catalog or an applicant with no numeric fields yields []
    """
    if not has_scorable_data(applicant):
        return []

    matches = [
        PartnerMatch(partner=partner, score=calculate_match_score(applicant, partner, variant))
        for partner in partners
    ]
    qualifying = [match for match in matches if match.score > 0]
    return sorted(qualifying, key=lambda m: m.score, reverse=True)


def rank_partner_results(
    applicant: ApplicantProfile,
    partners: Iterable[PartnerCriteria],
    variant: ScoringVariant = ScoringVariant.B,
) -> List[MatchResult]:
    """Same as rank_partners, reduced to {partner_id, score} records"""
    return [match.to_result() for match in rank_partners(applicant, partners, variant)]
