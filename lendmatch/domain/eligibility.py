"""Eligibility filter - pass/fail of an applicant against partner minimums"""

from lendmatch.domain.models import ApplicantProfile, PartnerCriteria
from lendmatch.utils.number_utils import is_present, parse_number


def is_eligible(applicant: ApplicantProfile, partner: PartnerCriteria) -> bool:
    """
    Check an applicant against the four partner thresholds.

    Criteria:
    - credit_score >= min_credit_score
    - annual_revenue >= min_annual_revenue
    - years_in_business >= min_years_in_business
    - min_loan_amount <= requested_amount <= max_loan_amount (inclusive)

    A field the applicant has not provided skips its criterion, so a sparse
    profile is never disqualified for what it does not say.
    """
    if is_present(applicant.credit_score):
        if parse_number(applicant.credit_score) < parse_number(partner.min_credit_score):
            return False

    if is_present(applicant.annual_revenue):
        if parse_number(applicant.annual_revenue) < parse_number(partner.min_annual_revenue):
            return False

    if is_present(applicant.years_in_business):
        if parse_number(applicant.years_in_business) < parse_number(partner.min_years_in_business):
            return False

    if is_present(applicant.requested_amount):
        amount = parse_number(applicant.requested_amount)
        if amount < parse_number(partner.min_loan_amount) or amount > parse_number(partner.max_loan_amount):
            return False

    return True
