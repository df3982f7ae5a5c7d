"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import List, Optional, Union

# Numeric profile fields may arrive as text from the extraction step
NumberLike = Union[int, float, str, None]

# Order in which the assistant asks for missing information
QUALIFICATION_FIELDS = (
    "business_type",
    "years_in_business",
    "annual_revenue",
    "requested_amount",
    "loan_purpose",
    "credit_score",
)


class ScoringVariant(str, Enum):
    """Match score formula"""

    A = "A"  # additive bonus model
    B = "B"  # averaged-factor model


@dataclass
class ApplicantProfile:
    """Sparse financial profile of a lead; any field may be unset"""

    credit_score: NumberLike = None
    annual_revenue: NumberLike = None
    years_in_business: NumberLike = None
    requested_amount: NumberLike = None
    business_type: Optional[str] = None
    loan_purpose: Optional[str] = None
    business_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) in (None, "") for f in fields(self))

    def missing_fields(self) -> List[str]:
        return [name for name in QUALIFICATION_FIELDS if getattr(self, name) in (None, "")]

    def is_complete(self) -> bool:
        return not self.missing_fields()


@dataclass
class PartnerCriteria:
    """Lending partner catalog entry: eligibility minimums plus display attributes"""

    id: int
    name: str
    loan_type: str
    min_loan_amount: float
    max_loan_amount: float
    min_credit_score: int
    min_annual_revenue: float
    min_years_in_business: float
    interest_rate_min: Optional[float] = None
    interest_rate_max: Optional[float] = None
    term_length_min: Optional[int] = None
    term_length_max: Optional[int] = None
    term_unit: Optional[str] = None  # "years", "months" or "revolving"
    funding_time_min: Optional[int] = None
    funding_time_max: Optional[int] = None
    funding_time_unit: Optional[str] = None  # "days", "weeks" or "months"
    active: bool = True


@dataclass
class MatchResult:
    """Engine output handed to storage"""

    partner_id: int
    score: int


@dataclass
class PartnerMatch:
    """Eligible partner together with its match score"""

    partner: PartnerCriteria
    score: int

    def to_result(self) -> MatchResult:
        return MatchResult(partner_id=self.partner.id, score=self.score)


@dataclass
class ChatTurn:
    """Single message of a conversation"""

    role: str  # "user" or "assistant"
    content: str
