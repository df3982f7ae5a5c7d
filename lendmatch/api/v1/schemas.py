"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PartnerBase(BaseModel):
    """Fields shared by partner create requests and responses"""

    name: str = Field(..., min_length=1)
    loan_type: str = Field(..., min_length=1)
    min_loan_amount: float = Field(..., ge=0)
    max_loan_amount: float = Field(..., ge=0)
    min_credit_score: int = Field(..., ge=0)
    min_annual_revenue: float = Field(..., ge=0)
    min_years_in_business: float = Field(..., ge=0)
    interest_rate_min: Optional[float] = None
    interest_rate_max: Optional[float] = None
    term_length_min: Optional[int] = None
    term_length_max: Optional[int] = None
    term_unit: Optional[str] = None
    funding_time_min: Optional[int] = None
    funding_time_max: Optional[int] = None
    funding_time_unit: Optional[str] = None
    active: bool = True


class PartnerCreate(PartnerBase):
    """Request body for POST /v1/lending-partners"""

    @model_validator(mode="after")
    def check_loan_range(self) -> "PartnerCreate":
        if self.max_loan_amount < self.min_loan_amount:
            raise ValueError("max_loan_amount must be greater than or equal to min_loan_amount")
        return self


class PartnerUpdate(BaseModel):
    """Request body for PUT /v1/lending-partners/{id}; every field optional"""

    name: Optional[str] = Field(None, min_length=1)
    loan_type: Optional[str] = Field(None, min_length=1)
    min_loan_amount: Optional[float] = Field(None, ge=0)
    max_loan_amount: Optional[float] = Field(None, ge=0)
    min_credit_score: Optional[int] = Field(None, ge=0)
    min_annual_revenue: Optional[float] = Field(None, ge=0)
    min_years_in_business: Optional[float] = Field(None, ge=0)
    interest_rate_min: Optional[float] = None
    interest_rate_max: Optional[float] = None
    term_length_min: Optional[int] = None
    term_length_max: Optional[int] = None
    term_unit: Optional[str] = None
    funding_time_min: Optional[int] = None
    funding_time_max: Optional[int] = None
    funding_time_unit: Optional[str] = None
    active: Optional[bool] = None


class PartnerResponse(PartnerBase):
    """Stored lending partner"""

    model_config = ConfigDict(from_attributes=True)

    id: int


class ProfileFields(BaseModel):
    """Optional applicant facts; numbers may be sent as text"""

    business_type: Optional[str] = None
    years_in_business: Optional[float | str] = None
    annual_revenue: Optional[float | str] = None
    requested_amount: Optional[float | str] = None
    loan_purpose: Optional[str] = None
    credit_score: Optional[int | str] = None


class LeadCreate(ProfileFields):
    """Request body for POST /v1/leads"""

    business_name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None


class LeadResponse(BaseModel):
    """Stored lead"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    business_name: str
    business_type: Optional[str] = None
    years_in_business: Optional[float] = None
    annual_revenue: Optional[float] = None
    requested_amount: Optional[float] = None
    loan_purpose: Optional[str] = None
    credit_score: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str
    created_at: datetime


class ChatMessageResponse(BaseModel):
    """Single message in a conversation"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    lead_id: int
    role: str
    content: str
    timestamp: datetime


class ChatRequest(BaseModel):
    """Request body for POST /v1/chat/message"""

    message: str = Field(..., min_length=1, description="User message text")
    lead_id: Optional[int] = Field(None, description="Existing lead to continue the conversation for")


class MatchSummary(BaseModel):
    """Ranked partner as shown to the chat client"""

    partner_id: int
    partner_name: str
    loan_type: str
    score: int
    factors: Dict[str, float] = Field(default_factory=dict)


class ChatResponse(BaseModel):
    """Response for POST /v1/chat/message"""

    message: str
    lead: Optional[LeadResponse] = None
    matches: List[MatchSummary]


class RankRequest(ProfileFields):
    """Request body for POST /v1/matches/rank"""

    scoring_variant: Optional[str] = Field(None, pattern="^[AB]$")


class MatchResultSchema(BaseModel):
    """Engine output: partner reference and score"""

    partner_id: int
    score: int


class RankResponse(BaseModel):
    """Response for POST /v1/matches/rank"""

    scoring_variant: str
    matches: List[MatchResultSchema]


class LeadMatchResponse(BaseModel):
    """Persisted match with partner details"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    lead_id: int
    partner_id: int
    match_score: int
    selected: bool
    submitted: bool
    submitted_at: Optional[datetime] = None
    partner: Optional[PartnerResponse] = None


class MatchUpdateRequest(BaseModel):
    """Request body for PUT /v1/leads/{lead_id}/matches/{partner_id}"""

    selected: Optional[bool] = None
    submitted: Optional[bool] = None


class SyncRequest(BaseModel):
    """Request body for POST /v1/sync/lending-partners"""

    api_key: str = Field(..., min_length=1)
    spreadsheet_id: str = Field(..., min_length=1)
    range: str = Field(..., min_length=1, description="A1 notation, e.g. Partners!A2:P")


class SyncResponse(BaseModel):
    """Response for POST /v1/sync/lending-partners"""

    added: int
    updated: int
    unchanged: int
