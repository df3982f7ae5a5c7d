"""Data access layer for leads, partners, messages, and matches"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from lendmatch.domain.models import ApplicantProfile, PartnerCriteria
from lendmatch.infrastructure.database.models import ChatMessage, Lead, LeadPartnerMatch, LendingPartner
from lendmatch.utils.number_utils import is_present, parse_number

DEFAULT_BUSINESS_NAME = "Business Lead"
NUMERIC_LEAD_FIELDS = ("years_in_business", "annual_revenue", "requested_amount")
TEXT_LEAD_FIELDS = ("business_type", "loan_purpose", "business_name", "email", "phone")


def lead_to_profile(lead: Lead) -> ApplicantProfile:
    """Project a stored lead onto the matching engine's profile type"""
    return ApplicantProfile(
        credit_score=lead.credit_score,
        annual_revenue=lead.annual_revenue,
        years_in_business=lead.years_in_business,
        requested_amount=lead.requested_amount,
        business_type=lead.business_type,
        loan_purpose=lead.loan_purpose,
        business_name=lead.business_name,
        email=lead.email,
        phone=lead.phone,
    )


def partner_to_criteria(partner: LendingPartner) -> PartnerCriteria:
    return PartnerCriteria(
        id=partner.id,
        name=partner.name,
        loan_type=partner.loan_type,
        min_loan_amount=partner.min_loan_amount,
        max_loan_amount=partner.max_loan_amount,
        min_credit_score=partner.min_credit_score,
        min_annual_revenue=partner.min_annual_revenue,
        min_years_in_business=partner.min_years_in_business,
        interest_rate_min=partner.interest_rate_min,
        interest_rate_max=partner.interest_rate_max,
        term_length_min=partner.term_length_min,
        term_length_max=partner.term_length_max,
        term_unit=partner.term_unit,
        funding_time_min=partner.funding_time_min,
        funding_time_max=partner.funding_time_max,
        funding_time_unit=partner.funding_time_unit,
        active=partner.active,
    )


def _profile_columns(profile: ApplicantProfile) -> dict:
    """Column values for every field the profile has, numerics coerced"""
    values: dict = {}
    if is_present(profile.credit_score):
        values["credit_score"] = int(parse_number(profile.credit_score))
    for name in NUMERIC_LEAD_FIELDS:
        value = getattr(profile, name)
        if is_present(value):
            values[name] = parse_number(value)
    for name in TEXT_LEAD_FIELDS:
        value = getattr(profile, name)
        if is_present(value):
            values[name] = str(value)
    return values


class LeadRepository:
    """Repository for leads"""

    def __init__(self, db: Session):
        self.db = db

    def create_lead(self, profile: ApplicantProfile) -> Lead:
        """Persist a new lead; a lead without a business name gets a placeholder"""
        values = _profile_columns(profile)
        values.setdefault("business_name", DEFAULT_BUSINESS_NAME)
        db_lead = Lead(**values)
        self.db.add(db_lead)
        self.db.flush()  # Get ID without committing
        return db_lead

    def update_lead(self, lead: Lead, profile: ApplicantProfile) -> Lead:
        """Overlay the profile's present fields on a stored lead"""
        for name, value in _profile_columns(profile).items():
            setattr(lead, name, value)
        self.db.flush()
        return lead

    def get_lead(self, lead_id: int) -> Optional[Lead]:
        return self.db.get(Lead, lead_id)

    def list_leads(self) -> List[Lead]:
        return self.db.query(Lead).order_by(Lead.id).all()


class PartnerRepository:
    """Repository for the lending partner catalog"""

    def __init__(self, db: Session):
        self.db = db

    def get_partner(self, partner_id: int) -> Optional[LendingPartner]:
        return self.db.get(LendingPartner, partner_id)

    def list_partners(self) -> List[LendingPartner]:
        return self.db.query(LendingPartner).order_by(LendingPartner.id).all()

    def list_active_partners(self) -> List[LendingPartner]:
        """Active partners ordered by id, which fixes the tie order of rankings"""
        return (
            self.db.query(LendingPartner)
            .filter(LendingPartner.active.is_(True))
            .order_by(LendingPartner.id)
            .all()
        )

    def active_catalog(self) -> List[PartnerCriteria]:
        return [partner_to_criteria(p) for p in self.list_active_partners()]

    def create_partner(self, **fields: Any) -> LendingPartner:
        db_partner = LendingPartner(**fields)
        self.db.add(db_partner)
        self.db.flush()
        return db_partner

    def update_partner(self, partner_id: int, **fields: Any) -> Optional[LendingPartner]:
        partner = self.get_partner(partner_id)
        if partner is None:
            return None
        for name, value in fields.items():
            setattr(partner, name, value)
        self.db.flush()
        return partner

    def delete_partner(self, partner_id: int) -> bool:
        partner = self.get_partner(partner_id)
        if partner is None:
            return False
        self.db.delete(partner)
        self.db.flush()
        return True


class ChatMessageRepository:
    """Repository for conversation history"""

    def __init__(self, db: Session):
        self.db = db

    def list_by_lead(self, lead_id: int) -> List[ChatMessage]:
        return (
            self.db.query(ChatMessage)
            .filter(ChatMessage.lead_id == lead_id)
            .order_by(ChatMessage.id)
            .all()
        )

    def create_message(self, lead_id: int, role: str, content: str) -> ChatMessage:
        db_message = ChatMessage(lead_id=lead_id, role=role, content=content)
        self.db.add(db_message)
        self.db.flush()
        return db_message


class MatchRepository:
    """Repository for lead/partner matches"""

    def __init__(self, db: Session):
        self.db = db

    def list_by_lead(self, lead_id: int) -> List[LeadPartnerMatch]:
        return (
            self.db.query(LeadPartnerMatch)
            .filter(LeadPartnerMatch.lead_id == lead_id)
            .order_by(LeadPartnerMatch.match_score.desc(), LeadPartnerMatch.partner_id)
            .all()
        )

    def get_match(self, lead_id: int, partner_id: int) -> Optional[LeadPartnerMatch]:
        return (
            self.db.query(LeadPartnerMatch)
            .filter(LeadPartnerMatch.lead_id == lead_id, LeadPartnerMatch.partner_id == partner_id)
            .first()
        )

    def create_match(self, lead_id: int, partner_id: int, score: int) -> LeadPartnerMatch:
        db_match = LeadPartnerMatch(lead_id=lead_id, partner_id=partner_id, match_score=score)
        self.db.add(db_match)
        self.db.flush()
        return db_match

    def update_match(
        self,
        match: LeadPartnerMatch,
        selected: Optional[bool] = None,
        submitted: Optional[bool] = None,
    ) -> LeadPartnerMatch:
        """Set selection flags; submitting stamps submitted_at"""
        if selected is not None:
            match.selected = selected
        if submitted is not None:
            match.submitted = submitted
            if submitted:
                match.submitted_at = datetime.now(timezone.utc)
        self.db.flush()
        return match
