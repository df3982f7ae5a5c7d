"""SQLAlchemy ORM models for leads, partners, conversations, and matches"""

from sqlalchemy import Column, Boolean, Float, DateTime, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Lead(Base):
    """Business that has engaged with the chat assistant"""

    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_name = Column(Text, nullable=False)
    business_type = Column(Text, nullable=True)
    years_in_business = Column(Float, nullable=True)
    annual_revenue = Column(Float, nullable=True)
    requested_amount = Column(Float, nullable=True)
    loan_purpose = Column(Text, nullable=True)
    credit_score = Column(Integer, nullable=True)
    email = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="new")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    messages = relationship("ChatMessage", back_populates="lead", cascade="all, delete-orphan")
    matches = relationship("LeadPartnerMatch", back_populates="lead", cascade="all, delete-orphan")


class LendingPartner(Base):
    """Lending institution with eligibility minimums"""

    __tablename__ = "lending_partners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    loan_type = Column(Text, nullable=False)
    min_loan_amount = Column(Float, nullable=False)
    max_loan_amount = Column(Float, nullable=False)
    min_credit_score = Column(Integer, nullable=False)
    min_annual_revenue = Column(Float, nullable=False)
    min_years_in_business = Column(Float, nullable=False)
    interest_rate_min = Column(Float, nullable=True)
    interest_rate_max = Column(Float, nullable=True)
    term_length_min = Column(Integer, nullable=True)
    term_length_max = Column(Integer, nullable=True)
    term_unit = Column(Text, nullable=True)
    funding_time_min = Column(Integer, nullable=True)
    funding_time_max = Column(Integer, nullable=True)
    funding_time_unit = Column(Text, nullable=True)
    active = Column(Boolean, nullable=False, default=True)


class ChatMessage(Base):
    """Single message in a lead's conversation"""

    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Text, nullable=False)  # "user" or "assistant"
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    lead = relationship("Lead", back_populates="messages")


class LeadPartnerMatch(Base):
    """Persisted match between a lead and a partner"""

    __tablename__ = "lead_partner_matches"
    __table_args__ = (UniqueConstraint("lead_id", "partner_id", name="uq_lead_partner"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_id = Column(Integer, ForeignKey("leads.id", ondelete="CASCADE"), nullable=False, index=True)
    partner_id = Column(Integer, ForeignKey("lending_partners.id", ondelete="CASCADE"), nullable=False)
    match_score = Column(Integer, nullable=False)
    selected = Column(Boolean, nullable=False, default=False)
    submitted = Column(Boolean, nullable=False, default=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    lead = relationship("Lead", back_populates="matches")
    partner = relationship("LendingPartner")
