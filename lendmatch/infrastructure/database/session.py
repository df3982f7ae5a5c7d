"""Database session management and catalog seeding"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from lendmatch.config import settings
from lendmatch.infrastructure.database.models import Base, LendingPartner

if settings.database_url.startswith("sqlite"):
    # SQLite connections are shared across FastAPI's threadpool
    engine = create_engine(settings.database_url, connect_args={"check_same_thread": False})
else:
    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    engine = create_engine(
        settings.database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SAMPLE_PARTNERS = [
    {
        "name": "Small Business Capital",
        "loan_type": "Term Loan",
        "min_loan_amount": 50_000,
        "max_loan_amount": 250_000,
        "min_credit_score": 680,
        "min_annual_revenue": 100_000,
        "min_years_in_business": 2,
        "interest_rate_min": 8,
        "interest_rate_max": 12,
        "term_length_min": 1,
        "term_length_max": 5,
        "term_unit": "years",
        "funding_time_min": 3,
        "funding_time_max": 5,
        "funding_time_unit": "days",
    },
    {
        "name": "Growth Fund",
        "loan_type": "Line of Credit",
        "min_loan_amount": 25_000,
        "max_loan_amount": 150_000,
        "min_credit_score": 650,
        "min_annual_revenue": 75_000,
        "min_years_in_business": 1,
        "interest_rate_min": 9.5,
        "interest_rate_max": 14,
        "term_unit": "revolving",
        "funding_time_min": 1,
        "funding_time_max": 2,
        "funding_time_unit": "days",
    },
    {
        "name": "Expansion Partners",
        "loan_type": "Equipment Financing",
        "min_loan_amount": 10_000,
        "max_loan_amount": 200_000,
        "min_credit_score": 620,
        "min_annual_revenue": 50_000,
        "min_years_in_business": 1,
        "interest_rate_min": 7,
        "interest_rate_max": 11,
        "term_length_min": 2,
        "term_length_max": 7,
        "term_unit": "years",
        "funding_time_min": 5,
        "funding_time_max": 7,
        "funding_time_unit": "days",
    },
    {
        "name": "First Capital",
        "loan_type": "SBA Loan",
        "min_loan_amount": 50_000,
        "max_loan_amount": 5_000_000,
        "min_credit_score": 650,
        "min_annual_revenue": 250_000,
        "min_years_in_business": 2,
        "interest_rate_min": 6,
        "interest_rate_max": 9.5,
        "term_length_min": 5,
        "term_length_max": 25,
        "term_unit": "years",
        "funding_time_min": 30,
        "funding_time_max": 90,
        "funding_time_unit": "days",
    },
    {
        "name": "Merchant Advance",
        "loan_type": "Merchant Cash Advance",
        "min_loan_amount": 5_000,
        "max_loan_amount": 250_000,
        "min_credit_score": 580,
        "min_annual_revenue": 100_000,
        "min_years_in_business": 0.5,
        "interest_rate_min": 12,
        "interest_rate_max": 25,
        "term_length_min": 3,
        "term_length_max": 18,
        "term_unit": "months",
        "funding_time_min": 1,
        "funding_time_max": 3,
        "funding_time_unit": "days",
    },
]


def init_db(db: Session) -> None:
    """Create tables and seed the sample catalog into an empty partner table"""
    Base.metadata.create_all(bind=db.get_bind())
    seed_partners(db)


def seed_partners(db: Session) -> int:
    """Insert the sample partners when the catalog is empty; returns rows added"""
    if db.query(LendingPartner).first() is not None:
        return 0
    for partner in SAMPLE_PARTNERS:
        db.add(LendingPartner(active=True, **partner))
    db.commit()
    return len(SAMPLE_PARTNERS)


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
