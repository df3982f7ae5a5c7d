"""Pytest fixtures for testing"""

import random
import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from lendmatch.api.dependencies import get_assistant
from lendmatch.api.main import create_app
from lendmatch.domain.assistant import RuleBasedAssistant
from lendmatch.domain.models import ApplicantProfile, PartnerCriteria
from lendmatch.infrastructure.database.models import Base
from lendmatch.infrastructure.database.session import get_db, seed_partners


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database with the sample partner catalog"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    seed_partners(db)
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a seeded rule-based assistant"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_assistant] = lambda: RuleBasedAssistant(rng=random.Random(0))
    return TestClient(app)


@pytest.fixture
def term_loan_partner() -> PartnerCriteria:
    """Partner with mid-market minimums and a 50k-250k loan range"""
    return PartnerCriteria(
        id=1,
        name="Small Business Capital",
        loan_type="Term Loan",
        min_loan_amount=50_000,
        max_loan_amount=250_000,
        min_credit_score=680,
        min_annual_revenue=100_000,
        min_years_in_business=2,
        interest_rate_min=8,
        interest_rate_max=12,
        term_length_min=1,
        term_length_max=5,
        term_unit="years",
        funding_time_min=3,
        funding_time_max=5,
        funding_time_unit="days",
    )


@pytest.fixture
def strong_applicant() -> ApplicantProfile:
    """Established business well above typical partner minimums"""
    return ApplicantProfile(
        credit_score=780,
        annual_revenue=300_000,
        years_in_business=6,
        requested_amount=100_000,
        business_type="Retail",
        loan_purpose="Inventory Purchase",
    )
