"""Shared test fixtures for the Tempo payroll engine tests.

Uses a file-based SQLite database so API tests run against real tables.
"""

from __future__ import annotations

import os

# Override DATABASE_URL before importing anything from app: the Settings
# model reads the environment eagerly via pydantic-settings, and the
# module-level ``engine`` in app.core.database is built at import time.
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings
from app.core.database import Base, get_db
from app.main import app
from app.schemas.instruction import Employee, Payment, PaymentInstruction

TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with overridden DB dependency."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ── Domain helpers ───────────────────────────────────────────────────


def make_config(**overrides) -> Settings:
    """Settings with no pacing between windows, plus any overrides."""
    defaults = {"database_url": "sqlite://", "batch_pause_ms": 0}
    defaults.update(overrides)
    return Settings(**defaults)


def make_address(n: int) -> str:
    """Deterministic, valid 20-byte address for payment ``n``."""
    return "0x" + f"{n:040x}"


def make_payment(n: int = 1, **overrides) -> Payment:
    fields = {
        "id": f"EMP-{n:03d}",
        "employee": Employee(
            name=f"Employee {n}", address=make_address(n), employee_id=f"E-{n}"
        ),
        "amount": "100.00",
        "memo": "Monthly salary",
    }
    fields.update(overrides)
    return Payment(**fields)


def make_instruction(payments=(), **overrides) -> PaymentInstruction:
    fields = {
        "message_id": "PAYROLL-TEST-001",
        "creation_date_time": "2024-01-31T09:00:00Z",
        "payments": tuple(payments),
    }
    fields.update(overrides)
    return PaymentInstruction(**fields)


@pytest.fixture
def config() -> Settings:
    return make_config()
