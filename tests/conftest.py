"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from cycle_ledger.api.main import create_app
from cycle_ledger.infrastructure.database.models import Base
from cycle_ledger.infrastructure.database.session import get_db
from cycle_ledger.domain.models import Cost, Cycle, RawCost, RawCycle, User
from cycle_ledger.domain.normalizer import normalize_cost, normalize_cycle


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def team() -> list[User]:
    """One admin with two operators (20% and 10%)"""
    return [
        User(id="admin-1", name="Ana", username="ana", role="admin"),
        User(id="op-1", name="Bruno", username="bruno", role="operator", commission_rate=20.0, parent_id="admin-1"),
        User(id="op-2", name="Carla", username="carla", role="operator", commission_rate=10.0, parent_id="admin-1"),
    ]


@pytest.fixture
def make_cycle() -> Callable[..., Cycle]:
    """Build a normalized cycle; money in currency units"""
    counter = {"n": 0}

    def _make(operator_id: str = "op-1", owner_admin_id: str = "admin-1", day: date = date(2026, 3, 10), **money) -> Cycle:
        counter["n"] += 1
        return normalize_cycle(
            RawCycle(
                id=f"c-{counter['n']}",
                name=f"Cycle {counter['n']}",
                date=day,
                operator_id=operator_id,
                operator_name=money.pop("operator_name", operator_id.upper()),
                owner_admin_id=owner_admin_id,
                **money,
            )
        )

    return _make


@pytest.fixture
def make_cost() -> Callable[..., Cost]:
    """Build a normalized cost; amount in currency units"""
    counter = {"n": 0}

    def _make(amount, operator_id: str = "op-1", owner_admin_id: str = "admin-1", day: date = date(2026, 3, 10), category: str = "sms", operator_name: str = "") -> Cost:
        counter["n"] += 1
        return normalize_cost(
            RawCost(
                id=f"exp-{counter['n']}",
                name=f"Cost {counter['n']}",
                date=day,
                amount=amount,
                category=category,
                operator_id=operator_id,
                operator_name=operator_name or operator_id.upper(),
                owner_admin_id=owner_admin_id,
            )
        )

    return _make
