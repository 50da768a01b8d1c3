"""
Shared fixtures: an in-memory SQLite database behind the get_db dependency.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import itertools
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from mandi.main import app
from mandi.db.base import Base
from mandi.db.session import get_db
from mandi.core.security import create_access_token, get_password_hash
from mandi.models import User, UserRole, PartyType, TransactionType
from mandi.services import party_service, product_service, transaction_service

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpassword123"
_usernames = itertools.count(1)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fresh_session():
    """A second session, for reading back what another session committed."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture(scope="session")
def password_hash():
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture
def make_user(db, password_hash):
    """Create a user directly in the database."""
    def _make(role=UserRole.OPERATOR, username=None, is_active=True):
        username = username or f"{role.value}{next(_usernames)}"
        user = User(
            username=username,
            email=f"{username}@example.com",
            hashed_password=password_hash,
            role=role,
            is_active=is_active
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


def bearer(user):
    token = create_access_token(user.username, user.id, user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Authorization headers for an existing user."""
    return bearer


@pytest.fixture
def viewer_headers(make_user):
    return bearer(make_user(UserRole.VIEWER))


@pytest.fixture
def operator_headers(make_user):
    return bearer(make_user(UserRole.OPERATOR))


@pytest.fixture
def admin_headers(make_user):
    return bearer(make_user(UserRole.ADMIN))


@pytest.fixture
def kisan(db):
    return party_service.create_party(db, PartyType.KISAN, {"name": "Ramesh", "village": "Rampur"})


@pytest.fixture
def vyapari(db):
    return party_service.create_party(
        db, PartyType.VYAPARI, {"name": "Gupta Traders", "city": "Indore", "gst_number": "23ABCDE1234F1Z5"}
    )


@pytest.fixture
def product(db):
    return product_service.create_product(db, {"name": "Tomato", "category": "Vegetable"})


@pytest.fixture
def record(db, kisan, vyapari, product):
    """Record a single-item transaction between the kisan and vyapari fixtures."""
    def _record(quantity, unit_price, on=date(2024, 1, 1), kisan_rate="0.02", vyapari_rate="0.40",
                paid_kisan="0", paid_vyapari="0"):
        data = SimpleNamespace(
            kisan_id=kisan.id,
            vyapari_id=vyapari.id,
            transaction_date=on,
            items=[SimpleNamespace(product_id=product.id, quantity=Decimal(quantity), unit_price=Decimal(unit_price))],
            commission_kisan_rate=Decimal(kisan_rate),
            commission_vyapari_rate_per_kg=Decimal(vyapari_rate),
            amount_paid_kisan=Decimal(paid_kisan),
            amount_paid_vyapari=Decimal(paid_vyapari),
            transaction_type=TransactionType.SALE_TO_VYAPARI,
            notes=None
        )
        return transaction_service.record_transaction(db, data)
    return _record
