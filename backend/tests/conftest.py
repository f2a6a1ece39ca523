"""Shared test fixtures for all test modules."""

import contextlib
import uuid
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any

import jwt
import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core import database as db_module
from app.core.config import settings
from app.core.database import Base, get_db
from app.models.coupon import Coupon, CouponStatus, DiscountType
from app.repositories.address_repository import AddressRepository
from app.repositories.merchant_repository import MerchantRepository
from app.repositories.product_repository import ProductRepository

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)

# Well-known users shared across tests
DEFAULT_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
OTHER_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
ADMIN_USER_ID = uuid.UUID("00000000-0000-0000-0000-0000000000ad")


def make_token(
    user_id: uuid.UUID,
    role: str | None = None,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Sign a bearer token the way the auth gateway does."""
    claims: dict[str, object] = {
        "sub": str(user_id),
        "exp": datetime.now(UTC) + expires_in,
    }
    if role:
        claims["role"] = role
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user_id: uuid.UUID = DEFAULT_USER_ID, role: str | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database. Clears data after each test.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def user_id():
    """Return the default acting user ID for tests."""
    return DEFAULT_USER_ID


@pytest.fixture
def db_session():
    """Create a database session for direct service and repository testing."""
    gen = get_db()
    db = next(gen)
    try:
        yield db
    finally:
        for _ in gen:
            pass


@pytest.fixture
def merchant(db_session):
    """An open merchant with a 5.00 delivery fee and a 20.00 minimum order."""
    return MerchantRepository(db_session).create(
        name="Noodle House",
        delivery_fee=Decimal("5.00"),
        min_order_amount=Decimal("20.00"),
    )


@pytest.fixture
def other_merchant(db_session):
    return MerchantRepository(db_session).create(name="Dumpling Bar")


@pytest.fixture
def address(db_session):
    """A saved address of the default user."""
    return AddressRepository(db_session).create(
        user_id=DEFAULT_USER_ID,
        name="Ada",
        phone="13800000000",
        province="Zhejiang",
        city="Hangzhou",
        district="Xihu",
        detail="1 Lakeside Road",
    )


@pytest.fixture
def other_address(db_session):
    """A saved address of the second user."""
    return AddressRepository(db_session).create(
        user_id=OTHER_USER_ID,
        name="Grace",
        phone="13900000000",
        province="Zhejiang",
        city="Hangzhou",
        district="Shangcheng",
        detail="8 Riverside Lane",
    )


@pytest.fixture
def products(db_session, merchant):
    """Catalog of the default merchant keyed by a short name."""
    repo = ProductRepository(db_session)
    return {
        "noodles": repo.create(merchant.id, "Beef Noodles", Decimal("12.50")),
        "dumplings": repo.create(merchant.id, "Pork Dumplings", Decimal("8.00")),
        "tea": repo.create(merchant.id, "Jasmine Tea", Decimal("3.99")),
        "sold_out": repo.create(
            merchant.id, "Seasonal Soup", Decimal("15.00"), is_available=False
        ),
    }


def create_coupon(db: Session, **overrides: Any) -> Coupon:
    """Insert a coupon directly, bypassing admin validation.

    Defaults to an active, unlimited 10.00 fixed coupon valid for the next 30 days.
    """
    now = datetime.now(UTC)
    fields: dict[str, Any] = {
        "code": f"CPN{uuid.uuid4().hex[:8].upper()}",
        "name": "Test coupon",
        "discount_type": DiscountType.FIXED.value,
        "discount_value": Decimal("10.00"),
        "min_order_amount": Decimal("0"),
        "max_discount": None,
        "start_date": now - timedelta(days=1),
        "end_date": now + timedelta(days=30),
        "merchant_id": None,
        "total_limit": 0,
        "per_user_limit": 1,
        "usage_count": 0,
        "status": CouponStatus.ACTIVE.value,
    }
    fields.update(overrides)
    coupon = Coupon(**fields)
    db.add(coupon)
    db.commit()
    db.refresh(coupon)
    return coupon
