"""Engine and session factory for the order database.

Services take a ``Session`` from ``get_db`` (HTTP) or ``SessionLocal`` (worker)
and own the commit. ``init_db`` creates the tables directly for local runs;
deployed schemas come from the alembic migrations.
"""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings

engine = create_engine(
    settings.APP_DATABASE_DSN,
    connect_args=({"check_same_thread": False} if "sqlite" in settings.APP_DATABASE_DSN else {}),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create every order, coupon and catalogue table that does not exist yet."""
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
