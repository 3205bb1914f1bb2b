"""Database engine and session management for payroll runs and local state."""

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from app.core.config import settings

# SQLite connections are shared across the threadpool FastAPI runs sync routes in
_connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)

engine = create_engine(settings.database_url, echo=False, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    """Declarative base for PayrollRun and StoredValue."""

    pass


def init_db() -> None:
    """Create the ``payroll_runs`` and ``stored_values`` tables if missing."""
    from app import models  # noqa: F401  registers tables on Base.metadata

    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency that yields one session per request and always closes it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
