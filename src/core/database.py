"""Database connection and session management.

This module handles the database connection using SQLAlchemy. With
``STORAGE_BACKEND=none`` no session is handed out and the storage layer runs
in degraded mode.
"""

from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from config import DATA_DIR, DATABASE_URL, DEFAULT_DATABASE_URL, STORAGE_BACKEND
from core.exceptions import ConfigurationError
from models.base import Base
# Import models to ensure they are registered with Base.metadata
import models  # noqa: F401

# Ensure data directory exists for the default SQLite file
if DATABASE_URL == DEFAULT_DATABASE_URL:
    DATA_DIR.mkdir(parents=True, exist_ok=True)

SUPPORTED_STORAGE_BACKENDS = frozenset({"database", "none"})

SQLALCHEMY_DATABASE_URL = DATABASE_URL

_connect_args = (
    {"check_same_thread": False}
    if SQLALCHEMY_DATABASE_URL.startswith("sqlite")
    else {}
)

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=_connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def storage_enabled(backend: str = STORAGE_BACKEND) -> bool:
    """Return whether a persistence backend is configured.

    Raises:
        ConfigurationError: If ``backend`` is not a known value.
    """
    if backend not in SUPPORTED_STORAGE_BACKENDS:
        raise ConfigurationError(
            f"Unknown STORAGE_BACKEND '{backend}'. "
            f"Expected one of: {', '.join(sorted(SUPPORTED_STORAGE_BACKENDS))}"
        )
    return backend != "none"


def init_db() -> None:
    """Create tables if they do not exist."""
    if storage_enabled():
        Base.metadata.create_all(bind=engine)


def get_db() -> Iterator[Optional[Session]]:
    """Dependency for getting a database session (None when disabled)."""
    if not storage_enabled():
        yield None
        return
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
