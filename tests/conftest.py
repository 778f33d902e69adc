"""
Pytest configuration and shared fixtures: an in-memory SQLite database per
test and a controllable clock.
"""

import os

# Must be set before any project module reads config
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "database"
os.environ["EMAILJS_SERVICE_ID"] = ""
os.environ["EMAILJS_TEMPLATE_ID"] = ""
os.environ["EMAILJS_PUBLIC_KEY"] = ""

from datetime import datetime, timedelta

import pytest
import pytz
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models.base import Base
from utils import time_utils
from utils.auth_manager import AuthManager
from utils.storage_manager import StorageManager

START_TIME = datetime(2026, 10, 19, 12, 0, 0, tzinfo=pytz.utc)


class FakeClock:
    """Callable stand-in for ``time_utils.utc_now``."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    fake = FakeClock(START_TIME)
    monkeypatch.setattr(time_utils, "utc_now", fake)
    return fake


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def storage(db, clock) -> StorageManager:
    """Storage seeded with the default demo accounts."""
    manager = StorageManager(db)
    manager.initialize()
    return manager


@pytest.fixture
def auth(storage) -> AuthManager:
    return AuthManager(storage)


@pytest.fixture
def strong_password() -> str:
    return "Abcd1234!@x"
