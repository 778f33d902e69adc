"""Login session database model."""

from sqlalchemy import Column, Integer, String
from .base import Base


class SessionModel(Base):
    """Authenticated session, user data denormalized at login time."""

    __tablename__ = "sessions"

    session_id = Column(String, primary_key=True, index=True)
    user_id = Column(Integer, index=True, nullable=False)
    email = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    login_time = Column(String, nullable=False)  # ISO format string
    expires_at = Column(String, nullable=False)  # ISO format string
