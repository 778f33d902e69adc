"""Recovery token database model."""

from sqlalchemy import Boolean, Column, String
from .base import Base


class RecoveryTokenModel(Base):
    """One-time password recovery token."""

    __tablename__ = "recovery_tokens"

    token = Column(String, primary_key=True, index=True)
    email = Column(String, index=True, nullable=False)
    created_at = Column(String, nullable=False)  # ISO format string
    expires_at = Column(String, nullable=False)  # ISO format string
    used = Column(Boolean, nullable=False, default=False)
