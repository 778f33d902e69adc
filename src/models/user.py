"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, Integer, String
from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=False)
    email = Column(String, unique=True, index=True, nullable=False)  # lower-cased
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)  # 'Estudiante', 'Profesor' or 'Administrador'
    status = Column(String, nullable=False, default="active")
    login_attempts = Column(Integer, nullable=False, default=0)
    blocked_until = Column(String, nullable=True)  # ISO format string
