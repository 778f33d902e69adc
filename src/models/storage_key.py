"""Storage key database model.

A row exists for every logical storage key that has been initialized.
"""

from sqlalchemy import Column, String
from .base import Base


class StorageKeyModel(Base):
    __tablename__ = "storage_keys"

    key = Column(String, primary_key=True)
    initialized_at = Column(String, nullable=False)  # ISO format string
