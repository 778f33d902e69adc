"""Database models."""

from .base import Base
from .recovery_token import RecoveryTokenModel
from .session import SessionModel
from .storage_key import StorageKeyModel
from .user import UserModel

__all__ = [
    "Base",
    "RecoveryTokenModel",
    "SessionModel",
    "StorageKeyModel",
    "UserModel",
]
