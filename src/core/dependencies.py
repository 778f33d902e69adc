"""Dependency injection module for FastAPI.

This module wires the request-scoped managers used by the API routes.
"""

from typing import Annotated, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import auth_manager
from utils import notification_manager
from utils import storage_manager

# Singleton for EmailNotifier (holds configuration only)
_email_notifier_instance: Optional[notification_manager.EmailNotifier] = None


def get_storage_manager(
    db: Optional[Session] = Depends(get_db),
) -> storage_manager.StorageManager:
    """Get StorageManager instance with request-scoped DB session.

    Args:
        db: Database session, or None when storage is disabled.

    Returns:
        StorageManager instance.
    """
    return storage_manager.StorageManager(db)


def get_auth_manager(
    storage: storage_manager.StorageManager = Depends(get_storage_manager),
) -> auth_manager.AuthManager:
    """Get AuthManager instance bound to the request's storage.

    Args:
        storage: Request-scoped StorageManager.

    Returns:
        AuthManager instance.
    """
    return auth_manager.AuthManager(storage)


def get_email_notifier() -> notification_manager.EmailNotifier:
    """Get EmailNotifier singleton instance."""
    global _email_notifier_instance
    if _email_notifier_instance is None:
        _email_notifier_instance = notification_manager.EmailNotifier()
    return _email_notifier_instance


# Type aliases for dependency injection
StorageManagerDep = Annotated[
    storage_manager.StorageManager, Depends(get_storage_manager)
]
AuthManagerDep = Annotated[auth_manager.AuthManager, Depends(get_auth_manager)]
EmailNotifierDep = Annotated[
    notification_manager.EmailNotifier, Depends(get_email_notifier)
]
