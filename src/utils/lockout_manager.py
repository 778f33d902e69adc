"""Account lockout after repeated failed logins.

A user is either Active (no ``blocked_until`` or a deadline that has passed)
or Blocked (``blocked_until`` in the future). Blocks are evaluated lazily when
a login is attempted; nothing runs in the background.
"""

import logging

from config import BLOCK_DURATION_MINUTES, MAX_LOGIN_ATTEMPTS
from schemas.results import BlockStatus
from schemas.user import User
from utils import time_utils
from utils.storage_manager import StorageManager

logger = logging.getLogger(__name__)


class LockoutManager:
    """Tracks failed login attempts and time-boxed blocks per account."""

    def __init__(self, storage: StorageManager):
        self.storage = storage

    def check_block(self, user: User) -> BlockStatus:
        """Return whether ``user`` is currently blocked.

        Args:
            user: User snapshot to inspect.

        Returns:
            BlockStatus with the remaining minutes (rounded up) when blocked.
        """
        if not user.blocked_until or time_utils.has_expired(user.blocked_until):
            return BlockStatus(blocked=False, remaining_time=0)
        return BlockStatus(
            blocked=True,
            remaining_time=time_utils.minutes_until(user.blocked_until),
        )

    def block(self, email: str) -> None:
        """Block the account for BLOCK_DURATION_MINUTES from now."""
        updated = self.storage.update_user(
            email,
            blocked_until=time_utils.iso_after(minutes=BLOCK_DURATION_MINUTES),
            login_attempts=MAX_LOGIN_ATTEMPTS,
        )
        if updated:
            logger.warning(
                "Blocked user %s for %d minutes", updated.id, BLOCK_DURATION_MINUTES
            )

    def unlock(self, email: str) -> None:
        """Clear any block and reset the failed attempt counter."""
        self.storage.update_user(email, blocked_until=None, login_attempts=0)

    def increment_attempts(self, email: str) -> int:
        """Record a failed login.

        Reaching MAX_LOGIN_ATTEMPTS blocks the account.

        Args:
            email: Email of the account.

        Returns:
            Attempts left before the block (0 once blocked). Unknown accounts
            report MAX_LOGIN_ATTEMPTS.
        """
        attempts = self.storage.increment_login_attempts(email)
        if attempts is None:
            return MAX_LOGIN_ATTEMPTS

        if attempts >= MAX_LOGIN_ATTEMPTS:
            self.block(email)
            attempts = MAX_LOGIN_ATTEMPTS
        return MAX_LOGIN_ATTEMPTS - attempts
