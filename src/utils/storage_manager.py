"""Storage gateway for users, recovery tokens and sessions.

This module owns every read and write of the three logical tables. Callers
get fresh pydantic snapshots and never hold ORM objects across calls.

When no database session is available (``StorageManager(None)``) the gateway
runs in degraded mode: reads return empty results and writes are ignored.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import false, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DBSession

from config import BLOCK_DURATION_MINUTES, MAX_LOGIN_ATTEMPTS, STORAGE_KEYS
from core.exceptions import UserAlreadyExistsError
from models.recovery_token import RecoveryTokenModel
from models.session import SessionModel
from models.storage_key import StorageKeyModel
from models.user import UserModel
from schemas.recovery_token import RecoveryToken
from schemas.session import Session
from schemas.user import User, UserRole
from utils import time_utils
from utils.converters import (
    model_to_session,
    model_to_token,
    model_to_user,
    session_to_model,
    token_to_model,
    user_to_model,
)
from utils.security import hash_password

logger = logging.getLogger(__name__)

# Demo accounts created on first start. Includes one account that is already
# blocked and one whose password has exactly the minimum length.
DEFAULT_USERS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "email": "estudiante@gmail.com",
        "password": "Passw0rd!23",
        "name": "Juan Estudiante",
        "role": UserRole.STUDENT,
    },
    {
        "id": 2,
        "email": "profesor@gmail.com",
        "password": "Pr0fesor!2024",
        "name": "Maria Profesora",
        "role": UserRole.TEACHER,
    },
    {
        "id": 3,
        "email": "admin@gmail.com",
        "password": "Adm1n!Secure",
        "name": "Carlos Admin",
        "role": UserRole.ADMINISTRATOR,
    },
    {
        "id": 4,
        "email": "bloqueado@gmail.com",
        "password": "Block3d!Pass",
        "name": "Usuario Bloqueado",
        "role": UserRole.STUDENT,
        "blocked": True,
    },
    {
        "id": 5,
        "email": "test10@gmail.com",
        "password": "Abcd1234!@",
        "name": "Test Limite",
        "role": UserRole.STUDENT,
    },
]

_UPDATABLE_USER_FIELDS = frozenset(
    {"password_hash", "name", "role", "status", "login_attempts", "blocked_until"}
)


def build_default_users() -> List[User]:
    """Materialize DEFAULT_USERS with hashed passwords and a live block."""
    users = []
    for entry in DEFAULT_USERS:
        blocked = entry.get("blocked", False)
        users.append(
            User(
                id=entry["id"],
                email=entry["email"],
                password_hash=hash_password(entry["password"]),
                name=entry["name"],
                role=entry["role"],
                login_attempts=MAX_LOGIN_ATTEMPTS if blocked else 0,
                blocked_until=(
                    time_utils.iso_after(minutes=BLOCK_DURATION_MINUTES)
                    if blocked
                    else None
                ),
            )
        )
    return users


class StorageManager:
    """Persists users, recovery tokens and sessions using SQLAlchemy."""

    def __init__(self, db: Optional[DBSession]):
        """Initialize StorageManager.

        Args:
            db: SQLAlchemy Session, or None to run without a backend.
        """
        self.db = db
        self._transaction_depth = 0

    @property
    def available(self) -> bool:
        return self.db is not None

    # --- Transactions ---

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Group several writes into one commit.

        Writes made inside the block are flushed but only committed when the
        outermost block exits cleanly; any exception rolls all of them back.
        """
        if not self.available:
            yield
            return

        self._transaction_depth += 1
        try:
            yield
        except Exception:
            self._transaction_depth -= 1
            if not self._transaction_depth:
                self.db.rollback()
            raise
        else:
            self._transaction_depth -= 1
            if not self._transaction_depth:
                self.db.commit()

    def _commit(self) -> None:
        if self._transaction_depth:
            self.db.flush()
        else:
            self.db.commit()

    # --- Initialization ---

    def _key_exists(self, name: str) -> bool:
        key = STORAGE_KEYS[name]
        return self.db.get(StorageKeyModel, key) is not None

    def _mark_key(self, name: str) -> None:
        if not self._key_exists(name):
            self.db.add(
                StorageKeyModel(
                    key=STORAGE_KEYS[name],
                    initialized_at=time_utils.to_iso(time_utils.utc_now()),
                )
            )

    def is_initialized(self) -> bool:
        if not self.available:
            return False
        return self._key_exists("users")

    def initialize(self) -> None:
        """Seed the default dataset unless it was seeded before."""
        if not self.available:
            return

        seeded = False
        if not self._key_exists("users"):
            for user in build_default_users():
                self.db.add(user_to_model(user))
            self._mark_key("users")
            seeded = True
        if not self._key_exists("tokens"):
            self._mark_key("tokens")
        self._commit()

        if seeded:
            logger.info("Seeded %d default users", len(DEFAULT_USERS))

    def reset(self) -> None:
        """Drop users, tokens and sessions, then seed again."""
        if not self.available:
            return

        self.db.query(SessionModel).delete()
        self.db.query(RecoveryTokenModel).delete()
        self.db.query(UserModel).delete()
        self.db.query(StorageKeyModel).delete()
        self._commit()
        self.db.expire_all()
        logger.info("Storage reset")
        self.initialize()

    # --- Users ---

    def get_users(self) -> List[User]:
        if not self.available:
            return []
        models = self.db.query(UserModel).order_by(UserModel.id).all()
        return [model_to_user(m) for m in models]

    def save_users(self, users: List[User]) -> None:
        """Replace the whole users table with ``users``."""
        if not self.available:
            return

        keep_ids = [u.id for u in users]
        query = self.db.query(UserModel)
        if keep_ids:
            query = query.filter(UserModel.id.notin_(keep_ids))
        query.delete()
        for user in users:
            self.db.merge(user_to_model(user))
        self._mark_key("users")
        self._commit()

    def _get_user_model(self, email: str) -> Optional[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(func.lower(UserModel.email) == email.lower())
            .first()
        )

    def find_user_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup by email."""
        if not self.available or not email:
            return None
        model = self._get_user_model(email)
        if model:
            return model_to_user(model)
        return None

    def next_user_id(self) -> int:
        """Return max(id) + 1, or 1 for an empty table."""
        if not self.available:
            return 1
        current = self.db.query(func.max(UserModel.id)).scalar()
        return (current or 0) + 1

    def add_user(self, user: User) -> None:
        """Insert a single user.

        Raises:
            UserAlreadyExistsError: If the email or id is already taken.
        """
        if not self.available:
            return

        self.db.add(user_to_model(user))
        # Two concurrent registrations can both pass the duplicate check;
        # the unique constraint decides.
        try:
            self._mark_key("users")
            self._commit()
        except IntegrityError as e:
            if not self._transaction_depth:
                self.db.rollback()
            raise UserAlreadyExistsError(user.email) from e
        logger.info("Created user %s", user.id)

    def update_user(self, email: str, /, **changes: Any) -> Optional[User]:
        """Update selected fields of one user.

        Args:
            email: Email of the user (case-insensitive).
            **changes: Field values to set.

        Returns:
            The updated User, or None if no user matched.

        Raises:
            ValueError: If a field is unknown or not updatable.
        """
        unknown = set(changes) - _UPDATABLE_USER_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {sorted(unknown)}")
        if not self.available or not email:
            return None

        model = self._get_user_model(email)
        if model is None:
            return None
        for field, value in changes.items():
            if isinstance(value, Enum):
                value = value.value
            setattr(model, field, value)
        self._commit()
        return model_to_user(model)

    def increment_login_attempts(self, email: str) -> Optional[int]:
        """Atomically add one failed attempt and return the new count.

        Returns:
            The new attempt count, or None if no user matched.
        """
        if not self.available or not email:
            return None

        result = self.db.execute(
            update(UserModel)
            .where(func.lower(UserModel.email) == email.lower())
            .values(login_attempts=UserModel.login_attempts + 1)
        )
        if result.rowcount == 0:
            return None
        self._commit()
        return (
            self.db.query(UserModel.login_attempts)
            .filter(func.lower(UserModel.email) == email.lower())
            .scalar()
        )

    # --- Recovery tokens ---

    def get_tokens(self) -> List[RecoveryToken]:
        if not self.available:
            return []
        models = self.db.query(RecoveryTokenModel).order_by(
            RecoveryTokenModel.created_at
        ).all()
        return [model_to_token(m) for m in models]

    def save_tokens(self, tokens: List[RecoveryToken]) -> None:
        """Replace the whole tokens table with ``tokens``."""
        if not self.available:
            return

        keep = [t.token for t in tokens]
        query = self.db.query(RecoveryTokenModel)
        if keep:
            query = query.filter(RecoveryTokenModel.token.notin_(keep))
        query.delete()
        for token in tokens:
            self.db.merge(token_to_model(token))
        self._mark_key("tokens")
        self._commit()

    def find_token(self, token: str) -> Optional[RecoveryToken]:
        if not self.available or not token:
            return None
        model = self.db.get(RecoveryTokenModel, token)
        if model:
            return model_to_token(model)
        return None

    def replace_tokens_for_email(self, email: str, token: RecoveryToken) -> None:
        """Delete every token of ``email`` and store ``token`` instead."""
        if not self.available:
            return

        self.db.query(RecoveryTokenModel).filter(
            func.lower(RecoveryTokenModel.email) == email.lower()
        ).delete()
        self.db.add(token_to_model(token))
        self._mark_key("tokens")
        self._commit()

    def mark_token_used(self, token: str) -> bool:
        """Flip ``used`` to True if it is still False.

        Returns:
            True if this call consumed the token.
        """
        if not self.available or not token:
            return False

        result = self.db.execute(
            update(RecoveryTokenModel)
            .where(RecoveryTokenModel.token == token)
            .where(RecoveryTokenModel.used == false())
            .values(used=True)
        )
        if result.rowcount != 1:
            return False
        self._commit()
        return True

    # --- Sessions ---

    def get_session(self, session_id: str) -> Optional[Session]:
        """Return the session, purging it if it has expired."""
        if not self.available or not session_id:
            return None

        model = self.db.get(SessionModel, session_id)
        if model is None:
            return None
        if time_utils.has_expired(model.expires_at, strict=True):
            user_id = model.user_id
            self.db.delete(model)
            self._commit()
            logger.info("Purged expired session of user %s", user_id)
            return None
        return model_to_session(model)

    def save_session(self, session: Session) -> None:
        """Store ``session``; any other session of the same user is dropped."""
        if not self.available:
            return

        self.db.query(SessionModel).filter(
            SessionModel.user_id == session.user_id,
            SessionModel.session_id != session.session_id,
        ).delete()
        self.db.merge(session_to_model(session))
        self._commit()

    def clear_session(self, session_id: str) -> None:
        if not self.available or not session_id:
            return
        self.db.query(SessionModel).filter(
            SessionModel.session_id == session_id
        ).delete()
        self._commit()
