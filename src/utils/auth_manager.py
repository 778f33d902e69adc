"""Authentication orchestration.

This module composes validation, storage, account lockout and recovery tokens
into the operations callers use: login, logout, registration, password
recovery and password reset. Expected failures are returned as result objects
with a user-facing message; nothing here raises for bad input.
"""

import logging
from typing import Optional

from config import BLOCK_DURATION_MINUTES, SESSION_TIMEOUT_MINUTES
from core.exceptions import TokenConsumptionError, UserAlreadyExistsError
from schemas.results import (
    LoginResult,
    OperationResult,
    RecoveryResult,
    RegisterResult,
    ResetPasswordResult,
    TokenValidationResult,
)
from schemas.session import Session
from schemas.user import User, UserRole, UserStatus
from utils import time_utils
from utils.lockout_manager import LockoutManager
from utils.recovery_token_manager import RecoveryTokenManager
from utils.security import generate_session_id, hash_password, verify_password
from utils.storage_manager import StorageManager
from utils.validation import PASSWORD_REQUIRED, validate_email, validate_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Credenciales invalidas"
PASSWORDS_DO_NOT_MATCH = "Las contrasenas no coinciden"
RECOVERY_REQUESTED = "Se ha enviado un enlace de recuperacion a tu correo"
MIN_NAME_LENGTH = 3


class AuthManager:
    """Entry point for every authentication operation."""

    def __init__(
        self,
        storage: StorageManager,
        lockout: Optional[LockoutManager] = None,
        tokens: Optional[RecoveryTokenManager] = None,
    ):
        """Initialize AuthManager.

        Args:
            storage: Storage gateway shared by all collaborators.
            lockout: Lockout engine (built from ``storage`` if omitted).
            tokens: Recovery token lifecycle (built from ``storage`` if omitted).
        """
        self.storage = storage
        self.lockout = lockout or LockoutManager(storage)
        self.tokens = tokens or RecoveryTokenManager(storage)

    # --- Read accessors ---

    def get_session(self, session_id: str) -> Optional[Session]:
        return self.storage.get_session(session_id)

    def find_user_by_email(self, email: str) -> Optional[User]:
        return self.storage.find_user_by_email(email)

    # --- Login / logout ---

    def login(self, email: str, password: str) -> LoginResult:
        """Authenticate a user and open a session.

        Failed password checks count towards the account lockout. Unknown
        emails get the same message as wrong passwords.

        Args:
            email: Email as typed by the user.
            password: Password as typed by the user.

        Returns:
            LoginResult; on success it carries the new Session.
        """
        email_validation = validate_email(email)
        if not email_validation.valid:
            return LoginResult(success=False, message=email_validation.message)

        if not password:
            return LoginResult(success=False, message=PASSWORD_REQUIRED)

        user = self.storage.find_user_by_email(email)
        if user is None:
            return LoginResult(success=False, message=INVALID_CREDENTIALS)

        block_status = self.lockout.check_block(user)
        if block_status.blocked:
            return LoginResult(
                success=False,
                message=(
                    f"Cuenta bloqueada. Intente en {block_status.remaining_time} minutos"
                ),
            )

        # The block ran out since the last attempt
        if user.blocked_until:
            self.lockout.unlock(email)

        # Only compare here; strength rules apply when a password is set
        if not verify_password(password, user.password_hash):
            return self._failed_login(email)

        self.lockout.unlock(email)

        now = time_utils.utc_now()
        session = Session(
            session_id=generate_session_id(),
            user_id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            login_time=time_utils.to_iso(now),
            expires_at=time_utils.iso_after(minutes=SESSION_TIMEOUT_MINUTES, start=now),
        )
        self.storage.save_session(session)
        logger.info("User %s logged in", user.id)

        return LoginResult(
            success=True,
            message="Login exitoso! Redirigiendo...",
            session=session,
        )

    def _failed_login(self, email: str) -> LoginResult:
        remaining = self.lockout.increment_attempts(email)

        updated_user = self.storage.find_user_by_email(email)
        if updated_user and self.lockout.check_block(updated_user).blocked:
            return LoginResult(
                success=False,
                message=(
                    f"Cuenta bloqueada por {BLOCK_DURATION_MINUTES} minutos "
                    "debido a multiples intentos fallidos"
                ),
            )

        if remaining == 1:
            message = (
                f"{INVALID_CREDENTIALS}. ADVERTENCIA: 1 intento restante antes del bloqueo"
            )
        elif remaining <= 2:
            message = f"{INVALID_CREDENTIALS}. {remaining} intentos restantes"
        else:
            message = INVALID_CREDENTIALS
        return LoginResult(success=False, message=message)

    def logout(self, session_id: str) -> OperationResult:
        """Close a session. Unknown or expired ids are fine."""
        self.storage.clear_session(session_id)
        return OperationResult(success=True, message="Sesion cerrada")

    # --- Registration ---

    def register(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> RegisterResult:
        """Create a student account.

        Args:
            name: Display name, at least three characters after trimming.
            email: Email address; stored lower-cased.
            password: Password meeting the strength rules.
            confirm_password: Must equal ``password``.

        Returns:
            RegisterResult with the first failing check's message.
        """
        if not name or not name.strip():
            return RegisterResult(success=False, message="El nombre es requerido")

        if len(name.strip()) < MIN_NAME_LENGTH:
            return RegisterResult(
                success=False,
                message=f"El nombre debe tener al menos {MIN_NAME_LENGTH} caracteres",
            )

        email_validation = validate_email(email)
        if not email_validation.valid:
            return RegisterResult(success=False, message=email_validation.message)

        if self.storage.find_user_by_email(email):
            return RegisterResult(success=False, message="Este correo ya esta registrado")

        password_validation = validate_password(password)
        if not password_validation.valid:
            return RegisterResult(success=False, message=password_validation.message)

        if password != confirm_password:
            return RegisterResult(success=False, message=PASSWORDS_DO_NOT_MATCH)

        user = User(
            id=self.storage.next_user_id(),
            email=email.strip().lower(),
            password_hash=hash_password(password),
            name=name.strip(),
            role=UserRole.STUDENT,
            status=UserStatus.ACTIVE,
            login_attempts=0,
            blocked_until=None,
        )
        try:
            self.storage.add_user(user)
        except UserAlreadyExistsError:
            return RegisterResult(success=False, message="Este correo ya esta registrado")

        return RegisterResult(
            success=True, message="Registro exitoso! Ya puedes iniciar sesion"
        )

    # --- Password recovery ---

    def request_password_recovery(self, email: str) -> RecoveryResult:
        """Start a password reset.

        The message is the same whether or not the email is registered; only
        the ``token`` field tells the caller a link should be delivered.

        Args:
            email: Email the user typed.

        Returns:
            RecoveryResult with the token for registered emails.
        """
        email_validation = validate_email(email)
        if not email_validation.valid:
            return RecoveryResult(success=False, message=email_validation.message)

        token = self.tokens.issue(email)
        return RecoveryResult(
            success=True,
            message=RECOVERY_REQUESTED,
            token=token.token if token else None,
        )

    def validate_recovery_token(self, token: str) -> TokenValidationResult:
        return self.tokens.validate(token)

    def reset_password(
        self,
        token: str,
        new_password: str,
        confirm_password: str,
    ) -> ResetPasswordResult:
        """Set a new password using a recovery token.

        All checks run before anything is written. The password change, the
        lockout reset and the token consumption are committed together.

        Args:
            token: Recovery token from the reset link.
            new_password: New password meeting the strength rules.
            confirm_password: Must equal ``new_password``.

        Returns:
            ResetPasswordResult with the first failing check's message.
        """
        token_validation = self.tokens.validate(token)
        if not token_validation.valid:
            return ResetPasswordResult(success=False, message=token_validation.message)

        if new_password != confirm_password:
            return ResetPasswordResult(success=False, message=PASSWORDS_DO_NOT_MATCH)

        password_validation = validate_password(new_password)
        if not password_validation.valid:
            return ResetPasswordResult(
                success=False, message=password_validation.message
            )

        user = self.storage.find_user_by_email(token_validation.email or "")
        if user is None:
            return ResetPasswordResult(success=False, message="Usuario no encontrado")

        password_hash = hash_password(new_password)
        try:
            with self.storage.transaction():
                self.storage.update_user(
                    user.email,
                    password_hash=password_hash,
                    login_attempts=0,
                    blocked_until=None,
                )
                consumed = self.tokens.consume(token)
                if not consumed.valid:
                    raise TokenConsumptionError(consumed.message)
        except TokenConsumptionError as e:
            return ResetPasswordResult(success=False, message=e.message)

        logger.info("Password reset for user %s", user.id)
        return ResetPasswordResult(
            success=True, message="Contrasena actualizada exitosamente"
        )
