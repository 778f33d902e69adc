"""Password recovery tokens.

Tokens are single use and expire TOKEN_EXPIRY_HOURS after issue. Only the
most recent token of an email is kept.
"""

import logging
from typing import Optional

from config import TOKEN_EXPIRY_HOURS
from core.exceptions import TokenConsumptionError
from schemas.recovery_token import RecoveryToken
from schemas.results import TokenFailure, TokenValidationResult
from utils import time_utils
from utils.security import generate_token
from utils.storage_manager import StorageManager

logger = logging.getLogger(__name__)

TOKEN_FAILURE_MESSAGES = {
    TokenFailure.MISSING: "Token no proporcionado",
    TokenFailure.NOT_FOUND: "Enlace invalido",
    TokenFailure.ALREADY_USED: "Este enlace ya fue utilizado",
    TokenFailure.EXPIRED: "El enlace ha expirado",
}


def _failure(reason: TokenFailure) -> TokenValidationResult:
    return TokenValidationResult(
        valid=False, message=TOKEN_FAILURE_MESSAGES[reason], reason=reason
    )


class RecoveryTokenManager:
    """Issues, validates and consumes recovery tokens."""

    def __init__(self, storage: StorageManager):
        self.storage = storage

    def issue(self, email: str) -> Optional[RecoveryToken]:
        """Create a token for ``email`` if it belongs to a registered user.

        Any earlier token of that email is discarded.

        Args:
            email: Email the reset was requested for.

        Returns:
            The new RecoveryToken, or None for unknown emails.
        """
        user = self.storage.find_user_by_email(email)
        if user is None:
            return None

        now = time_utils.utc_now()
        token = RecoveryToken(
            token=generate_token(),
            email=email.lower(),
            created_at=time_utils.to_iso(now),
            expires_at=time_utils.iso_after(hours=TOKEN_EXPIRY_HOURS, start=now),
            used=False,
        )
        self.storage.replace_tokens_for_email(email, token)
        logger.info("Issued recovery token for user %s", user.id)
        return token

    def validate(self, token: str) -> TokenValidationResult:
        """Check a token without changing it.

        Args:
            token: Token from the reset link.

        Returns:
            TokenValidationResult carrying the bound email when valid.
        """
        if not token:
            return _failure(TokenFailure.MISSING)

        record = self.storage.find_token(token)
        if record is None:
            return _failure(TokenFailure.NOT_FOUND)
        if record.used:
            return _failure(TokenFailure.ALREADY_USED)
        if time_utils.has_expired(record.expires_at, strict=True):
            return _failure(TokenFailure.EXPIRED)

        return TokenValidationResult(valid=True, message="", email=record.email)

    def consume(self, token: str) -> TokenValidationResult:
        """Validate ``token`` and mark it as used.

        Returns:
            The validation result; a valid result means this call used the
            token.

        Raises:
            TokenConsumptionError: If the token passed validation but another
                request used it first.
        """
        result = self.validate(token)
        if not result.valid:
            return result

        if not self.storage.mark_token_used(token):
            raise TokenConsumptionError(
                TOKEN_FAILURE_MESSAGES[TokenFailure.ALREADY_USED]
            )
        logger.info("Consumed a recovery token")
        return result
