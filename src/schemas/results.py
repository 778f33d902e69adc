"""Result objects returned by the authentication core.

Every caller-facing operation answers with one of these models instead of
raising for expected failures.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from schemas.base import CamelModel
from schemas.session import Session


class ValidationResult(CamelModel):
    valid: bool
    message: str = ""


class PasswordRequirements(CamelModel):
    length: bool
    uppercase: bool
    lowercase: bool
    special: bool


class PasswordValidationResult(ValidationResult):
    details: PasswordRequirements = Field(
        description="All four checks, independent of the short-circuited message."
    )


class BlockStatus(CamelModel):
    blocked: bool
    remaining_time: int = Field(default=0, description="Minutes, rounded up.")


class TokenFailure(str, Enum):
    MISSING = "missing"
    NOT_FOUND = "not_found"
    ALREADY_USED = "already_used"
    EXPIRED = "expired"


class TokenValidationResult(ValidationResult):
    email: Optional[str] = None
    reason: Optional[TokenFailure] = None


class OperationResult(CamelModel):
    success: bool
    message: str


class LoginResult(OperationResult):
    session: Optional[Session] = None


class RegisterResult(OperationResult):
    pass


class RecoveryResult(OperationResult):
    token: Optional[str] = Field(
        default=None,
        description="Only set when the email belongs to a registered user.",
    )


class ResetPasswordResult(OperationResult):
    pass


class NotificationResult(OperationResult):
    pass
