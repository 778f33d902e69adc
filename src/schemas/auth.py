"""Request and response bodies of the authentication API."""

from typing import Optional

from pydantic import Field

from schemas.base import CamelModel
from schemas.results import OperationResult, PasswordRequirements
from schemas.session import Session


class LoginRequest(CamelModel):
    email: str = ""
    password: str = ""


class RegisterRequest(CamelModel):
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""


class PasswordRecoveryRequest(CamelModel):
    email: str = ""


class ResetPasswordRequest(CamelModel):
    token: str = ""
    new_password: str = ""
    confirm_password: str = ""


class PasswordCheckRequest(CamelModel):
    password: str = ""


class PasswordCheckResponse(CamelModel):
    valid: bool
    message: str
    requirements: PasswordRequirements


class PasswordRecoveryResponse(OperationResult):
    reset_link: Optional[str] = Field(
        default=None,
        description="Returned only when the link could not be emailed.",
    )


class SessionResponse(CamelModel):
    session: Session
    expires_at_display: str = Field(description="Expiry formatted for display.")
