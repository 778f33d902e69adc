"""Recovery token schema definitions."""

from pydantic import Field

from schemas.base import CamelModel


class RecoveryToken(CamelModel):
    token: str = Field(description="Random alphanumeric token.")
    email: str = Field(description="Owner email, lower-cased.")
    created_at: str
    expires_at: str
    used: bool = Field(
        default=False,
        description="Set once the token reset a password; never unset.",
    )
