"""User schema definitions."""

from enum import Enum
from typing import Optional

from pydantic import Field

from schemas.base import CamelModel


class UserRole(str, Enum):
    STUDENT = "Estudiante"
    TEACHER = "Profesor"
    ADMINISTRATOR = "Administrador"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PublicUser(CamelModel):
    """User data that is safe to hand to callers."""

    id: int = Field(description="Numeric user id, assigned as max(id) + 1.")
    email: str = Field(description="Lower-cased email address.")
    name: str = Field(description="Display name.")
    role: UserRole = Field(default=UserRole.STUDENT)
    status: UserStatus = Field(default=UserStatus.ACTIVE)
    login_attempts: int = Field(
        default=0,
        ge=0,
        description="Consecutive failed login attempts.",
    )
    blocked_until: Optional[str] = Field(
        default=None,
        description="ISO timestamp until which login is refused.",
    )


class User(PublicUser):
    """Full user record as stored."""

    password_hash: str = Field(description="Bcrypt hash of the password.")

    def to_public(self) -> PublicUser:
        return PublicUser.model_validate(self.model_dump(exclude={"password_hash"}))
