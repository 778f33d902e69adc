"""Session schema definitions.

A Session is the proof that a user authenticated. User fields are copied at
login time so reading a session never touches the users table.
"""

from pydantic import Field

from schemas.base import CamelModel
from schemas.user import UserRole


class Session(CamelModel):
    session_id: str = Field(
        description="Opaque identifier the caller presents on later requests.",
        frozen=True,
    )
    user_id: int
    email: str
    name: str
    role: UserRole
    login_time: str = Field(description="ISO timestamp of the login.")
    expires_at: str = Field(
        description="ISO timestamp; the session is absent once this instant has passed."
    )
