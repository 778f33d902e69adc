"""Conversion between database models and pydantic schemas."""

from models.recovery_token import RecoveryTokenModel
from models.session import SessionModel
from models.user import UserModel
from schemas.recovery_token import RecoveryToken
from schemas.session import Session
from schemas.user import User, UserRole, UserStatus


def user_to_model(user: User) -> UserModel:
    return UserModel(
        id=user.id,
        email=user.email,
        password_hash=user.password_hash,
        name=user.name,
        role=user.role.value,
        status=user.status.value,
        login_attempts=user.login_attempts,
        blocked_until=user.blocked_until,
    )


def model_to_user(model: UserModel) -> User:
    return User(
        id=model.id,
        email=model.email,
        password_hash=model.password_hash,
        name=model.name,
        role=UserRole(model.role),
        status=UserStatus(model.status),
        login_attempts=model.login_attempts or 0,
        blocked_until=model.blocked_until,
    )


def token_to_model(token: RecoveryToken) -> RecoveryTokenModel:
    return RecoveryTokenModel(
        token=token.token,
        email=token.email,
        created_at=token.created_at,
        expires_at=token.expires_at,
        used=token.used,
    )


def model_to_token(model: RecoveryTokenModel) -> RecoveryToken:
    return RecoveryToken(
        token=model.token,
        email=model.email,
        created_at=model.created_at,
        expires_at=model.expires_at,
        used=bool(model.used),
    )


def session_to_model(session: Session) -> SessionModel:
    return SessionModel(
        session_id=session.session_id,
        user_id=session.user_id,
        email=session.email,
        name=session.name,
        role=session.role.value,
        login_time=session.login_time,
        expires_at=session.expires_at,
    )


def model_to_session(model: SessionModel) -> Session:
    return Session(
        session_id=model.session_id,
        user_id=model.user_id,
        email=model.email,
        name=model.name,
        role=UserRole(model.role),
        login_time=model.login_time,
        expires_at=model.expires_at,
    )
