"""Authentication routes.

This module exposes the authentication core over HTTP. Handlers answer with
the core's result objects (``success`` + ``message``) and set the status code
from the outcome; the core itself never raises for expected failures.

Sessions are opaque ids sent back by the client as a Bearer token.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.dependencies import AuthManagerDep, EmailNotifierDep
from schemas.auth import (
    LoginRequest,
    PasswordCheckRequest,
    PasswordCheckResponse,
    PasswordRecoveryRequest,
    PasswordRecoveryResponse,
    RegisterRequest,
    ResetPasswordRequest,
    SessionResponse,
)
from schemas.results import (
    LoginResult,
    OperationResult,
    RegisterResult,
    ResetPasswordResult,
    TokenValidationResult,
)
from schemas.session import Session
from schemas.user import PublicUser, UserRole
from utils.notification_manager import build_reset_link
from utils.time_utils import format_datetime
from utils.validation import get_password_requirements, validate_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# HTTP Bearer token security; missing headers are answered with 401 below
security = HTTPBearer(auto_error=False)


def get_current_session(
    auth_manager: AuthManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Session:
    """Resolve the Bearer session id into a live session.

    Args:
        auth_manager: Injected AuthManager instance.
        credentials: HTTP Bearer credentials carrying the session id.

    Returns:
        Current Session.

    Raises:
        HTTPException: If no session id was sent or the session is gone.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    session = auth_manager.get_session(credentials.credentials)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired or invalid",
        )
    return session


@router.post("/login", summary="Iniciar sesion")
def login(
    req: LoginRequest,
    response: Response,
    auth_manager: AuthManagerDep,
) -> LoginResult:
    """Login with email and password.

    Returns:
        LoginResult; ``session.sessionId`` is the Bearer token for later calls.
    """
    result = auth_manager.login(req.email, req.password)
    if not result.success:
        response.status_code = status.HTTP_401_UNAUTHORIZED
    return result


@router.post("/logout", summary="Cerrar sesion")
def logout(
    auth_manager: AuthManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> OperationResult:
    """Close the caller's session. Always succeeds."""
    session_id = credentials.credentials if credentials else ""
    return auth_manager.logout(session_id)


@router.post("/register", summary="Registro de usuario")
def register(
    req: RegisterRequest,
    response: Response,
    auth_manager: AuthManagerDep,
) -> RegisterResult:
    """Register a new student account."""
    result = auth_manager.register(
        req.name, req.email, req.password, req.confirm_password
    )
    response.status_code = (
        status.HTTP_201_CREATED if result.success else status.HTTP_400_BAD_REQUEST
    )
    return result


@router.post("/password-requirements", summary="Comprobar contrasena")
def check_password(req: PasswordCheckRequest) -> PasswordCheckResponse:
    """Evaluate a candidate password for the live requirement checklist."""
    validation = validate_password(req.password)
    return PasswordCheckResponse(
        valid=validation.valid,
        message=validation.message,
        requirements=get_password_requirements(req.password),
    )


@router.post("/password-recovery", summary="Solicitar recuperacion")
def request_password_recovery(
    req: PasswordRecoveryRequest,
    response: Response,
    auth_manager: AuthManagerDep,
    notifier: EmailNotifierDep,
) -> PasswordRecoveryResponse:
    """Start a password reset and try to email the link.

    The answer looks the same for registered and unknown emails. When the
    email cannot be delivered the link is returned in ``resetLink`` so the
    front-end can show it directly.
    """
    result = auth_manager.request_password_recovery(req.email)
    if not result.success:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return PasswordRecoveryResponse(success=False, message=result.message)

    reset_link = None
    if result.token:
        link = build_reset_link(result.token)
        user = auth_manager.find_user_by_email(req.email)
        notification = notifier.send_recovery_email(
            to_email=req.email.lower(),
            to_name=user.name if user else "",
            reset_link=link,
        )
        if not notification.success:
            reset_link = link

    return PasswordRecoveryResponse(
        success=True,
        message=result.message,
        reset_link=reset_link,
    )


@router.get("/password-recovery/{token}", summary="Validar enlace")
def validate_recovery_token(
    token: str,
    response: Response,
    auth_manager: AuthManagerDep,
) -> TokenValidationResult:
    """Check a reset link before showing the new-password form."""
    result = auth_manager.validate_recovery_token(token)
    if not result.valid:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return result


@router.post("/reset-password", summary="Restablecer contrasena")
def reset_password(
    req: ResetPasswordRequest,
    response: Response,
    auth_manager: AuthManagerDep,
) -> ResetPasswordResult:
    """Set a new password with a recovery token."""
    result = auth_manager.reset_password(
        req.token, req.new_password, req.confirm_password
    )
    if not result.success:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return result


@router.get("/session", summary="Sesion actual")
def get_session(
    current_session: Session = Depends(get_current_session),
) -> SessionResponse:
    """Return the caller's session with a display-ready expiry."""
    return SessionResponse(
        session=current_session,
        expires_at_display=format_datetime(current_session.expires_at),
    )


@router.get("/users", summary="Buscar usuario por email")
def find_user(
    auth_manager: AuthManagerDep,
    email: str = Query(..., description="Email to look up (case-insensitive)."),
    current_session: Session = Depends(get_current_session),
) -> PublicUser:
    """Look up a user by email.

    Permission requirements:
    - Administrador only

    Raises:
        HTTPException: If permission denied or user not found.
    """
    if current_session.role != UserRole.ADMINISTRATOR:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can look up users.",
        )

    user = auth_manager.find_user_by_email(email)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found.",
        )
    return user.to_public()
