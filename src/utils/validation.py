"""Input validation for emails and passwords.

Pure functions; they never touch storage.
"""

import re

from config import MIN_PASSWORD_LENGTH, PASSWORD_SPECIAL_CHARACTERS
from schemas.results import (
    PasswordRequirements,
    PasswordValidationResult,
    ValidationResult,
)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_WHITESPACE = re.compile(r"\s")
_UPPERCASE = re.compile(r"[A-Z]")
_LOWERCASE = re.compile(r"[a-z]")
_SPECIAL = re.compile(f"[{re.escape(PASSWORD_SPECIAL_CHARACTERS)}]")

INVALID_EMAIL_FORMAT = "Formato de email invalido"
PASSWORD_REQUIRED = "El campo contrasena es requerido"


def validate_email(email: str) -> ValidationResult:
    """Check the shape of an email address.

    Args:
        email: Raw user input.

    Returns:
        ValidationResult with a user-facing message when invalid.
    """
    if not email or not email.strip():
        return ValidationResult(valid=False, message="El campo email es requerido")

    if _WHITESPACE.search(email):
        return ValidationResult(
            valid=False, message="El email no puede contener espacios"
        )

    if not EMAIL_PATTERN.fullmatch(email):
        return ValidationResult(valid=False, message=INVALID_EMAIL_FORMAT)

    if email.count("@") > 1 or email.startswith("@"):
        return ValidationResult(valid=False, message=INVALID_EMAIL_FORMAT)

    domain = email.split("@", 1)[1]
    if "." not in domain:
        return ValidationResult(valid=False, message=INVALID_EMAIL_FORMAT)

    return ValidationResult(valid=True, message="")


def get_password_requirements(password: str) -> PasswordRequirements:
    """Evaluate every password rule independently (live checklist)."""
    password = password or ""
    return PasswordRequirements(
        length=len(password) >= MIN_PASSWORD_LENGTH,
        uppercase=bool(_UPPERCASE.search(password)),
        lowercase=bool(_LOWERCASE.search(password)),
        special=bool(_SPECIAL.search(password)),
    )


def validate_password(password: str) -> PasswordValidationResult:
    """Check password strength.

    Rules are applied in a fixed order (required, length, uppercase,
    lowercase, special character) and the first failing rule decides the
    message. ``details`` always carries the result of all four checks.

    Args:
        password: Candidate password.

    Returns:
        PasswordValidationResult.
    """
    details = get_password_requirements(password)

    if not password or not password.strip():
        message = PASSWORD_REQUIRED
    elif not details.length:
        message = (
            f"La contrasena debe tener al menos {MIN_PASSWORD_LENGTH} caracteres"
        )
    elif not details.uppercase:
        message = "La contrasena debe contener al menos una mayuscula"
    elif not details.lowercase:
        message = "La contrasena debe contener al menos una minuscula"
    elif not details.special:
        message = "La contrasena debe contener al menos un caracter especial"
    else:
        return PasswordValidationResult(valid=True, message="", details=details)

    return PasswordValidationResult(valid=False, message=message, details=details)
