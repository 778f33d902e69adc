"""Configuration module for the UniPortal authentication service.

This module provides centralized configuration management, including directory
paths, API server settings, persistence and notification settings. Deployment
values can be overridden via environment variables; the authentication policy
constants at the bottom are fixed.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# --- Persistence Configuration ---

DEFAULT_DATABASE_URL = f"sqlite:///{DATA_DIR}/uniportal.db"
DATABASE_URL: str = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

# "database" uses DATABASE_URL; "none" runs without a backend (empty reads,
# ignored writes)
STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "database").strip().lower()

# Logical storage keys, one per table
STORAGE_KEYS: Dict[str, str] = {
    "users": "uniportal_users",
    "tokens": "uniportal_tokens",
    "session": "uniportal_session",
}

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# Public URL of the portal front-end, used to build password reset links
APP_BASE_URL: str = os.getenv("APP_BASE_URL", "http://localhost:3000").rstrip("/")

# Enables POST /api/admin/reset-database (demo data reset)
ENABLE_DATABASE_RESET: bool = (
    os.getenv("ENABLE_DATABASE_RESET", "false").lower() == "true"
)

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Security Configuration ---

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# --- Notification Configuration (EmailJS) ---

EMAILJS_API_URL: str = os.getenv(
    "EMAILJS_API_URL", "https://api.emailjs.com/api/v1.0/email/send"
)
EMAILJS_SERVICE_ID: Optional[str] = os.getenv("EMAILJS_SERVICE_ID")
EMAILJS_TEMPLATE_ID: Optional[str] = os.getenv("EMAILJS_TEMPLATE_ID")
EMAILJS_PUBLIC_KEY: Optional[str] = os.getenv("EMAILJS_PUBLIC_KEY")
# Optional private key ("accessToken") for strict-mode EmailJS accounts
EMAILJS_PRIVATE_KEY: Optional[str] = os.getenv("EMAILJS_PRIVATE_KEY")
EMAILJS_TIMEOUT_SECONDS: float = float(os.getenv("EMAILJS_TIMEOUT_SECONDS", "10"))

# --- Authentication Policy (fixed) ---

MAX_LOGIN_ATTEMPTS: int = 4
BLOCK_DURATION_MINUTES: int = 30
TOKEN_EXPIRY_HOURS: int = 24
MIN_PASSWORD_LENGTH: int = 10
SESSION_TIMEOUT_MINUTES: int = 30

# Recovery tokens
TOKEN_LENGTH: int = 32
TOKEN_ALPHABET: str = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
)

# Characters accepted as "special" by the password strength check
PASSWORD_SPECIAL_CHARACTERS: str = "!@#$%^&*()_+-=[]{}|;:',.<>?"
