"""Input validation and verification-code helpers."""

import re
import secrets
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d).{6,}$")
PASSWORD_REQUIREMENTS = "Password must be at least 6 characters and contain both letters and numbers"

_UNSAFE_CHARS = re.compile(r"[<>\"'%;()&+]")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip()


def validate_email(email: Optional[str]) -> bool:
    if not email or not email.strip():
        return False
    return EMAIL_PATTERN.fullmatch(email.strip()) is not None


def validate_password(password: Optional[str]) -> bool:
    if password is None or len(password) < 6:
        return False
    return PASSWORD_PATTERN.fullmatch(password) is not None


def generate_verification_code() -> str:
    """Six random digits, 100000-999999."""
    return str(100000 + secrets.randbelow(900000))


def sanitize_input(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return _UNSAFE_CHARS.sub("", value)
