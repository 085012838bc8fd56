import re

from boxingcoach.errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # bcrypt ignores anything beyond 72 bytes


def normalize_email(email: str) -> str:
    """Validate email format and return it stripped and lowercased."""
    normalized = email.strip().lower()
    if not normalized:
        raise ValidationError("Email and password are required")
    if not EMAIL_RE.fullmatch(normalized):
        raise ValidationError("Invalid email address")
    return normalized


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - Minimum length of 6 characters
    - At most 72 bytes when UTF-8 encoded

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if not password:
        raise ValidationError("Email and password are required")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def validate_full_name(full_name: str) -> str:
    """Return the trimmed display name, rejecting empty or overlong values."""
    name = full_name.strip()
    if not name:
        raise ValidationError("Full name cannot be empty")
    if len(name) > 100:
        raise ValidationError("Full name must be at most 100 characters")
    return name
