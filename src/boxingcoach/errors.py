from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Login email/password pair does not match.

    The message is the same for an unknown email and a wrong password.
    """

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class MissingCredentialError(AuthenticationError):
    """Raised when a protected request carries no bearer token."""

    def __init__(self, message: str = "Access token required") -> None:
        super().__init__(message)


class InvalidOrExpiredCredentialError(AuthenticationError):
    """Raised when a bearer token fails signature, structure or expiry checks."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class DuplicateIdentityError(UserError):
    """Raised when signing up with an email that is already registered."""

    def __init__(self, message: str = "Email already exists") -> None:
        super().__init__(message)


class HashingFailure(Exception):  # noqa: N818
    """Password hashing failed for reasons other than a password mismatch."""


class ConfigurationError(Exception):
    """Missing or malformed configuration detected at startup."""
