"""Stateless JWT session tokens."""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

import structlog
from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from boxingcoach.config import Config
from boxingcoach.errors import ConfigurationError
from boxingcoach.utils import now

logger = structlog.get_logger(__name__)

# Used only when no secret is configured outside production.
INSECURE_DEV_SECRET = "insecure-development-secret-do-not-use-in-production"  # noqa: S105

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


class TokenClaims(BaseModel):
    """Principal identity decoded from a valid session token."""

    id: UUID = Field(..., description="Principal ID")
    email: str = Field(..., description="Principal email at token issuance time")


class TokenService:
    """Issues and validates signed, time-limited bearer tokens.

    Tokens are standard HMAC-signed JWTs carrying ``sub``, ``email``, ``iat``
    and ``exp``. Nothing is stored server-side, so a token stays valid until it
    expires or the secret changes.
    """

    def __init__(
        self,
        secret: str,
        validity: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = now,
    ) -> None:
        if not secret:
            raise ConfigurationError("Token signing secret must not be empty")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(f"Unsupported token algorithm '{algorithm}'")
        if validity <= timedelta(0):
            raise ConfigurationError("Token validity window must be positive")
        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock
        self.validity = validity

    @classmethod
    def from_config(cls, config: Config, clock: Callable[[], datetime] = now) -> "TokenService":
        """Build the service from startup configuration.

        A missing secret is fatal in production. In development an insecure
        built-in secret is used and a warning is logged.
        """
        secret = config.jwt_secret
        if not secret:
            if not config.is_development:
                raise ConfigurationError("BOXINGCOACH_JWT_SECRET is required in production")
            logger.warning("insecure_jwt_secret", environment=config.environment)
            secret = INSECURE_DEV_SECRET
        return cls(
            secret,
            validity=timedelta(days=config.token_validity_days),
            algorithm=config.jwt_algorithm,
            clock=clock,
        )

    def issue(self, principal_id: UUID, email: str) -> str:
        """Create a signed token for the principal, valid for the configured window."""
        issued_at = int(self._clock().timestamp())
        payload: dict[str, Any] = {
            "sub": str(principal_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + int(self.validity.total_seconds()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def validate(self, token: str) -> TokenClaims | None:
        """Decode a token, returning None if it is forged, malformed or expired."""
        if not _has_canonical_signature(token):
            return None
        try:
            # Expiry is checked below against the injected clock
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm], options={"verify_exp": False})
        except JWTError:
            return None

        expires_at = payload.get("exp")
        if not isinstance(expires_at, int) or self._clock().timestamp() >= expires_at:
            return None

        try:
            return TokenClaims(id=payload.get("sub"), email=payload.get("email"))
        except PydanticValidationError:
            return None


def _has_canonical_signature(token: str) -> bool:
    """Check that the signature segment is the exact base64url encoding of its bytes.

    Base64url decoding ignores the unused low bits of the final character, so
    several strings decode to the same signature. Only the canonical one is valid.
    """
    segments = token.split(".")
    if len(segments) != 3:  # noqa: PLR2004
        return False
    signature = segments[2]
    try:
        decoded = base64url_decode(signature.encode("ascii"))
    except ValueError:
        return False
    return base64url_encode(decoded).decode("ascii") == signature
