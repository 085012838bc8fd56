"""Tests for JWT session token issuance and validation."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from boxingcoach.config import Config
from boxingcoach.core.security.tokens import INSECURE_DEV_SECRET, TokenService
from boxingcoach.errors import ConfigurationError

ISSUED_AT = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)
WINDOW = timedelta(days=7)


class FakeClock:
    """Controllable replacement for the wall clock."""

    def __init__(self, current: datetime) -> None:
        self.current = current

    def __call__(self) -> datetime:
        return self.current


@pytest.fixture
def clock():
    return FakeClock(ISSUED_AT)


@pytest.fixture
def tokens(clock):
    return TokenService("s1-secret", validity=WINDOW, clock=clock)


def _altered(token: str, index: int) -> str:
    replacement = "A" if token[index] != "A" else "B"
    return token[:index] + replacement + token[index + 1 :]


class TestIssueValidate:
    def test_round_trip(self, tokens):
        """Test that a freshly issued token decodes to the same principal."""
        user_id = uuid4()
        claims = tokens.validate(tokens.issue(user_id, "a@b.com"))

        assert claims is not None
        assert claims.id == user_id
        assert claims.email == "a@b.com"

    def test_payload_is_standard_jwt(self, tokens):
        """Test that the token can be verified by any JWT implementation holding the secret."""
        user_id = uuid4()
        payload = jwt.decode(
            tokens.issue(user_id, "a@b.com"), "s1-secret", algorithms=["HS256"], options={"verify_exp": False}
        )

        assert payload["sub"] == str(user_id)
        assert payload["email"] == "a@b.com"
        assert payload["iat"] == int(ISSUED_AT.timestamp())
        assert payload["exp"] - payload["iat"] == int(WINDOW.total_seconds())

    def test_valid_just_before_expiry(self, tokens, clock):
        token = tokens.issue(uuid4(), "a@b.com")
        clock.current = ISSUED_AT + WINDOW - timedelta(seconds=1)
        assert tokens.validate(token) is not None

    def test_invalid_just_after_expiry(self, tokens, clock):
        token = tokens.issue(uuid4(), "a@b.com")
        clock.current = ISSUED_AT + WINDOW + timedelta(seconds=1)
        assert tokens.validate(token) is None

    def test_invalid_at_expiry_instant(self, tokens, clock):
        token = tokens.issue(uuid4(), "a@b.com")
        clock.current = ISSUED_AT + WINDOW
        assert tokens.validate(token) is None

    def test_every_altered_character_rejected(self, tokens):
        """Test that changing any character of the token invalidates it."""
        token = tokens.issue(uuid4(), "a@b.com")
        for index in range(len(token)):
            if token[index] == ".":
                continue
            assert tokens.validate(_altered(token, index)) is None, f"alteration at {index} accepted"

    def test_non_canonical_signature_rejected(self, tokens):
        """Test that flipping the unused low bits of the last signature character is rejected.

        Such a string still decodes to the original signature bytes.
        """
        alphabet = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
        for _ in range(20):
            token = tokens.issue(uuid4(), "a@b.com")
            last = alphabet.index(token[-1])
            for low_bits in (1, 2, 3):
                assert tokens.validate(token[:-1] + alphabet[last ^ low_bits]) is None

    def test_truncated_token_rejected(self, tokens):
        token = tokens.issue(uuid4(), "a@b.com")
        assert tokens.validate(token[:-1]) is None

    def test_other_secret_rejected(self, tokens, clock):
        token = tokens.issue(uuid4(), "a@b.com")
        other = TokenService("s2-secret", validity=WINDOW, clock=clock)
        assert other.validate(token) is None

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "a.b", "...."])
    def test_malformed_token_rejected(self, tokens, token):
        assert tokens.validate(token) is None

    def test_unsigned_token_rejected(self, tokens):
        """Test that a token with alg=none and no signature is rejected."""
        signed = tokens.issue(uuid4(), "a@b.com")
        header, payload, _ = signed.split(".")
        unsigned_header = "eyJhbGciOiJub25lIiwidHlwIjoiSldUIn0"  # {"alg":"none","typ":"JWT"}
        assert tokens.validate(f"{unsigned_header}.{payload}.") is None
        assert tokens.validate(f"{header}.{payload}.") is None

    def test_missing_claims_rejected(self, tokens):
        """Test that a correctly signed token without a principal is rejected."""
        exp = int((ISSUED_AT + WINDOW).timestamp())
        token = jwt.encode({"email": "a@b.com", "exp": exp}, "s1-secret", algorithm="HS256")
        assert tokens.validate(token) is None

    def test_missing_expiry_rejected(self, tokens):
        token = jwt.encode({"sub": str(uuid4()), "email": "a@b.com"}, "s1-secret", algorithm="HS256")
        assert tokens.validate(token) is None


class TestConstruction:
    def test_empty_secret_rejected(self):
        with pytest.raises(ConfigurationError):
            TokenService("")

    def test_asymmetric_algorithm_rejected(self):
        with pytest.raises(ConfigurationError):
            TokenService("secret", algorithm="RS256")

    def test_non_positive_validity_rejected(self):
        with pytest.raises(ConfigurationError):
            TokenService("secret", validity=timedelta(0))


class TestFromConfig:
    def _config(self, **overrides):
        values = {"database_url": "mongodb://localhost:27017/test", **overrides}
        return Config(_env_file=None, **values)

    def test_missing_secret_fatal_in_production(self):
        with pytest.raises(ConfigurationError):
            TokenService.from_config(self._config(environment="production"))

    def test_missing_secret_uses_insecure_default_in_development(self, clock):
        tokens = TokenService.from_config(self._config(environment="development"), clock=clock)
        token = tokens.issue(uuid4(), "a@b.com")

        assert TokenService(INSECURE_DEV_SECRET, clock=clock).validate(token) is not None

    def test_configured_secret_and_window_used(self, clock):
        config = self._config(jwt_secret="configured", token_validity_days=1)
        tokens = TokenService.from_config(config, clock=clock)
        token = tokens.issue(uuid4(), "a@b.com")

        assert tokens.validity == timedelta(days=1)
        assert TokenService("configured", clock=clock).validate(token) is not None
        clock.current = ISSUED_AT + timedelta(days=1, seconds=1)
        assert tokens.validate(token) is None
