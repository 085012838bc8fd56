"""Password hashing with bcrypt."""

from functools import cached_property

import bcrypt

from boxingcoach.errors import ConfigurationError, HashingFailure

DEFAULT_ROUNDS = 10
MIN_ROUNDS = 4
MAX_ROUNDS = 31


class PasswordHasher:
    """Salted, deliberately slow one-way hashing of passwords.

    The work factor is fixed at construction. Hashes carry their own salt and
    cost, so hashes created with a different work factor still verify.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
            raise ConfigurationError(f"bcrypt rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}, got {rounds}")
        self.rounds = rounds

    @cached_property
    def _decoy_hash(self) -> str:
        return self.hash("decoy-password-for-unknown-accounts")

    def hash(self, password: str) -> str:
        """Hash a plaintext password. Raises HashingFailure if bcrypt fails."""
        try:
            return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self.rounds)).decode("utf-8")
        except (TypeError, ValueError, AttributeError) as e:
            raise HashingFailure("Failed to hash password") from e

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plaintext password against a stored hash.

        Returns False for a mismatch or a malformed hash string. A stored value
        that is not a string at all indicates corrupted storage and raises
        HashingFailure.
        """
        if not isinstance(password_hash, str):
            raise HashingFailure("Stored password hash is corrupted")
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            return False

    def verify_decoy(self, password: str) -> bool:
        """Spend the cost of a real verification when there is no stored hash.

        Keeps login timing the same for unknown and registered emails. Always False.
        """
        self.verify(password, self._decoy_hash)
        return False
