from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from boxingcoach.core.core import Service
from boxingcoach.core.modules.user.models import User
from boxingcoach.core.modules.user.validators import normalize_email, validate_full_name, validate_password
from boxingcoach.errors import DuplicateIdentityError, InvalidCredentialsError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Manages user accounts and their credentials."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def get_user(self, user_id: UUID) -> User:
        """Get user by ID."""
        doc = await self._collection.find_one({"_id": user_id})
        if doc is None:
            raise NotFoundError("User not found")
        return User.from_mongo(doc)

    async def find_by_email(self, email: str) -> User | None:
        doc = await self._collection.find_one({"email": email})
        return None if doc is None else User.from_mongo(doc)

    async def create_user(self, email: str, password: str, full_name: str | None = None) -> User:
        """Create user with hashed password.

        The display name defaults to the local part of the email.
        """
        email = normalize_email(email)
        validate_password(password)
        name = validate_full_name(full_name) if full_name else email.split("@")[0]

        password_hash = self.core.hasher.hash(password)
        user = User(email=email, full_name=name, password_hash=password_hash)
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise DuplicateIdentityError from e
        logger.info("user_created", user_id=user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user owning these credentials, or raise InvalidCredentialsError."""
        if not email or not password:
            raise ValidationError("Email and password are required")
        user = await self.find_by_email(email.strip().lower())
        if user is None:
            verified = self.core.hasher.verify_decoy(password)
        else:
            verified = self.core.hasher.verify(password, user.password_hash)
        if not verified:
            logger.info("login_failed")
            raise InvalidCredentialsError
        return user

    async def update_full_name(self, user_id: UUID, full_name: str) -> User:
        """Change the display name of a user."""
        name = validate_full_name(full_name)
        result = await self._collection.update_one({"_id": user_id}, {"$set": {"full_name": name}})
        if result.matched_count == 0:
            raise NotFoundError("User not found")
        return await self.get_user(user_id)

    async def change_password(self, user_id: UUID, old_password: str, new_password: str) -> None:
        """Change user password after verifying current password.

        Tokens issued before the change stay valid until they expire.
        """
        user = await self.get_user(user_id)
        if not self.core.hasher.verify(old_password, user.password_hash):
            raise ValidationError("Invalid current password")

        validate_password(new_password)
        password_hash = self.core.hasher.hash(new_password)
        await self._collection.update_one({"_id": user_id}, {"$set": {"password_hash": password_hash}})

    async def on_start(self) -> None:
        """Create the unique email index."""
        await self._collection.create_index([("email", 1)], unique=True)
        logger.debug("user_service_started")
