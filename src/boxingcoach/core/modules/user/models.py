from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from boxingcoach.core.db import MongoModel
from boxingcoach.utils import now


class User(MongoModel):
    """User domain model with credentials."""

    email: str
    full_name: str
    password_hash: str  # bcrypt hash
    created_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address used to log in")
    full_name: str = Field(..., description="Display name")
    created_at: datetime = Field(..., description="Account creation time")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, email=user.email, full_name=user.full_name, created_at=user.created_at)
