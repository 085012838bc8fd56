from datetime import datetime
from uuid import UUID

from pydantic import Field

from boxingcoach.core.db import MongoModel
from boxingcoach.utils import now


class TrainingSession(MongoModel):
    """A single recorded training session, owned by one user.

    Indexed on (user_id, created_at). Never modified after creation.
    """

    user_id: UUID
    technique: str
    duration_seconds: float
    score: float = 0
    velocity: float = 0
    accuracy: float = 0
    created_at: datetime = Field(default_factory=now)
