from uuid import UUID

from pydantic import BaseModel, Field

from boxingcoach.core.db import MongoModel


class UserStats(MongoModel):
    """Running training totals for one user.

    Indexed on user_id - unique. Only written by the training-session insert path.
    """

    user_id: UUID
    total_sessions: int = 0
    total_training_time: float = 0  # seconds
    average_score: float = 0
    best_score: float | None = None


class TechniqueStats(BaseModel):
    """Aggregates for a single technique."""

    technique: str = Field(..., description="Technique label")
    sessions: int = Field(..., description="Number of recorded sessions", ge=0)
    total_duration: float = Field(..., description="Total duration in seconds", ge=0)
    average_score: float = Field(..., description="Average score")
    best_score: float = Field(..., description="Highest score")
