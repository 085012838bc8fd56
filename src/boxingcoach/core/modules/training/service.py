import math
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from boxingcoach.core.core import Service
from boxingcoach.core.modules.stats.averages import best_score, running_average
from boxingcoach.core.modules.stats.models import TechniqueStats
from boxingcoach.core.modules.training.models import TrainingSession
from boxingcoach.core.pagination import DEFAULT_PAGE_LIMIT, PaginationResult
from boxingcoach.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class TrainingService(Service):
    """Records training sessions and keeps the owner's aggregates current."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("training_sessions")

    async def on_start(self) -> None:
        """Create indexes for per-user listing."""
        await self._collection.create_index([("user_id", 1), ("created_at", -1)])

    async def record_session(
        self,
        user_id: UUID,
        technique: str,
        duration_seconds: float,
        score: float = 0,
        velocity: float = 0,
        accuracy: float = 0,
    ) -> TrainingSession:
        """Store a training session and update the user's aggregate stats."""
        technique = technique.strip()
        if not technique:
            raise ValidationError("Technique and duration are required")
        if not all(math.isfinite(value) for value in (duration_seconds, score, velocity, accuracy)):
            raise ValidationError("Duration and metrics must be finite numbers")
        if duration_seconds < 0:
            raise ValidationError("Duration cannot be negative")

        session = TrainingSession(
            user_id=user_id,
            technique=technique,
            duration_seconds=duration_seconds,
            score=score,
            velocity=velocity,
            accuracy=accuracy,
        )
        await self._collection.insert_one(session.to_mongo())
        await self.core.services.stats.record_session(user_id, duration_seconds, score)
        logger.debug("training_session_recorded", user_id=user_id, session_id=session.id, technique=technique)
        return session

    async def list_sessions(
        self, user_id: UUID, limit: int = DEFAULT_PAGE_LIMIT, offset: int = 0
    ) -> PaginationResult[TrainingSession]:
        """Get paginated sessions of a user, newest first."""
        query = {"user_id": user_id}

        total = await self._collection.count_documents(query)
        cursor = self._collection.find(query).sort("created_at", -1).skip(offset).limit(limit)
        items = await TrainingSession.list_cursor(cursor)

        return PaginationResult(items=items, total=total, limit=limit, offset=offset)

    async def get_session(self, user_id: UUID, session_id: UUID) -> TrainingSession:
        """Get a session by ID. Sessions of other users are reported as not found."""
        doc = await self._collection.find_one({"_id": session_id, "user_id": user_id})
        if doc is None:
            raise NotFoundError("Session not found")
        return TrainingSession.from_mongo(doc)

    async def get_technique_stats(self, user_id: UUID) -> list[TechniqueStats]:
        """Aggregate a user's sessions per technique, ordered by technique label."""
        sessions = await TrainingSession.list_cursor(self._collection.find({"user_id": user_id}).sort("created_at", 1))

        by_technique: dict[str, TechniqueStats] = {}
        for session in sessions:
            current = by_technique.get(session.technique)
            if current is None:
                current = TechniqueStats(
                    technique=session.technique, sessions=0, total_duration=0, average_score=0, best_score=0
                )
            by_technique[session.technique] = TechniqueStats(
                technique=session.technique,
                sessions=current.sessions + 1,
                total_duration=current.total_duration + session.duration_seconds,
                average_score=running_average(current.average_score, current.sessions, session.score),
                best_score=best_score(current.best_score, session.score),
            )

        return [by_technique[name] for name in sorted(by_technique)]
