from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from boxingcoach.core.core import Service
from boxingcoach.core.modules.stats.averages import best_score, running_average
from boxingcoach.core.modules.stats.models import UserStats
from boxingcoach.errors import NotFoundError

logger = structlog.get_logger(__name__)

MAX_UPDATE_ATTEMPTS = 10


class StatsService(Service):
    """Maintains per-user aggregate training statistics."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("user_stats")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("user_id", 1)], unique=True)

    async def create_stats(self, user_id: UUID) -> UserStats:
        """Create an empty stats record, or return the existing one."""
        stats = UserStats(user_id=user_id)
        try:
            await self._collection.insert_one(stats.to_mongo())
        except DuplicateKeyError:
            return await self.get_stats(user_id)
        return stats

    async def get_stats(self, user_id: UUID) -> UserStats:
        doc = await self._collection.find_one({"user_id": user_id})
        if doc is None:
            raise NotFoundError("User stats not found")
        return UserStats.from_mongo(doc)

    async def record_session(self, user_id: UUID, duration_seconds: float, score: float) -> UserStats:
        """Fold one training session into the user's aggregates.

        Uses optimistic compare-and-swap on ``total_sessions``: the write only
        applies if no other session was recorded since the read, otherwise the
        read-compute-write cycle is repeated.
        """
        for attempt in range(MAX_UPDATE_ATTEMPTS):
            doc = await self._collection.find_one({"user_id": user_id})
            current = UserStats.from_mongo(doc) if doc is not None else await self.create_stats(user_id)

            updated = current.model_copy(
                update={
                    "total_sessions": current.total_sessions + 1,
                    "total_training_time": current.total_training_time + duration_seconds,
                    "average_score": running_average(current.average_score, current.total_sessions, score),
                    "best_score": best_score(current.best_score, score),
                }
            )
            result = await self._collection.update_one(
                {"user_id": user_id, "total_sessions": current.total_sessions},
                {
                    "$set": {
                        "total_sessions": updated.total_sessions,
                        "total_training_time": updated.total_training_time,
                        "average_score": updated.average_score,
                        "best_score": updated.best_score,
                    }
                },
            )
            if result.matched_count == 1:
                return updated
            logger.debug("stats_update_conflict", user_id=user_id, attempt=attempt + 1)

        raise RuntimeError(f"Could not update stats for user '{user_id}' after {MAX_UPDATE_ATTEMPTS} attempts")
