from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from boxingcoach.config import Config
from boxingcoach.core.core import Core
from boxingcoach.core.modules.stats.models import TechniqueStats, UserStats
from boxingcoach.core.modules.training.models import TrainingSession
from boxingcoach.core.modules.user.models import UserView
from boxingcoach.core.pagination import DEFAULT_PAGE_LIMIT, PaginationResult
from boxingcoach.core.security.tokens import TokenClaims
from boxingcoach.errors import InvalidOrExpiredCredentialError, NotFoundError


class App:
    """Facade for all application operations.

    Protected operations take the claims produced by ``authenticate``; the web
    layer resolves them before calling in.
    """

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    def authenticate(self, token: str | None) -> TokenClaims:
        """Resolve a bearer token to its principal claims."""
        return self._core.services.access.authenticate(token)

    async def signup(self, email: str, password: str, full_name: str | None = None) -> tuple[str, UserView]:
        """Register a user, create their stats record and issue a token."""
        user = await self._core.services.user.create_user(email, password, full_name)
        await self._core.services.stats.create_stats(user.id)
        token = self._core.tokens.issue(user.id, user.email)
        return token, UserView.from_domain(user)

    async def login(self, email: str, password: str) -> tuple[str, UserView]:
        """Verify credentials and issue a token."""
        user = await self._core.services.user.authenticate(email, password)
        token = self._core.tokens.issue(user.id, user.email)
        return token, UserView.from_domain(user)

    async def refresh_token(self, principal: TokenClaims) -> str:
        """Issue a new token for a principal whose account still exists."""
        try:
            await self._core.services.user.get_user(principal.id)
        except NotFoundError as e:
            raise InvalidOrExpiredCredentialError from e
        return self._core.services.access.issue_token(principal)

    async def get_profile(self, principal: TokenClaims) -> UserView:
        """Get the current user's profile, read fresh from storage."""
        user = await self._core.services.user.get_user(principal.id)
        return UserView.from_domain(user)

    async def update_profile(self, principal: TokenClaims, full_name: str) -> UserView:
        user = await self._core.services.user.update_full_name(principal.id, full_name)
        return UserView.from_domain(user)

    async def change_password(self, principal: TokenClaims, old_password: str, new_password: str) -> None:
        """Change password for current user."""
        await self._core.services.user.change_password(principal.id, old_password, new_password)

    async def get_user_stats(self, principal: TokenClaims) -> UserStats:
        return await self._core.services.stats.get_stats(principal.id)

    async def record_training_session(
        self,
        principal: TokenClaims,
        technique: str,
        duration_seconds: float,
        score: float = 0,
        velocity: float = 0,
        accuracy: float = 0,
    ) -> TrainingSession:
        """Record a training session for the current user."""
        return await self._core.services.training.record_session(
            principal.id, technique, duration_seconds, score, velocity, accuracy
        )

    async def get_training_sessions(
        self, principal: TokenClaims, limit: int = DEFAULT_PAGE_LIMIT, offset: int = 0
    ) -> PaginationResult[TrainingSession]:
        return await self._core.services.training.list_sessions(principal.id, limit, offset)

    async def get_training_session(self, principal: TokenClaims, session_id: UUID) -> TrainingSession:
        return await self._core.services.training.get_session(principal.id, session_id)

    async def get_training_stats(self, principal: TokenClaims) -> tuple[UserStats | None, list[TechniqueStats]]:
        """Get overall aggregates (None if missing) and the per-technique breakdown."""
        try:
            overall: UserStats | None = await self._core.services.stats.get_stats(principal.id)
        except NotFoundError:
            overall = None
        by_technique = await self._core.services.training.get_technique_stats(principal.id)
        return overall, by_technique
