"""Training session API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from boxingcoach.core.modules.stats.models import TechniqueStats, UserStats
from boxingcoach.core.modules.training.models import TrainingSession
from boxingcoach.core.pagination import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, PaginationResult
from boxingcoach.web.deps import AppDep, PrincipalDep
from boxingcoach.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["training"])


class RecordSessionRequest(BaseModel):
    """Request to record a training session."""

    technique: str = Field(..., description="Technique label, e.g. jab or uppercut")
    duration_seconds: float = Field(..., allow_inf_nan=False, description="Session duration in seconds")
    score: float = Field(0, allow_inf_nan=False, description="Session score")
    velocity: float = Field(0, allow_inf_nan=False, description="Measured punch velocity")
    accuracy: float = Field(0, allow_inf_nan=False, description="Measured accuracy")


class RecordSessionResponse(BaseModel):
    message: str
    session: TrainingSession


class SessionResponse(BaseModel):
    session: TrainingSession


class TrainingStatsResponse(BaseModel):
    overall: UserStats | None = Field(..., description="Aggregate statistics across all sessions")
    by_technique: list[TechniqueStats] = Field(..., description="Aggregates per technique")


@router.post(
    "/sessions",
    summary="Record training session",
    description="Store a training session and update the user's aggregate statistics.",
    operation_id="recordSession",
    status_code=201,
    responses={
        201: {"description": "Session recorded"},
        400: {"model": ErrorResponse, "description": "Missing technique or duration"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
    },
)
async def record_session(request: RecordSessionRequest, app: AppDep, principal: PrincipalDep) -> RecordSessionResponse:
    session = await app.record_training_session(
        principal, request.technique, request.duration_seconds, request.score, request.velocity, request.accuracy
    )
    return RecordSessionResponse(message="Training session recorded", session=session)


@router.get(
    "/sessions",
    summary="List training sessions",
    description="Get the current user's training sessions, newest first.",
    operation_id="listSessions",
    responses={
        200: {"description": "Paginated list of sessions"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
    },
)
async def list_sessions(
    app: AppDep,
    principal: PrincipalDep,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_LIMIT, description="Maximum items to return")] = DEFAULT_PAGE_LIMIT,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[TrainingSession]:
    return await app.get_training_sessions(principal, limit, offset)


@router.get(
    "/sessions/{session_id}",
    summary="Get training session",
    description="Get one of the current user's training sessions.",
    operation_id="getSession",
    responses={
        200: {"description": "Training session"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
async def get_session(session_id: UUID, app: AppDep, principal: PrincipalDep) -> SessionResponse:
    return SessionResponse(session=await app.get_training_session(principal, session_id))


@router.get(
    "/stats",
    summary="Get training statistics",
    description="Overall aggregates plus a per-technique breakdown for the current user.",
    operation_id="getTrainingStats",
    responses={
        200: {"description": "Training statistics"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
    },
)
async def get_training_stats(app: AppDep, principal: PrincipalDep) -> TrainingStatsResponse:
    overall, by_technique = await app.get_training_stats(principal)
    return TrainingStatsResponse(overall=overall, by_technique=by_technique)
