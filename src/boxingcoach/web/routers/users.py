from fastapi import APIRouter
from pydantic import BaseModel, Field

from boxingcoach.core.modules.stats.models import UserStats
from boxingcoach.core.modules.user.models import UserView
from boxingcoach.web.deps import AppDep, PrincipalDep
from boxingcoach.web.openapi import ErrorResponse

router = APIRouter(tags=["users"])


class ProfileResponse(BaseModel):
    user: UserView


class UpdateProfileRequest(BaseModel):
    full_name: str = Field(..., description="New display name")


class UpdateProfileResponse(BaseModel):
    message: str
    user: UserView


class ChangePasswordRequest(BaseModel):
    """Request to change user password."""

    old_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=1, description="New password")


class StatsResponse(BaseModel):
    stats: UserStats


@router.get(
    "/profile",
    summary="Get current user profile",
    description="Get the profile of the currently authenticated user.",
    operation_id="getProfile",
    responses={
        200: {"description": "Current user profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def get_profile(app: AppDep, principal: PrincipalDep) -> ProfileResponse:
    return ProfileResponse(user=await app.get_profile(principal))


@router.put(
    "/profile",
    summary="Update current user profile",
    description="Change the display name of the currently authenticated user.",
    operation_id="updateProfile",
    responses={
        200: {"description": "Updated profile"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
    },
)
async def update_profile(request: UpdateProfileRequest, app: AppDep, principal: PrincipalDep) -> UpdateProfileResponse:
    user = await app.update_profile(principal, request.full_name)
    return UpdateProfileResponse(message="Profile updated successfully", user=user)


@router.post(
    "/profile/change-password",
    summary="Change password",
    description="Change the password for the currently authenticated user. Existing tokens stay valid.",
    operation_id="changePassword",
    status_code=204,
    responses={
        204: {"description": "Password changed successfully"},
        400: {"model": ErrorResponse, "description": "Invalid current password or new password"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
    },
)
async def change_password(request: ChangePasswordRequest, app: AppDep, principal: PrincipalDep) -> None:
    await app.change_password(principal, request.old_password, request.new_password)


@router.get(
    "/stats",
    summary="Get user statistics",
    description="Aggregate training statistics of the currently authenticated user.",
    operation_id="getUserStats",
    responses={
        200: {"description": "Aggregate statistics"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
        404: {"model": ErrorResponse, "description": "User stats not found"},
    },
)
async def get_stats(app: AppDep, principal: PrincipalDep) -> StatsResponse:
    return StatsResponse(stats=await app.get_user_stats(principal))
