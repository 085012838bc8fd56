from fastapi import APIRouter
from pydantic import BaseModel, Field

from boxingcoach.core.modules.user.models import UserView
from boxingcoach.utils import now
from boxingcoach.web.deps import AppDep, PrincipalDep
from boxingcoach.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class SignupRequest(BaseModel):
    """Registration request."""

    email: str = Field(..., description="Email address, used to log in")
    password: str = Field(..., description="Password, at least 6 characters")
    full_name: str | None = Field(None, description="Display name, defaults to the local part of the email")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class AuthResponse(BaseModel):
    """Authentication response."""

    message: str = Field(..., description="Outcome summary")
    token: str = Field(..., description="Bearer token for subsequent requests")
    user: UserView = Field(..., description="Authenticated user")


class RefreshResponse(BaseModel):
    message: str = Field(..., description="Outcome summary")
    token: str = Field(..., description="Newly issued bearer token")


@router.get(
    "/test",
    summary="Auth routing check",
    description="Confirms that the auth routes are reachable.",
    operation_id="authTest",
)
async def auth_test() -> dict[str, str]:
    return {"message": "Auth routes are working", "timestamp": now().isoformat()}


@router.post(
    "/signup",
    summary="Register user",
    description="Create an account and receive an authentication token.",
    operation_id="signup",
    status_code=201,
    responses={
        201: {"description": "User created"},
        400: {"model": ErrorResponse, "description": "Invalid email or password"},
        409: {"model": ErrorResponse, "description": "Email already exists"},
    },
)
async def signup(signup_data: SignupRequest, app: AppDep) -> AuthResponse:
    token, user = await app.signup(signup_data.email, signup_data.password, signup_data.full_name)
    return AuthResponse(message="User created successfully", token=token, user=user)


@router.post(
    "/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive an authentication token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Missing email or password"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(login_data: LoginRequest, app: AppDep) -> AuthResponse:
    token, user = await app.login(login_data.email, login_data.password)
    return AuthResponse(message="Login successful", token=token, user=user)


@router.post(
    "/refresh",
    summary="Refresh token",
    description="Exchange a valid token for a new one with a full validity window.",
    operation_id="refreshToken",
    responses={
        200: {"description": "New token issued"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
    },
)
async def refresh(app: AppDep, principal: PrincipalDep) -> RefreshResponse:
    token = await app.refresh_token(principal)
    return RefreshResponse(message="Token refreshed", token=token)
