"""API index endpoint."""

from fastapi import APIRouter

router = APIRouter(tags=["meta"])


@router.get(
    "",
    summary="API index",
    description="Lists the versioned route groups.",
    operation_id="getApiIndex",
)
async def api_index() -> dict[str, str | dict[str, str]]:
    return {
        "message": "Boxing Coach API v1",
        "endpoints": {
            "auth": "/api/v1/auth",
            "users": "/api/v1/users",
            "training": "/api/v1/training",
        },
    }
