import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from boxingcoach.errors import (
    AccessDeniedError,
    AuthenticationError,
    DuplicateIdentityError,
    InvalidOrExpiredCredentialError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, **extra: object
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content: dict[str, object] = {"error": message}
    if error_type:
        content["type"] = error_type
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, InvalidOrExpiredCredentialError):
        status_code = 403
        error_type = "invalid_token"
    elif isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, AccessDeniedError):
        status_code = 403
        error_type = "access_denied"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, DuplicateIdentityError):
        status_code = 409
        error_type = "conflict"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)


async def request_validation_error_handler(_: Request, exc: Exception) -> Response:
    """Report malformed request bodies and query parameters as 400."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return create_json_error_response(status_code=400, message=message, error_type="validation_error")


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Render framework HTTP errors (unknown routes, wrong methods) in the API error format."""
    status_code = exc.status_code if isinstance(exc, StarletteHTTPException) else 500
    if status_code == 404:
        return create_json_error_response(
            status_code=404, message="Not found", error_type="not_found", path=request.url.path, method=request.method
        )
    detail = exc.detail if isinstance(exc, StarletteHTTPException) else "Internal server error"
    return create_json_error_response(status_code=status_code, message=str(detail), error_type="http_error")


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500). Exception text is only exposed in development."""
    logger.exception("unexpected_error", path=request.url.path, method=request.method)
    config = getattr(request.app.state, "config", None)
    extra = {"message": str(exc)} if config is not None and config.is_development else {}
    return create_json_error_response(
        status_code=500, message="Internal server error", error_type="internal_server_error", **extra
    )
