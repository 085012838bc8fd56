from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from boxingcoach.app import App
from boxingcoach.core.security.tokens import TokenClaims

# Security scheme
bearer_scheme = HTTPBearer(auto_error=False, scheme_name="BearerAuth")


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_principal(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> TokenClaims:
    """Validate the Authorization Bearer token and attach its claims to the request."""
    token = credentials.credentials if credentials else None
    principal = app.authenticate(token)
    request.state.principal = principal
    return principal


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
PrincipalDep = Annotated[TokenClaims, Depends(get_principal)]
