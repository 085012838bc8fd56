from boxingcoach.core.core import Service
from boxingcoach.core.security.tokens import TokenClaims
from boxingcoach.errors import InvalidOrExpiredCredentialError, MissingCredentialError


class AccessService(Service):
    """Gate for protected operations.

    Claims come from the token alone; the user record is not re-read here, so
    they reflect the account as it was when the token was issued.
    """

    def authenticate(self, token: str | None) -> TokenClaims:
        """Validate a bearer token and return the principal it was issued for."""
        if not token:
            raise MissingCredentialError
        claims = self.core.tokens.validate(token)
        if claims is None:
            raise InvalidOrExpiredCredentialError
        return claims

    def issue_token(self, claims: TokenClaims) -> str:
        """Issue a fresh token for an already authenticated principal."""
        return self.core.tokens.issue(claims.id, claims.email)
