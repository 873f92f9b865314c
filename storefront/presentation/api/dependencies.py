from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...domain.errors import AuthError

_bearer_scheme = HTTPBearer(auto_error=False)


def require_session_token(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
) -> str:
    """Extract the bearer session token; the account service validates it."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError("Authentication token is missing")
    return credentials.credentials
