"""
Haulpay - FastAPI Dependencies

Shared dependencies for authentication and role checks.

The session token is read from:
1. Authorization: Bearer <token> header
2. access_token cookie (set by the login page)

Identity comes from the signed token alone; no database lookup is made.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.utils.error_handling import (
    AuthenticationException,
    AuthorizationException,
    InvalidTokenException,
)
from app.utils.security import SessionIdentity, verify_access_token


# HTTP Bearer token security
security = HTTPBearer(auto_error=False)

ACCESS_TOKEN_COOKIE = "access_token"


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """Bearer header first, cookie as fallback."""
    if credentials and credentials.credentials:
        return credentials.credentials

    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token and token.startswith("Bearer "):
        token = token[7:]
    return token or None


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> SessionIdentity:
    """
    Resolve the caller's identity from the session token.

    Raises:
        AuthenticationException: No token supplied (401)
        InvalidTokenException: Bad signature, malformed payload or expired (403)
    """
    token = extract_token(request, credentials)
    if not token:
        raise AuthenticationException()

    identity = verify_access_token(token)
    if identity is None:
        raise InvalidTokenException()

    request.state.identity = identity
    return identity


async def require_admin(
    identity: SessionIdentity = Depends(get_current_identity),
) -> SessionIdentity:
    """Only admins pass; everyone else gets 403 before any work is done."""
    if not identity.is_admin:
        raise AuthorizationException()
    return identity


def get_optional_identity(request: Request) -> Optional[SessionIdentity]:
    """Cookie-based identity for page routes; None instead of raising."""
    token = extract_token(request)
    if not token:
        return None
    return verify_access_token(token)
