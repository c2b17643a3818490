# portal/api/deps.py
import jwt
from fastapi import Header, Request

from portal.core.errors import AuthError
from portal.core.security import ROLE_ADMIN, ROLE_USER, decode_access_token


def _bearer_token(authorization: str | None) -> str | None:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return None


async def get_token_claims(authorization: str | None = Header(default=None)) -> dict:
    """
    FastAPI dependency that verifies the bearer token.

    Tokens are stateless: the signature and expiry are checked, nothing is
    looked up server-side, and a still-valid token keeps working until it expires.

    Returns:
        dict: Decoded claims (id, email, type, iat, exp)

    Raises:
        AuthError (401): "missing token" if no bearer token is present
        AuthError (401): "invalid token" if the signature, expiry or payload is bad
    """
    token = _bearer_token(authorization)
    if not token:
        raise AuthError("missing token")

    try:
        claims = decode_access_token(token)
    except jwt.PyJWTError:
        raise AuthError("invalid token")

    if not claims.get("id") or claims.get("type") not in (ROLE_USER, ROLE_ADMIN):
        raise AuthError("invalid token")
    return claims


def require_role(role: str):
    """
    Build a dependency that accepts only tokens issued for `role`.

    A valid admin token never authorizes a user route and vice versa.

    Usage:
        @router.get("/profile")
        async def profile(claims: dict = Depends(require_user)):
            ...
    """
    async def _guard(authorization: str | None = Header(default=None)) -> dict:
        claims = await get_token_claims(authorization)
        if claims["type"] != role:
            raise AuthError("wrong role", status_code=403)
        return claims

    return _guard


require_user = require_role(ROLE_USER)
require_admin = require_role(ROLE_ADMIN)


def client_ip(request: Request) -> str | None:
    """Peer address of the request (the portal sits directly in front of clients)."""
    return request.client.host if request.client else None
