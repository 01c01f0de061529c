"""
Authentication and authorization utilities.
Handles JWT bearer tokens issued to API users.

The token carries the principal: "sub" (username) and "roles" (list of
role names, see shared.config.constants.Roles). The core services never see
the token; routers and resolvers check roles before delegating.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterable
from typing import Any

import jwt
from fastapi import Header

from shared.config.settings import (
    JWT_SECRET,
    JWT_ISSUER,
    JWT_AUDIENCE,
    settings,
)
from shared.config.logging import get_logger
from shared.utils.exceptions import InsufficientRoleError, UnauthorizedError

logger = get_logger(__name__)


# =============================================================================
# JWT Functions
# =============================================================================


def sign_jwt(
    payload: dict[str, Any],
    ttl_seconds: int | None = None,
) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (sub, roles, ...)
        ttl_seconds: Token lifetime in seconds. Defaults to access token expiry.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Returns:
        Decoded token claims.

    Raises:
        UnauthorizedError: If token is invalid, expired or lacks required claims.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token abgelaufen")
    except jwt.InvalidTokenError as e:
        # Log the actual error, return a generic message to the client
        logger.warning("JWT validation failed", error=str(e))
        raise UnauthorizedError("Ungueltiger Token")

    if "sub" not in payload:
        raise UnauthorizedError("Ungueltiger Token: sub fehlt")

    roles = payload.get("roles", [])
    if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
        raise UnauthorizedError("Ungueltiger Token: roles fehlerhaft")

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        UnauthorizedError: If header is missing or malformed.
    """
    if not authorization:
        raise UnauthorizedError("Authorization-Header fehlt")
    if not authorization.startswith("Bearer "):
        raise UnauthorizedError("Authorization-Header muss das Format 'Bearer <token>' haben")
    return authorization.split(" ", 1)[1].strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    FastAPI dependency to get the current user context from JWT.

    Usage:
        @router.post("/rest")
        def create(ctx = Depends(current_user_context)):
            username = ctx["sub"]
            roles = ctx["roles"]

    Returns:
        Dict with: sub (username), roles, and the registered JWT claims
    """
    token = get_bearer_token(authorization)
    return verify_jwt(token)


def optional_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any] | None:
    """Like current_user_context, but anonymous requests yield None."""
    if not authorization:
        return None
    return verify_jwt(get_bearer_token(authorization))


def has_role(ctx: dict[str, Any] | None, allowed: Iterable[str]) -> bool:
    """Check whether the principal has at least one of the allowed roles."""
    if not ctx:
        return False
    return bool(set(ctx.get("roles", [])).intersection(allowed))


def require_roles(ctx: dict[str, Any] | None, allowed: Iterable[str]) -> None:
    """
    Verify that the user has at least one of the allowed roles.

    Raises:
        UnauthorizedError: If there is no principal at all.
        InsufficientRoleError: If user lacks required role.
    """
    if ctx is None:
        raise UnauthorizedError("Anmeldung erforderlich")
    allowed = sorted(allowed)
    if not has_role(ctx, allowed):
        raise InsufficientRoleError(allowed, username=ctx.get("sub"))
