"""
Security module: JWT authentication and role checks.
"""

from shared.security.auth import (
    sign_jwt,
    verify_jwt,
    get_bearer_token,
    current_user_context,
    optional_user_context,
    require_roles,
    has_role,
)

__all__ = [
    "sign_jwt",
    "verify_jwt",
    "get_bearer_token",
    "current_user_context",
    "optional_user_context",
    "require_roles",
    "has_role",
]
