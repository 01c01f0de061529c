"""
Tests for JWT authentication and role checks.
"""

import jwt
import pytest

from shared.config.constants import DELETE_ROLES, WRITE_ROLES
from shared.config.settings import JWT_AUDIENCE, JWT_ISSUER
from shared.security.auth import (
    get_bearer_token,
    has_role,
    optional_user_context,
    require_roles,
    sign_jwt,
    verify_jwt,
)
from shared.utils.exceptions import InsufficientRoleError, UnauthorizedError


class TestJwt:
    """Test token signing and verification."""

    def test_round_trip(self):
        """A signed token verifies and carries its claims."""
        token = sign_jwt({"sub": "admin", "roles": ["admin", "user"]})
        payload = verify_jwt(token)

        assert payload["sub"] == "admin"
        assert payload["roles"] == ["admin", "user"]
        assert payload["iss"] == JWT_ISSUER
        assert payload["aud"] == JWT_AUDIENCE

    def test_expired_token(self):
        """Expired tokens are rejected."""
        token = sign_jwt({"sub": "admin", "roles": []}, ttl_seconds=-10)

        with pytest.raises(UnauthorizedError) as exc_info:
            verify_jwt(token)
        assert exc_info.value.detail == "Token abgelaufen"

    def test_wrong_secret(self):
        """Tokens signed with another secret are rejected."""
        token = jwt.encode(
            {"sub": "admin", "iss": JWT_ISSUER, "aud": JWT_AUDIENCE},
            "another-secret-that-is-long-enough-for-hs256",
            algorithm="HS256",
        )
        with pytest.raises(UnauthorizedError):
            verify_jwt(token)

    def test_missing_sub(self):
        """Tokens without a subject are rejected."""
        token = sign_jwt({"roles": ["admin"]})
        with pytest.raises(UnauthorizedError):
            verify_jwt(token)

    def test_malformed_roles(self):
        """roles must be a list of strings."""
        token = sign_jwt({"sub": "admin", "roles": "admin"})
        with pytest.raises(UnauthorizedError):
            verify_jwt(token)


class TestBearerHeader:
    """Test Authorization header parsing."""

    def test_extracts_token(self):
        assert get_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_missing_header(self):
        with pytest.raises(UnauthorizedError):
            get_bearer_token(None)

    def test_wrong_scheme(self):
        with pytest.raises(UnauthorizedError):
            get_bearer_token("Basic YWRtaW46cA==")

    def test_optional_context_anonymous(self):
        assert optional_user_context(None) is None


class TestRoles:
    """Test role checks."""

    def test_admin_may_delete(self):
        require_roles({"sub": "admin", "roles": ["admin"]}, DELETE_ROLES)

    def test_user_may_write_but_not_delete(self):
        ctx = {"sub": "user", "roles": ["user"]}

        assert has_role(ctx, WRITE_ROLES) is True
        with pytest.raises(InsufficientRoleError) as exc_info:
            require_roles(ctx, DELETE_ROLES)
        assert exc_info.value.status_code == 403

    def test_anonymous(self):
        assert has_role(None, WRITE_ROLES) is False
        with pytest.raises(UnauthorizedError):
            require_roles(None, WRITE_ROLES)
