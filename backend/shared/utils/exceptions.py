"""
Centralized HTTP exceptions for consistent error handling.

Every failure the core services raise is one of these typed exceptions. They
are FastAPI HTTPExceptions, so the REST transport maps them to status codes
without further glue; the GraphQL transport maps them to GraphQL errors with
an extension code (see graphql_code).

Usage:
    from shared.utils.exceptions import AutoNotFoundError, VersionOutdatedError

    raise AutoNotFoundError(auto_id)
    raise VersionOutdatedError(version)
"""

from fastapi import HTTPException, status
from typing import Any

from shared.config.constants import ErrorMessages
from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class
    to ensure consistent logging and response format.
    """

    graphql_code: str = "BAD_USER_INPUT"

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Keine Datei vorhanden", entity_id=1)
    """

    def __init__(self, detail: str, entity_id: int | str | None = None, **log_context: Any):
        self.entity_id = entity_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity_id=entity_id,
            **log_context,
        )


class AutoNotFoundError(NotFoundError):
    """No Auto exists for the given ID."""

    def __init__(self, auto_id: int | str | None, **log_context: Any):
        super().__init__(ErrorMessages.AUTO_NOT_FOUND.format(id=auto_id), auto_id, **log_context)


class AutosNotFoundError(NotFoundError):
    """A search yielded no Auto. The message enumerates the criteria."""

    def __init__(self, criteria: dict[str, Any], page: int, **log_context: Any):
        self.criteria = criteria
        criteria_str = ", ".join(f"{k}={v}" for k, v in criteria.items()) or "-"
        super().__init__(
            ErrorMessages.AUTOS_NOT_FOUND.format(criteria=criteria_str, page=page),
            **log_context,
        )


# =============================================================================
# 401 / 403 Authentication and Authorization Errors
# =============================================================================


class UnauthorizedError(AppException):
    """Missing or invalid bearer token (401)."""

    graphql_code = "UNAUTHENTICATED"

    def __init__(self, detail: str = "Nicht authentifiziert", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="warning",
            headers={"WWW-Authenticate": "Bearer"},
            **log_context,
        )


class ForbiddenError(AppException):
    """
    Authorization/permission error (403).

    Usage:
        raise ForbiddenError("Autos loeschen")
    """

    graphql_code = "FORBIDDEN"

    def __init__(self, action: str | None = None, **log_context: Any):
        if action:
            detail = f"Nicht berechtigt zum {action}"
        else:
            detail = "Zugriff verweigert"

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            log_level="warning",
            action=action,
            **log_context,
        )


class InsufficientRoleError(ForbiddenError):
    """User doesn't have the required role."""

    def __init__(self, required_roles: list[str], **log_context: Any):
        roles_str = ", ".join(required_roles)
        super().__init__(
            f"Ausfuehren dieser Aktion (erforderliche Rolle: {roles_str})",
            required_roles=required_roles,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Der Preis muss positiv sein")
        raise ValidationError("Ungueltiger Wert", field="price", value=-1)
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InvalidCriteriaError(ValidationError):
    """A search criterion names no column or carries an unusable value."""

    def __init__(self, key: str, value: Any = None, **log_context: Any):
        self.key = key
        if value is None:
            detail = ErrorMessages.UNKNOWN_CRITERION.format(key=key)
        else:
            detail = ErrorMessages.INVALID_CRITERION.format(key=key, value=value)
        super().__init__(detail, key=key, **log_context)


# =============================================================================
# 412 / 428 Optimistic Locking Errors
# =============================================================================


class PreconditionFailedError(AppException):
    """Precondition on the request (If-Match) does not hold (412)."""

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_412_PRECONDITION_FAILED,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InvalidVersionError(PreconditionFailedError):
    """The version token is not of the form "<1-3 digits>"."""

    def __init__(self, version: str | None, **log_context: Any):
        self.version = version
        super().__init__(ErrorMessages.VERSION_INVALID.format(version=version), version=version, **log_context)


class VersionOutdatedError(PreconditionFailedError):
    """The supplied version is older than the persisted one."""

    def __init__(self, version: int, **log_context: Any):
        self.version = version
        super().__init__(ErrorMessages.VERSION_OUTDATED.format(version=version), version=version, **log_context)


class PreconditionRequiredError(AppException):
    """The If-Match header is missing on a conditional update (428)."""

    def __init__(self, detail: str = ErrorMessages.VERSION_MISSING, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 422 Unprocessable Entity Errors
# =============================================================================


class UnprocessableEntityError(AppException):
    """Well-formed input that violates a business rule (422)."""

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class ChassisNumberExistsError(UnprocessableEntityError):
    """Another Auto already uses the chassis number."""

    def __init__(self, chassis_number: str | None, **log_context: Any):
        self.chassis_number = chassis_number
        super().__init__(
            ErrorMessages.CHASSIS_NUMBER_EXISTS.format(chassis_number=chassis_number),
            chassis_number=chassis_number,
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Datei konnte nicht gespeichert werden", auto_id=1)
    """

    graphql_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, detail: str = "Interner Serverfehler", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Datenbankfehler bei {operation}. Bitte erneut versuchen."
        super().__init__(detail, operation=operation, **log_context)
