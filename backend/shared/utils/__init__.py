"""
Utilities module: Exceptions, validators.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    AutoNotFoundError,
    AutosNotFoundError,
    UnauthorizedError,
    ForbiddenError,
    InsufficientRoleError,
    ValidationError,
    InvalidCriteriaError,
    PreconditionFailedError,
    InvalidVersionError,
    VersionOutdatedError,
    PreconditionRequiredError,
    UnprocessableEntityError,
    ChassisNumberExistsError,
    InternalError,
    DatabaseError,
)
from shared.utils.validators import (
    escape_like_pattern,
    validate_mechanic,
)

__all__ = [
    # exceptions
    "AppException",
    "NotFoundError",
    "AutoNotFoundError",
    "AutosNotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "InsufficientRoleError",
    "ValidationError",
    "InvalidCriteriaError",
    "PreconditionFailedError",
    "InvalidVersionError",
    "VersionOutdatedError",
    "PreconditionRequiredError",
    "UnprocessableEntityError",
    "ChassisNumberExistsError",
    "InternalError",
    "DatabaseError",
    # validators
    "escape_like_pattern",
    "validate_mechanic",
]
