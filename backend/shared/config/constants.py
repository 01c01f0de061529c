"""
Centralized constants for the backend application.
Avoids magic strings and repeated constants.

Usage:
    from shared.config.constants import Roles, Limits, SafetyFeature

    if Roles.ADMIN in user["roles"]:
        ...

    size = Limits.DEFAULT_PAGE_SIZE
"""

from enum import Enum
from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """User role constants (as issued in the JWT "roles" claim)."""

    ADMIN: Final[str] = "admin"
    USER: Final[str] = "user"

    ALL: Final[list[str]] = [ADMIN, USER]


# Role groups for common access patterns
WRITE_ROLES: Final[frozenset[str]] = frozenset({Roles.ADMIN, Roles.USER})
DELETE_ROLES: Final[frozenset[str]] = frozenset({Roles.ADMIN})


# =============================================================================
# Domain enumerations
# =============================================================================


class AutoCategory(str, Enum):
    """Body style of an Auto."""

    LIMOUSINE = "LIMOUSINE"
    KOMBI = "KOMBI"
    SUV = "SUV"
    CABRIO = "CABRIO"
    COUPE = "COUPE"


class SafetyFeature:
    """
    Canonical safety feature codes as stored in auto.safety_features.

    SEARCH_FLAGS maps the boolean search criteria to their code, in the
    order the predicates are applied.
    """

    ESB: Final[str] = "ESB"
    ABS: Final[str] = "ABS"
    AIRBAG: Final[str] = "AIRBAG"
    PARKASSISTENT: Final[str] = "PARKASSISTENT"

    SEARCH_FLAGS: Final[tuple[tuple[str, str], ...]] = (
        ("esb", ESB),
        ("abs", ABS),
        ("airbag", AIRBAG),
        ("parkingAssist", PARKASSISTENT),
    )

    SEPARATOR: Final[str] = ","


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Engine
    MAX_HORSEPOWER: Final[int] = 1000
    MAX_CYLINDERS: Final[int] = 24
    MAX_ENGINE_NAME_LENGTH: Final[int] = 40

    # Repair
    MAX_MECHANIC_LENGTH: Final[int] = 32

    # Ids are BIGINT (signed 64 bit)
    MAX_ID: Final[int] = 2**63 - 1

    # Auto
    MAX_CHASSIS_NUMBER_LENGTH: Final[int] = 17
    MAX_MAKE_LENGTH: Final[int] = 40
    MAX_MODEL_LENGTH: Final[int] = 40
    MIN_MODEL_YEAR: Final[int] = 1886
    MAX_MODEL_YEAR: Final[int] = 2100

    # Version token ("0" .. "999")
    MAX_VERSION_DIGITS: Final[int] = 3

    # Pagination defaults (page number is zero-based, size 0 = unpaginated)
    DEFAULT_PAGE_SIZE: Final[int] = 5
    DEFAULT_PAGE_NUMBER: Final[int] = 0
    MAX_PAGE_SIZE: Final[int] = 100

    # Upload
    MAX_FILE_SIZE: Final[int] = 5 * 1024 * 1024


# =============================================================================
# Error Messages
# =============================================================================


class ErrorMessages:
    """User-facing error messages (German, as served by the API)."""

    AUTO_NOT_FOUND: Final[str] = "Es gibt kein Auto mit der ID {id}."
    AUTOS_NOT_FOUND: Final[str] = "Keine Autos gefunden: {criteria}, Seite {page}"
    VERSION_INVALID: Final[str] = "Die Versionsnummer {version} ist ungueltig."
    VERSION_OUTDATED: Final[str] = "Die Versionsnummer {version} ist nicht aktuell."
    VERSION_MISSING: Final[str] = "Header \"If-Match\" fehlt"
    CHASSIS_NUMBER_EXISTS: Final[str] = "Die Fahrgestellnummer {chassis_number} existiert bereits."
    UNKNOWN_CRITERION: Final[str] = "Unbekanntes Suchkriterium: {key}"
    INVALID_CRITERION: Final[str] = "Ungueltiger Wert fuer Suchkriterium {key}: {value}"
    FILE_NOT_FOUND: Final[str] = "Keine Datei zum Auto mit der ID {id} vorhanden."
