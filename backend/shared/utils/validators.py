"""
Shared validators for input sanitization.
Used by the pydantic schemas and the search predicate builder.
"""

import re

# Letters (incl. German umlauts), hyphen and blank
MECHANIC_PATTERN = re.compile(r"^[A-ZÄÖÜa-zäöüß\- ]+$")


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards. This function escapes them so a
    search term only ever matches literally.

    Args:
        value: The search string to escape

    Returns:
        The escaped string safe for use in LIKE patterns
    """
    if not value:
        return value

    # Escape the escape character first, then the wildcards
    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def validate_mechanic(name: str) -> str:
    """Mechanic names consist of letters, hyphens and blanks only."""
    if not MECHANIC_PATTERN.fullmatch(name):
        raise ValueError("Der Name des Mechanikers darf nur Buchstaben, Bindestriche und Leerzeichen enthalten")
    return name

