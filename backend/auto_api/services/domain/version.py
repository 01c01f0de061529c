"""
Optimistic-lock version token codec.

On the wire a version travels as an entity tag: the decimal number wrapped in
double quotes ("0", "12"). Inside the services it is a plain non-negative int.
"""

import re

from shared.config.constants import Limits
from shared.utils.exceptions import InvalidVersionError

VERSION_TOKEN_PATTERN = re.compile(rf'"([0-9]{{1,{Limits.MAX_VERSION_DIGITS}}})"')


def parse_version_token(token: str | None) -> int:
    """
    Decode an If-Match style version token.

    Raises:
        InvalidVersionError: If the token is not one to three ASCII digits
            in double quotes.
    """
    if token is None:
        raise InvalidVersionError(token)
    match = VERSION_TOKEN_PATTERN.fullmatch(token)
    if match is None:
        raise InvalidVersionError(token)
    return int(match.group(1))


def format_version_token(version: int) -> str:
    """Encode a version for the ETag header."""
    return f'"{version}"'
