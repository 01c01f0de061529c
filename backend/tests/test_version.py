"""
Tests for the optimistic-lock version token codec.
"""

import pytest

from auto_api.services.domain.version import format_version_token, parse_version_token
from shared.utils.exceptions import InvalidVersionError


class TestParseVersionToken:
    """parse_version_token() accepts exactly '"<1-3 digits>"'."""

    @pytest.mark.parametrize(
        "token, expected",
        [('"0"', 0), ('"7"', 7), ('"12"', 12), ('"999"', 999), ('"007"', 7)],
    )
    def test_valid_tokens(self, token, expected):
        assert parse_version_token(token) == expected

    @pytest.mark.parametrize(
        "token",
        [
            "0",          # unquoted
            '"1000"',     # four digits
            '""',         # empty
            '"-1"',       # sign
            '"1a"',       # letter
            "'1'",        # single quotes
            ' "1"',       # leading blank
            '"1" ',       # trailing blank
            'W/"1"',      # weak etag
            '"١"',        # non-ASCII digit
            "",
        ],
    )
    def test_malformed_tokens(self, token):
        with pytest.raises(InvalidVersionError) as exc_info:
            parse_version_token(token)
        assert exc_info.value.status_code == 412
        assert "Versionsnummer" in exc_info.value.detail

    def test_missing_token(self):
        with pytest.raises(InvalidVersionError):
            parse_version_token(None)


class TestFormatVersionToken:
    def test_quotes_version(self):
        assert format_version_token(3) == '"3"'

    def test_parse_accepts_formatted(self):
        assert parse_version_token(format_version_token(42)) == 42
