"""
Tests for core helpers.
"""

import pytest

from core.helpers import cap_count, generate_token, parse_int


class TestGenerateToken:
    def test_hex_length_is_twice_bytes(self):
        assert len(generate_token()) == 64
        assert len(generate_token(8)) == 16

    def test_tokens_are_unique(self):
        assert generate_token() != generate_token()


class TestParseInt:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("42", 42),
            (7, 7),
            (" 3 ", 3),
            ("0", None),
            ("-5", None),
            ("abc", None),
            ("4.2", None),
            ("", None),
            (None, None),
            (True, None),
        ],
    )
    def test_parse(self, value, expected):
        assert parse_int(value) == expected


class TestCapCount:
    def test_below_cap(self):
        assert cap_count(3, 9) == "3"

    def test_at_cap(self):
        assert cap_count(9, 9) == "9"

    def test_above_cap(self):
        assert cap_count(10, 9) == "9+"
