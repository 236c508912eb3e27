"""Unit tests for PHP shorthand byte conversion."""

import pytest

from wp_php_settings.engine.byte_size import leading_int, to_bytes


class TestToBytes:
    """Suffix ranks and malformed input."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1K", 1024),
            ("256M", 256 * 1024**2),
            ("2G", 2 * 1024**3),
            ("128m", 128 * 1024**2),
            ("1g", 1024**3),
        ],
    )
    def test_suffix_multiplies_by_1024_per_rank(self, value, expected):
        assert to_bytes(value) == expected

    def test_plain_number_is_bytes(self):
        assert to_bytes("512") == 512

    def test_integer_input(self):
        assert to_bytes(4096) == 4096

    def test_empty_string_returns_zero(self):
        assert to_bytes("") == 0

    def test_whitespace_only_returns_zero(self):
        assert to_bytes("   ") == 0

    def test_none_returns_zero(self):
        assert to_bytes(None) == 0

    def test_unparseable_leading_text_returns_zero(self):
        assert to_bytes("abcM") == 0

    def test_surrounding_whitespace_trimmed(self):
        assert to_bytes("  64M  ") == 64 * 1024**2

    def test_unknown_suffix_keeps_leading_number(self):
        assert to_bytes("10T") == 10

    def test_negative_one_unlimited(self):
        assert to_bytes("-1") == -1


class TestLeadingInt:
    def test_reads_digit_prefix(self):
        assert leading_int("300s") == 300

    def test_no_digits(self):
        assert leading_int("unlimited") == 0

    def test_signed(self):
        assert leading_int("-5") == -5
