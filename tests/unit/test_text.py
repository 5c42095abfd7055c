"""
Unit tests for text helpers.
"""

import pytest

from tickerfeed.utils.text import (
    fill_placeholders,
    format_number,
    format_percent,
    round_half_up,
    to_text,
)


@pytest.mark.unit
class TestNumbers:
    """Tests for numeric formatting."""

    @pytest.mark.parametrize(
        "value, expected",
        [(2.5, 3), (3.5, 4), (-2.5, -2), (71.49, 71), (0.0, 0)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_format_number(self):
        assert format_number(87.0) == "87"
        assert format_number(87.5) == "87.5"
        assert format_number(12) == "12"

    def test_format_percent(self):
        assert format_percent(None) == "0.0"
        assert format_percent(52.349) == "52.3"
        assert format_percent(50) == "50.0"


@pytest.mark.unit
class TestToText:
    """Tests for to_text."""

    def test_values(self):
        assert to_text(None) == ""
        assert to_text(True) == "true"
        assert to_text(False) == "false"
        assert to_text(10.0) == "10"
        assert to_text("abc") == "abc"


@pytest.mark.unit
class TestFillPlaceholders:
    """Tests for fill_placeholders."""

    def test_fill(self):
        result = fill_placeholders("{{name}} {{temperature}}°F", {"name": "Springfield", "temperature": 72})
        assert result == "Springfield 72°F"

    def test_unknown_left_in_place(self):
        assert fill_placeholders("{{name}} {{other}}", {"name": "A"}) == "A {{other}}"

    def test_repeated(self):
        assert fill_placeholders("{{x}}-{{x}}", {"x": 1}) == "1-1"
