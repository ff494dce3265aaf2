"""Tests for reply validation: quantities, emails, confirm/cancel."""

import pytest

from ticketdesk.conversation.validators import (
    extract_email,
    is_cancel,
    is_confirm,
    parse_quantity,
    require_email,
    require_quantity,
)
from ticketdesk.errors import InvalidEmailError, InvalidQuantityError, ValidationError


class TestParseQuantity:
    @pytest.mark.parametrize("value,expected", [
        ("1", 1),
        ("10", 10),
        (" 4 ", 4),
        ("+3", 3),
    ])
    def test_accepts_in_range(self, value, expected):
        assert parse_quantity(value, 1, 10) == expected

    @pytest.mark.parametrize("value", ["0", "11", "-1", "abc", "", "2.5", "1_0", "two", "3 tickets"])
    def test_rejects(self, value):
        assert parse_quantity(value, 1, 10) is None

    def test_custom_bounds(self):
        assert parse_quantity("4", 1, 3) is None
        assert parse_quantity("3", 1, 3) == 3

    def test_require_quantity_raises(self):
        with pytest.raises(InvalidQuantityError, match="between 1 and 10"):
            require_quantity("11", 1, 10)

    def test_invalid_quantity_is_validation_error(self):
        with pytest.raises(ValidationError):
            require_quantity("abc", 1, 10)


class TestExtractEmail:
    @pytest.mark.parametrize("text,expected", [
        ("a.b+c@sub.domain.co", "a.b+c@sub.domain.co"),
        ("my email is fan@example.com thanks", "fan@example.com"),
        ("FAN@EXAMPLE.ORG", "FAN@EXAMPLE.ORG"),
    ])
    def test_finds_email(self, text, expected):
        assert extract_email(text) == expected

    @pytest.mark.parametrize("text", ["not-an-email", "a@b", "@example.com", ""])
    def test_no_email(self, text):
        assert extract_email(text) is None

    def test_require_email_raises(self):
        with pytest.raises(InvalidEmailError):
            require_email("not-an-email")

    def test_require_email_returns_address(self):
        assert require_email("it's fan@example.com") == "fan@example.com"


class TestConfirmCancel:
    @pytest.mark.parametrize("text", ["confirm", "CONFIRM", "  Confirm  "])
    def test_confirm(self, text):
        assert is_confirm(text)

    @pytest.mark.parametrize("text", ["yes", "confirmed", "confirm please", ""])
    def test_not_confirm(self, text):
        assert not is_confirm(text)

    @pytest.mark.parametrize("text", ["cancel", "Cancel", " CANCEL\n"])
    def test_cancel(self, text):
        assert is_cancel(text)

    def test_not_cancel(self):
        assert not is_cancel("cancel it")
