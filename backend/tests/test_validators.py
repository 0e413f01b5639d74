"""Tests for the shared input predicates."""

import pytest

from tableside.core.validators import (
    is_allowed_email,
    is_strong_password,
    is_valid_table_code,
    password_policy_error,
)


class TestTableCode:
    @pytest.mark.parametrize("code", ["22/CS/062", "00/CS/000", "99/CS/999"])
    def test_valid(self, code):
        assert is_valid_table_code(code)

    @pytest.mark.parametrize("code", [
        "", None, "2/CS/062", "22/cs/062", "22/CS/62", "22-CS-062", " 22/CS/062", "22/CS/0621",
    ])
    def test_invalid(self, code):
        assert not is_valid_table_code(code)


class TestEmailDomain:
    def test_gmail_accepted(self):
        assert is_allowed_email("first.last+tag@gmail.com")

    @pytest.mark.parametrize("email", [
        "someone@yahoo.com", "someone@gmail.co", "a@b@gmail.com", "bad space@gmail.com", "", None,
    ])
    def test_other_addresses_rejected(self, email):
        assert not is_allowed_email(email)

    def test_configured_domain(self):
        assert is_allowed_email("chef@restaurant.in", domain="restaurant.in")


class TestPasswordPolicy:
    def test_strong_password(self):
        assert is_strong_password("Secret#123")
        assert password_policy_error("Secret#123") is None

    @pytest.mark.parametrize("password,fragment", [
        ("Se#1", "at least 8"),
        ("secret#123", "uppercase"),
        ("SECRET#123", "lowercase"),
        ("Secret#abc", "number"),
        ("Secret1234", "special"),
    ])
    def test_each_rule_reported(self, password, fragment):
        assert fragment in password_policy_error(password)
