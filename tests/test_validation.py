"""
Tests for input validation rules and normalizers
"""

import pytest

from personal_banking.errors import ValidationError
from personal_banking.validation import (
    RULES, normalize_phone, normalize_tax_id, require, validate
)


class TestRules:

    @pytest.mark.parametrize("value", ["123.456.789-09", "123456789-09", "12345678909"])
    def test_valid_tax_ids(self, value):
        assert validate("tax_id", value).valid

    @pytest.mark.parametrize("value", ["", "123.456.789", "abc.def.ghi-jk", "111.111.111-11"])
    def test_invalid_tax_ids(self, value):
        result = validate("tax_id", value)
        assert not result.valid
        assert result.message

    def test_repeated_digit_message(self):
        assert "repeated" in validate("tax_id", "00000000000").message

    @pytest.mark.parametrize("value", ["Maria Silva", "José Ângelo", "Al"])
    def test_valid_names(self, value):
        assert validate("name", value).valid

    @pytest.mark.parametrize("value", ["", "   ", "A", "R2D2", "x" * 51])
    def test_invalid_names(self, value):
        assert not validate("name", value).valid

    @pytest.mark.parametrize("value", ["+55 (11) 91234-5678", "+55 (11) 912345678", "+5511912345678", "5511912345678"])
    def test_valid_phones(self, value):
        assert validate("phone", value).valid

    @pytest.mark.parametrize("value", ["", "11912345678", "+55 (11) 81234-5678", "+1 555 1234"])
    def test_invalid_phones(self, value):
        assert not validate("phone", value).valid

    @pytest.mark.parametrize("value,valid", [
        ("secret123", True),
        ("short1", False),
        ("onlyletters", False),
        ("1234567890", False),
    ])
    def test_passwords(self, value, valid):
        assert validate("password", value).valid is valid

    def test_rules_registry(self):
        assert set(RULES) == {"tax_id", "name", "phone", "password"}

    def test_unknown_rule(self):
        with pytest.raises(ValueError, match="Unknown validation rule"):
            validate("email", "someone@example.com")


class TestRequire:

    def test_require_returns_value(self):
        assert require("name", "Maria Silva") == "Maria Silva"

    def test_require_raises_with_rule_message(self):
        with pytest.raises(ValidationError, match="at least 8 characters") as exc_info:
            require("password", "abc")
        assert exc_info.value.to_dict()["error"] == "ValidationFailed"


class TestNormalizers:

    @pytest.mark.parametrize("value", ["12345678909", "123.456.789-09", "123456789-09"])
    def test_tax_id(self, value):
        assert normalize_tax_id(value) == "123.456.789-09"

    @pytest.mark.parametrize("value", ["", "1234", None, "123.456.789-0"])
    def test_tax_id_rejected(self, value):
        assert normalize_tax_id(value) is None

    @pytest.mark.parametrize("value", [
        "+55 (11) 91234-5678", "+5511912345678", "5511912345678", "+55 (11) 912345678", "11912345678"
    ])
    def test_phone(self, value):
        assert normalize_phone(value) == "+55 (11) 91234-5678"

    @pytest.mark.parametrize("value", ["", None, "12345", "+55 (11) 1234-5678"])
    def test_phone_rejected(self, value):
        assert normalize_phone(value) is None
