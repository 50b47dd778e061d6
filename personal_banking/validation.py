"""
Input Validation

Validation rules for raw registration input, dispatched by name. Each rule is
a pure function ``str -> ValidationResult``. Normalizers turn accepted input
into the canonical formats the stores use:

- tax id: ``000.000.000-00``
- phone:  ``+55 (XX) XXXXX-XXXX``
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .errors import ValidationError


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> 'ValidationResult':
        return cls(True)

    @classmethod
    def fail(cls, message: str) -> 'ValidationResult':
        return cls(False, message)


TAX_ID_PATTERN = re.compile(r'^(\d{3}\.?\d{3}\.?\d{3}-\d{2}|\d{11})$')
NAME_PATTERN = re.compile(r'^[A-Za-zÀ-ÿ\s]{2,50}$')
PHONE_PATTERN = re.compile(
    r'^\+55 \(\d{2}\) 9\d{4}-?\d{4}$|^\+55\d{11}$|^55\d{11}$'
)


def _digits(value: str) -> str:
    return re.sub(r'\D', '', value)


def validate_tax_id(value: str) -> ValidationResult:
    if not value or not TAX_ID_PATTERN.match(value):
        return ValidationResult.fail(
            "Invalid tax id format. Correct format: 123.456.789-00 or 12345678900"
        )
    digits = _digits(value)
    if len(set(digits)) == 1:
        return ValidationResult.fail("Tax id cannot be composed of repeated digits.")
    return ValidationResult.ok()


def validate_name(value: str) -> ValidationResult:
    if not value or not value.strip():
        return ValidationResult.fail("Name cannot be empty.")
    if not NAME_PATTERN.match(value):
        return ValidationResult.fail(
            "Name must contain only letters and spaces, and be between 2 and 50 characters."
        )
    return ValidationResult.ok()


def validate_phone(value: str) -> ValidationResult:
    if not value or not PHONE_PATTERN.match(value):
        return ValidationResult.fail(
            "Invalid phone number format. Correct formats: +55 (XX) 9XXXX-XXXX, or +55XX9XXXXXXXX"
        )
    return ValidationResult.ok()


def validate_password(value: str) -> ValidationResult:
    if not value or len(value) < 8:
        return ValidationResult.fail("Password must be at least 8 characters long.")
    if not re.search(r'[A-Za-z]', value) or not re.search(r'\d', value):
        return ValidationResult.fail("Password must include both letters and numbers.")
    return ValidationResult.ok()


RULES: Dict[str, Callable[[str], ValidationResult]] = {
    "tax_id": validate_tax_id,
    "name": validate_name,
    "phone": validate_phone,
    "password": validate_password,
}


def validate(rule: str, value: str) -> ValidationResult:
    """Run the named rule against a value"""
    try:
        check = RULES[rule]
    except KeyError:
        raise ValueError(f"Unknown validation rule: {rule}") from None
    return check(value)


def require(rule: str, value: str) -> str:
    """
    Return the value if it passes the named rule.

    Raises:
        ValidationError: With the rule's message when the value is rejected
    """
    result = validate(rule, value)
    if not result.valid:
        raise ValidationError(result.message)
    return value


def normalize_tax_id(value: str) -> Optional[str]:
    """Canonical ``000.000.000-00`` form, or None if there are not 11 digits"""
    digits = _digits(value or "")
    if len(digits) != 11:
        return None
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def normalize_phone(value: str) -> Optional[str]:
    """Canonical ``+55 (XX) XXXXX-XXXX`` form, or None if the number is malformed"""
    digits = _digits(value or "")
    if digits.startswith("55") and len(digits) == 13:
        digits = digits[2:]
    if len(digits) != 11:
        return None
    return f"+55 ({digits[:2]}) {digits[2:7]}-{digits[7:]}"
