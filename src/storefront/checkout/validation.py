"""Checkout form rules.

Rules are checked in a fixed order and only the first failure is
reported: required fields, then phone 1, then phone 2.
"""

import re

from protean.exceptions import ValidationError

PHONE_DIGITS = 11

_PHONE_PATTERN = re.compile(rf"[0-9]{{{PHONE_DIGITS}}}")


def is_valid_phone(number: str) -> bool:
    return bool(_PHONE_PATTERN.fullmatch(number or ""))


def validate_checkout_form(customer_name: str, phone1: str, phone2: str | None, address: str) -> None:
    """Raise ValidationError describing the first rule the form breaks."""
    if not (customer_name or "").strip() or not (phone1 or "").strip() or not (address or "").strip():
        raise ValidationError({"form": ["Please fill all required fields"]})

    if not is_valid_phone(phone1):
        raise ValidationError({"phone1": [f"Phone number 1 must be {PHONE_DIGITS} digits"]})

    if phone2 and not is_valid_phone(phone2):
        raise ValidationError({"phone2": [f"Phone number 2 must be {PHONE_DIGITS} digits"]})
