"""
Field validators for the vendor onboarding wizard.

Each validator is a pure function of the field value and returns an error
message, or None when the value is acceptable. password_confirmation also
depends on the current password.
"""

import re
from typing import Any, Mapping

from vendor_bot.wizard.fields import (
    BusinessType,
    FieldKind,
    fields_for_step,
    get_field,
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Ethiopian mobile numbers: 2519/2517 with country code, 09/07 with trunk prefix.
PHONE_RE = re.compile(r"^\+?(?:251[79]|0[79])\d{8}$")
PHONE_STRIP_RE = re.compile(r"[\s\-()]")

PASSWORD_MIN_LENGTH = 8

MIN_LENGTHS = {
    "name": 2,
    "business_name": 2,
    "business_description": 10,
    "business_address": 10,
    "tin_number": 10,
    "trade_license_number": 5,
    "tax_id": 5,
}

EMAIL_FIELDS = ("email", "business_email")
PHONE_FIELDS = ("phone_number", "business_phone")


def normalize_phone(value: str) -> str:
    """Drop spaces, hyphens and parentheses."""
    return PHONE_STRIP_RE.sub("", value or "")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match((value or "").strip()))


def is_valid_phone(value: str) -> bool:
    return bool(PHONE_RE.match(normalize_phone(value)))


def _required_text(label: str, value: str, min_length: int | None = None) -> str | None:
    text = (value or "").strip()
    if not text:
        return f"{label} is required."
    if min_length and len(text) < min_length:
        return f"{label} must be at least {min_length} characters."
    return None


def validate_field(name: str, value: Any, values: Mapping[str, Any] | None = None) -> str | None:
    """
    Validate one field.

    Args:
        name: Field name from the catalogue.
        value: Current value (str for scalar fields, Attachment or None for files).
        values: All current scalar values; only password_confirmation reads it.

    Returns:
        Human-readable error message, or None if valid.
    """
    spec = get_field(name)

    if spec.kind == FieldKind.FILE:
        if value is None:
            return f"Please upload your {spec.label.lower()}."
        return None

    text = value if isinstance(value, str) else ("" if value is None else str(value))

    if not spec.required:
        return None

    if name in EMAIL_FIELDS:
        error = _required_text(spec.label, text)
        if error:
            return error
        if not is_valid_email(text):
            return "Please enter a valid email address."
        return None

    if name in PHONE_FIELDS:
        error = _required_text(spec.label, text)
        if error:
            return error
        if not is_valid_phone(text):
            return "Please enter a valid phone number (e.g. +251912345678 or 0912345678)."
        return None

    if name == "password":
        if not text:
            return "Password is required."
        if len(text) < PASSWORD_MIN_LENGTH:
            return f"Password must be at least {PASSWORD_MIN_LENGTH} characters."
        return None

    if name == "password_confirmation":
        if not text:
            return "Please confirm your password."
        password = (values or {}).get("password") or ""
        if text != password:
            return "Passwords do not match."
        return None

    if name == "business_type":
        if not text.strip():
            return "Please select a business type."
        if text not in {t.value for t in BusinessType}:
            return "Please select a valid business type."
        return None

    return _required_text(spec.label, text, MIN_LENGTHS.get(name))


def validate_step_fields(
    step: int,
    values: Mapping[str, str],
    attachments: Mapping[str, Any],
) -> dict[str, str]:
    """Run every validator of a step. Returns {field: message} for failures, in field order."""
    errors: dict[str, str] = {}
    for spec in fields_for_step(step):
        if spec.kind == FieldKind.FILE:
            value = attachments.get(spec.name)
        else:
            value = values.get(spec.name, "")
        error = validate_field(spec.name, value, values)
        if error:
            errors[spec.name] = error
    return errors
