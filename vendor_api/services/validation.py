"""
Server-side validation of vendor applications.

Mirrors the wizard's rules and reports failures as {field: [messages]} so
the client can map them straight back onto its inline errors.
"""

import re
from dataclasses import dataclass
from typing import Mapping

from vendor_api.schemas.vendor_application import BusinessType

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?(?:251[79]|0[79])\d{8}$")
PHONE_STRIP_RE = re.compile(r"[\s\-()]")
URL_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)

REQUIRED_TEXT_FIELDS = (
    "name",
    "email",
    "phone_number",
    "password",
    "password_confirmation",
    "business_name",
    "business_type",
    "business_description",
    "business_email",
    "business_phone",
    "business_address",
    "tin_number",
    "trade_license_number",
    "tax_id",
)
TEXT_FIELDS = REQUIRED_TEXT_FIELDS + ("website",)
DOCUMENT_FIELDS = ("trade_license_doc", "id_card_doc")

MIN_LENGTHS = {
    "name": 2,
    "business_name": 2,
    "business_description": 10,
    "business_address": 10,
    "tin_number": 10,
    "trade_license_number": 5,
    "tax_id": 5,
}

# Passwords are checked as typed; whitespace counts.
SECRET_FIELDS = ("password", "password_confirmation")
PASSWORD_MIN_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt input limit

ALLOWED_DOCUMENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "application/pdf": "pdf",
}
ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png", "pdf")


@dataclass(frozen=True)
class UploadedDocument:
    filename: str
    content_type: str
    content: bytes

    @property
    def extension(self) -> str:
        return self.filename.rsplit(".", 1)[-1].lower() if "." in self.filename else ""


def _label(field: str) -> str:
    return field.replace("_", " ")


def normalize_phone(value: str) -> str:
    return PHONE_STRIP_RE.sub("", value)


def validate_application(
    fields: Mapping[str, str],
    documents: Mapping[str, UploadedDocument | None],
    max_document_bytes: int,
) -> dict[str, list[str]]:
    """
    Validate a submitted application.

    Returns:
        {} when valid, otherwise {field: [message, ...]} in field order.
    """
    errors: dict[str, list[str]] = {}

    def add(field: str, message: str) -> None:
        errors.setdefault(field, []).append(message)

    for field in REQUIRED_TEXT_FIELDS:
        value = fields.get(field) or ""
        if field not in SECRET_FIELDS:
            value = value.strip()
        if not value:
            add(field, f"The {_label(field)} field is required.")
            continue
        min_length = MIN_LENGTHS.get(field)
        if min_length and len(value) < min_length:
            add(field, f"The {_label(field)} must be at least {min_length} characters.")

    for field in ("email", "business_email"):
        value = (fields.get(field) or "").strip()
        if value and not EMAIL_RE.match(value):
            add(field, f"The {_label(field)} must be a valid email.")

    for field in ("phone_number", "business_phone"):
        value = fields.get(field) or ""
        if value.strip() and not PHONE_RE.match(normalize_phone(value)):
            add(field, f"The {_label(field)} format is invalid.")

    password = fields.get("password") or ""
    confirmation = fields.get("password_confirmation") or ""
    if password and len(password) < PASSWORD_MIN_LENGTH:
        add("password", f"The password must be at least {PASSWORD_MIN_LENGTH} characters.")
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        add("password", f"The password may not be greater than {MAX_PASSWORD_BYTES} characters.")
    if password and confirmation and password != confirmation:
        add("password_confirmation", "The password confirmation does not match.")

    business_type = (fields.get("business_type") or "").strip()
    if business_type and business_type not in {t.value for t in BusinessType}:
        add("business_type", "The selected business type is invalid.")

    website = (fields.get("website") or "").strip()
    if website and not URL_RE.match(website):
        add("website", "The website format is invalid.")

    for field in DOCUMENT_FIELDS:
        doc = documents.get(field)
        if doc is None or not doc.content:
            add(field, f"The {_label(field)} field is required.")
            continue
        if doc.content_type not in ALLOWED_DOCUMENT_TYPES and doc.extension not in ALLOWED_EXTENSIONS:
            add(field, f"The {_label(field)} must be a file of type: {', '.join(ALLOWED_EXTENSIONS)}.")
        if len(doc.content) > max_document_bytes:
            add(field, f"The {_label(field)} may not be greater than {max_document_bytes // 1024} kilobytes.")

    return errors
