"""
Vendor application field catalogue.

Steps:
  1. Identity → 2. Business → 3. Legal & Tax → 4. Documents → 5. Review & Submit

Every field belongs to exactly one step and one category:
  - TEXT:   scalar text, persisted to durable storage
  - SECRET: scalar text, kept in memory only (passwords)
  - FILE:   binary attachment, never persisted
"""

from dataclasses import dataclass
from enum import Enum


class FieldKind(str, Enum):
    TEXT = "TEXT"
    SECRET = "SECRET"
    FILE = "FILE"


class BusinessType(str, Enum):
    RETAIL = "retail"
    WHOLESALE = "wholesale"
    MANUFACTURING = "manufacturing"
    SERVICES = "services"
    OTHER = "other"


BUSINESS_TYPE_LABELS = {
    BusinessType.RETAIL: "Retail",
    BusinessType.WHOLESALE: "Wholesale",
    BusinessType.MANUFACTURING: "Manufacturing",
    BusinessType.SERVICES: "Services",
    BusinessType.OTHER: "Other",
}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    step: int
    kind: FieldKind = FieldKind.TEXT
    required: bool = True


@dataclass(frozen=True)
class Attachment:
    """An uploaded document. Lives in memory for the session only."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


# ── Steps ──────────────────────────────────────────────────

STEP_IDENTITY = 1
STEP_BUSINESS = 2
STEP_LEGAL = 3
STEP_DOCUMENTS = 4
STEP_REVIEW = 5

STEP_TITLES = {
    STEP_IDENTITY: "Personal Information",
    STEP_BUSINESS: "Business Information",
    STEP_LEGAL: "Legal & Tax Information",
    STEP_DOCUMENTS: "Document Upload",
    STEP_REVIEW: "Review & Submit",
}

TOTAL_STEPS = len(STEP_TITLES)
LAST_STEP = TOTAL_STEPS


# ── Fields ─────────────────────────────────────────────────

FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("name", "Full name", STEP_IDENTITY),
    FieldSpec("email", "Email", STEP_IDENTITY),
    FieldSpec("phone_number", "Phone number", STEP_IDENTITY),
    FieldSpec("password", "Password", STEP_IDENTITY, FieldKind.SECRET),
    FieldSpec("password_confirmation", "Confirm password", STEP_IDENTITY, FieldKind.SECRET),
    FieldSpec("business_name", "Business name", STEP_BUSINESS),
    FieldSpec("business_type", "Business type", STEP_BUSINESS),
    FieldSpec("business_description", "Business description", STEP_BUSINESS),
    FieldSpec("business_email", "Business email", STEP_BUSINESS),
    FieldSpec("business_phone", "Business phone", STEP_BUSINESS),
    FieldSpec("business_address", "Business address", STEP_BUSINESS),
    FieldSpec("website", "Website", STEP_BUSINESS, required=False),
    FieldSpec("tin_number", "TIN number", STEP_LEGAL),
    FieldSpec("trade_license_number", "Trade license number", STEP_LEGAL),
    FieldSpec("tax_id", "Tax ID", STEP_LEGAL),
    FieldSpec("trade_license_doc", "Trade license document", STEP_DOCUMENTS, FieldKind.FILE),
    FieldSpec("id_card_doc", "ID card", STEP_DOCUMENTS, FieldKind.FILE),
)

FIELDS_BY_NAME = {spec.name: spec for spec in FIELDS}

SCALAR_FIELDS = tuple(f.name for f in FIELDS if f.kind != FieldKind.FILE)
PERSISTED_FIELDS = tuple(f.name for f in FIELDS if f.kind == FieldKind.TEXT)
FILE_FIELDS = tuple(f.name for f in FIELDS if f.kind == FieldKind.FILE)


def get_field(name: str) -> FieldSpec:
    """Look up a field, raising KeyError for unknown names."""
    try:
        return FIELDS_BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown vendor application field: {name}") from None


def fields_for_step(step: int) -> tuple[FieldSpec, ...]:
    return tuple(f for f in FIELDS if f.step == step)


def step_of(name: str) -> int:
    return get_field(name).step
