"""Pydantic schemas for vendor application endpoints."""

from __future__ import annotations
import uuid
from datetime import datetime
from enum import Enum
from pydantic import BaseModel


class ApplicationStatus(str, Enum):
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class BusinessType(str, Enum):
    RETAIL = "retail"
    WHOLESALE = "wholesale"
    MANUFACTURING = "manufacturing"
    SERVICES = "services"
    OTHER = "other"


class SubmissionData(BaseModel):
    """Echo of the created application returned to the wizard."""
    application_id: str
    name: str
    email: str
    business_name: str
    status: str
    submitted_at: datetime
    estimated_review_time: str = "2-3 business days"


class SubmissionResponse(BaseModel):
    success: bool = True
    message: str
    data: SubmissionData


class VendorApplicationResponse(BaseModel):
    """Schema for returning a stored application (never the password hash)."""
    id: uuid.UUID
    application_id: str
    name: str
    email: str
    phone_number: str
    business_name: str
    business_type: str
    business_description: str
    business_email: str
    business_phone: str
    business_address: str
    website: str | None
    tin_number: str
    trade_license_number: str
    tax_id: str
    trade_license_doc: str | None
    id_card_doc: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
