"""VendorApplication ORM model — marketplace seller registrations."""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from vendor_api.db.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VendorApplication(Base):
    __tablename__ = "vendor_applications"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    application_id: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)

    # Personal
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Business
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    business_type: Mapped[str] = mapped_column(String(30), nullable=False)
    business_description: Mapped[str] = mapped_column(Text, nullable=False)
    business_email: Mapped[str] = mapped_column(String(255), nullable=False)
    business_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    business_address: Mapped[str] = mapped_column(Text, nullable=False)
    website: Mapped[str | None] = mapped_column(String(255))

    # Legal & tax
    tin_number: Mapped[str] = mapped_column(String(50), nullable=False)
    trade_license_number: Mapped[str] = mapped_column(String(50), nullable=False)
    tax_id: Mapped[str] = mapped_column(String(50), nullable=False)

    # Documents (paths under UPLOAD_DIR)
    trade_license_doc: Mapped[str | None] = mapped_column(Text)
    id_card_doc: Mapped[str | None] = mapped_column(Text)

    status: Mapped[str] = mapped_column(String(30), default="pending_review")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
