"""Vendor Application API — registration submission, listing and lookup."""

import logging
import random
import string
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from vendor_api.config import settings
from vendor_api.db.database import get_db
from vendor_api.models.vendor_application import VendorApplication
from vendor_api.schemas.vendor_application import (
    ApplicationStatus,
    SubmissionData,
    SubmissionResponse,
    VendorApplicationResponse,
)
from vendor_api.services.documents import remove_documents, save_document
from vendor_api.services.security import hash_password
from vendor_api.services.validation import (
    DOCUMENT_FIELDS,
    TEXT_FIELDS,
    UploadedDocument,
    normalize_phone,
    validate_application,
)

router = APIRouter()
logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "The given data was invalid."
EMAIL_TAKEN_MESSAGE = "The email has already been taken."


def _generate_application_id() -> str:
    """Generate application ID: APP-{EPOCH_MS}-{9 random chars}."""
    rand_part = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"APP-{int(time.time() * 1000)}-{rand_part}"


def _validation_error(errors: dict[str, list[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": VALIDATION_MESSAGE, "errors": errors},
    )


async def _read_submission(request: Request) -> tuple[dict[str, str], dict[str, UploadedDocument | None]]:
    """Pull text fields and documents out of a multipart (or JSON) body."""
    fields: dict[str, str] = {}
    documents: dict[str, UploadedDocument | None] = {name: None for name in DOCUMENT_FIELDS}

    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Request body must be a JSON object")
        for name in TEXT_FIELDS:
            if body.get(name) is not None:
                fields[name] = str(body[name])
        return fields, documents

    form = await request.form()
    for name in TEXT_FIELDS:
        value = form.get(name)
        if isinstance(value, str):
            fields[name] = value
    for name in DOCUMENT_FIELDS:
        value = form.get(name)
        if isinstance(value, UploadFile):
            documents[name] = UploadedDocument(
                filename=value.filename or name,
                content_type=value.content_type or "application/octet-stream",
                content=await value.read(),
            )
    return fields, documents


# ── POST /api/vendor-onboarding ──────────────────────────

async def _email_taken(db: AsyncSession, email: str) -> bool:
    result = await db.execute(
        select(VendorApplication.id).where(VendorApplication.email == email)
    )
    return result.scalar_one_or_none() is not None


@router.post("/", response_model=SubmissionResponse, status_code=201)
async def create_application(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Submit a new vendor application from the onboarding wizard."""
    fields, documents = await _read_submission(request)

    errors = validate_application(fields, documents, settings.max_document_bytes)
    if errors:
        logger.info("Vendor application rejected: fields=%s", sorted(errors))
        return _validation_error(errors)

    email = fields["email"].strip().lower()
    if await _email_taken(db, email):
        return _validation_error({"email": [EMAIL_TAKEN_MESSAGE]})

    application = VendorApplication(
        application_id=_generate_application_id(),
        name=fields["name"].strip(),
        email=email,
        phone_number=normalize_phone(fields["phone_number"]),
        password_hash=hash_password(fields["password"]),
        business_name=fields["business_name"].strip(),
        business_type=fields["business_type"].strip(),
        business_description=fields["business_description"].strip(),
        business_email=fields["business_email"].strip().lower(),
        business_phone=normalize_phone(fields["business_phone"]),
        business_address=fields["business_address"].strip(),
        website=(fields.get("website") or "").strip() or None,
        tin_number=fields["tin_number"].strip(),
        trade_license_number=fields["trade_license_number"].strip(),
        tax_id=fields["tax_id"].strip(),
        status=ApplicationStatus.PENDING_REVIEW.value,
    )
    db.add(application)

    # A concurrent request may claim the email between the check and the insert.
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        logger.info("Vendor application rejected: duplicate email=%s", email)
        return _validation_error({"email": [EMAIL_TAKEN_MESSAGE]})

    try:
        application.trade_license_doc = save_document(
            settings.upload_dir, application.application_id,
            "trade_license_doc", documents["trade_license_doc"],
        )
        application.id_card_doc = save_document(
            settings.upload_dir, application.application_id,
            "id_card_doc", documents["id_card_doc"],
        )
        await db.commit()
    except Exception:
        remove_documents(settings.upload_dir, application.application_id)
        raise
    await db.refresh(application)

    logger.info(
        "Vendor application created: application_id=%s, email=%s, business=%s",
        application.application_id,
        application.email,
        application.business_name,
    )

    return SubmissionResponse(
        success=True,
        message="Vendor application submitted successfully",
        data=SubmissionData(
            application_id=application.application_id,
            name=application.name,
            email=application.email,
            business_name=application.business_name,
            status=application.status,
            submitted_at=application.created_at or datetime.now(timezone.utc),
        ),
    )


# ── GET /api/vendor-onboarding ───────────────────────────

@router.get("/", response_model=list[VendorApplicationResponse])
async def list_applications(
    status: ApplicationStatus | None = Query(None, description="Filter by review status"),
    skip: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(get_db),
):
    """List vendor applications, newest first."""
    query = select(VendorApplication)
    if status:
        query = query.where(VendorApplication.status == status.value)
    query = query.order_by(VendorApplication.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


# ── GET /api/vendor-onboarding/{application_id} ──────────

@router.get("/{application_id}", response_model=VendorApplicationResponse)
async def get_application(
    application_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a single vendor application by its public application ID."""
    result = await db.execute(
        select(VendorApplication).where(VendorApplication.application_id == application_id)
    )
    application = result.scalar_one_or_none()
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application
