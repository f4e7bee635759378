"""KYC document storage on the local filesystem."""

import logging
import shutil
from pathlib import Path

from vendor_api.services.validation import ALLOWED_DOCUMENT_TYPES, ALLOWED_EXTENSIONS, UploadedDocument

logger = logging.getLogger(__name__)


def save_document(upload_dir: str, application_id: str, field: str, doc: UploadedDocument) -> str:
    """
    Write a document to {upload_dir}/{application_id}/{field}.{ext}.

    Returns:
        The stored path, relative to upload_dir.
    """
    extension = doc.extension if doc.extension in ALLOWED_EXTENSIONS else (
        ALLOWED_DOCUMENT_TYPES.get(doc.content_type, "bin")
    )
    relative = Path(application_id) / f"{field}.{extension}"
    target = Path(upload_dir) / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(doc.content)

    logger.info(
        "Document stored: application_id=%s, field=%s, bytes=%s",
        application_id, field, len(doc.content),
    )
    return relative.as_posix()


def remove_documents(upload_dir: str, application_id: str) -> None:
    """Delete every stored document of an application that was not saved."""
    target = Path(upload_dir) / application_id
    if target.exists():
        shutil.rmtree(target)
        logger.warning("Documents removed: application_id=%s", application_id)
