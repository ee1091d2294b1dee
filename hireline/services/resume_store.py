"""
Resume file storage on the local upload directory.
"""
import os
import uuid
import logging
from typing import Optional

from fastapi import UploadFile

from hireline.core.config import settings
from hireline.core.exceptions import UnsupportedFormatError, ValidationError
from hireline.services.text_extraction import (
    SUPPORTED_EXTENSIONS,
    normalize_extension,
    resolve_resume_path,
)

logger = logging.getLogger(__name__)


def save_upload(file: UploadFile) -> str:
    """Validate and store an uploaded resume. Returns the stored file name."""
    if not file or not file.filename:
        raise ValidationError("No file uploaded")

    ext = normalize_extension(os.path.splitext(file.filename)[1])
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(ext)

    content = file.file.read()
    if not content:
        raise ValidationError("Uploaded file is empty")
    max_bytes = settings.max_upload_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise ValidationError(f"File exceeds the {settings.max_upload_mb}MB limit")

    os.makedirs(settings.upload_dir, exist_ok=True)
    stored_name = f"{uuid.uuid4().hex}{ext}"
    with open(resolve_resume_path(stored_name), "wb") as f:
        f.write(content)

    logger.info(f"Stored resume upload {file.filename} as {stored_name} ({len(content)} bytes)")
    return stored_name


def release_file(file_path: Optional[str]) -> None:
    """Delete a stored resume file; a file that is already gone is not an error."""
    if not file_path:
        return
    path = resolve_resume_path(file_path)
    try:
        os.remove(path)
        logger.info(f"Released resume file {file_path}")
    except FileNotFoundError:
        logger.warning(f"Resume file {file_path} was already missing")
