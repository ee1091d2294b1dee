"""
Document text extraction for uploaded resumes.

Each format has its own binary parser (PyPDF2, python-docx); every parser
failure leaves this module as an ExtractionError.
"""
import os
import logging
from typing import Optional

import PyPDF2
import docx

from hireline.core.config import settings
from hireline.core.exceptions import (
    ExtractionError,
    ResumeFileNotFoundError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

PDF_EXTENSION = ".pdf"
DOCX_EXTENSION = ".docx"
SUPPORTED_EXTENSIONS = {PDF_EXTENSION, DOCX_EXTENSION}


def normalize_extension(extension: Optional[str]) -> str:
    ext = (extension or "").strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


def resolve_resume_path(file_path: str) -> str:
    """Map a stored resume file name onto the upload directory."""
    return os.path.join(settings.upload_dir, os.path.basename(file_path))


def _extract_pdf(file_path: str) -> str:
    with open(file_path, "rb") as f:
        pdf_reader = PyPDF2.PdfReader(f)
        if pdf_reader.is_encrypted:
            raise ExtractionError("PDF is encrypted and cannot be read.")
        pages = [page.extract_text() or "" for page in pdf_reader.pages]
    return "\n".join(pages)


def _extract_docx(file_path: str) -> str:
    document = docx.Document(file_path)
    parts = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                parts.append(" | ".join(cells))
    return "\n".join(parts)


_EXTRACTORS = {
    PDF_EXTENSION: _extract_pdf,
    DOCX_EXTENSION: _extract_docx,
}


def extract_text(file_path: str, extension: Optional[str] = None) -> str:
    """
    Extract the plain text of a PDF or DOCX file.

    Args:
        file_path: Path to the file on the resume store.
        extension: Declared extension; taken from the path when omitted.

    Returns:
        str: Stripped text. May be empty when the document has no text layer.

    Raises:
        ResumeFileNotFoundError: The path does not resolve to a file.
        UnsupportedFormatError: Extension outside {.pdf, .docx}.
        ExtractionError: The format parser rejected the bytes.
    """
    if not os.path.isfile(file_path):
        raise ResumeFileNotFoundError(file_path)

    ext = normalize_extension(extension if extension is not None else os.path.splitext(file_path)[1])
    extractor = _EXTRACTORS.get(ext)
    if extractor is None:
        raise UnsupportedFormatError(ext)

    try:
        text = extractor(file_path)
    except ExtractionError:
        raise
    except Exception as e:
        logger.warning(f"Text extraction failed for {os.path.basename(file_path)}: {e}")
        raise ExtractionError(
            f"Error extracting text from {ext} file: {e}",
            details={"extension": ext},
        ) from e

    text = text.strip()
    logger.info(f"Extracted {len(text)} characters from {ext} file")
    return text
