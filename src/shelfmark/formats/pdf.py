# ABOUTME: PDF document-info and text extraction using pypdf.
# ABOUTME: Defensive wrapper that turns every parser failure into ExtractionUnavailable.

import logging
from datetime import datetime
from pathlib import Path

import pypdf
from pypdf import PasswordType

from shelfmark.errors import ExtractionUnavailable
from shelfmark.metadata.types import DocumentProperties

logger = logging.getLogger(__name__)

# Malformed object references are common in uploads; pypdf logs each one.
logging.getLogger("pypdf").setLevel(logging.ERROR)

# Sampled text is used for heuristics and search, not full-text storage.
MAX_TEXT_LENGTH = 5000
_MAX_TEXT_PAGES = 10


def _open_reader(path: Path) -> pypdf.PdfReader:
    if not path.exists():
        raise ExtractionUnavailable(f"File not found: {path}")
    if path.stat().st_size == 0:
        raise ExtractionUnavailable(f"File is empty: {path}")

    try:
        reader = pypdf.PdfReader(str(path))
    except Exception as exc:
        raise ExtractionUnavailable(f"Failed to read PDF: {path}: {exc}") from exc

    if reader.is_encrypted:
        # Owner-password-only files open with an empty user password.
        try:
            decrypted = reader.decrypt("")
        except Exception as exc:
            raise ExtractionUnavailable(f"PDF is encrypted: {path}") from exc
        if decrypted == PasswordType.NOT_DECRYPTED:
            raise ExtractionUnavailable(f"PDF is encrypted: {path}")
    return reader


def _info_value(value: object) -> str | None:
    """Normalize a document-info entry to a stripped string or None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _creation_date(info: pypdf.DocumentInformation) -> datetime | None:
    try:
        return info.creation_date
    except (ValueError, TypeError) as exc:
        logger.debug("Ignoring malformed PDF creation date: %s", exc)
        return None


def _sample_text(reader: pypdf.PdfReader, path: Path) -> str:
    """Extract text from the first pages until MAX_TEXT_LENGTH is reached.

    Pages whose text layer cannot be decoded are skipped; a scanned PDF
    simply yields an empty string.
    """
    chunks: list[str] = []
    length = 0
    for index, page in enumerate(reader.pages[:_MAX_TEXT_PAGES]):
        try:
            text = page.extract_text() or ""
        except Exception as exc:
            logger.debug("No text layer on page %d of %s: %s", index + 1, path.name, exc)
            continue
        chunks.append(text)
        length += len(text)
        if length >= MAX_TEXT_LENGTH:
            break
    return "\n".join(chunks)[:MAX_TEXT_LENGTH]


def read_pdf_properties(path: Path) -> DocumentProperties:
    """Read document info and a text sample from a PDF file.

    Args:
        path: Path to the PDF file.

    Returns:
        DocumentProperties with whatever the file declares.

    Raises:
        ExtractionUnavailable: If the file is missing, empty, corrupt, or
            encrypted with a non-empty password.
    """
    reader = _open_reader(path)

    try:
        page_count = len(reader.pages)
        info = reader.metadata
    except Exception as exc:
        raise ExtractionUnavailable(f"Failed to read PDF structure: {path}: {exc}") from exc

    props = DocumentProperties(format="PDF", page_count=page_count)
    if info is not None:
        props.title = _info_value(info.title)
        props.author = _info_value(info.author)
        props.subject = _info_value(info.subject)
        props.creator = _info_value(info.creator)
        props.producer = _info_value(info.producer)
        props.creation_date = _creation_date(info)

    props.text = _sample_text(reader, path)
    return props
