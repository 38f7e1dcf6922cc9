# ABOUTME: EPUB metadata and text extraction using ebooklib.
# ABOUTME: Defensive wrapper that handles malformed files gracefully.

import logging
import re
import warnings
from datetime import datetime
from pathlib import Path

import ebooklib
from bs4 import BeautifulSoup
from ebooklib import epub

from shelfmark.errors import ExtractionUnavailable
from shelfmark.metadata.types import DocumentProperties

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 5000

_YEAR_RE = re.compile(r"\b(1[0-9]{3}|20[0-9]{2})\b")


def _get_metadata_value(book: epub.EpubBook, namespace: str, name: str) -> str | None:
    """Extract a single metadata value from an EpubBook, or None if missing."""
    values = book.get_metadata(namespace, name)
    if not values:
        return None
    # Metadata entries are tuples of (value, attributes)
    value = values[0][0]
    return str(value).strip() if value else None


def _get_authors(book: epub.EpubBook) -> list[str]:
    """Extract all author names from an EpubBook."""
    creators = book.get_metadata("DC", "creator")
    if not creators:
        return []
    return [str(entry[0]).strip() for entry in creators if entry[0]]


def _parse_date(value: str | None) -> datetime | None:
    """Parse a Dublin Core date ("1965", "1965-08-01", full ISO timestamps)."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        pass
    m = _YEAR_RE.search(value)
    return datetime(int(m.group(1)), 1, 1) if m else None


def _sample_text(book: epub.EpubBook) -> str:
    """Collect plain text from the spine documents, in reading order."""
    chunks: list[str] = []
    length = 0
    for item_id, _linear in book.spine:
        item = book.get_item_with_id(item_id)
        if item is None or item.get_type() != ebooklib.ITEM_DOCUMENT:
            continue
        soup = BeautifulSoup(item.get_content(), "html.parser")
        text = soup.get_text("\n")
        chunks.append(text)
        length += len(text)
        if length >= MAX_TEXT_LENGTH:
            break
    return "\n".join(chunks)[:MAX_TEXT_LENGTH]


def read_epub_properties(path: Path) -> DocumentProperties:
    """Extract Dublin Core metadata and a text sample from an EPUB file.

    Args:
        path: Path to the EPUB file.

    Returns:
        DocumentProperties populated with extracted fields.

    Raises:
        ExtractionUnavailable: If the file cannot be read or parsed.
    """
    if not path.exists():
        raise ExtractionUnavailable(f"File not found: {path}")

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            book = epub.read_epub(str(path), options={"ignore_ncx": True})
    except Exception as exc:
        raise ExtractionUnavailable(f"Failed to read EPUB: {path}: {exc}") from exc

    authors = _get_authors(book)
    try:
        text = _sample_text(book)
    except Exception as exc:
        logger.warning("Could not read text from %s: %s", path.name, exc)
        text = ""

    return DocumentProperties(
        format="EPUB",
        title=_get_metadata_value(book, "DC", "title"),
        author=", ".join(authors) if authors else None,
        subject=_get_metadata_value(book, "DC", "subject"),
        creator=_get_metadata_value(book, "DC", "publisher"),
        creation_date=_parse_date(_get_metadata_value(book, "DC", "date")),
        text=text,
    )
