# ABOUTME: Reads embedded properties and body-text heuristics from an uploaded document.
# ABOUTME: Never raises; unreadable files produce an empty extraction with an error reason.

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from shelfmark.errors import ExtractionUnavailable
from shelfmark.formats.reader import detect_format, read_document
from shelfmark.metadata.content import clean_author, clean_title, guess_from_text

logger = logging.getLogger(__name__)

SOURCE_PROPERTIES = "properties"
SOURCE_CONTENT = "content"


@dataclass
class DocumentExtraction:
    """Fields recovered from a document, tagged by where title and author came from."""

    format: str
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    creation_date: datetime | None = None
    page_count: int | None = None
    sampled_text: str = ""
    title_source: str | None = None
    author_source: str | None = None
    error: str | None = None

    @property
    def readable(self) -> bool:
        return self.error is None


def extract_from_document(path: Path) -> DocumentExtraction:
    """Extract title, author and supporting fields from a document.

    Embedded properties are preferred. When the title or author is missing,
    the first lines of the sampled text are scanned for them. Any failure to
    read the document is caught and reported through `error`.

    Args:
        path: Path to the stored upload.

    Returns:
        DocumentExtraction; fields that could not be recovered are None.
    """
    try:
        props = read_document(path)
    except ExtractionUnavailable as exc:
        logger.warning("Could not extract from %s: %s", path.name, exc)
        return DocumentExtraction(format=detect_format(path), error=str(exc))

    extraction = DocumentExtraction(
        format=props.format,
        subject=props.subject,
        creator=props.creator,
        creation_date=props.creation_date,
        page_count=props.page_count,
        sampled_text=props.text,
    )

    title = clean_title(props.title)
    if title:
        extraction.title = title
        extraction.title_source = SOURCE_PROPERTIES
    author = clean_author(props.author)
    if author:
        extraction.author = author
        extraction.author_source = SOURCE_PROPERTIES

    if extraction.title and extraction.author:
        return extraction

    if not props.text.strip():
        logger.debug("No text layer in %s", path.name)
        return extraction

    guess = guess_from_text(props.text)
    if extraction.title is None and guess.title:
        extraction.title = guess.title
        extraction.title_source = SOURCE_CONTENT
    if extraction.author is None and guess.author:
        extraction.author = guess.author
        extraction.author_source = SOURCE_CONTENT

    return extraction
