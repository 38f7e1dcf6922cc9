# ABOUTME: Core metadata data structures for the intake pipeline.
# ABOUTME: DocumentProperties comes out of format readers; ExtractionResult goes to the caller.

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from shelfmark.metadata.genre import DEFAULT_GENRE


class ExtractionMethod(str, Enum):
    """Which source produced the final title."""

    PROPERTIES = "properties"
    CONTENT = "content"
    FILENAME = "filename"
    FALLBACK = "fallback"


@dataclass
class DocumentProperties:
    """Raw fields read from a document by a format reader.

    Embedded properties are whatever the file header declares; `text` is a
    sample of the body text (possibly empty for scanned documents).
    """

    format: str
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: datetime | None = None
    page_count: int | None = None
    text: str = ""


@dataclass
class ExtractionResult:
    """Metadata guessed for one upload.

    Built fresh per upload and never persisted on its own: the caller copies
    its fields into the book record. `confidence` is an additive counter,
    not a probability.
    """

    title: str | None = None
    author: str | None = None
    genre: str = DEFAULT_GENRE
    description: str | None = None
    page_count: int | None = None
    confidence: int = 0
    method: ExtractionMethod = ExtractionMethod.FALLBACK
    subject: str | None = None
    creator: str | None = None
    creation_date: datetime | None = None
    language: str | None = None
    keywords: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def published_year(self) -> int | None:
        """Year of the document creation date, if known."""
        return self.creation_date.year if self.creation_date else None

    @property
    def has_title_and_author(self) -> bool:
        """Whether both required fields are non-empty."""
        return bool(self.title and self.title.strip() and self.author and self.author.strip())
