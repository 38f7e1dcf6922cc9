# ABOUTME: Exception types for the Shelfmark intake pipeline.
# ABOUTME: Separates locally recovered failures from the ones callers must handle.

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shelfmark.metadata.types import ExtractionResult


class ShelfmarkError(Exception):
    """Base class for all Shelfmark errors."""


class ExtractionUnavailable(ShelfmarkError):
    """Raised when a document cannot be parsed for properties or text.

    Format readers raise this; the extractor converts it into an empty
    result so the coordinator can fall back to filename heuristics.
    """


class RasterizationFailed(ShelfmarkError):
    """Raised when a page could not be rendered to an image in time."""


class CoverWriteFailed(ShelfmarkError):
    """Raised when the final cover image cannot be written to disk."""


class UploadRejected(ShelfmarkError):
    """Raised when an upload fails the type or size checks."""


class ValidationFailed(ShelfmarkError):
    """Raised when title or author is still empty after every fallback.

    Carries the extraction result so the caller can prefill a form and ask
    the user for the missing fields.
    """

    def __init__(self, message: str, extraction: ExtractionResult | None = None) -> None:
        super().__init__(message)
        self.extraction = extraction
