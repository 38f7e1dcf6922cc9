# ABOUTME: Picks a format reader for a document based on its file suffix.
# ABOUTME: Unknown formats raise ExtractionUnavailable so callers fall back to filenames.

from collections.abc import Callable
from pathlib import Path

from shelfmark.errors import ExtractionUnavailable
from shelfmark.formats.epub import read_epub_properties
from shelfmark.formats.pdf import read_pdf_properties
from shelfmark.formats.text import read_text_properties
from shelfmark.metadata.types import DocumentProperties

_READERS: dict[str, Callable[[Path], DocumentProperties]] = {
    ".pdf": read_pdf_properties,
    ".epub": read_epub_properties,
    ".txt": read_text_properties,
}

# Formats whose first page can be rendered to an image.
RASTERIZABLE_SUFFIXES: frozenset[str] = frozenset({".pdf"})

# Formats that support inserting a new first page.
COMPOSABLE_SUFFIXES: frozenset[str] = frozenset({".pdf"})


def detect_format(path: Path) -> str:
    """Human-readable format name for a path ("PDF", "EPUB", ...)."""
    suffix = path.suffix.lower().lstrip(".")
    return suffix.upper() if suffix else "Unknown"


def read_document(path: Path) -> DocumentProperties:
    """Read properties and a text sample from any supported document.

    Raises:
        ExtractionUnavailable: If the format is unsupported or the file is unreadable.
    """
    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise ExtractionUnavailable(f"Unsupported format for extraction: {path.suffix or path.name}")
    return reader(path)


def is_rasterizable(path: Path | None) -> bool:
    """Whether the first page of `path` can be rendered as a cover."""
    return path is not None and path.suffix.lower() in RASTERIZABLE_SUFFIXES


def supports_cover_page(path: Path) -> bool:
    """Whether a cover page can be prepended to `path`."""
    return path.suffix.lower() in COMPOSABLE_SUFFIXES
