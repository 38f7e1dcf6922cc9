# ABOUTME: Plain-text "document" reader.
# ABOUTME: No embedded properties; samples the text and estimates a page count.

import math
from pathlib import Path

from shelfmark.errors import ExtractionUnavailable
from shelfmark.metadata.types import DocumentProperties

MAX_TEXT_LENGTH = 5000
WORDS_PER_PAGE = 250


def read_text_properties(path: Path) -> DocumentProperties:
    """Read a plain-text file as a document with no embedded properties.

    Raises:
        ExtractionUnavailable: If the file cannot be read.
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ExtractionUnavailable(f"Failed to read text file: {path}: {exc}") from exc

    word_count = len(text.split())
    return DocumentProperties(
        format="TXT",
        page_count=math.ceil(word_count / WORDS_PER_PAGE) if word_count else None,
        text=text[:MAX_TEXT_LENGTH],
    )
