# ABOUTME: Metadata package: heuristics for guessing title, author, and genre of uploads.
# ABOUTME: Exports the ExtractionResult dataclass used throughout Shelfmark.

from shelfmark.metadata.filename import FilenameGuess, parse_filename
from shelfmark.metadata.genre import (
    DEFAULT_GENRE,
    DEFAULT_TABLES,
    GenreClassifier,
    GenreTables,
    classify_genre,
)
from shelfmark.metadata.types import DocumentProperties, ExtractionMethod, ExtractionResult

__all__ = [
    "DEFAULT_GENRE",
    "DEFAULT_TABLES",
    "DocumentProperties",
    "ExtractionMethod",
    "ExtractionResult",
    "FilenameGuess",
    "GenreClassifier",
    "GenreTables",
    "classify_genre",
    "parse_filename",
]
