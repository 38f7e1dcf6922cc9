# ABOUTME: Pipeline coordinator: metadata extraction with fallbacks, user overrides, cover synthesis.
# ABOUTME: Produces the record a book-creation handler persists, or raises ValidationFailed.

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from shelfmark.core.compose import CompositionResult, compose_cover_page
from shelfmark.core.cover import CoverOptions, CoverResult, CoverSynthesizer
from shelfmark.core.extractor import SOURCE_CONTENT, SOURCE_PROPERTIES, extract_from_document
from shelfmark.core.storage import UploadLayout, file_size
from shelfmark.errors import ValidationFailed
from shelfmark.formats.reader import supports_cover_page
from shelfmark.metadata.content import build_description
from shelfmark.metadata.filename import clean_filename_title, parse_filename
from shelfmark.metadata.genre import GenreClassifier
from shelfmark.metadata.language import detect_language, extract_keywords
from shelfmark.metadata.types import ExtractionMethod, ExtractionResult

logger = logging.getLogger(__name__)

DEFAULT_UPLOADS_DIR = Path("uploads")

# Extracted values replace user input only above this confidence.
OVERRIDE_CONFIDENCE_THRESHOLD = 40

PROPERTY_TITLE_POINTS = 30
PROPERTY_AUTHOR_POINTS = 30
PROPERTY_SUBJECT_POINTS = 10
CONTENT_TITLE_POINTS = 25
CONTENT_AUTHOR_POINTS = 25
FILENAME_TITLE_POINTS = 20
FILENAME_AUTHOR_POINTS = 20
FALLBACK_TITLE_POINTS = 10

_GENRE_SAMPLE_LENGTH = 2000


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for one coordinator instance."""

    uploads_dir: Path = DEFAULT_UPLOADS_DIR
    attempt_first_page_raster: bool = True
    compose_cover_page: bool = False
    cover_options: CoverOptions = field(default_factory=CoverOptions)
    override_threshold: int = OVERRIDE_CONFIDENCE_THRESHOLD


@dataclass
class PipelineResult:
    """Final metadata, cover and file reference for one upload."""

    title: str
    author: str
    genre: str
    description: str | None
    pages: int | None
    confidence: int
    extraction: ExtractionResult
    book_path: Path
    original_name: str
    cover: CoverResult | None = None
    cover_error: str | None = None
    composition: CompositionResult | None = None

    @property
    def has_cover_page(self) -> bool:
        return self.composition is not None and self.composition.success

    def to_record(self) -> dict[str, Any]:
        """Plain-dict book record, as a persistence layer would store it."""
        extraction = self.extraction
        metadata: dict[str, Any] = {
            "extraction_method": extraction.method.value,
            "extraction_confidence": extraction.confidence,
            "extracted_title": extraction.title,
            "extracted_author": extraction.author,
            "extracted_subject": extraction.subject,
            "extracted_creator": extraction.creator,
            "extracted_creation_date": (
                extraction.creation_date.isoformat() if extraction.creation_date else None
            ),
            "extracted_published_year": extraction.published_year,
            "extracted_pages": extraction.page_count,
            "extracted_language": extraction.language,
            "extracted_keywords": list(extraction.keywords),
            "detected_genre": extraction.genre,
        }
        if self.has_cover_page:
            metadata["original_file"] = {
                "filename": self.composition.original_filename,
                "size": self.composition.original_size,
            }
        if self.cover_error:
            metadata["cover_error"] = self.cover_error

        cover_image = None
        if self.cover is not None:
            cover_image = {
                "url": self.cover.url,
                "filename": self.cover.filename,
                "size": self.cover.size_bytes,
                "is_generated": True,
                "generation_type": self.cover.generation_type,
            }

        return {
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
            "description": self.description,
            "pages": self.pages,
            "book_file": {
                "url": UploadLayout.book_url(self.book_path.name),
                "filename": self.book_path.name,
                "size": file_size(self.book_path),
                "has_cover_page": self.has_cover_page,
                "original_filename": self.original_name,
            },
            "cover_image": cover_image,
            "metadata": metadata,
        }


def _blank(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _choose(user_value: str | None, extracted: str | None, extracted_wins: bool) -> str | None:
    """User input wins unless a confident extraction found a non-empty value."""
    user_value = _blank(user_value)
    extracted = _blank(extracted)
    if user_value and not (extracted_wins and extracted):
        return user_value
    return extracted or user_value


class PipelineCoordinator:
    """Runs extraction, override resolution and cover synthesis for uploads.

    Stateless across calls; concurrent uploads only share the output
    directories, which rely on unique filenames.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        classifier: GenreClassifier | None = None,
        synthesizer: CoverSynthesizer | None = None,
    ) -> None:
        self._config = config or PipelineConfig()
        self._layout = UploadLayout(self._config.uploads_dir)
        self._classifier = classifier or GenreClassifier()
        if synthesizer is None:
            options = self._config.cover_options
            options = replace(
                options,
                attempt_raster=options.attempt_raster and self._config.attempt_first_page_raster,
            )
            synthesizer = CoverSynthesizer(self._layout.covers_dir, options)
        self._synthesizer = synthesizer

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def layout(self) -> UploadLayout:
        return self._layout

    @property
    def synthesizer(self) -> CoverSynthesizer:
        return self._synthesizer

    def extract(self, file_path: Path, original_name: str | None = None) -> ExtractionResult:
        """Guess metadata for a stored upload.

        Sources are consulted in order (embedded properties, body text,
        filename, cleaned filename) and each hit adds to the confidence
        score. Never raises.

        Args:
            file_path: The stored upload.
            original_name: The filename the user uploaded; defaults to
                file_path's name.

        Returns:
            ExtractionResult; `method` names the source of the title.
        """
        original_name = original_name or file_path.name
        doc = extract_from_document(file_path)
        result = ExtractionResult(
            page_count=doc.page_count,
            subject=doc.subject,
            creator=doc.creator,
            creation_date=doc.creation_date,
            error=doc.error,
        )

        if doc.title_source == SOURCE_PROPERTIES:
            result.title = doc.title
            result.method = ExtractionMethod.PROPERTIES
            result.confidence += PROPERTY_TITLE_POINTS
        if doc.author_source == SOURCE_PROPERTIES:
            result.author = doc.author
            result.confidence += PROPERTY_AUTHOR_POINTS
        if doc.subject:
            result.confidence += PROPERTY_SUBJECT_POINTS

        if doc.title_source == SOURCE_CONTENT:
            result.title = doc.title
            result.method = ExtractionMethod.CONTENT
            result.confidence += CONTENT_TITLE_POINTS
        if doc.author_source == SOURCE_CONTENT:
            result.author = doc.author
            result.confidence += CONTENT_AUTHOR_POINTS

        if not result.title or not result.author:
            guess = parse_filename(original_name)
            # A title-only guess is just the bare name; leave it to the fallback.
            if not guess.author:
                guess.title = ""
            if not result.title and guess.title:
                result.title = guess.title
                result.method = ExtractionMethod.FILENAME
                result.confidence += FILENAME_TITLE_POINTS
            if not result.author and guess.author:
                result.author = guess.author
                result.confidence += FILENAME_AUTHOR_POINTS

        if not result.title:
            fallback = clean_filename_title(original_name)
            if fallback:
                result.title = fallback
                result.method = ExtractionMethod.FALLBACK
                result.confidence += FALLBACK_TITLE_POINTS

        text = doc.sampled_text
        result.genre = self._classifier.classify(
            result.title, result.author, result.subject, text[:_GENRE_SAMPLE_LENGTH]
        )
        result.description = build_description(text)
        result.language = detect_language(text)
        result.keywords = extract_keywords(text)

        logger.info(
            "Extracted %r by %r from %s (method=%s, confidence=%d)",
            result.title,
            result.author,
            original_name,
            result.method.value,
            result.confidence,
        )
        return result

    def process(
        self,
        file_path: Path,
        user_title: str | None = None,
        user_author: str | None = None,
        user_genre: str | None = None,
        user_description: str | None = None,
        original_name: str | None = None,
    ) -> PipelineResult:
        """Resolve final metadata for an upload and generate its cover.

        Args:
            file_path: The stored upload.
            user_title: Title typed by the user, if any.
            user_author: Author typed by the user, if any.
            user_genre: Genre chosen by the user, if any.
            user_description: Description typed by the user, if any.
            original_name: The filename the user uploaded.

        Returns:
            PipelineResult ready to be turned into a book record.

        Raises:
            ValidationFailed: If title or author is still empty. The
                exception carries the extraction for form prefill.
        """
        original_name = original_name or file_path.name
        extraction = self.extract(file_path, original_name)
        extracted_wins = extraction.confidence > self._config.override_threshold

        title = _choose(user_title, extraction.title, extracted_wins)
        author = _choose(user_author, extraction.author, extracted_wins)
        # The classifier default is a placeholder, not a detection.
        detected_genre = (
            extraction.genre if extraction.genre != self._classifier.tables.default else None
        )
        genre = _choose(user_genre, detected_genre, extracted_wins) or extraction.genre
        description = _blank(user_description) or extraction.description

        if not title or not author:
            missing = [name for name, value in (("title", title), ("author", author)) if not value]
            raise ValidationFailed(
                f"Could not determine {' and '.join(missing)}; please provide title and author",
                extraction,
            )

        outcome = self._synthesizer.synthesize(file_path, title, author)

        book_path = file_path
        composition = None
        if self._config.compose_cover_page and supports_cover_page(file_path):
            composition = compose_cover_page(
                file_path,
                title,
                author,
                output_dir=self._layout.books_dir,
                style=self._synthesizer.options.style,
            )
            if composition.success:
                book_path = composition.path

        return PipelineResult(
            title=title,
            author=author,
            genre=genre,
            description=description,
            pages=extraction.page_count,
            confidence=extraction.confidence,
            extraction=extraction,
            book_path=book_path,
            original_name=original_name,
            cover=outcome.cover,
            cover_error=outcome.error,
            composition=composition,
        )
