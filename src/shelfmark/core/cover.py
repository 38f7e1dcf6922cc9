# ABOUTME: Cover synthesizer: first-page raster when possible, template cover otherwise.
# ABOUTME: Only a failed write of the final image surfaces, as a soft failure on CoverOutcome.

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from PIL import Image, ImageOps

from shelfmark.core.raster import DEFAULT_PRESETS, DEFAULT_TIMEOUT, RasterPreset, rasterize_first_page
from shelfmark.core.storage import UploadLayout, file_size, remove_quietly, unique_filename
from shelfmark.core.template import TemplateStyle, TemplateText, render_template_cover
from shelfmark.errors import CoverWriteFailed, RasterizationFailed
from shelfmark.formats.reader import is_rasterizable

logger = logging.getLogger(__name__)

RASTER_PREFIX = "pdf-cover-"
TEMPLATE_PREFIX = "text-cover-"

# A rendered page whose gray levels span no more than this is treated as blank.
BLANK_PAGE_TOLERANCE = 8


class CoverOrigin(str, Enum):
    """How a cover image was produced."""

    FIRST_PAGE_RASTER = "first-page-raster"
    TEMPLATE_GENERATED = "template-generated"


@dataclass(frozen=True)
class CoverOptions:
    """Canonical cover size, encoding and raster behavior."""

    width: int = 600
    height: int = 900
    quality: int = 85
    raster_timeout: float = DEFAULT_TIMEOUT
    presets: tuple[RasterPreset, ...] = DEFAULT_PRESETS
    attempt_raster: bool = True
    background: tuple[int, int, int] = (255, 255, 255)
    style: TemplateStyle = field(default_factory=TemplateStyle)


@dataclass
class CoverResult:
    """A cover image written to disk."""

    image_path: Path
    filename: str
    width: int
    height: int
    size_bytes: int
    origin: CoverOrigin
    is_fallback: bool
    text: TemplateText | None = None

    @property
    def url(self) -> str:
        return UploadLayout.cover_url(self.filename)

    @property
    def generation_type(self) -> str:
        return self.origin.value


@dataclass
class CoverOutcome:
    """Result of synthesis. `cover` is None only when writing the image failed."""

    cover: CoverResult | None = None
    error: str | None = None
    raster_error: str | None = None

    @property
    def success(self) -> bool:
        return self.cover is not None


class CoverSynthesizer:
    """Produces one cover image per call into a fixed output directory."""

    def __init__(self, output_dir: Path, options: CoverOptions | None = None) -> None:
        self._output_dir = output_dir
        self._options = options or CoverOptions()

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def options(self) -> CoverOptions:
        return self._options

    def _save(self, image: Image.Image, prefix: str) -> tuple[Path, str]:
        """Encode image as progressive JPEG under a unique name."""
        filename = unique_filename(prefix, ".jpg")
        path = self._output_dir / filename
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            image.save(
                path,
                "JPEG",
                quality=self._options.quality,
                optimize=True,
                progressive=True,
            )
        except OSError as exc:
            remove_quietly(path)
            raise CoverWriteFailed(f"Could not write cover {path}: {exc}") from exc
        return path, filename

    def render_first_page(self, pdf_path: Path) -> CoverResult:
        """Path A: rasterize page 1 and letterbox it onto the canonical canvas.

        Raises:
            RasterizationFailed: If every raster preset failed.
            CoverWriteFailed: If the JPEG could not be written.
        """
        opts = self._options
        page = rasterize_first_page(
            pdf_path, self._output_dir, presets=opts.presets, timeout=opts.raster_timeout
        )
        low, high = page.convert("L").getextrema()
        if high - low <= BLANK_PAGE_TOLERANCE:
            raise RasterizationFailed(f"First page of {pdf_path.name} is blank")
        canvas = ImageOps.pad(
            page,
            (opts.width, opts.height),
            method=Image.Resampling.LANCZOS,
            color=opts.background,
        )
        path, filename = self._save(canvas, RASTER_PREFIX)
        logger.info("Generated first-page cover %s for %s", filename, pdf_path.name)
        return CoverResult(
            image_path=path,
            filename=filename,
            width=opts.width,
            height=opts.height,
            size_bytes=file_size(path),
            origin=CoverOrigin.FIRST_PAGE_RASTER,
            is_fallback=False,
        )

    def render_template(self, title: str, author: str | None) -> CoverResult:
        """Path B: draw the template cover.

        Raises:
            CoverWriteFailed: If the JPEG could not be written.
        """
        opts = self._options
        image, text = render_template_cover(title, author, opts.width, opts.height, opts.style)
        path, filename = self._save(image, TEMPLATE_PREFIX)
        logger.info("Generated template cover %s for %r", filename, title)
        return CoverResult(
            image_path=path,
            filename=filename,
            width=opts.width,
            height=opts.height,
            size_bytes=file_size(path),
            origin=CoverOrigin.TEMPLATE_GENERATED,
            is_fallback=True,
            text=text,
        )

    def synthesize(self, document_path: Path | None, title: str, author: str | None) -> CoverOutcome:
        """Produce a cover for a document, falling back to the template.

        Path A is tried only when raster attempts are enabled and the
        document format can be rasterized. Never raises.

        Args:
            document_path: Stored upload, or None when there is no document.
            title: Final title, rendered on template covers.
            author: Final author, rendered on template covers.

        Returns:
            CoverOutcome with the cover, or with `error` set if no image
            could be written.
        """
        raster_error: str | None = None
        if self._options.attempt_raster and is_rasterizable(document_path):
            try:
                return CoverOutcome(cover=self.render_first_page(document_path))
            except (RasterizationFailed, CoverWriteFailed) as exc:
                logger.warning("First-page cover failed for %s, using template: %s", document_path.name, exc)
                raster_error = str(exc)

        try:
            cover = self.render_template(title, author)
        except CoverWriteFailed as exc:
            logger.error("Cover generation failed: %s", exc)
            return CoverOutcome(error=str(exc), raster_error=raster_error)
        return CoverOutcome(cover=cover, raster_error=raster_error)


def synthesize_cover(
    document_path: Path | None,
    title: str,
    author: str | None,
    output_dir: Path,
    options: CoverOptions | None = None,
) -> CoverOutcome:
    """Convenience wrapper around CoverSynthesizer.synthesize."""
    return CoverSynthesizer(output_dir, options).synthesize(document_path, title, author)
