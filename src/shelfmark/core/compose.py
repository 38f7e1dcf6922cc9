# ABOUTME: Prepends a generated cover page to a PDF (reportlab page, pypdf merge).
# ABOUTME: Writes to a temporary name and renames only after a complete write.

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path

import pypdf
from pypdf import PageObject
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from shelfmark.core.storage import file_size, remove_quietly, unique_filename
from shelfmark.core.template import TemplateStyle, blend, hex_to_rgb, template_text
from shelfmark.errors import ExtractionUnavailable

logger = logging.getLogger(__name__)

COMPOSITE_PREFIX = "book-with-cover-"
_GRADIENT_BANDS = 64


@dataclass
class CompositionResult:
    """Outcome of prepending a cover page. On failure, the original stays canonical."""

    success: bool
    path: Path | None = None
    filename: str | None = None
    size_bytes: int = 0
    page_count: int = 0
    original_filename: str | None = None
    original_size: int = 0
    error: str | None = None


def _rgb(color: tuple[int, int, int]) -> tuple[float, float, float]:
    return color[0] / 255, color[1] / 255, color[2] / 255


def draw_cover_page(title: str, author: str | None, style: TemplateStyle | None = None) -> bytes:
    """Render the template layout as a one-page A4 PDF and return its bytes."""
    style = style or TemplateStyle()
    text = template_text(title, author, style)
    width, height = A4

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    c.setTitle(text.title)

    start, end = hex_to_rgb(style.gradient_start), hex_to_rgb(style.gradient_end)
    band = height / _GRADIENT_BANDS
    for i in range(_GRADIENT_BANDS):
        c.setFillColorRGB(*_rgb(blend(start, end, i / (_GRADIENT_BANDS - 1))))
        c.rect(0, height - (i + 1) * band, width, band + 1, stroke=0, fill=1)

    alpha = style.accent_alpha / 255
    c.setStrokeColorRGB(1, 1, 1, alpha=alpha)
    c.setFillColorRGB(1, 1, 1, alpha=alpha)
    c.setLineWidth(2)
    m = style.margin
    c.roundRect(m, m, width - 2 * m, height - 2 * m, 14, stroke=1, fill=0)

    # Book glyph: two pages and a spine.
    cx, gy = width / 2, height * 0.76
    gw, gh = width * 0.16, height * 0.08
    c.rect(cx - gw, gy - gh / 2, gw - 3, gh, stroke=0, fill=1)
    c.rect(cx + 3, gy - gh / 2, gw - 3, gh, stroke=0, fill=1)

    dot_y, gap = height * 0.34, 18
    first_x = cx - gap * (style.dot_count - 1) / 2
    for i in range(style.dot_count):
        c.circle(first_x + i * gap, dot_y, 3.5, stroke=0, fill=1)
    c.line(width * 0.3, height * 0.29, width * 0.7, height * 0.29)

    c.setFillColorRGB(1, 1, 1)
    c.setFont("Helvetica-Bold", 30)
    c.drawCentredString(cx, height * 0.55, text.title)
    c.setFont("Helvetica", 18)
    c.drawCentredString(cx, height * 0.48, text.author)
    c.setFont("Helvetica", 12)
    c.drawCentredString(cx, m + 28, text.footer)

    c.showPage()
    c.save()
    return buf.getvalue()


def compose_cover_page(
    book_path: Path,
    title: str,
    author: str | None,
    output_dir: Path | None = None,
    style: TemplateStyle | None = None,
) -> CompositionResult:
    """Build a new PDF made of a cover page followed by every page of book_path.

    The original file is never modified. The composite is written to a
    temporary file and renamed into place once complete; on any failure the
    temporary file is removed and `success` is False.

    Args:
        book_path: The stored PDF upload.
        title: Final title for the cover page.
        author: Final author for the cover page.
        output_dir: Where to write the composite. Defaults to book_path's directory.
        style: Template style shared with image covers.

    Returns:
        CompositionResult describing the composite, or the failure.
    """
    output_dir = output_dir or book_path.parent
    result = CompositionResult(
        success=False,
        original_filename=book_path.name,
        original_size=file_size(book_path),
    )

    filename = unique_filename(COMPOSITE_PREFIX, ".pdf")
    final_path = output_dir / filename
    temp_path = output_dir / f".{filename}.part"
    try:
        original = pypdf.PdfReader(str(book_path))
        cover = pypdf.PdfReader(io.BytesIO(draw_cover_page(title, author, style)))

        writer = pypdf.PdfWriter()
        writer.add_page(cover.pages[0])
        for page in original.pages:
            writer.add_page(page)

        output_dir.mkdir(parents=True, exist_ok=True)
        with open(temp_path, "wb") as fh:
            writer.write(fh)
        os.replace(temp_path, final_path)
    except Exception as exc:
        remove_quietly(temp_path)
        logger.warning("Cover page composition failed for %s: %s", book_path.name, exc)
        result.error = str(exc)
        return result

    result.success = True
    result.path = final_path
    result.filename = filename
    result.size_bytes = file_size(final_path)
    result.page_count = len(writer.pages)
    logger.info("Composed %s (%d pages) from %s", filename, result.page_count, book_path.name)
    return result


def split_cover_page(path: Path) -> tuple[PageObject, list[PageObject]]:
    """Return the first page of a composite and the pages that follow it.

    Raises:
        ExtractionUnavailable: If the PDF cannot be read or has no pages.
    """
    try:
        reader = pypdf.PdfReader(str(path))
        pages = list(reader.pages)
    except Exception as exc:
        raise ExtractionUnavailable(f"Failed to read PDF: {path}: {exc}") from exc
    if not pages:
        raise ExtractionUnavailable(f"PDF has no pages: {path}")
    return pages[0], pages[1:]
