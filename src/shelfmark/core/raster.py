# ABOUTME: Renders the first page of a PDF to an in-memory image using PyMuPDF.
# ABOUTME: Each attempt runs in a worker future with a timeout; presets step down in DPI.

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF
from PIL import Image

from shelfmark.core.storage import remove_quietly, unique_filename
from shelfmark.errors import RasterizationFailed

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

# MuPDF is not thread-safe; concurrent uploads render one at a time.
_RENDER_LOCK = threading.Lock()


@dataclass(frozen=True)
class RasterPreset:
    """One rendering attempt: resolution plus a label for logs."""

    dpi: int
    label: str


DEFAULT_PRESETS: tuple[RasterPreset, ...] = (
    RasterPreset(dpi=200, label="high"),
    RasterPreset(dpi=150, label="medium"),
    RasterPreset(dpi=100, label="low"),
)


def _render(pdf_path: Path, png_path: Path, dpi: int, cancelled: threading.Event) -> None:
    """Render page 1 of pdf_path to png_path. Runs on the worker thread."""
    if cancelled.is_set():
        return
    with _RENDER_LOCK, fitz.open(str(pdf_path)) as doc:
        if doc.page_count == 0:
            raise RasterizationFailed("PDF has no pages")
        pix = doc[0].get_pixmap(dpi=dpi, alpha=False)
        # Rendering itself cannot be interrupted; skip the write if the caller gave up.
        if cancelled.is_set():
            return
        pix.save(str(png_path))


def _attempt(pdf_path: Path, work_dir: Path, preset: RasterPreset, timeout: float) -> Image.Image:
    png_path = work_dir / unique_filename("raster-", ".png")
    cancelled = threading.Event()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="shelfmark-raster")
    future = executor.submit(_render, pdf_path, png_path, preset.dpi, cancelled)
    try:
        future.result(timeout=timeout)
        with Image.open(png_path) as rendered:
            return rendered.convert("RGB")
    except FutureTimeout as exc:
        cancelled.set()
        # A late worker may still be writing; clean up once it finishes.
        future.add_done_callback(lambda _f: remove_quietly(png_path))
        raise RasterizationFailed(f"timed out after {timeout:g}s at {preset.dpi} dpi") from exc
    except RasterizationFailed:
        raise
    except Exception as exc:
        raise RasterizationFailed(f"render failed at {preset.dpi} dpi: {exc}") from exc
    finally:
        executor.shutdown(wait=False)
        remove_quietly(png_path)


def rasterize_first_page(
    pdf_path: Path,
    work_dir: Path,
    presets: tuple[RasterPreset, ...] = DEFAULT_PRESETS,
    timeout: float = DEFAULT_TIMEOUT,
) -> Image.Image:
    """Render the first page of a PDF, stepping down through presets on failure.

    Each attempt renders to a temporary PNG in work_dir that is removed on
    every exit route. A timed-out attempt is abandoned: its worker is told to
    skip the write and any late file is removed when the worker finishes.

    Args:
        pdf_path: The PDF to render.
        work_dir: Directory for temporary PNG files.
        presets: Attempts to make, in order.
        timeout: Seconds to wait for each attempt.

    Returns:
        The rendered page as an RGB image.

    Raises:
        RasterizationFailed: If every preset failed or timed out.
    """
    if not presets:
        raise RasterizationFailed("No raster presets configured")

    work_dir.mkdir(parents=True, exist_ok=True)
    failures: list[str] = []
    for preset in presets:
        try:
            image = _attempt(pdf_path, work_dir, preset, timeout)
        except RasterizationFailed as exc:
            logger.info("Raster attempt (%s) failed for %s: %s", preset.label, pdf_path.name, exc)
            failures.append(str(exc))
            continue
        logger.debug("Rendered %s at %d dpi (%dx%d)", pdf_path.name, preset.dpi, *image.size)
        return image

    raise RasterizationFailed("; ".join(failures))
