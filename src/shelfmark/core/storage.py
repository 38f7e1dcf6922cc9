# ABOUTME: Upload directory layout, collision-free filenames, and file cleanup helpers.
# ABOUTME: Every generated file is named <prefix><ms timestamp>-<random hex><suffix>.

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

COVERS_DIRNAME = "covers"
BOOKS_DIRNAME = "books"
URL_ROOT = "/uploads"


def unique_filename(prefix: str, suffix: str) -> str:
    """Build a filename unique across concurrent writers.

    Args:
        prefix: Leading part, e.g. "pdf-cover-".
        suffix: Extension including the dot, e.g. ".jpg".

    Returns:
        A name like "pdf-cover-1718000000000-9f2a6c1e.jpg".
    """
    timestamp = int(time.time() * 1000)
    return f"{prefix}{timestamp}-{secrets.token_hex(4)}{suffix}"


def file_size(path: Path) -> int:
    """Size in bytes, or 0 if the file has gone away."""
    try:
        return path.stat().st_size
    except OSError:
        return 0


def remove_quietly(path: Path | None) -> None:
    """Delete a file if it exists; failures are logged, not raised."""
    if path is None:
        return
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Could not remove %s: %s", path, exc)


@dataclass(frozen=True)
class UploadLayout:
    """Where covers and books live under the uploads root, and their public URLs."""

    root: Path

    @property
    def covers_dir(self) -> Path:
        return self.root / COVERS_DIRNAME

    @property
    def books_dir(self) -> Path:
        return self.root / BOOKS_DIRNAME

    def ensure(self) -> None:
        """Create the covers and books directories if missing."""
        self.covers_dir.mkdir(parents=True, exist_ok=True)
        self.books_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def cover_url(filename: str) -> str:
        return f"{URL_ROOT}/{COVERS_DIRNAME}/{filename}"

    @staticmethod
    def book_url(filename: str) -> str:
        return f"{URL_ROOT}/{BOOKS_DIRNAME}/{filename}"
