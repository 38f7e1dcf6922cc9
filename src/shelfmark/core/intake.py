# ABOUTME: Upload checks (allowed formats, size ceiling) and copying uploads into storage.
# ABOUTME: Rejections raise UploadRejected before any extraction work starts.

import logging
import shutil
from pathlib import Path

from shelfmark.core.storage import UploadLayout, remove_quietly, unique_filename
from shelfmark.errors import UploadRejected

logger = logging.getLogger(__name__)

ALLOWED_SUFFIXES: frozenset[str] = frozenset({".pdf", ".epub", ".mobi", ".txt", ".doc", ".docx"})
MAX_UPLOAD_BYTES = 50 * 1024 * 1024
BOOK_PREFIX = "book-"


def check_upload(path: Path, max_bytes: int = MAX_UPLOAD_BYTES) -> int:
    """Validate an upload's type and size.

    Args:
        path: The file as received.
        max_bytes: Upper size limit, inclusive.

    Returns:
        The file size in bytes.

    Raises:
        UploadRejected: If the file is missing, empty, too large, or of a
            disallowed type.
    """
    if not path.is_file():
        raise UploadRejected(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in ALLOWED_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_SUFFIXES))
        raise UploadRejected(f"Unsupported file type {suffix or '(none)'}; allowed: {allowed}")

    size = path.stat().st_size
    if size == 0:
        raise UploadRejected(f"File is empty: {path.name}")
    if size > max_bytes:
        raise UploadRejected(
            f"File is too large: {size} bytes (limit {max_bytes // (1024 * 1024)} MB)"
        )
    return size


def store_upload(source: Path, layout: UploadLayout, max_bytes: int = MAX_UPLOAD_BYTES) -> Path:
    """Check an upload and copy it into the books directory under a unique name.

    The source is left in place. The stored copy keeps the source's suffix.

    Raises:
        UploadRejected: If the upload fails the checks.
        OSError: If the copy fails.
    """
    check_upload(source, max_bytes)
    layout.ensure()
    dest = layout.books_dir / unique_filename(BOOK_PREFIX, source.suffix.lower())
    try:
        shutil.copy2(source, dest)
    except OSError:
        remove_quietly(dest)
        raise
    logger.debug("Stored upload %s as %s", source.name, dest.name)
    return dest
