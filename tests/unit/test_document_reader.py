# ABOUTME: Unit tests for the plain-text reader and suffix-based format dispatch.
# ABOUTME: Covers page estimation for text files and unsupported formats.

from pathlib import Path

import pytest

from shelfmark.errors import ExtractionUnavailable
from shelfmark.formats.reader import (
    detect_format,
    is_rasterizable,
    read_document,
    supports_cover_page,
)
from shelfmark.formats.text import read_text_properties


class TestReadTextProperties:
    """Tests for plain-text uploads."""

    def test_no_embedded_properties(self, sample_txt: Path) -> None:
        """Text files declare nothing."""
        props = read_text_properties(sample_txt)
        assert props.format == "TXT"
        assert props.title is None
        assert props.author is None

    def test_page_estimate(self, sample_txt: Path) -> None:
        """Pages are estimated at 250 words each, rounded up."""
        # 6 heading words plus 720 body words.
        assert read_text_properties(sample_txt).page_count == 3

    def test_empty_file_has_no_pages(self, tmp_path: Path) -> None:
        """An empty text file has no page estimate."""
        path = tmp_path / "empty.txt"
        path.write_text("")
        assert read_text_properties(path).page_count is None

    def test_text_sample(self, sample_txt: Path) -> None:
        """The sample starts at the top of the file."""
        assert read_text_properties(sample_txt).text.startswith("PRIDE AND PREJUDICE")


class TestReadDocument:
    """Tests for dispatch by suffix."""

    def test_dispatches_pdf(self, pdf_with_properties: Path) -> None:
        """PDFs go to the PDF reader."""
        assert read_document(pdf_with_properties).format == "PDF"

    def test_dispatches_epub(self, sample_epub: Path) -> None:
        """EPUBs go to the EPUB reader."""
        assert read_document(sample_epub).format == "EPUB"

    def test_suffix_is_case_insensitive(self, sample_txt: Path) -> None:
        """Upper-case suffixes are recognized."""
        upper = sample_txt.rename(sample_txt.with_suffix(".TXT"))
        assert read_document(upper).format == "TXT"

    def test_unsupported_format_raises(self, tmp_path: Path) -> None:
        """Formats without a reader raise ExtractionUnavailable."""
        path = tmp_path / "book.mobi"
        path.write_bytes(b"BOOKMOBI")
        with pytest.raises(ExtractionUnavailable, match="Unsupported"):
            read_document(path)


class TestFormatCapabilities:
    """Tests for format capability checks."""

    def test_only_pdf_is_rasterizable(self) -> None:
        """First-page rendering applies to PDFs only."""
        assert is_rasterizable(Path("a.pdf"))
        assert is_rasterizable(Path("a.PDF"))
        assert not is_rasterizable(Path("a.epub"))
        assert not is_rasterizable(None)

    def test_only_pdf_supports_cover_page(self) -> None:
        """Cover pages can only be prepended to PDFs."""
        assert supports_cover_page(Path("a.pdf"))
        assert not supports_cover_page(Path("a.txt"))

    def test_detect_format(self) -> None:
        """Format names are the upper-cased suffix."""
        assert detect_format(Path("a.docx")) == "DOCX"
        assert detect_format(Path("README")) == "Unknown"
