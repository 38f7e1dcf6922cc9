# ABOUTME: Shared pytest fixtures for Shelfmark tests.
# ABOUTME: Builds sample PDFs (with and without properties), EPUBs, and text uploads in tmp_path.

import io
from collections.abc import Callable
from pathlib import Path

import pypdf
import pytest
from ebooklib import epub
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

PdfFactory = Callable[..., Path]


def build_pdf(
    path: Path,
    pages: list[list[str]],
    metadata: dict[str, str] | None = None,
) -> Path:
    """Write a PDF with one page per entry in `pages`, each a list of text lines.

    reportlab always stamps a title and author, so the pages are copied into
    a fresh pypdf writer and only the requested document info is added.
    """
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()

    reader = pypdf.PdfReader(io.BytesIO(buf.getvalue()))
    writer = pypdf.PdfWriter()
    for page in reader.pages:
        writer.add_page(page)
    if metadata:
        writer.add_metadata(metadata)
    with open(path, "wb") as fh:
        writer.write(fh)
    return path


@pytest.fixture
def pdf_factory(tmp_path: Path) -> PdfFactory:
    """Factory building PDFs under tmp_path: pdf_factory(name, pages, metadata)."""

    def _make(
        name: str,
        pages: list[list[str]] | None = None,
        metadata: dict[str, str] | None = None,
    ) -> Path:
        return build_pdf(tmp_path / name, pages if pages is not None else [[]], metadata)

    return _make


@pytest.fixture
def pdf_with_properties(pdf_factory: PdfFactory) -> Path:
    """A three-page PDF declaring title, author, and subject."""
    return pdf_factory(
        "upload.pdf",
        pages=[["Chapter One"], ["Chapter Two"], ["Chapter Three"]],
        metadata={
            "/Title": "The Left Hand of Darkness",
            "/Author": "Ursula K. Le Guin",
            "/Subject": "Science fiction novel",
            "/CreationDate": "D:19690301000000Z",
        },
    )


@pytest.fixture
def bracketed_pdf(pdf_factory: PdfFactory) -> Path:
    """A PDF whose declared title and author contain square brackets."""
    return pdf_factory(
        "notes.pdf",
        pages=[["Working notes"]],
        metadata={"/Title": "Notes [/draft]", "/Author": "Ada [bold]Lovelace"},
    )


@pytest.fixture
def dune_pdf(pdf_factory: PdfFactory) -> Path:
    """A blank two-page PDF with no properties, named after title and author."""
    return pdf_factory("Dune - Frank Herbert.pdf", pages=[[], []])


@pytest.fixture
def title_page_pdf(pdf_factory: PdfFactory) -> Path:
    """A PDF with no properties whose first page carries a title and a by-line."""
    return pdf_factory(
        "document.pdf",
        pages=[
            ["The Silent Orchard", "A Novel", "by Margaret Ellison"],
            ["Copyright 2019 Margaret Ellison. All rights reserved."],
        ],
    )


@pytest.fixture
def corrupt_pdf(tmp_path: Path) -> Path:
    """A file with a .pdf suffix and unparseable content, named like a scanner output."""
    filepath = tmp_path / "scan0001.pdf"
    filepath.write_bytes(b"this is not a valid pdf file\x00\x01\x02")
    return filepath


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    """Create a minimal valid EPUB file with known metadata and body text."""
    book = epub.EpubBook()

    book.set_identifier("test-isbn-978-0-123456-47-2")
    book.set_title("The Name of the Rose")
    book.set_language("en")
    book.add_author("Umberto Eco")

    book.add_metadata("DC", "publisher", "Harcourt")
    book.add_metadata("DC", "subject", "Mystery")
    book.add_metadata("DC", "date", "1980-01-01")

    chapter = epub.EpubHtml(title="Chapter 1", file_name="chap01.xhtml", lang="en")
    chapter.content = (
        b"<html><body><h1>Prologue</h1>"
        b"<p>In the beginning was the Word and the Word was with God, and the Word was God. "
        b"This was beginning with God and the duty of the faithful monk would be to repeat "
        b"every day with chanting humility the one never-changing event.</p>"
        b"</body></html>"
    )
    book.add_item(chapter)

    book.toc = [epub.Link("chap01.xhtml", "Chapter 1", "chap01")]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    filepath = tmp_path / "name_of_the_rose.epub"
    epub.write_epub(str(filepath), book)
    return filepath


@pytest.fixture
def corrupt_epub(tmp_path: Path) -> Path:
    """Create a corrupt file that is not a valid EPUB."""
    filepath = tmp_path / "corrupt.epub"
    filepath.write_text("this is not a valid epub file")
    return filepath


@pytest.fixture
def sample_txt(tmp_path: Path) -> Path:
    """A plain-text upload with a title line and a by-line."""
    body = " ".join(["It is a truth universally acknowledged."] * 120)
    filepath = tmp_path / "pride.txt"
    filepath.write_text(f"PRIDE AND PREJUDICE\nby Jane Austen\n\n{body}\n", encoding="utf-8")
    return filepath


@pytest.fixture
def uploads_dir(tmp_path: Path) -> Path:
    """An empty uploads root."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path
