# ABOUTME: End-to-end tests for the Shelfmark CLI.
# ABOUTME: Tests CLI commands via Click's CliRunner with real PDF and EPUB fixtures.

import json
from pathlib import Path

import pypdf
from click.testing import CliRunner

from shelfmark.cli import cli


def _record(output: str) -> dict:
    """Parse the JSON record printed by `add --json`, skipping any log lines."""
    return json.loads(output[output.index("{"):])


class TestCliInspect:
    """E2e tests for `shelfmark inspect`."""

    def test_inspect_epub(self, sample_epub: Path) -> None:
        """Inspect shows the declared metadata of an EPUB."""
        result = CliRunner().invoke(cli, ["inspect", str(sample_epub)])
        assert result.exit_code == 0
        assert "The Name of the Rose" in result.output
        assert "Umberto Eco" in result.output
        assert "properties" in result.output

    def test_inspect_bracketed_title(self, bracketed_pdf: Path) -> None:
        """Square brackets in document properties are printed literally."""
        result = CliRunner().invoke(cli, ["inspect", str(bracketed_pdf)])
        assert result.exit_code == 0
        assert "Notes [/draft]" in result.output
        assert "Ada [bold]Lovelace" in result.output

    def test_inspect_uses_filename(self, dune_pdf: Path) -> None:
        """Inspect falls back to the filename for a bare PDF."""
        result = CliRunner().invoke(cli, ["inspect", str(dune_pdf)])
        assert result.exit_code == 0
        assert "Frank Herbert" in result.output
        assert "Dune" in result.output

    def test_inspect_corrupt_file_still_succeeds(self, corrupt_pdf: Path) -> None:
        """Unreadable files are reported, not fatal."""
        result = CliRunner().invoke(cli, ["inspect", str(corrupt_pdf)])
        assert result.exit_code == 0
        assert "scan0001" in result.output
        assert "Read error" in result.output

    def test_inspect_nonexistent_file_fails(self) -> None:
        """Inspect fails for a missing path."""
        result = CliRunner().invoke(cli, ["inspect", "/nonexistent/path.pdf"])
        assert result.exit_code != 0

    def test_verbose_flag(self, sample_epub: Path) -> None:
        """-v is accepted before the subcommand."""
        result = CliRunner().invoke(cli, ["-v", "inspect", str(sample_epub)])
        assert result.exit_code == 0


class TestCliCover:
    """E2e tests for `shelfmark cover`."""

    def test_template_cover(self, dune_pdf: Path, tmp_path: Path) -> None:
        """--no-raster writes a template cover into the output directory."""
        out = tmp_path / "covers"
        result = CliRunner().invoke(cli, ["cover", str(dune_pdf), "-o", str(out), "--no-raster"])
        assert result.exit_code == 0
        assert "template-generated" in result.output
        assert len(list(out.glob("text-cover-*.jpg"))) == 1

    def test_explicit_title(self, corrupt_pdf: Path, tmp_path: Path) -> None:
        """Given title and author are used as-is."""
        result = CliRunner().invoke(
            cli,
            ["cover", str(corrupt_pdf), "--title", "Ledger", "--author", "Clerk", "-o", str(tmp_path)],
        )
        assert result.exit_code == 0
        assert len(list(tmp_path.glob("text-cover-*.jpg"))) == 1


class TestCliCompose:
    """E2e tests for `shelfmark compose`."""

    def test_compose_pdf(self, pdf_with_properties: Path, tmp_path: Path) -> None:
        """Compose writes a PDF with one extra page."""
        out = tmp_path / "out"
        result = CliRunner().invoke(
            cli,
            ["compose", str(pdf_with_properties), "--title", "Left Hand", "--author", "Le Guin", "-o", str(out)],
        )
        assert result.exit_code == 0
        written = list(out.glob("book-with-cover-*.pdf"))
        assert len(written) == 1
        assert len(pypdf.PdfReader(str(written[0])).pages) == 4

    def test_compose_rejects_epub(self, sample_epub: Path) -> None:
        """Compose only handles PDFs."""
        result = CliRunner().invoke(cli, ["compose", str(sample_epub), "--title", "X"])
        assert result.exit_code == 1
        assert "only supported for PDF" in result.output

    def test_compose_requires_title(self, pdf_with_properties: Path) -> None:
        """--title is required."""
        result = CliRunner().invoke(cli, ["compose", str(pdf_with_properties)])
        assert result.exit_code != 0


class TestCliAdd:
    """E2e tests for `shelfmark add`."""

    def test_add_json(self, dune_pdf: Path, uploads_dir: Path) -> None:
        """Add stores the file and prints the record as JSON."""
        result = CliRunner().invoke(
            cli, ["add", str(dune_pdf), "--uploads-dir", str(uploads_dir), "--no-raster", "--json"]
        )
        assert result.exit_code == 0
        record = _record(result.output)
        assert record["title"] == "Dune"
        assert record["author"] == "Frank Herbert"
        assert record["book_file"]["original_filename"] == "Dune - Frank Herbert.pdf"
        assert (uploads_dir / "books" / record["book_file"]["filename"]).exists()
        assert (uploads_dir / "covers" / record["cover_image"]["filename"]).exists()

    def test_add_table(self, sample_epub: Path, uploads_dir: Path) -> None:
        """Without --json a summary table is printed."""
        result = CliRunner().invoke(cli, ["add", str(sample_epub), "--uploads-dir", str(uploads_dir)])
        assert result.exit_code == 0
        assert "Umberto Eco" in result.output

    def test_add_bracketed_title(self, bracketed_pdf: Path, uploads_dir: Path) -> None:
        """A bracketed title prints in the summary and every written file is kept."""
        result = CliRunner().invoke(
            cli, ["add", str(bracketed_pdf), "--uploads-dir", str(uploads_dir), "--no-raster"]
        )
        assert result.exit_code == 0
        assert "Notes [/draft]" in result.output
        assert "Ada [bold]Lovelace" in result.output
        assert len(list((uploads_dir / "books").iterdir())) == 1
        assert len(list((uploads_dir / "covers").glob("*.jpg"))) == 1

    def test_add_user_values(self, dune_pdf: Path, uploads_dir: Path) -> None:
        """User-supplied values win over a filename guess."""
        result = CliRunner().invoke(
            cli,
            [
                "add", str(dune_pdf), "--uploads-dir", str(uploads_dir), "--no-raster", "--json",
                "--title", "Dune Messiah", "--genre", "Classic", "--description", "Sequel.",
            ],
        )
        assert result.exit_code == 0
        record = _record(result.output)
        assert record["title"] == "Dune Messiah"
        assert record["author"] == "Frank Herbert"
        assert record["genre"] == "Classic"
        assert record["description"] == "Sequel."

    def test_add_compose(self, pdf_with_properties: Path, uploads_dir: Path) -> None:
        """--compose replaces the stored file with the composite."""
        result = CliRunner().invoke(
            cli,
            ["add", str(pdf_with_properties), "--uploads-dir", str(uploads_dir), "--no-raster", "--compose", "--json"],
        )
        assert result.exit_code == 0
        record = _record(result.output)
        assert record["book_file"]["has_cover_page"] is True
        assert record["book_file"]["filename"].startswith("book-with-cover-")

    def test_add_needs_title_and_author(self, corrupt_pdf: Path, uploads_dir: Path) -> None:
        """Without an author the command fails and keeps nothing."""
        result = CliRunner().invoke(
            cli, ["add", str(corrupt_pdf), "--uploads-dir", str(uploads_dir), "--no-raster"]
        )
        assert result.exit_code == 1
        assert "please provide title and author" in result.output
        assert list((uploads_dir / "books").iterdir()) == []

    def test_add_rejects_type(self, tmp_path: Path, uploads_dir: Path) -> None:
        """Disallowed file types are rejected before processing."""
        path = tmp_path / "virus.exe"
        path.write_bytes(b"MZ")
        result = CliRunner().invoke(cli, ["add", str(path), "--uploads-dir", str(uploads_dir)])
        assert result.exit_code == 1
        assert "Unsupported file type" in result.output

    def test_uploads_dir_from_env(self, dune_pdf: Path, uploads_dir: Path) -> None:
        """SHELFMARK_UPLOADS_DIR sets the uploads root."""
        result = CliRunner().invoke(
            cli,
            ["add", str(dune_pdf), "--no-raster", "--json"],
            env={"SHELFMARK_UPLOADS_DIR": str(uploads_dir)},
        )
        assert result.exit_code == 0
        assert len(list((uploads_dir / "books").iterdir())) == 1
