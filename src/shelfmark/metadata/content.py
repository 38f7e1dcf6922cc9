# ABOUTME: Title/author heuristics over the first lines of a document's text.
# ABOUTME: Also cleans raw property values and derives a short description.

import re
from dataclasses import dataclass

# How many non-empty lines at the top of the text are considered.
SCAN_LINES = 20

_MIN_TITLE_LENGTH = 3
_MAX_TITLE_LENGTH = 100
_DESCRIPTION_MIN_PARAGRAPH = 100
_DESCRIPTION_MAX_LENGTH = 300

_WHITESPACE_RE = re.compile(r"\s+")
_BOILERPLATE_RE = re.compile(r"\b(page|chapter|contents|copyright|isbn)\b", re.IGNORECASE)
_NUMERIC_LINE_RE = re.compile(r"^[\d\s\-_.,:/]+$")
_TITLE_LABEL_RE = re.compile(r"^title\s*[:\-]\s*", re.IGNORECASE)
_AUTHOR_LABEL_RE = re.compile(r"^(?:written\s+by|by|author)\s*[:\-]?\s+", re.IGNORECASE)
_QUOTES_RE = re.compile(r"[“”„‟]")

# "by Frank Herbert", "written by ...", "Author: ..." anywhere in a line.
# Only the keyword is case-insensitive; the name must start with a capital.
_EXPLICIT_AUTHOR_RE = re.compile(
    r"(?:^|(?<=\W))(?P<lead>\w+\s+)?(?i:written\s+by|by|author\s*:)\s+"
    r"(?P<name>[A-Z][\w.'’\-]*(?:\s+[A-Z][\w.'’\-]*){0,3})"
)
_LINE_TITLE_BY_AUTHOR_RE = re.compile(
    r"^(?P<title>.+?)\s+(?i:by)\s+(?P<author>[A-Z][\w.'’\-]*(?:\s+[A-Z][\w.'’\-]*){0,3})$"
)

# Verbs that make "X by Y" a credit line for someone other than the author.
_NON_AUTHOR_LEADS = frozenset(
    {"published", "edited", "printed", "distributed", "translated", "illustrated"}
)


@dataclass
class TextGuess:
    """Title and author guessed from body text. None where nothing matched."""

    title: str | None = None
    author: str | None = None


def clean_title(title: str | None) -> str | None:
    """Normalize a raw title value; returns None if nothing meaningful is left."""
    if not title:
        return None
    cleaned = _TITLE_LABEL_RE.sub("", str(title).strip())
    cleaned = _QUOTES_RE.sub('"', cleaned)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    return cleaned or None


def clean_author(author: str | None) -> str | None:
    """Strip "by"/"author:" prefixes and extra whitespace from an author value."""
    if not author:
        return None
    cleaned = _WHITESPACE_RE.sub(" ", str(author)).strip()
    cleaned = _AUTHOR_LABEL_RE.sub("", cleaned)
    cleaned = _QUOTES_RE.sub('"', cleaned).strip(" ,;")
    return cleaned or None


def first_lines(text: str, limit: int = SCAN_LINES) -> list[str]:
    """Return up to `limit` stripped, non-empty lines from the top of `text`."""
    lines: list[str] = []
    for raw in text.splitlines():
        line = _WHITESPACE_RE.sub(" ", raw).strip()
        if line:
            lines.append(line)
            if len(lines) >= limit:
                break
    return lines


def _mostly_digits(line: str) -> bool:
    chars = [c for c in line if not c.isspace()]
    if not chars:
        return True
    digits = sum(1 for c in chars if c.isdigit())
    return digits * 2 > len(chars)


def is_title_candidate(line: str) -> bool:
    """A line could be a title: sane length, not numeric, not boilerplate."""
    if not _MIN_TITLE_LENGTH <= len(line) <= _MAX_TITLE_LENGTH:
        return False
    if _NUMERIC_LINE_RE.match(line) or _mostly_digits(line):
        return False
    return not _BOILERPLATE_RE.search(line)


def looks_like_author_line(line: str) -> bool:
    """2-4 words, at least 70% of them starting with a capital letter."""
    words = line.split()
    if len(words) < 2 or len(words) > 4:
        return False
    capitalized = sum(1 for w in words if w[0].isupper())
    return capitalized >= len(words) * 0.7


def find_explicit_author(lines: list[str]) -> tuple[int, str] | None:
    """Find a "by <Name>" or "author: <Name>" credit in the given lines.

    Returns:
        (line_index, name) of the first credit, or None.
    """
    for index, line in enumerate(lines):
        for m in _EXPLICIT_AUTHOR_RE.finditer(line):
            lead = (m.group("lead") or "").strip().lower()
            if lead in _NON_AUTHOR_LEADS:
                continue
            name = clean_author(m.group("name"))
            if name:
                return index, name
    return None


def guess_from_text(text: str) -> TextGuess:
    """Guess title and author from the first lines of body text.

    The title is the first line that passes the title-candidate checks and
    is not itself the author credit. The author comes from an explicit
    credit anywhere in the scanned lines, else from the first name-shaped
    line after the title.
    """
    lines = first_lines(text)
    if not lines:
        return TextGuess()

    guess = TextGuess()
    explicit = find_explicit_author(lines)
    author_index = explicit[0] if explicit else None
    if explicit:
        guess.author = explicit[1]

    title_index: int | None = None
    for index, line in enumerate(lines):
        m = _LINE_TITLE_BY_AUTHOR_RE.match(line)
        if m and m.group("title").split()[-1].lower() in _NON_AUTHOR_LEADS:
            continue
        if m and is_title_candidate(m.group("title")):
            guess.title = clean_title(m.group("title"))
            guess.author = guess.author or clean_author(m.group("author"))
            title_index = index
            break
        if index == author_index and _AUTHOR_LABEL_RE.match(line):
            continue
        if is_title_candidate(line):
            guess.title = clean_title(line)
            title_index = index
            break

    if guess.author is None and title_index is not None:
        for line in lines[title_index + 1 :]:
            if looks_like_author_line(line) and not _BOILERPLATE_RE.search(line):
                guess.author = clean_author(line)
                break

    return guess


def build_description(text: str) -> str | None:
    """Use the first substantial paragraph of the text as a description."""
    for raw in re.split(r"\n\s*\n|\n", text):
        paragraph = _WHITESPACE_RE.sub(" ", raw).strip()
        if len(paragraph) > _DESCRIPTION_MIN_PARAGRAPH:
            if len(paragraph) > _DESCRIPTION_MAX_LENGTH:
                return paragraph[:_DESCRIPTION_MAX_LENGTH] + "..."
            return paragraph
    return None
