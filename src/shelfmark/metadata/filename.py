# ABOUTME: Heuristic title/author parsing of uploaded filenames.
# ABOUTME: Tries ordered structural patterns, then separator splits, then the bare name.

import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePath

import wordninja

_MAX_TITLE_LENGTH = 200
_MAX_AUTHOR_LENGTH = 100

# Minimum length for an all-lowercase spaceless word to be handed to wordninja.
_MIN_CONCAT_LENGTH = 8

_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]{1,5}$")
_BRACKETS_RE = re.compile(r"[\[\]{}_]")
_PARENS_RE = re.compile(r"[()]")
_DASH_VARIANTS_RE = re.compile(r"[–—]")
_REPEATED_DASH_RE = re.compile(r"\s*-{2,}\s*")
_WHITESPACE_RE = re.compile(r"\s+")
_CAMEL_CASE_RE = re.compile(r"[a-z][A-Z]")
_CAMEL_LOWER_UPPER_RE = re.compile(r"([a-z])([A-Z])")
_CAMEL_UPPER_SEQUENCE_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_GLUED_DASH_RE = re.compile(r"(?<=[A-Za-z])-(?=[A-Z])")
_LETTER_RE = re.compile(r"[^\W\d_]")

_TITLE_BY_AUTHOR_RE = re.compile(r"^(?P<title>.+?)\s+(?i:by)\s+(?P<author>.+)$")
_AUTHOR_DASH_TITLE_RE = re.compile(r"^(?P<author>[^-]+?)\s+-\s+(?P<title>.+)$")
_TITLE_DASH_AUTHOR_RE = re.compile(r"^(?P<title>.+?)\s+-\s+(?P<author>.+)$")
_TITLE_PAREN_AUTHOR_RE = re.compile(r"^(?P<title>.+?)\s*\((?P<author>[^()]+)\)$")

_LITERAL_SEPARATORS = (" - ", " by ", ", ", " | ", "; ")

# Common English stop words that appear in titles but not person names.
_TITLE_STOP_WORDS = frozenset(
    {
        "the",
        "a",
        "an",
        "of",
        "and",
        "in",
        "on",
        "at",
        "to",
        "for",
        "by",
        "with",
        "from",
        "is",
        "was",
        "are",
        "were",
        "be",
        "been",
    }
)

# Lower-case particles allowed inside an author name ("Ludwig van Beethoven").
_NAME_PARTICLES = frozenset({"van", "von", "de", "del", "della", "da", "di", "le", "la", "du"})


@dataclass
class FilenameGuess:
    """Title and author guessed from a filename. Either may be empty."""

    title: str = ""
    author: str = ""


def is_likely_person_name(text: str) -> bool:
    """Heuristic check whether a string looks like a person's name.

    Recognizes 2-3 capitalized words (including initials like "J.R.R.")
    without common title stop words.
    """
    words = text.split()

    if len(words) < 2 or len(words) > 3:
        return False

    for word in words:
        if not word[0].isupper():
            return False

    return not any(w.lower() in _TITLE_STOP_WORDS for w in words)


def _is_capitalized_name(text: str) -> bool:
    """Looser name check for explicit "by Author" forms: any length, capitalized words."""
    words = text.split()
    if not words:
        return False
    return all(w[0].isupper() or w.lower() in _NAME_PARTICLES for w in words)


def _split_camel_case(segment: str) -> str:
    """Split CamelCase words apart, leaving digits and acronyms attached."""
    result = _CAMEL_LOWER_UPPER_RE.sub(r"\1 \2", segment)
    return _CAMEL_UPPER_SEQUENCE_RE.sub(r"\1 \2", result)


def _split_concatenated_words(text: str) -> str:
    """Split CamelCase and long lower-case run-together words in each token."""
    words: list[str] = []
    for token in text.split(" "):
        if _CAMEL_CASE_RE.search(token):
            words.append(_split_camel_case(token))
        elif token.isalpha() and token.islower() and len(token) >= _MIN_CONCAT_LENGTH:
            words.append(" ".join(wordninja.split(token)) or token)
        else:
            words.append(token)
    return " ".join(words)


def normalize_filename(original_name: str) -> str:
    """Strip the extension and normalize separators in an uploaded filename.

    Parentheses are kept so the "Title (Author)" pattern can still match.
    """
    basename = PurePath(original_name.strip()).name if original_name.strip() else ""
    stem = _EXTENSION_RE.sub("", basename)
    text = _BRACKETS_RE.sub(" ", stem)
    text = _DASH_VARIANTS_RE.sub("-", text)
    text = _REPEATED_DASH_RE.sub(" - ", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    # A dash glued inside a CamelCase token ("SteveBerry-TheTemplarLegacy") is a separator too.
    text = " ".join(
        _GLUED_DASH_RE.sub(" - ", token) if _CAMEL_CASE_RE.search(token) else token
        for token in text.split(" ")
    )
    return _split_concatenated_words(text)


def _clean_part(text: str) -> str:
    """Remove leftover parentheses and surrounding punctuation from a parsed part."""
    text = _PARENS_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip(" -,;|")


def _within_bounds(title: str, author: str) -> bool:
    """Both parts are non-empty and no longer than the record limits."""
    return (
        bool(title)
        and bool(author)
        and len(title) <= _MAX_TITLE_LENGTH
        and len(author) <= _MAX_AUTHOR_LENGTH
    )


def _match_title_by_author(name: str) -> FilenameGuess | None:
    m = _TITLE_BY_AUTHOR_RE.match(name)
    if m and _is_capitalized_name(_clean_part(m.group("author"))):
        return FilenameGuess(_clean_part(m.group("title")), _clean_part(m.group("author")))
    return None


def _match_author_dash_title(name: str) -> FilenameGuess | None:
    m = _AUTHOR_DASH_TITLE_RE.match(name)
    if not m:
        return None
    author = _clean_part(m.group("author"))
    title = _clean_part(m.group("title"))
    # "Dune - Frank Herbert" must not be read backwards.
    if is_likely_person_name(author) and not is_likely_person_name(title):
        return FilenameGuess(title, author)
    return None


def _match_title_dash_author(name: str) -> FilenameGuess | None:
    m = _TITLE_DASH_AUTHOR_RE.match(name)
    if m:
        return FilenameGuess(_clean_part(m.group("title")), _clean_part(m.group("author")))
    return None


def _match_title_paren_author(name: str) -> FilenameGuess | None:
    m = _TITLE_PAREN_AUTHOR_RE.match(name)
    if m and _LETTER_RE.search(m.group("author")):
        return FilenameGuess(_clean_part(m.group("title")), _clean_part(m.group("author")))
    return None


def _match_leading_name(name: str) -> FilenameGuess | None:
    """Detect "Firstname Lastname Title..." with no separator at all."""
    words = _clean_part(name).split()
    for name_len in (3, 2):
        if len(words) <= name_len:
            continue
        candidate = " ".join(words[:name_len])
        if is_likely_person_name(candidate):
            return FilenameGuess(" ".join(words[name_len:]), candidate)
    return None


# Tried in order; the first structurally valid match wins.
_PATTERNS: tuple[Callable[[str], FilenameGuess | None], ...] = (
    _match_title_by_author,
    _match_author_dash_title,
    _match_title_dash_author,
    _match_title_paren_author,
    _match_leading_name,
)


def _split_on_separators(name: str) -> FilenameGuess | None:
    """Split on literal separators and use the name shape to pick the author half."""
    for separator in _LITERAL_SEPARATORS:
        if separator not in name:
            continue
        left, right = (_clean_part(p) for p in name.split(separator, 1))
        left = left[:_MAX_TITLE_LENGTH]
        if is_likely_person_name(right) and len(right) <= _MAX_AUTHOR_LENGTH:
            return FilenameGuess(left, right)
        if is_likely_person_name(left):
            return FilenameGuess(right[:_MAX_TITLE_LENGTH], left)
    return None


def parse_filename(original_name: str) -> FilenameGuess:
    """Guess a title and author from an uploaded file's original name.

    Never raises. Filenames with no recognizable structure degrade to a
    title-only guess made of the whole cleaned name.

    Args:
        original_name: The filename as uploaded, with or without directories.

    Returns:
        FilenameGuess with title and author, either possibly empty.
    """
    name = normalize_filename(original_name)
    if not name:
        return FilenameGuess()

    for pattern in _PATTERNS:
        guess = pattern(name)
        if guess is not None and _within_bounds(guess.title, guess.author):
            return guess

    split = _split_on_separators(name)
    if split is not None and split.title and split.author:
        return split

    return FilenameGuess(title=_clean_part(name)[:_MAX_TITLE_LENGTH], author="")


def clean_filename_title(original_name: str) -> str:
    """Return the whole cleaned filename, used as the last-resort title."""
    return _clean_part(normalize_filename(original_name))[:_MAX_TITLE_LENGTH]
