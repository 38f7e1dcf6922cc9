# ABOUTME: Lightweight language detection and keyword extraction for sampled text.
# ABOUTME: Stop-word counting only; good enough to prefill a form, not to be trusted.

import re
from collections import Counter

DEFAULT_LANGUAGE = "English"

_SAMPLE_LENGTH = 1000
_MAX_KEYWORDS = 10
_MIN_KEYWORD_LENGTH = 4
_MIN_KEYWORD_COUNT = 3

_WORD_RE = re.compile(r"\w+")
_NON_WORD_RE = re.compile(r"[^\w\s]")

# Languages other than English; English wins when nothing scores.
_LANGUAGE_STOP_WORDS: dict[str, frozenset[str]] = {
    "Spanish": frozenset(
        "el la de que y en un es se no te lo le da su por son con para al".split()
    ),
    "French": frozenset(
        "le de et à un il être en avoir que pour dans ce son une sur avec ne se".split()
    ),
    "German": frozenset(
        "der die und in den von zu das mit sich des auf für ist im dem nicht ein eine als".split()
    ),
    "Italian": frozenset(
        "il di che e la per un in con del da a al le si dei sul una nel alla".split()
    ),
    "Portuguese": frozenset(
        "de a o que e do da em um para é com não uma os no se na por mais".split()
    ),
}

_COMMON_WORDS = frozenset(
    """
    the and for are but not you all can had her was one our out day get has him his
    how its may new now old see two who boy did she use air any say way oil sit set
    run eat far sea eye ask own try kind hand high year work part make good long here
    well such take than them will come made many time very when much know just first
    could where after think little right never before great might still should being
    every three state while start place again those both during without another
    between through because important different that this with from have were they
    what which their there would about into been
    """.split()
)


def detect_language(text: str) -> str:
    """Guess the language of `text` from stop-word frequency in its first 1000 chars."""
    sample = text[:_SAMPLE_LENGTH].lower()
    counts = Counter(_WORD_RE.findall(sample))
    if not counts:
        return DEFAULT_LANGUAGE

    best_language = DEFAULT_LANGUAGE
    best_score = 0
    for language, stop_words in _LANGUAGE_STOP_WORDS.items():
        score = sum(counts[word] for word in stop_words)
        if score > best_score:
            best_score = score
            best_language = language

    # English text hits "a", "de" and friends too; require a clear signal.
    english_score = sum(counts[w] for w in ("the", "and", "of", "to", "is", "that", "with"))
    if english_score >= best_score:
        return DEFAULT_LANGUAGE
    return best_language


def extract_keywords(text: str, limit: int = _MAX_KEYWORDS) -> list[str]:
    """Return the most frequent meaningful words of `text`.

    Words must be longer than three characters, appear at least three times,
    and not be common English filler. Ties keep first-seen order.
    """
    words = _NON_WORD_RE.sub(" ", text.lower()).split()
    counts = Counter(
        w for w in words if len(w) >= _MIN_KEYWORD_LENGTH and not w.isdigit()
    )
    ranked = [
        (word, count)
        for word, count in counts.most_common()
        if count >= _MIN_KEYWORD_COUNT and word not in _COMMON_WORDS
    ]
    return [word for word, _ in ranked[:limit]]
