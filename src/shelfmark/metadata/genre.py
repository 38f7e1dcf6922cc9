# ABOUTME: Keyword and author-table genre classification for uploaded books.
# ABOUTME: Lookup tables are immutable data injected into the classifier.

from collections.abc import Iterable
from dataclasses import dataclass

DEFAULT_GENRE = "Fiction"

GenreKeywords = tuple[tuple[str, tuple[str, ...]], ...]
AuthorGenres = tuple[tuple[str, str], ...]

# Declaration order is the tie-break order: on equal keyword counts the
# genre listed first wins.
_DEFAULT_KEYWORDS: GenreKeywords = (
    (
        "Science Fiction",
        (
            "science fiction", "sci-fi", "spaceship", "spacecraft", "alien", "robot",
            "galaxy", "cyberpunk", "android", "interstellar", "martian", "dune",
            "foundation", "time machine", "planet",
        ),
    ),
    (
        "Fantasy",
        (
            "fantasy", "magic", "dragon", "wizard", "kingdom", "quest", "sword", "elf",
            "sorcerer", "throne", "hobbit", "narnia", "witch", "spell", "enchanted",
        ),
    ),
    (
        "Mystery",
        (
            "mystery", "detective", "murder", "crime", "investigation", "clue", "suspect",
            "sherlock", "holmes", "poirot", "forensic", "evidence",
        ),
    ),
    (
        "Romance",
        ("romance", "love story", "passion", "wedding", "bride", "kiss", "romantic", "dating"),
    ),
    (
        "Thriller",
        ("thriller", "suspense", "danger", "chase", "escape", "conspiracy", "spy", "assassin"),
    ),
    (
        "Horror",
        (
            "horror", "ghost", "haunted", "nightmare", "terror", "demon", "supernatural",
            "exorcist", "vampire",
        ),
    ),
    (
        "Biography",
        ("biography", "memoir", "autobiography", "life of", "life story", "personal account"),
    ),
    (
        "History",
        (
            "history", "historical", "ancient", "empire", "revolution", "civilization",
            "world war", "civil war", "century",
        ),
    ),
    (
        "Self-Help",
        (
            "self-help", "how to", "success", "motivation", "habits", "productivity",
            "personal development", "self improvement",
        ),
    ),
    (
        "Business",
        (
            "business", "entrepreneur", "marketing", "leadership", "management", "startup",
            "innovation", "strategy", "finance",
        ),
    ),
    (
        "Technology",
        (
            "technology", "programming", "computer", "software", "algorithm", "coding",
            "internet", "python", "javascript",
        ),
    ),
    (
        "Philosophy",
        ("philosophy", "philosophical", "ethics", "morality", "wisdom", "existence", "stoic"),
    ),
    (
        "Religion",
        ("religion", "religious", "spiritual", "faith", "bible", "prayer", "church", "divine"),
    ),
    (
        "Science",
        ("science", "scientific", "experiment", "physics", "chemistry", "biology", "research"),
    ),
    (
        "Health",
        ("health", "medical", "wellness", "fitness", "nutrition", "medicine", "exercise", "diet"),
    ),
    (
        "Psychology",
        ("psychology", "behavior", "mental", "consciousness", "cognitive", "dreams"),
    ),
    (
        "Education",
        ("education", "learning", "teaching", "academic", "university", "textbook"),
    ),
    (
        "Travel",
        ("travel", "journey", "destination", "explore", "itinerary"),
    ),
    (
        "Cooking",
        ("cooking", "recipe", "kitchen", "chef", "cuisine", "baking"),
    ),
    (
        "Poetry",
        ("poetry", "poems", "verse", "sonnet", "rhyme"),
    ),
    (
        "Drama",
        ("drama", "theatre", "theater", "screenplay", "tragedy"),
    ),
    (
        "Classic",
        (
            "classic", "literature", "masterpiece", "shakespeare", "dickens", "hemingway",
            "great gatsby", "mockingbird",
        ),
    ),
)

_DEFAULT_AUTHOR_GENRES: AuthorGenres = (
    ("stephen king", "Horror"),
    ("j.k. rowling", "Fantasy"),
    ("tolkien", "Fantasy"),
    ("george r.r. martin", "Fantasy"),
    ("agatha christie", "Mystery"),
    ("arthur conan doyle", "Mystery"),
    ("dan brown", "Thriller"),
    ("james patterson", "Thriller"),
    ("john grisham", "Thriller"),
    ("nicholas sparks", "Romance"),
    ("jane austen", "Romance"),
    ("isaac asimov", "Science Fiction"),
    ("frank herbert", "Science Fiction"),
    ("arthur c. clarke", "Science Fiction"),
    ("philip k. dick", "Science Fiction"),
    ("ursula k. le guin", "Science Fiction"),
    ("james clear", "Self-Help"),
    ("george orwell", "Classic"),
    ("harper lee", "Classic"),
)


@dataclass(frozen=True)
class GenreTables:
    """Immutable lookup tables driving genre classification.

    Attributes:
        keywords: Ordered (genre, keywords) pairs; order breaks ties.
        author_genres: Ordered (lower-case author substring, genre) pairs.
        default: Genre returned when nothing matches.
    """

    keywords: GenreKeywords = _DEFAULT_KEYWORDS
    author_genres: AuthorGenres = _DEFAULT_AUTHOR_GENRES
    default: str = DEFAULT_GENRE

    @property
    def genres(self) -> list[str]:
        """All genre names the tables can produce, in declaration order."""
        names = [genre for genre, _ in self.keywords]
        names.extend(g for _, g in self.author_genres if g not in names)
        if self.default not in names:
            names.append(self.default)
        return names

    def extend(
        self,
        *,
        keywords: Iterable[tuple[str, Iterable[str]]] = (),
        author_genres: Iterable[tuple[str, str]] = (),
    ) -> "GenreTables":
        """Return new tables with extra keywords and author entries appended.

        Keywords for an existing genre are added to that genre's list; new
        genres are declared after the existing ones.
        """
        merged: dict[str, tuple[str, ...]] = dict(self.keywords)
        for genre, words in keywords:
            merged[genre] = merged.get(genre, ()) + tuple(w.lower() for w in words)
        authors = self.author_genres + tuple((a.lower(), g) for a, g in author_genres)
        return GenreTables(
            keywords=tuple(merged.items()),
            author_genres=authors,
            default=self.default,
        )


DEFAULT_TABLES = GenreTables()


class GenreClassifier:
    """Scores text against genre keyword lists with an author override table.

    Classification is deterministic: the author table is checked first and
    short-circuits; otherwise the genre with the strictly highest keyword
    count wins, ties going to the genre declared first.
    """

    def __init__(self, tables: GenreTables = DEFAULT_TABLES) -> None:
        self._tables = tables

    @property
    def tables(self) -> GenreTables:
        return self._tables

    def classify(
        self,
        title: str | None = None,
        author: str | None = None,
        subject: str | None = None,
        body_sample: str | None = None,
    ) -> str:
        """Return the best genre for the combined input fields."""
        combined = " ".join(
            part for part in (title, author, subject, body_sample) if part
        ).lower()
        if not combined.strip():
            return self._tables.default

        for author_name, genre in self._tables.author_genres:
            if author_name in combined:
                return genre

        best_genre = self._tables.default
        best_score = 0
        for genre, keywords in self._tables.keywords:
            score = sum(1 for keyword in keywords if keyword in combined)
            if score > best_score:
                best_score = score
                best_genre = genre

        return best_genre

    def scores(self, text: str) -> dict[str, int]:
        """Keyword hit count per genre, for display and debugging."""
        lowered = text.lower()
        return {
            genre: sum(1 for keyword in keywords if keyword in lowered)
            for genre, keywords in self._tables.keywords
        }


def classify_genre(
    title: str | None = None,
    author: str | None = None,
    subject: str | None = None,
    body_sample: str | None = None,
) -> str:
    """Classify with the default tables."""
    return GenreClassifier().classify(title, author, subject, body_sample)
