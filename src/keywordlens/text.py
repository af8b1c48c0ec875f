"""Shared tokenisation helpers, stopwords and code-word detection."""

from __future__ import annotations

import re
from typing import Iterable, List, Pattern, Sequence

# English and Greek stop words shared by every keyword pipeline.
STOPWORDS: frozenset[str] = frozenset(
    {
        "a",
        "about",
        "above",
        "after",
        "again",
        "against",
        "all",
        "am",
        "an",
        "and",
        "any",
        "are",
        "as",
        "at",
        "be",
        "because",
        "been",
        "before",
        "being",
        "below",
        "between",
        "both",
        "but",
        "by",
        "can",
        "could",
        "did",
        "do",
        "does",
        "down",
        "during",
        "each",
        "few",
        "for",
        "from",
        "further",
        "had",
        "has",
        "have",
        "having",
        "he",
        "her",
        "here",
        "hers",
        "herself",
        "him",
        "himself",
        "his",
        "how",
        "i",
        "if",
        "in",
        "into",
        "is",
        "it",
        "its",
        "itself",
        "just",
        "me",
        "might",
        "more",
        "most",
        "my",
        "myself",
        "no",
        "nor",
        "not",
        "of",
        "off",
        "on",
        "once",
        "only",
        "or",
        "other",
        "our",
        "ours",
        "ourselves",
        "out",
        "over",
        "own",
        "same",
        "she",
        "should",
        "so",
        "some",
        "such",
        "than",
        "that",
        "the",
        "their",
        "theirs",
        "them",
        "themselves",
        "then",
        "there",
        "these",
        "they",
        "this",
        "those",
        "through",
        "to",
        "too",
        "under",
        "until",
        "up",
        "very",
        "was",
        "we",
        "were",
        "what",
        "when",
        "where",
        "which",
        "while",
        "who",
        "whom",
        "why",
        "will",
        "with",
        "would",
        "you",
        "your",
        "yours",
        "yourself",
        "yourselves",
        # Greek
        "ο",
        "η",
        "το",
        "οι",
        "τα",
        "την",
        "των",
        "τον",
        "του",
        "της",
        "και",
        "που",
        "να",
        "για",
        "είναι",
        "σε",
        "με",
        "αν",
        "από",
        "μόνο",
        "αλλά",
        "δεν",
        "όχι",
        "ή",
        "ως",
        "αυτό",
        "αυτή",
        "αυτοί",
        "αυτές",
        "αυτά",
        "πολύ",
        "πολλά",
        "λίγο",
        "λίγα",
        "κάτι",
        "άλλο",
        "άλλα",
        "άλλη",
        "άλλες",
        "κάποιος",
        "κάποια",
        "κάποιο",
        "κάποιοι",
        "κάποιες",
        "ποιος",
        "ποια",
        "ποιο",
        "ποιοι",
        "ποιες",
        "πώς",
        "πού",
        "πότε",
        "γιατί",
        "ποσο",
        "ποσα",
        "είμαι",
        "είσαι",
        "εστε",
        "ειμαστε",
        "ειστε",
        "εινε",
        "ημουν",
        "ησουν",
        "ημασταν",
        "ησασταν",
        "θα",
        "ας",
    }
)

CODE_PATTERNS: dict[str, Pattern[str]] = {
    "html_attribute": re.compile(r"^(href|src|alt|title|class|id|name|value|data-[\w-]+)$", re.IGNORECASE),
    "camel_case": re.compile(r"^[a-z]+[A-Z][a-zA-Z0-9]*$"),
    "snake_case": re.compile(r"^[a-z]+_[a-z0-9_]+$"),
    "kebab_case": re.compile(r"^[a-z]+(-[a-z0-9]+)+$"),
    "css_unit": re.compile(r"^(px|em|rem|pt|cm|mm|in|pc|ex|ch|vw|vh|vmin|vmax|%)$", re.IGNORECASE),
    "css_property": re.compile(
        r"^(background|color|border|margin|padding|font|width|height|display|position|flex|grid)$",
        re.IGNORECASE,
    ),
    "js_keyword": re.compile(
        r"^(function|const|let|var|return|if|else|for|while|do|switch|case|try|catch|finally"
        r"|async|await|class|extends|constructor)$",
        re.IGNORECASE,
    ),
    "numeric_only": re.compile(r"^\d+$"),
    "single_char": re.compile(r"^.$", re.DOTALL),
    "url_like": re.compile(r"^(http|https|www|ftp|\.com|\.org|\.net|\.edu)$", re.IGNORECASE),
    "minified": re.compile(r"^[a-z]{1,2}\d+$|^_[a-zA-Z0-9]+$"),
}

# Latin vowels plus the Greek vowel range, accented forms included.
VOWEL_RE = re.compile(r"[aeiouyαεηιουωάέήίόύώϊϋΐΰ]", re.IGNORECASE)
QUESTION_WORDS: tuple[str, ...] = ("how", "what", "why", "when", "where", "which", "who")

_HEX_WORD_RE = re.compile(r"^#[0-9a-f]+$|^[0-9a-f]{3}$|^[0-9a-f]{6}$", re.IGNORECASE)
_REPEATED_CHAR_RE = re.compile(r"(.)\1{2,}")
_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_QUESTION_PREFIX_RE = re.compile(r"^(?:%s)" % "|".join(QUESTION_WORDS))


class KeywordInputError(ValueError):
    """Raised when a pipeline receives input it cannot analyse."""


class InvalidItemError(ValueError):
    """Raised for a single malformed item; pipelines drop the item and continue."""


def is_code_word(word: str) -> bool:
    """Return ``True`` when *word* looks like markup, code or noise."""

    if not word:
        return True
    return any(pattern.search(word) for pattern in CODE_PATTERNS.values())


def is_real_language_word(word: str) -> bool:
    if not word or len(word) < 3:
        return False
    if vowel_ratio(word) < 0.25:
        return False
    if _HEX_WORD_RE.match(word):
        return False
    if _REPEATED_CHAR_RE.search(word):
        return False
    return True


def vowel_ratio(text: str) -> float:
    if not text:
        return 0.0
    return len(VOWEL_RE.findall(text)) / len(text)


def starts_with_question(text: str) -> bool:
    return bool(_QUESTION_PREFIX_RE.match(text.strip().lower()))


def normalize_keyword_list(keywords: str | Iterable[str] | None) -> List[str]:
    """Normalise a list or comma-separated string into trimmed keywords.

    Duplicates are kept; every entry is analysed on its own.
    """

    if keywords is None:
        return []
    if isinstance(keywords, str):
        raw: Iterable[object] = keywords.split(",")
    else:
        raw = keywords
    result: List[str] = []
    for item in raw:
        if item is None:
            continue
        value = str(item).strip()
        if value:
            result.append(value)
    return result


def split_words(text: str) -> List[str]:
    return [word for word in _WHITESPACE_RE.split(text.strip()) if word]


def tokenize_for_phrases(text: str) -> List[str]:
    """Lowercase, strip punctuation and drop short or stop-word tokens."""

    tokens: List[str] = []
    for raw in split_words(text.lower()):
        token = _NON_WORD_RE.sub("", raw)
        if len(token) <= 2 or token in STOPWORDS:
            continue
        tokens.append(token)
    return tokens


def build_keyword_pattern(keyword: str) -> tuple[Pattern[str], bool]:
    """Compile the boundary-anchored pattern used to count *keyword*.

    Multi-word keywords accept any run of whitespace between their words.
    Returns the pattern and whether the keyword is a phrase.
    """

    normalized = keyword.strip().lower()
    is_phrase = bool(_WHITESPACE_RE.search(normalized))
    if is_phrase:
        body = r"\s+".join(re.escape(part) for part in split_words(normalized))
    else:
        body = re.escape(normalized)
    return re.compile(rf"\b{body}\b", re.IGNORECASE), is_phrase


def contains_any_term(words: Sequence[str], terms: Iterable[str]) -> bool:
    lookup = {word.lower() for word in words}
    return any(term in lookup for term in terms)


__all__ = [
    "CODE_PATTERNS",
    "InvalidItemError",
    "KeywordInputError",
    "QUESTION_WORDS",
    "STOPWORDS",
    "VOWEL_RE",
    "build_keyword_pattern",
    "contains_any_term",
    "is_code_word",
    "is_real_language_word",
    "normalize_keyword_list",
    "split_words",
    "starts_with_question",
    "tokenize_for_phrases",
    "vowel_ratio",
]
