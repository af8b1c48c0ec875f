"""Frequency-based keyword suggestions used as the LSI candidate pool."""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import asdict, dataclass
from typing import Any, List, Sequence

from . import content as content_parser
from .text import STOPWORDS, is_code_word, is_real_language_word

logger = logging.getLogger(__name__)

_SPLIT_RE = re.compile(r"[\s\-_/]+")
# Word characters plus the Greek and Coptic block.
_STRIP_RE = re.compile(r"[^\w\u0370-\u03FF]")
_MIN_CONTENT_CHARS = 50


@dataclass(slots=True)
class KeywordSuggestion:
    """A keyword or phrase proposed from content, with its relevance score."""

    keyword: str
    frequency: int
    relevance: int
    type: str = "word"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _candidate_words(text: str) -> List[str]:
    words: List[str] = []
    for raw in _SPLIT_RE.split(text.lower()):
        if len(raw) < 3:
            continue
        word = _STRIP_RE.sub("", raw)
        if len(word) < 3 or word in STOPWORDS:
            continue
        if is_code_word(word) or not is_real_language_word(word):
            continue
        words.append(word)
    return words


def _repeated_phrases(words: Sequence[str]) -> Counter[str]:
    phrases: Counter[str] = Counter()
    for size in (2, 3):
        for start in range(len(words) - size + 1):
            phrases[" ".join(words[start : start + size])] += 1
    return Counter({phrase: count for phrase, count in phrases.items() if count >= 2})


def relevance_score(keyword: str, frequency: int, total_words: int) -> float:
    """Score a keyword from its frequency share, length and phrase shape (0-100)."""

    if total_words <= 0:
        return 0.0
    frequency_score = min(frequency / (total_words * 0.01) * 60, 60)
    length = len(keyword)
    length_bonus = 0
    if 6 <= length <= 8:
        length_bonus = 5
    elif length > 8:
        length_bonus = 15
    phrase_bonus = 10 if " " in keyword else 0
    return min(frequency_score + length_bonus + phrase_bonus, 100)


def suggest_keywords(
    content: str,
    max_suggestions: int = 10,
    language: str | None = "en",
) -> List[KeywordSuggestion]:
    """Suggest the most relevant words and repeated phrases in *content*.

    ``language`` is accepted for callers that pass it; filtering is the same
    for English and Greek content.
    """

    if not content or not isinstance(content, str) or not content.strip():
        return []

    parsed = content_parser.parse(content)
    clean_text = parsed.text if parsed.text.strip() else content
    if len(clean_text) < _MIN_CONTENT_CHARS:
        return []

    words = _candidate_words(clean_text)
    if not words:
        return []

    frequencies: Counter[str] = Counter(words)
    for phrase, count in _repeated_phrases(words).items():
        frequencies[phrase] = count

    suggestions = [
        KeywordSuggestion(
            keyword=keyword,
            frequency=frequency,
            relevance=int(relevance_score(keyword, frequency, len(words)) + 0.5),
            type="phrase" if " " in keyword else "word",
        )
        for keyword, frequency in frequencies.items()
    ]
    suggestions.sort(key=lambda item: (-item.relevance, -item.frequency))
    selected = suggestions[: max(0, max_suggestions)]
    logger.debug(
        "suggestions.complete language=%s words=%s candidates=%s selected=%s",
        language,
        len(words),
        len(suggestions),
        len(selected),
    )
    return selected


def get_suggestion_strings(
    content: str,
    max_suggestions: int = 10,
    language: str | None = "en",
) -> List[str]:
    return [item.keyword for item in suggest_keywords(content, max_suggestions, language)]


__all__ = ["KeywordSuggestion", "get_suggestion_strings", "relevance_score", "suggest_keywords"]
