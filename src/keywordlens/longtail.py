"""Long-tail phrase extraction, scoring and search-intent classification."""

from __future__ import annotations

import logging
import re
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, List, Sequence

from . import content as content_parser
from .text import (
    STOPWORDS,
    InvalidItemError,
    KeywordInputError,
    is_code_word,
    normalize_keyword_list,
    starts_with_question,
    tokenize_for_phrases,
    vowel_ratio,
)

logger = logging.getLogger(__name__)

MIN_CONTENT_CHARS = 100
MIN_PHRASE_FREQUENCY = 2
MIN_VOWEL_RATIO = 0.2

FREQUENCY_CAP = 30
RELEVANCE_CAP = 40
PARTIAL_RELEVANCE_CAP = 20
LENGTH_CAP = 20
SPECIFICITY_STEP = 5

INTENTS = ("informational", "commercial", "navigational", "transactional")

# Evaluated in order; the first matching rule wins.
_INTENT_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("informational", re.compile(r"^(how|what|why|when|where|which|who|guide|tutorial|learn)")),
    ("commercial", re.compile(r"(best|top|review|compare|vs|versus|alternative)")),
    ("transactional", re.compile(r"(buy|price|cost|cheap|deal|discount|order|purchase)")),
    ("navigational", re.compile(r"(login|sign in|register|download|app|software)")),
)
_DIGIT_RE = re.compile(r"\d")


@dataclass(slots=True)
class PhraseCount:
    phrase: str
    frequency: int


@dataclass(slots=True)
class ScoredPhrase:
    """A long-tail phrase with its additive score components."""

    phrase: str
    frequency: int
    total_score: int
    components: dict[str, int] = field(default_factory=dict)
    intent: str = "informational"


@dataclass(slots=True)
class LongTailResult:
    total_phrases: int
    suggestions: List[ScoredPhrase]
    by_intent: dict[str, List[ScoredPhrase]]
    seed_keywords: List[str]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def is_valid_phrase(phrase: str) -> bool:
    """Accept phrases that read like language rather than markup or noise."""

    if not phrase:
        return False
    if vowel_ratio(phrase) < MIN_VOWEL_RATIO:
        return False
    words = phrase.split(" ")
    if all(word in STOPWORDS for word in words):
        return False
    if any(is_code_word(word) for word in words):
        return False
    return True


def extract_phrases(text: str, min_words: int = 2, max_words: int = 5) -> List[PhraseCount]:
    """Return n-gram phrases of *min_words*..*max_words* tokens seen at least twice."""

    tokens = tokenize_for_phrases(text)
    counts: Counter[str] = Counter()
    for size in range(max(1, min_words), max_words + 1):
        for start in range(len(tokens) - size + 1):
            phrase = " ".join(tokens[start : start + size])
            if is_valid_phrase(phrase):
                counts[phrase] += 1
    phrases = [
        PhraseCount(phrase=phrase, frequency=count)
        for phrase, count in counts.items()
        if count >= MIN_PHRASE_FREQUENCY
    ]
    logger.debug(
        "longtail.extract tokens=%s window=%s-%s phrases=%s",
        len(tokens),
        min_words,
        max_words,
        len(phrases),
    )
    return phrases


def _relevance(phrase: str, words: Sequence[str], seeds: Sequence[str]) -> int:
    if not seeds:
        return PARTIAL_RELEVANCE_CAP
    if any(seed in phrase for seed in seeds):
        return RELEVANCE_CAP
    word_set = set(words)
    partial = sum(1 for seed in seeds if any(part in word_set for part in seed.split(" ")))
    return min(partial * 10, PARTIAL_RELEVANCE_CAP)


def score_phrase(item: PhraseCount, seed_keywords: Sequence[str] = ()) -> ScoredPhrase:
    """Score a phrase on frequency, seed relevance, length and specificity.

    ``seed_keywords`` are expected lowercased. Raises :class:`InvalidItemError`
    for a blank phrase.
    """

    phrase = getattr(item, "phrase", None)
    if not isinstance(phrase, str) or not phrase.strip():
        raise InvalidItemError(f"Invalid phrase item: {item!r}")
    frequency = int(getattr(item, "frequency", 0) or 0)
    words = phrase.split(" ")

    components = {
        "frequency": min(frequency * 5, FREQUENCY_CAP),
        "relevance": _relevance(phrase, words, seed_keywords),
        "length": min(len(words) * 5, LENGTH_CAP),
        "specificity": (SPECIFICITY_STEP if _DIGIT_RE.search(phrase) else 0)
        + (SPECIFICITY_STEP if starts_with_question(phrase) else 0),
    }
    return ScoredPhrase(
        phrase=phrase,
        frequency=frequency,
        total_score=sum(components.values()),
        components=components,
        intent=classify_intent(phrase),
    )


def classify_intent(phrase: str) -> str:
    lowered = phrase.strip().lower()
    for intent, pattern in _INTENT_RULES:
        if pattern.search(lowered):
            return intent
    return "informational"


def categorize_by_intent(phrases: Iterable[ScoredPhrase]) -> dict[str, List[ScoredPhrase]]:
    categories: dict[str, List[ScoredPhrase]] = {intent: [] for intent in INTENTS}
    for item in phrases:
        if not item.phrase or not item.phrase.strip():
            logger.warning("longtail.categorize.skipped reason=empty-phrase")
            continue
        categories[item.intent].append(item)
    return categories


def generate_long_tail(
    content: str,
    seed_keywords: str | Iterable[str] | None = (),
    max_suggestions: int = 20,
    *,
    min_words: int = 2,
    max_words: int = 5,
) -> LongTailResult:
    """Suggest long-tail phrases from *content*, ranked against *seed_keywords*."""

    start = time.perf_counter()
    parsed = content_parser.parse(content)
    text = parsed.text or (content or "")
    if len(text) < MIN_CONTENT_CHARS:
        logger.warning("longtail.failed reason=insufficient-content chars=%s", len(text))
        raise KeywordInputError("Insufficient content for long-tail keyword generation")

    seeds = normalize_keyword_list(seed_keywords)
    lowered_seeds = [seed.lower() for seed in seeds]
    logger.info(
        "longtail.start chars=%s words=%s seeds=%s",
        len(text),
        parsed.word_count,
        ", ".join(seeds) if seeds else "none",
    )

    scored: List[ScoredPhrase] = []
    for item in extract_phrases(text, min_words, max_words):
        try:
            phrase = score_phrase(item, lowered_seeds)
        except InvalidItemError as exc:
            logger.warning("longtail.score.skipped error=%s", exc)
            continue
        if phrase.total_score > 0:
            scored.append(phrase)
    scored.sort(key=lambda entry: entry.total_score, reverse=True)
    suggestions = scored[: max(0, max_suggestions)]
    by_intent = categorize_by_intent(suggestions)

    logger.info(
        "longtail.complete suggestions=%s informational=%s commercial=%s transactional=%s "
        "navigational=%s duration_ms=%.2f",
        len(suggestions),
        len(by_intent["informational"]),
        len(by_intent["commercial"]),
        len(by_intent["transactional"]),
        len(by_intent["navigational"]),
        (time.perf_counter() - start) * 1000.0,
    )
    return LongTailResult(
        total_phrases=len(suggestions),
        suggestions=suggestions,
        by_intent=by_intent,
        seed_keywords=seeds,
    )


__all__ = [
    "INTENTS",
    "LongTailResult",
    "PhraseCount",
    "ScoredPhrase",
    "categorize_by_intent",
    "classify_intent",
    "extract_phrases",
    "generate_long_tail",
    "is_valid_phrase",
    "score_phrase",
]
