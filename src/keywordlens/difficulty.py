"""Heuristic keyword difficulty estimation."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, List

from .text import contains_any_term, normalize_keyword_list, split_words, starts_with_question

logger = logging.getLogger(__name__)

BASE_SCORE = 50
GENERIC_TERMS = frozenset({"best", "top", "good", "great", "make", "get", "free"})
COMMERCIAL_TERMS = frozenset({"buy", "price", "cost", "cheap", "deal", "sale", "discount"})
LOCATION_TERMS = frozenset({"near", "in", "at", "local", "city", "town"})

# (upper bound exclusive, level, color); the last level has no upper bound.
LEVELS: tuple[tuple[int, str, str], ...] = (
    (30, "easy", "#10b981"),
    (60, "medium", "#f59e0b"),
    (80, "hard", "#ef4444"),
)
VERY_HARD = ("very hard", "#991b1b")

RECOMMENDATIONS = {
    "easy": '"{keyword}" appears to be a good target - relatively low competition expected.',
    "medium": '"{keyword}" has moderate difficulty. Create quality content and build backlinks.',
    "hard": '"{keyword}" is competitive. Consider targeting long-tail variations.',
    "very hard": '"{keyword}" is highly competitive. Focus on long-tail alternatives first.',
}

_DIGIT_RE = re.compile(r"\d")


@dataclass(slots=True)
class DifficultyFactors:
    length: int = 0
    generic: int = 0
    commercial: int = 0
    question: int = 0
    numbers: int = 0
    location: int = 0

    def total(self) -> int:
        return self.length + self.generic + self.commercial + self.question + self.numbers + self.location


@dataclass(slots=True)
class DifficultyEstimate:
    """Difficulty score, level and the factors that produced it."""

    keyword: str
    score: int
    level: str
    color: str
    factors: DifficultyFactors = field(default_factory=DifficultyFactors)
    recommendation: str = ""


@dataclass(slots=True)
class DifficultyResult:
    total_keywords: int
    estimates: List[DifficultyEstimate]
    easiest: List[DifficultyEstimate]
    hardest: List[DifficultyEstimate]
    distribution: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def difficulty_level(score: float) -> tuple[str, str]:
    """Map a score to its ``(level, color)`` pair."""

    for upper, level, color in LEVELS:
        if score < upper:
            return level, color
    return VERY_HARD


def _length_adjustment(word_count: int) -> int:
    if word_count == 1:
        return 25
    if word_count == 2:
        return 10
    if word_count >= 4:
        return -15
    return 0


def score_keyword(keyword: str) -> DifficultyEstimate:
    words = split_words(keyword)
    factors = DifficultyFactors(
        length=_length_adjustment(len(words)),
        generic=15 if contains_any_term(words, GENERIC_TERMS) else 0,
        commercial=10 if contains_any_term(words, COMMERCIAL_TERMS) else 0,
        question=-10 if starts_with_question(keyword) else 0,
        numbers=-10 if _DIGIT_RE.search(keyword) else 0,
        location=-5 if contains_any_term(words, LOCATION_TERMS) else 0,
    )
    score = max(0, min(100, BASE_SCORE + factors.total()))
    level, color = difficulty_level(score)
    return DifficultyEstimate(
        keyword=keyword,
        score=score,
        level=level,
        color=color,
        factors=factors,
        recommendation=RECOMMENDATIONS[level].format(keyword=keyword),
    )


def estimate_difficulty(keywords: str | Iterable[str], content: str = "") -> DifficultyResult:
    """Estimate ranking difficulty for each keyword.

    ``content`` is accepted as context for callers but does not change scores.
    """

    start = time.perf_counter()
    keyword_list = normalize_keyword_list(keywords)
    logger.info("difficulty.start keywords=%s context_chars=%s", len(keyword_list), len(content or ""))

    estimates = [score_keyword(keyword) for keyword in keyword_list]
    ordered = sorted(estimates, key=lambda estimate: estimate.score)
    distribution = {
        "easy": sum(1 for estimate in estimates if estimate.level == "easy"),
        "medium": sum(1 for estimate in estimates if estimate.level == "medium"),
        "hard": sum(1 for estimate in estimates if estimate.level == "hard"),
        "very_hard": sum(1 for estimate in estimates if estimate.level == "very hard"),
    }

    logger.info(
        "difficulty.complete easy=%s medium=%s hard=%s very_hard=%s duration_ms=%.2f",
        distribution["easy"],
        distribution["medium"],
        distribution["hard"],
        distribution["very_hard"],
        (time.perf_counter() - start) * 1000.0,
    )
    return DifficultyResult(
        total_keywords=len(estimates),
        estimates=estimates,
        easiest=ordered[:3],
        hardest=list(reversed(ordered[-3:])),
        distribution=distribution,
    )


__all__ = [
    "COMMERCIAL_TERMS",
    "DifficultyEstimate",
    "DifficultyFactors",
    "DifficultyResult",
    "GENERIC_TERMS",
    "LOCATION_TERMS",
    "difficulty_level",
    "estimate_difficulty",
    "score_keyword",
]
