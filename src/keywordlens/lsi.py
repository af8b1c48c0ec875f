"""LSI-style related keyword scoring based on sentence co-occurrence."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterable, List, Mapping, Sequence

from . import content as content_parser
from .suggestions import KeywordSuggestion, suggest_keywords
from .text import InvalidItemError, KeywordInputError, normalize_keyword_list

logger = logging.getLogger(__name__)

MIN_CONTENT_CHARS = 200
DEFAULT_SCORE = 50
COOCCURRENCE_POINTS = 10
MAX_SCORE = 100

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

Suggester = Callable[[str, int, str], Sequence[Any]]


@dataclass(slots=True)
class LSIKeyword:
    keyword: str
    frequency: int
    relevance: int
    lsi_score: int
    type: str = "word"


@dataclass(slots=True)
class LSIResult:
    total_suggestions: int
    main_keywords: List[str]
    lsi_keywords: List[LSIKeyword]
    summary: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def split_sentences(text: str) -> List[str]:
    return [sentence for sentence in _SENTENCE_SPLIT_RE.split(text) if sentence.strip()]


def lsi_score(candidate: str, main_keywords: Sequence[str], text: str) -> int:
    """Score *candidate* by how often it shares a sentence with a main keyword."""

    if not main_keywords:
        return DEFAULT_SCORE
    needle = candidate.lower()
    mains = [keyword.lower() for keyword in main_keywords]
    score = 0
    for sentence in split_sentences(text):
        lowered = sentence.lower()
        if needle in lowered and any(main in lowered for main in mains):
            score += COOCCURRENCE_POINTS
    return min(MAX_SCORE, score)


def _coerce_candidate(item: Any) -> KeywordSuggestion:
    if isinstance(item, KeywordSuggestion):
        return item
    if isinstance(item, str):
        keyword = item
        frequency = relevance = 0
        kind = None
    elif isinstance(item, Mapping):
        keyword = item.get("keyword")
        frequency = item.get("frequency") or 0
        relevance = item.get("relevance") or 0
        kind = item.get("type")
    else:
        keyword = getattr(item, "keyword", None)
        frequency = getattr(item, "frequency", 0) or 0
        relevance = getattr(item, "relevance", 0) or 0
        kind = getattr(item, "type", None)
    if not isinstance(keyword, str) or not keyword.strip():
        raise InvalidItemError(f"Invalid LSI candidate: {item!r}")
    keyword = keyword.strip()
    try:
        frequency, relevance = int(frequency), int(relevance)
    except (TypeError, ValueError) as exc:
        raise InvalidItemError(f"Invalid LSI candidate counts: {item!r}") from exc
    return KeywordSuggestion(
        keyword=keyword,
        frequency=frequency,
        relevance=relevance,
        type=kind or ("phrase" if " " in keyword else "word"),
    )


def generate_lsi(
    content: str,
    main_keywords: str | Iterable[str] | None = (),
    max_suggestions: int = 15,
    *,
    candidates: Iterable[Any] | None = None,
    suggester: Suggester | None = None,
    language: str = "en",
) -> LSIResult:
    """Rank related keywords for *content* by co-occurrence with *main_keywords*.

    The candidate pool is *candidates* when given, otherwise the output of
    *suggester* (by default :func:`suggest_keywords`) asked for twice
    *max_suggestions* entries.
    """

    start = time.perf_counter()
    parsed = content_parser.parse(content)
    text = parsed.text or (content or "")
    if len(text) < MIN_CONTENT_CHARS:
        logger.warning("lsi.failed reason=insufficient-content chars=%s", len(text))
        raise KeywordInputError("Need more content for LSI keyword generation")

    mains = normalize_keyword_list(main_keywords)
    logger.info(
        "lsi.start chars=%s words=%s main_keywords=%s",
        len(text),
        parsed.word_count,
        ", ".join(mains) if mains else "none",
    )

    if candidates is None:
        generate = suggester or suggest_keywords
        pool: Iterable[Any] = generate(content, max_suggestions * 2, language)
    else:
        pool = candidates

    excluded = {keyword.lower() for keyword in mains}
    scored: List[LSIKeyword] = []
    for item in pool:
        try:
            candidate = _coerce_candidate(item)
        except InvalidItemError as exc:
            logger.warning("lsi.candidate.skipped error=%s", exc)
            continue
        if candidate.keyword.lower() in excluded:
            continue
        scored.append(
            LSIKeyword(
                keyword=candidate.keyword,
                frequency=candidate.frequency,
                relevance=candidate.relevance,
                lsi_score=lsi_score(candidate.keyword, mains, text),
                type=candidate.type,
            )
        )

    scored.sort(key=lambda entry: entry.lsi_score, reverse=True)
    top = scored[: max(0, max_suggestions)]
    average = sum(entry.lsi_score for entry in top) / len(top) if top else 0.0
    summary = {
        "phrases": sum(1 for entry in top if entry.type == "phrase"),
        "words": sum(1 for entry in top if entry.type == "word"),
        "avg_lsi_score": average,
    }

    logger.info(
        "lsi.complete suggestions=%s phrases=%s words=%s avg_score=%.1f duration_ms=%.2f",
        len(top),
        summary["phrases"],
        summary["words"],
        average,
        (time.perf_counter() - start) * 1000.0,
    )
    return LSIResult(
        total_suggestions=len(top),
        main_keywords=mains,
        lsi_keywords=top,
        summary=summary,
    )


__all__ = ["LSIKeyword", "LSIResult", "generate_lsi", "lsi_score", "split_sentences"]
