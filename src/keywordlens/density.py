"""Keyword density analysis with positional and section breakdowns."""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, List, Pattern

from . import content as content_parser
from .text import KeywordInputError, build_keyword_pattern, normalize_keyword_list, split_words

logger = logging.getLogger(__name__)

OPTIMAL_DENSITY_MIN = 1.0
OPTIMAL_DENSITY_MAX = 3.0
SECTION_NAMES = ("Introduction", "Early Content", "Middle Content", "Conclusion")


@dataclass(slots=True)
class KeywordPosition:
    index: int
    percentage: float


@dataclass(slots=True)
class DensityResult:
    """Density figures for a single keyword or phrase."""

    keyword: str
    count: int
    density: float
    status: str
    is_optimal: bool
    positions: List[KeywordPosition] = field(default_factory=list)
    type: str = "word"


@dataclass(slots=True)
class SectionDistribution:
    section: str
    total_keywords: int
    keyword_counts: List[dict[str, Any]] = field(default_factory=list)


@dataclass(slots=True)
class DensityRecommendation:
    type: str
    keyword: str
    message: str
    action: str


@dataclass(slots=True)
class DensityAnalysisResult:
    """Aggregate output of :func:`analyze_density`."""

    total_words: int
    total_keywords: int
    density_results: List[DensityResult]
    distribution: List[SectionDistribution]
    recommendations: List[DensityRecommendation]
    summary: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def classify_density(density: float) -> str:
    if OPTIMAL_DENSITY_MIN <= density <= OPTIMAL_DENSITY_MAX:
        return "optimal"
    if density < OPTIMAL_DENSITY_MIN:
        return "underused"
    return "overused"


def calculate_density(text: str, keyword: str, total_words: int) -> DensityResult:
    """Count *keyword* in *text* and express it as a share of *total_words*."""

    pattern, is_phrase = build_keyword_pattern(keyword)
    return _density_for_pattern(text, keyword, pattern, is_phrase, total_words)


def _density_for_pattern(
    text: str,
    keyword: str,
    pattern: Pattern[str],
    is_phrase: bool,
    total_words: int,
) -> DensityResult:
    lowered = text.lower()
    text_length = len(text) or 1
    positions = [
        KeywordPosition(index=match.start(), percentage=match.start() / text_length * 100)
        for match in pattern.finditer(lowered)
    ]
    count = len(positions)
    keyword_words = len(split_words(keyword.lower())) or 1
    raw_density = (count * keyword_words) / total_words * 100 if total_words > 0 else 0.0
    density = round(raw_density, 2)
    status = classify_density(density)
    logger.debug(
        "density.keyword keyword=%r count=%s density=%.2f status=%s",
        keyword,
        count,
        density,
        status,
    )
    return DensityResult(
        keyword=keyword,
        count=count,
        density=density,
        status=status,
        is_optimal=status == "optimal",
        positions=positions,
        type="phrase" if is_phrase else "word",
    )


def calculate_distribution(
    text: str,
    keywords: Iterable[str],
    *,
    patterns: List[Pattern[str]] | None = None,
) -> List[SectionDistribution]:
    """Count each keyword inside four equal character-length quarters of *text*."""

    keyword_list = list(keywords)
    if patterns is None:
        patterns = [build_keyword_pattern(keyword)[0] for keyword in keyword_list]
    size = len(text) // 4
    bounds = [(0, size), (size, size * 2), (size * 2, size * 3), (size * 3, len(text))]

    sections: List[SectionDistribution] = []
    for name, (start, end) in zip(SECTION_NAMES, bounds):
        section_text = text[start:end].lower()
        counts = [len(pattern.findall(section_text)) for pattern in patterns]
        sections.append(
            SectionDistribution(
                section=name,
                total_keywords=sum(counts),
                keyword_counts=[
                    {"keyword": keyword, "count": count}
                    for keyword, count in zip(keyword_list, counts)
                ],
            )
        )
    return sections


def build_recommendations(results: Iterable[DensityResult]) -> List[DensityRecommendation]:
    recommendations: List[DensityRecommendation] = []
    for result in results:
        if result.status == "underused":
            recommendations.append(
                DensityRecommendation(
                    type="warning",
                    keyword=result.keyword,
                    message=(
                        f'"{result.keyword}" is underused ({result.density}%). '
                        "Try to use it more naturally in your content."
                    ),
                    action="increase",
                )
            )
        elif result.status == "overused":
            recommendations.append(
                DensityRecommendation(
                    type="critical",
                    keyword=result.keyword,
                    message=(
                        f'"{result.keyword}" is overused ({result.density}%). '
                        "This may be considered keyword stuffing."
                    ),
                    action="decrease",
                )
            )
        else:
            recommendations.append(
                DensityRecommendation(
                    type="success",
                    keyword=result.keyword,
                    message=f'"{result.keyword}" has optimal density ({result.density}%).',
                    action="maintain",
                )
            )
    return recommendations


def analyze_density(content: str, keywords: str | Iterable[str]) -> DensityAnalysisResult:
    """Analyse how densely each keyword occurs in *content* (HTML or text).

    Raises :class:`KeywordInputError` when no keywords are given or the content
    holds no words.
    """

    start = time.perf_counter()
    keyword_list = normalize_keyword_list(keywords)
    if not keyword_list:
        logger.warning("density.failed reason=no-keywords")
        raise KeywordInputError("No keywords provided for density analysis")

    parsed = content_parser.parse(content)
    text = parsed.text or (content or "")
    total_words = parsed.word_count
    if total_words == 0:
        logger.warning("density.failed reason=no-content")
        raise KeywordInputError("No content to analyze")

    logger.info(
        "density.start keywords=%s words=%s sample=%s",
        len(keyword_list),
        total_words,
        ", ".join(keyword_list[:3]),
    )

    compiled = [build_keyword_pattern(keyword) for keyword in keyword_list]
    density_results = [
        _density_for_pattern(text, keyword, pattern, is_phrase, total_words)
        for keyword, (pattern, is_phrase) in zip(keyword_list, compiled)
    ]
    distribution = calculate_distribution(
        text,
        keyword_list,
        patterns=[pattern for pattern, _ in compiled],
    )
    recommendations = build_recommendations(density_results)
    summary = {
        "optimal": sum(1 for result in density_results if result.status == "optimal"),
        "underused": sum(1 for result in density_results if result.status == "underused"),
        "overused": sum(1 for result in density_results if result.status == "overused"),
    }

    logger.info(
        "density.complete keywords=%s optimal=%s underused=%s overused=%s duration_ms=%.2f",
        len(keyword_list),
        summary["optimal"],
        summary["underused"],
        summary["overused"],
        (time.perf_counter() - start) * 1000.0,
    )
    return DensityAnalysisResult(
        total_words=total_words,
        total_keywords=len(keyword_list),
        density_results=density_results,
        distribution=distribution,
        recommendations=recommendations,
        summary=summary,
    )


__all__ = [
    "DensityAnalysisResult",
    "DensityRecommendation",
    "DensityResult",
    "KeywordPosition",
    "OPTIMAL_DENSITY_MAX",
    "OPTIMAL_DENSITY_MIN",
    "SECTION_NAMES",
    "SectionDistribution",
    "analyze_density",
    "build_recommendations",
    "calculate_density",
    "calculate_distribution",
    "classify_density",
]
