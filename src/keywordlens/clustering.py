"""Greedy keyword clustering with lexical similarity strategies."""

from __future__ import annotations

import logging
import math
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Iterable, List, Sequence

from .text import STOPWORDS, KeywordInputError, normalize_keyword_list
from .themes import ThemeCatalog

logger = logging.getLogger(__name__)

STRATEGIES = ("jaccard", "semantic")
DEFAULT_SIMILARITY_THRESHOLD = 0.3
DEFAULT_STRATEGY = "jaccard"
HIGH_QUALITY_THRESHOLD = 70

_DEFAULT_CATALOG = ThemeCatalog()


@dataclass(slots=True)
class RelatedKeyword:
    keyword: str
    similarity: int


@dataclass(slots=True)
class CommonWord:
    word: str
    count: int
    frequency: float


@dataclass(slots=True)
class KeywordCluster:
    """A primary keyword, the keywords it claimed, and derived labels."""

    primary: str
    related: List[RelatedKeyword] = field(default_factory=list)
    common_words: List[CommonWord] = field(default_factory=list)
    suggested_name: str = ""
    quality: int = 0
    theme: str = ""

    @property
    def size(self) -> int:
        return 1 + len(self.related)

    def members(self) -> List[str]:
        return [self.primary, *(item.keyword for item in self.related)]

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["size"] = self.size
        return payload


@dataclass(slots=True)
class ClusterInsight:
    type: str
    message: str


@dataclass(slots=True)
class ClusteringResult:
    total_keywords: int
    total_clusters: int
    clusters: List[KeywordCluster]
    singleton: int
    avg_cluster_size: float
    options: dict[str, Any]
    insights: List[ClusterInsight]

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["clusters"] = [cluster.to_dict() for cluster in self.clusters]
        return payload


def _words(keyword: str) -> List[str]:
    return keyword.lower().split()


def jaccard_similarity(left: str, right: str) -> float:
    """Intersection over union of the two keywords' word sets."""

    left_words = set(_words(left))
    right_words = set(_words(right))
    union = left_words | right_words
    if not union:
        return 0.0
    return len(left_words & right_words) / len(union)


def word_similarity(left: str, right: str) -> float:
    if left == right:
        return 1.0
    if min(len(left), len(right)) < 3:
        return 0.0
    if left.startswith(right[:3]) or right.startswith(left[:3]):
        return 0.7
    if left.endswith(right[-3:]) or right.endswith(left[-3:]):
        return 0.6
    if right in left or left in right:
        return 0.5
    return 0.0


def semantic_similarity(left: str, right: str) -> float:
    """Average pairwise word similarity, with a bonus for contained phrases."""

    left_words = _words(left)
    right_words = _words(right)
    total = 0.0
    comparisons = 0
    for left_word in left_words:
        for right_word in right_words:
            total += word_similarity(left_word, right_word)
            comparisons += 1

    if len(left_words) > 1 and len(right_words) > 1:
        left_phrase = " ".join(left_words)
        right_phrase = " ".join(right_words)
        if right_phrase in left_phrase or left_phrase in right_phrase:
            total += 0.5
            comparisons += 1

    return total / comparisons if comparisons else 0.0


_SIMILARITY_FUNCTIONS: dict[str, Callable[[str, str], float]] = {
    "jaccard": jaccard_similarity,
    "semantic": semantic_similarity,
}


def keyword_similarity(left: str, right: str, strategy: str = DEFAULT_STRATEGY) -> float:
    try:
        function = _SIMILARITY_FUNCTIONS[strategy]
    except KeyError as exc:
        raise KeywordInputError(
            f"Unknown clustering strategy '{strategy}'; expected one of {', '.join(STRATEGIES)}"
        ) from exc
    return function(left, right)


def _percent(similarity: float) -> int:
    return int(math.floor(similarity * 100 + 0.5))


def find_common_words(keywords: Sequence[str]) -> List[CommonWord]:
    """Words shared by at least two keywords, most widely shared first."""

    if not keywords:
        return []
    counts: Counter[str] = Counter()
    for keyword in keywords:
        seen: set[str] = set()
        for word in _words(keyword):
            if len(word) <= 2 or word in STOPWORDS or word in seen:
                continue
            seen.add(word)
            counts[word] += 1
    shared = [(word, count) for word, count in counts.items() if count >= 2]
    shared.sort(key=lambda item: item[1], reverse=True)
    return [
        CommonWord(word=word, count=count, frequency=count / len(keywords))
        for word, count in shared
    ]


def suggest_cluster_name(keywords: Sequence[str], common_words: Sequence[CommonWord] | None = None) -> str:
    if not keywords:
        return ""
    if common_words is None:
        common_words = find_common_words(keywords)
    if not common_words:
        return keywords[0]

    top_words = [item.word for item in common_words[:3]]
    needed = min(2, len(top_words))
    for keyword in keywords:
        keyword_words = set(_words(keyword))
        if sum(1 for word in top_words if word in keyword_words) >= needed:
            return keyword
    second = top_words[1] if len(top_words) > 1 else "related"
    return f"{top_words[0]} {second}"


def cluster_quality(cluster: KeywordCluster) -> int:
    """Score a cluster (0-100) from size, cohesion and shared vocabulary."""

    score = 0
    size = cluster.size
    if size >= 5:
        score += 30
    elif size >= 3:
        score += 20
    elif size >= 2:
        score += 10

    related = cluster.related
    if related:
        average = sum(item.similarity for item in related) / len(related)
        if average >= 70:
            score += 25
        elif average >= 50:
            score += 15
        elif average >= 30:
            score += 5

    common_count = len(cluster.common_words)
    if common_count >= 3:
        score += 20
    elif common_count >= 2:
        score += 10
    elif common_count >= 1:
        score += 5

    # Near-duplicate members suggest the cluster is over-merged.
    very_similar = sum(1 for item in related if item.similarity >= 80)
    if related and very_similar > len(related) * 0.7:
        score -= 10

    return max(0, min(100, score))


def build_insights(clusters: Sequence[KeywordCluster], total_keywords: int) -> List[ClusterInsight]:
    if not clusters:
        return []
    insights: List[ClusterInsight] = []
    average_quality = sum(cluster.quality for cluster in clusters) / len(clusters)
    high_quality = sum(1 for cluster in clusters if cluster.quality >= HIGH_QUALITY_THRESHOLD)
    singletons = sum(1 for cluster in clusters if cluster.size == 1)
    singleton_percentage = singletons / total_keywords * 100 if total_keywords else 0.0

    if average_quality >= 70:
        insights.append(
            ClusterInsight("success", "Excellent clustering quality! Your keywords group well together.")
        )
    elif average_quality >= 50:
        insights.append(
            ClusterInsight(
                "info",
                "Good clustering results. Consider refining your keyword list for better grouping.",
            )
        )
    else:
        insights.append(
            ClusterInsight(
                "warning",
                "Clustering quality could be improved. Try adding more related keywords.",
            )
        )

    if singleton_percentage > 50:
        insights.append(
            ClusterInsight(
                "warning",
                f"{singleton_percentage:.0f}% of keywords are standalone. Consider expanding your keyword set.",
            )
        )

    if high_quality > 0:
        suffix = "s" if high_quality > 1 else ""
        insights.append(
            ClusterInsight(
                "success",
                f"{high_quality} high-quality cluster{suffix} identified for content creation.",
            )
        )
    return insights


def cluster_keywords(
    keywords: str | Iterable[str],
    *,
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
    strategy: str = DEFAULT_STRATEGY,
    themes: ThemeCatalog | None = None,
) -> ClusteringResult:
    """Partition *keywords* into clusters with a single greedy forward pass.

    Each unclaimed keyword, in input order, becomes a primary and claims every
    later unclaimed keyword whose similarity exceeds the threshold. The result
    therefore depends on input order.
    """

    start = time.perf_counter()
    keyword_list = normalize_keyword_list(keywords)
    if len(keyword_list) < 2:
        logger.warning("cluster.failed reason=too-few-keywords count=%s", len(keyword_list))
        raise KeywordInputError("Need at least 2 keywords for clustering")
    strategy = (strategy or DEFAULT_STRATEGY).strip().lower()
    if strategy not in _SIMILARITY_FUNCTIONS:
        logger.warning("cluster.failed reason=unknown-strategy strategy=%s", strategy)
        raise KeywordInputError(
            f"Unknown clustering strategy '{strategy}'; expected one of {', '.join(STRATEGIES)}"
        )
    similarity = _SIMILARITY_FUNCTIONS[strategy]
    catalog = themes or _DEFAULT_CATALOG

    logger.info(
        "cluster.start keywords=%s strategy=%s threshold=%s",
        len(keyword_list),
        strategy,
        similarity_threshold,
    )

    processed = [False] * len(keyword_list)
    clusters: List[KeywordCluster] = []
    for index, primary in enumerate(keyword_list):
        if processed[index]:
            continue
        cluster = KeywordCluster(primary=primary)
        for other_index in range(index + 1, len(keyword_list)):
            if processed[other_index]:
                continue
            candidate = keyword_list[other_index]
            value = similarity(primary, candidate)
            if value > similarity_threshold:
                cluster.related.append(RelatedKeyword(keyword=candidate, similarity=_percent(value)))
                processed[other_index] = True
        processed[index] = True

        members = cluster.members()
        cluster.common_words = find_common_words(members)
        cluster.suggested_name = suggest_cluster_name(members, cluster.common_words)
        cluster.quality = cluster_quality(cluster)
        cluster.theme = catalog.identify(members)
        cluster.related.sort(key=lambda item: item.similarity, reverse=True)
        clusters.append(cluster)

    clusters.sort(key=lambda item: (item.quality, item.size), reverse=True)
    singleton = sum(1 for cluster in clusters if cluster.size == 1)
    avg_cluster_size = sum(cluster.size for cluster in clusters) / len(clusters)

    logger.info(
        "cluster.complete clusters=%s singletons=%s avg_size=%.1f duration_ms=%.2f",
        len(clusters),
        singleton,
        avg_cluster_size,
        (time.perf_counter() - start) * 1000.0,
    )
    return ClusteringResult(
        total_keywords=len(keyword_list),
        total_clusters=len(clusters),
        clusters=clusters,
        singleton=singleton,
        avg_cluster_size=avg_cluster_size,
        options={"similarity_threshold": similarity_threshold, "strategy": strategy},
        insights=build_insights(clusters, len(keyword_list)),
    )


__all__ = [
    "ClusterInsight",
    "ClusteringResult",
    "CommonWord",
    "KeywordCluster",
    "RelatedKeyword",
    "STRATEGIES",
    "build_insights",
    "cluster_keywords",
    "cluster_quality",
    "find_common_words",
    "jaccard_similarity",
    "keyword_similarity",
    "semantic_similarity",
    "suggest_cluster_name",
    "word_similarity",
]
