"""Service facade that runs the keyword pipelines with settings and metrics."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, List, TypeVar

from .clustering import ClusteringResult, cluster_keywords
from .config import Settings
from .density import DensityAnalysisResult, analyze_density
from .difficulty import DifficultyResult, estimate_difficulty
from .longtail import LongTailResult, generate_long_tail
from .lsi import LSIResult, generate_lsi
from .observability import MetricsRecorder
from .suggestions import KeywordSuggestion, suggest_keywords
from .text import KeywordInputError
from .themes import ThemeCatalog

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeywordServices:
    """Entry points for the keyword pipelines.

    Each call is counted as ``<pipeline>.requests`` and timed as
    ``<pipeline>.duration``. Failures are counted as ``<pipeline>.failures``
    tagged with the exception class and then re-raised unchanged.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        metrics: MetricsRecorder | None = None,
        themes: ThemeCatalog | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.metrics = metrics if metrics is not None else self.settings.build_metrics_recorder()
        self.themes = themes if themes is not None else self.settings.load_theme_catalog()

    def _run(self, pipeline: str, operation: Callable[[], T], gauges: Callable[[T], dict[str, float]]) -> T:
        self.metrics.increment(f"{pipeline}.requests")
        start = time.perf_counter()
        try:
            result = operation()
        except KeywordInputError as exc:
            self.metrics.increment(f"{pipeline}.failures", reason="invalid_input")
            logger.info("%s.rejected error=%s", pipeline, exc)
            raise
        except Exception as exc:
            self.metrics.increment(f"{pipeline}.failures", reason=type(exc).__name__)
            logger.exception("%s.error", pipeline)
            raise
        finally:
            self.metrics.record_timing(f"{pipeline}.duration", time.perf_counter() - start)
        for name, value in gauges(result).items():
            self.metrics.set_gauge(f"{pipeline}.{name}", value)
        return result

    def analyze_density(self, content: str, keywords: str | Iterable[str]) -> DensityAnalysisResult:
        return self._run(
            "density",
            lambda: analyze_density(content, keywords),
            lambda result: {"keywords": result.total_keywords, "words": result.total_words},
        )

    def generate_long_tail(
        self,
        content: str,
        seed_keywords: str | Iterable[str] | None = (),
        max_suggestions: int | None = None,
    ) -> LongTailResult:
        limit = self.settings.long_tail_max_suggestions if max_suggestions is None else max_suggestions
        return self._run(
            "longtail",
            lambda: generate_long_tail(
                content,
                seed_keywords,
                limit,
                min_words=self.settings.long_tail_min_words,
                max_words=self.settings.long_tail_max_words,
            ),
            lambda result: {"suggestions": result.total_phrases},
        )

    def estimate_difficulty(self, keywords: str | Iterable[str], content: str = "") -> DifficultyResult:
        def _gauges(result: DifficultyResult) -> dict[str, float]:
            average = (
                sum(estimate.score for estimate in result.estimates) / len(result.estimates)
                if result.estimates
                else 0.0
            )
            return {"keywords": result.total_keywords, "avg_score": average}

        return self._run("difficulty", lambda: estimate_difficulty(keywords, content), _gauges)

    def cluster_keywords(
        self,
        keywords: str | Iterable[str],
        *,
        similarity_threshold: float | None = None,
        strategy: str | None = None,
    ) -> ClusteringResult:
        threshold = (
            self.settings.cluster_similarity_threshold if similarity_threshold is None else similarity_threshold
        )
        return self._run(
            "cluster",
            lambda: cluster_keywords(
                keywords,
                similarity_threshold=threshold,
                strategy=strategy or self.settings.cluster_strategy,
                themes=self.themes,
            ),
            lambda result: {"clusters": result.total_clusters, "singletons": result.singleton},
        )

    def generate_lsi(
        self,
        content: str,
        main_keywords: str | Iterable[str] | None = (),
        max_suggestions: int | None = None,
        *,
        candidates: Iterable[Any] | None = None,
    ) -> LSIResult:
        limit = self.settings.lsi_max_suggestions if max_suggestions is None else max_suggestions
        return self._run(
            "lsi",
            lambda: generate_lsi(
                content,
                main_keywords,
                limit,
                candidates=candidates,
                language=self.settings.suggestion_language,
            ),
            lambda result: {"suggestions": result.total_suggestions},
        )

    def suggest_keywords(
        self,
        content: str,
        max_suggestions: int | None = None,
        language: str | None = None,
    ) -> List[KeywordSuggestion]:
        limit = self.settings.suggestion_max_results if max_suggestions is None else max_suggestions
        return self._run(
            "suggestions",
            lambda: suggest_keywords(content, limit, language or self.settings.suggestion_language),
            lambda result: {"suggestions": len(result)},
        )


__all__ = ["KeywordServices"]
