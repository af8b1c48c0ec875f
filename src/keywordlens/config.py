"""Configuration helpers for the keywordlens engine."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import TYPE_CHECKING, Final

try:  # pragma: no cover - optional dependency loaded at runtime
    from dotenv import load_dotenv
except Exception:  # pragma: no cover
    load_dotenv = None

if load_dotenv is not None:
    load_dotenv()

if TYPE_CHECKING:
    from .observability import MetricsRecorder
    from .themes import ThemeCatalog

_DEFAULT_LONG_TAIL_MAX_SUGGESTIONS: Final[int] = 20
_DEFAULT_LONG_TAIL_MIN_WORDS: Final[int] = 2
_DEFAULT_LONG_TAIL_MAX_WORDS: Final[int] = 5
_DEFAULT_LSI_MAX_SUGGESTIONS: Final[int] = 15
_DEFAULT_CLUSTER_SIMILARITY_THRESHOLD: Final[float] = 0.3
_DEFAULT_CLUSTER_STRATEGY: Final[str] = "jaccard"
_DEFAULT_SUGGESTION_LANGUAGE: Final[str] = "en"
_DEFAULT_SUGGESTION_MAX_RESULTS: Final[int] = 10
_DEFAULT_NAMESPACE: Final[str] = "keywordlens"
_CLUSTER_STRATEGIES: Final[frozenset[str]] = frozenset({"jaccard", "semantic"})


def _env_optional_bool(name: str) -> bool | None:
    """Read an optional boolean environment variable."""

    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    msg = f"Environment variable {name} must be a boolean value (true/false)."
    raise ValueError(msg)


def _env_bool(name: str, default: bool) -> bool:
    value = _env_optional_bool(name)
    return default if value is None else value


def _env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    """Read an integer environment variable, optionally enforcing a lower bound."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer") from exc
    if minimum is not None and value < minimum:
        raise ValueError(f"Environment variable {name} must be >= {minimum}")
    return value


def _env_float(name: str, default: float) -> float:
    """Read a float environment variable with a fallback (preserving zero)."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a float") from exc


@dataclass(slots=True)
class Settings:
    """Runtime settings loaded from environment variables."""

    long_tail_max_suggestions: int = _DEFAULT_LONG_TAIL_MAX_SUGGESTIONS
    long_tail_min_words: int = _DEFAULT_LONG_TAIL_MIN_WORDS
    long_tail_max_words: int = _DEFAULT_LONG_TAIL_MAX_WORDS
    lsi_max_suggestions: int = _DEFAULT_LSI_MAX_SUGGESTIONS
    cluster_similarity_threshold: float = _DEFAULT_CLUSTER_SIMILARITY_THRESHOLD
    cluster_strategy: str = _DEFAULT_CLUSTER_STRATEGY
    suggestion_language: str = _DEFAULT_SUGGESTION_LANGUAGE
    suggestion_max_results: int = _DEFAULT_SUGGESTION_MAX_RESULTS
    themes_path: str | None = None
    log_level: str | None = None
    observability_metrics_enabled: bool = True
    observability_namespace: str = _DEFAULT_NAMESPACE
    observability_prometheus_enabled: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings by reading environment variables."""

        min_words = _env_int("LONG_TAIL_MIN_WORDS", _DEFAULT_LONG_TAIL_MIN_WORDS, minimum=1)
        max_words = _env_int("LONG_TAIL_MAX_WORDS", _DEFAULT_LONG_TAIL_MAX_WORDS, minimum=1)
        if max_words < min_words:
            raise ValueError("LONG_TAIL_MAX_WORDS must be >= LONG_TAIL_MIN_WORDS")

        strategy = os.getenv("CLUSTER_STRATEGY", _DEFAULT_CLUSTER_STRATEGY).strip().lower()
        if strategy not in _CLUSTER_STRATEGIES:
            raise ValueError(
                f"CLUSTER_STRATEGY must be one of {', '.join(sorted(_CLUSTER_STRATEGIES))}"
            )

        return cls(
            long_tail_max_suggestions=_env_int(
                "LONG_TAIL_MAX_SUGGESTIONS", _DEFAULT_LONG_TAIL_MAX_SUGGESTIONS, minimum=0
            ),
            long_tail_min_words=min_words,
            long_tail_max_words=max_words,
            lsi_max_suggestions=_env_int("LSI_MAX_SUGGESTIONS", _DEFAULT_LSI_MAX_SUGGESTIONS, minimum=0),
            cluster_similarity_threshold=_env_float(
                "CLUSTER_SIMILARITY_THRESHOLD", _DEFAULT_CLUSTER_SIMILARITY_THRESHOLD
            ),
            cluster_strategy=strategy,
            suggestion_language=os.getenv("SUGGESTION_LANGUAGE", _DEFAULT_SUGGESTION_LANGUAGE),
            suggestion_max_results=_env_int(
                "SUGGESTION_MAX_RESULTS", _DEFAULT_SUGGESTION_MAX_RESULTS, minimum=0
            ),
            themes_path=os.getenv("THEMES_PATH") or None,
            log_level=os.getenv("KEYWORDLENS_LOG_LEVEL") or None,
            observability_metrics_enabled=_env_bool("OBSERVABILITY_METRICS_ENABLED", True),
            observability_namespace=os.getenv("OBSERVABILITY_NAMESPACE", _DEFAULT_NAMESPACE),
            observability_prometheus_enabled=_env_bool("OBSERVABILITY_PROMETHEUS_ENABLED", False),
        )

    def resolved_log_level(self) -> int:
        """Return the logging level for the package logger (INFO when unset)."""

        if not self.log_level:
            return logging.INFO
        level = logging.getLevelName(self.log_level.strip().upper())
        return level if isinstance(level, int) else logging.INFO

    def build_metrics_recorder(self) -> "MetricsRecorder":
        """Instantiate the configured metrics recorder."""

        from .observability import MetricsRecorder

        return MetricsRecorder(
            enabled=self.observability_metrics_enabled,
            namespace=self.observability_namespace,
            prometheus_enabled=self.observability_prometheus_enabled,
        )

    def load_theme_catalog(self) -> "ThemeCatalog":
        """Return the theme table, read from ``themes_path`` when configured."""

        from .themes import load_themes

        return load_themes(self.themes_path)
