"""keywordlens: keyword analysis pipelines for SEO content."""

from __future__ import annotations

from .clustering import ClusteringResult, cluster_keywords
from .config import Settings
from .density import DensityAnalysisResult, analyze_density
from .difficulty import DifficultyResult, estimate_difficulty
from .longtail import LongTailResult, generate_long_tail
from .lsi import LSIResult, generate_lsi
from .services import KeywordServices
from .suggestions import KeywordSuggestion, suggest_keywords
from .text import InvalidItemError, KeywordInputError

__all__ = [
    "ClusteringResult",
    "DensityAnalysisResult",
    "DifficultyResult",
    "InvalidItemError",
    "KeywordInputError",
    "KeywordServices",
    "KeywordSuggestion",
    "LSIResult",
    "LongTailResult",
    "Settings",
    "analyze_density",
    "cluster_keywords",
    "create_app",
    "estimate_difficulty",
    "generate_long_tail",
    "generate_lsi",
    "suggest_keywords",
]


def __getattr__(name: str):  # pragma: no cover - small helper
    if name == "create_app":
        from .app import create_app

        return create_app
    raise AttributeError(f"module 'keywordlens' has no attribute {name}")
