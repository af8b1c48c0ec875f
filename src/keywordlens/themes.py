"""Topic themes used to label keyword clusters."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

try:  # pragma: no cover - optional dependency guard
    import yaml
except Exception as exc:  # pragma: no cover
    yaml = None
    YAML_IMPORT_ERROR = exc
else:  # pragma: no cover
    YAML_IMPORT_ERROR = None

DEFAULT_THEME = "General"


@dataclass(slots=True, frozen=True)
class Theme:
    """A named topic and the terms that signal it."""

    name: str
    terms: tuple[str, ...] = field(default_factory=tuple)

    def score(self, word_counts: Counter[str]) -> int:
        return sum(word_counts.get(term, 0) for term in self.terms)


DEFAULT_THEMES: tuple[Theme, ...] = (
    Theme("SEO Tools", ("seo", "tool", "software", "analyzer", "optimizer")),
    Theme("Content Marketing", ("content", "blog", "article", "writing", "marketing")),
    Theme("Keyword Research", ("keyword", "research", "search", "volume", "competition")),
    Theme("Technical SEO", ("technical", "crawl", "index", "site", "speed")),
    Theme("Local SEO", ("local", "location", "google", "business", "map")),
    Theme("E-commerce", ("product", "price", "buy", "sale", "shop")),
    Theme("Analytics", ("analytics", "data", "tracking", "metrics", "report")),
)


class ThemeCatalog:
    """Ordered theme table; earlier themes win ties."""

    def __init__(self, themes: Iterable[Theme] | None = None) -> None:
        self._themes: tuple[Theme, ...] = tuple(DEFAULT_THEMES if themes is None else themes)

    def __len__(self) -> int:
        return len(self._themes)

    def themes(self) -> List[Theme]:
        return list(self._themes)

    def identify(self, keywords: Iterable[str]) -> str:
        """Return the theme whose terms occur most often across *keywords*."""

        words = " ".join(keywords).lower().split()
        counts: Counter[str] = Counter(words)
        best_theme = DEFAULT_THEME
        best_score = 0
        for theme in self._themes:
            score = theme.score(counts)
            if score > best_score:
                best_score = score
                best_theme = theme.name
        return best_theme


class ThemeLoadError(RuntimeError):
    """Raised when a theme file exists but cannot be loaded."""


def load_themes(path: str | Path | None) -> ThemeCatalog:
    """Load themes from a YAML file; fall back to the built-in table when missing."""

    if not path:
        return ThemeCatalog()
    theme_path = Path(path)
    if not theme_path.exists():
        return ThemeCatalog()

    if yaml is None:  # pragma: no cover - requires pyyaml
        raise ThemeLoadError("pyyaml is required to load theme definitions") from YAML_IMPORT_ERROR

    try:
        data = yaml.safe_load(theme_path.read_text(encoding="utf-8")) or []
    except yaml.YAMLError as exc:
        raise ThemeLoadError(f"Invalid theme file {theme_path}: {exc}") from exc
    if not isinstance(data, list):
        raise ThemeLoadError(f"Theme file {theme_path} must contain a list of themes")

    themes: list[Theme] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        name = str(item.get("theme", "")).strip()
        terms = item.get("terms") or []
        if not isinstance(terms, list):
            terms = [str(terms)]
        cleaned = tuple(str(term).strip().lower() for term in terms if str(term).strip())
        if not name or not cleaned:
            continue
        themes.append(Theme(name=name, terms=cleaned))
    return ThemeCatalog(themes)


__all__ = [
    "DEFAULT_THEME",
    "DEFAULT_THEMES",
    "Theme",
    "ThemeCatalog",
    "ThemeLoadError",
    "load_themes",
]
