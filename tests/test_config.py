from __future__ import annotations

import logging
from pathlib import Path

import pytest

from keywordlens.config import Settings

_ENV_VARS = (
    "LONG_TAIL_MAX_SUGGESTIONS",
    "LONG_TAIL_MIN_WORDS",
    "LONG_TAIL_MAX_WORDS",
    "LSI_MAX_SUGGESTIONS",
    "CLUSTER_SIMILARITY_THRESHOLD",
    "CLUSTER_STRATEGY",
    "SUGGESTION_LANGUAGE",
    "SUGGESTION_MAX_RESULTS",
    "THEMES_PATH",
    "KEYWORDLENS_LOG_LEVEL",
    "OBSERVABILITY_METRICS_ENABLED",
    "OBSERVABILITY_NAMESPACE",
    "OBSERVABILITY_PROMETHEUS_ENABLED",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_when_environment_is_empty() -> None:
    settings = Settings.from_env()

    assert settings == Settings()
    assert settings.long_tail_max_suggestions == 20
    assert settings.cluster_similarity_threshold == 0.3
    assert settings.cluster_strategy == "jaccard"
    assert settings.themes_path is None
    assert settings.resolved_log_level() == logging.INFO


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LONG_TAIL_MAX_SUGGESTIONS", "5")
    monkeypatch.setenv("LONG_TAIL_MIN_WORDS", "3")
    monkeypatch.setenv("LONG_TAIL_MAX_WORDS", "4")
    monkeypatch.setenv("CLUSTER_SIMILARITY_THRESHOLD", "0")
    monkeypatch.setenv("CLUSTER_STRATEGY", "Semantic")
    monkeypatch.setenv("SUGGESTION_LANGUAGE", "el")
    monkeypatch.setenv("KEYWORDLENS_LOG_LEVEL", "debug")
    monkeypatch.setenv("OBSERVABILITY_METRICS_ENABLED", "off")

    settings = Settings.from_env()

    assert settings.long_tail_max_suggestions == 5
    assert (settings.long_tail_min_words, settings.long_tail_max_words) == (3, 4)
    assert settings.cluster_similarity_threshold == 0.0
    assert settings.cluster_strategy == "semantic"
    assert settings.suggestion_language == "el"
    assert settings.resolved_log_level() == logging.DEBUG
    assert settings.observability_metrics_enabled is False


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("LSI_MAX_SUGGESTIONS", "many", "LSI_MAX_SUGGESTIONS"),
        ("SUGGESTION_MAX_RESULTS", "-1", "SUGGESTION_MAX_RESULTS"),
        ("CLUSTER_SIMILARITY_THRESHOLD", "high", "CLUSTER_SIMILARITY_THRESHOLD"),
        ("OBSERVABILITY_PROMETHEUS_ENABLED", "maybe", "OBSERVABILITY_PROMETHEUS_ENABLED"),
        ("CLUSTER_STRATEGY", "cosine", "CLUSTER_STRATEGY"),
        ("LONG_TAIL_MIN_WORDS", "6", "LONG_TAIL_MAX_WORDS"),
    ],
)
def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=message):
        Settings.from_env()


def test_collaborator_builders(tmp_path: Path) -> None:
    themes_path = tmp_path / "themes.yaml"
    themes_path.write_text("- theme: Pets\n  terms: [cats]\n", encoding="utf-8")
    settings = Settings(
        themes_path=str(themes_path),
        observability_metrics_enabled=False,
        observability_namespace="kl",
    )

    metrics = settings.build_metrics_recorder()
    catalog = settings.load_theme_catalog()

    assert metrics.enabled is False
    assert metrics.namespace == "kl"
    assert catalog.identify(["cats"]) == "Pets"
