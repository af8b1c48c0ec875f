from __future__ import annotations

import io
import logging

import pytest

from keywordlens.config import Settings
from keywordlens.observability import MetricsRecorder
from keywordlens.services import KeywordServices
from keywordlens.text import KeywordInputError
from keywordlens.themes import Theme, ThemeCatalog

GARDEN_TEXT = "Organic gardening tips help beginners grow tomatoes. " * 3


@pytest.fixture()
def metrics_output():
    logger = logging.getLogger("keywordlens.test.services.metrics")
    logger.propagate = False
    buffer = io.StringIO()
    handler = logging.StreamHandler(buffer)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    yield MetricsRecorder(enabled=True, logger=logger), buffer
    logger.removeHandler(handler)


def test_successful_call_records_requests_duration_and_gauges(metrics_output) -> None:
    metrics, buffer = metrics_output
    services = KeywordServices(metrics=metrics)

    result = services.analyze_density("SEO is important. SEO helps.", ["seo"])

    assert result.total_keywords == 1
    output = buffer.getvalue()
    assert "keywordlens.density.requests value=1" in output
    assert "keywordlens.density.duration duration_ms=" in output
    assert "keywordlens.density.keywords value=1" in output
    assert "keywordlens.density.words value=5" in output
    assert "failures" not in output


def test_failure_is_counted_and_reraised(metrics_output) -> None:
    metrics, buffer = metrics_output
    services = KeywordServices(metrics=metrics)

    with pytest.raises(KeywordInputError):
        services.cluster_keywords(["only one"])

    output = buffer.getvalue()
    assert "keywordlens.cluster.requests value=1" in output
    assert "keywordlens.cluster.failures value=1 reason=invalid_input" in output
    assert "keywordlens.cluster.duration" in output


def test_settings_supply_default_limits() -> None:
    settings = Settings(
        long_tail_max_suggestions=2,
        long_tail_min_words=3,
        long_tail_max_words=3,
        suggestion_max_results=1,
        observability_metrics_enabled=False,
    )
    services = KeywordServices(settings=settings)

    long_tail = services.generate_long_tail(GARDEN_TEXT, ["tomatoes"])
    assert long_tail.total_phrases == 2
    assert all(len(item.phrase.split()) == 3 for item in long_tail.suggestions)

    assert len(services.suggest_keywords(GARDEN_TEXT)) == 1
    assert len(services.suggest_keywords(GARDEN_TEXT, max_suggestions=3)) == 3


def test_cluster_settings_and_theme_catalog_are_applied() -> None:
    settings = Settings(cluster_similarity_threshold=0.9, observability_metrics_enabled=False)
    themes = ThemeCatalog([Theme("Pets", ("cats",))])
    services = KeywordServices(settings=settings, themes=themes)

    strict = services.cluster_keywords(["cats food", "cats toys"])
    loose = services.cluster_keywords(["cats food", "cats toys"], similarity_threshold=0.2)

    assert strict.total_clusters == 2
    assert strict.options["similarity_threshold"] == 0.9
    assert loose.total_clusters == 1
    assert loose.clusters[0].theme == "Pets"


def test_difficulty_and_lsi_pass_through() -> None:
    services = KeywordServices(settings=Settings(observability_metrics_enabled=False))

    difficulty = services.estimate_difficulty("seo, how to fix a leaky faucet")
    lsi = services.generate_lsi(GARDEN_TEXT * 2, [], candidates=["tomatoes"])

    assert [estimate.level for estimate in difficulty.estimates] == ["hard", "easy"]
    assert [item.lsi_score for item in lsi.lsi_keywords] == [50]
