from __future__ import annotations

import pytest

from keywordlens.suggestions import get_suggestion_strings, relevance_score, suggest_keywords

PYTHON_TEXT = (
    "Python tutorials teach python programming. "
    "Python tutorials explain python basics clearly."
)


def test_short_content_yields_no_suggestions() -> None:
    assert suggest_keywords("too short to analyse") == []
    assert suggest_keywords("") == []


def test_repeated_phrase_ranks_first() -> None:
    suggestions = suggest_keywords(PYTHON_TEXT, max_suggestions=3)

    assert len(suggestions) == 3
    first, second, _ = suggestions
    assert first.keyword == "python tutorials"
    assert first.type == "phrase"
    assert first.frequency == 2
    assert first.relevance == 85
    # Ties on relevance fall back to frequency.
    assert second.keyword == "tutorials"
    assert second.relevance == 75


def test_relevance_is_bounded_and_sorted() -> None:
    suggestions = suggest_keywords(PYTHON_TEXT * 3, max_suggestions=50)

    assert suggestions
    assert all(0 <= item.relevance <= 100 for item in suggestions)
    ordering = [(-item.relevance, -item.frequency) for item in suggestions]
    assert ordering == sorted(ordering)


def test_code_and_css_words_are_filtered() -> None:
    text = (
        "background function garden planning helps every garden grow. "
        "Garden planning matters for background colour choices."
    )

    keywords = get_suggestion_strings(text, max_suggestions=20)

    assert "garden" in keywords
    assert "background" not in keywords
    assert "function" not in keywords


def test_relevance_score_adds_length_and_phrase_bonuses() -> None:
    assert relevance_score("seo", 1, 1000) == pytest.approx(6.0)
    assert relevance_score("garden", 1, 1000) == pytest.approx(11.0)
    assert relevance_score("gardening", 1, 1000) == pytest.approx(21.0)
    assert relevance_score("garden tips", 1, 1000) == pytest.approx(31.0)
    assert relevance_score("gardening tips", 100, 100) == 85
    assert relevance_score("anything", 1, 0) == 0.0
