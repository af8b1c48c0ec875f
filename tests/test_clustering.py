from __future__ import annotations

import pytest

from keywordlens.clustering import (
    KeywordCluster,
    RelatedKeyword,
    CommonWord,
    cluster_keywords,
    cluster_quality,
    find_common_words,
    jaccard_similarity,
    keyword_similarity,
    semantic_similarity,
    suggest_cluster_name,
    word_similarity,
)
from keywordlens.text import KeywordInputError
from keywordlens.themes import Theme, ThemeCatalog


def test_similar_keywords_merge_and_unrelated_stays_alone() -> None:
    result = cluster_keywords(
        ["seo tools", "best seo tools", "content marketing"],
        similarity_threshold=0.3,
        strategy="jaccard",
    )

    assert result.total_keywords == 3
    assert result.total_clusters == 2
    assert result.singleton == 1
    assert result.avg_cluster_size == 1.5
    assert result.options == {"similarity_threshold": 0.3, "strategy": "jaccard"}

    seo, content = result.clusters
    assert seo.primary == "seo tools"
    assert seo.related == [RelatedKeyword("best seo tools", 67)]
    assert [item.word for item in seo.common_words] == ["seo", "tools"]
    assert seo.suggested_name == "seo tools"
    assert seo.quality == 35
    assert seo.theme == "SEO Tools"
    assert content.members() == ["content marketing"]
    assert content.theme == "Content Marketing"
    assert content.quality == 0


def test_every_keyword_lands_in_exactly_one_cluster() -> None:
    keywords = [
        "seo",
        "seo",
        "seo audit",
        "local seo",
        "marketing",
        "content marketing",
        "email marketing tips",
        "garden",
    ]

    for strategy in ("jaccard", "semantic"):
        result = cluster_keywords(keywords, strategy=strategy)
        members = [member for cluster in result.clusters for member in cluster.members()]
        assert sorted(members) == sorted(keywords)
        assert sum(cluster.size for cluster in result.clusters) == len(keywords)


def test_threshold_is_strictly_exceeded() -> None:
    result = cluster_keywords(["seo tools", "seo"], similarity_threshold=0.5)

    assert result.total_clusters == 2
    assert result.singleton == 2


def test_greedy_pass_depends_on_input_order() -> None:
    forward = cluster_keywords(["seo audit", "audit tools", "garden tools"], similarity_threshold=0.3)
    shuffled = cluster_keywords(["audit tools", "seo audit", "garden tools"], similarity_threshold=0.3)

    assert forward.total_clusters == 2
    assert sorted(c.primary for c in forward.clusters) == ["garden tools", "seo audit"]
    assert shuffled.total_clusters == 1
    assert shuffled.clusters[0].members() == ["audit tools", "seo audit", "garden tools"]


def test_clusters_sorted_by_quality_then_size() -> None:
    result = cluster_keywords(
        ["garden", "seo tools", "best seo tools", "seo tools list", "free seo tools"],
        similarity_threshold=0.3,
    )

    keys = [(cluster.quality, cluster.size) for cluster in result.clusters]
    assert keys == sorted(keys, reverse=True)
    assert all(0 <= cluster.quality <= 100 for cluster in result.clusters)
    assert result.clusters[-1].primary == "garden"


def test_too_few_keywords_raise() -> None:
    with pytest.raises(KeywordInputError, match="at least 2 keywords"):
        cluster_keywords(["seo"])
    with pytest.raises(KeywordInputError):
        cluster_keywords("seo, ")


def test_unknown_strategy_raises() -> None:
    with pytest.raises(KeywordInputError, match="Unknown clustering strategy"):
        cluster_keywords(["seo", "tools"], strategy="cosine")
    with pytest.raises(KeywordInputError):
        keyword_similarity("seo", "tools", "cosine")


def test_jaccard_similarity() -> None:
    assert jaccard_similarity("SEO tools", "best seo tools") == pytest.approx(2 / 3)
    assert jaccard_similarity("seo", "marketing") == 0.0
    assert jaccard_similarity("", "") == 0.0


def test_word_similarity_buckets() -> None:
    assert word_similarity("seo", "seo") == 1.0
    assert word_similarity("marketing", "market") == 0.7
    assert word_similarity("running", "jumping") == 0.6
    assert word_similarity("seo", "go") == 0.0
    assert word_similarity("garden", "tools") == 0.0


def test_semantic_similarity_includes_phrase_bonus() -> None:
    assert semantic_similarity("seo tools", "seo tool") == pytest.approx(2.2 / 5)
    assert semantic_similarity("seo", "seo") == 1.0


def test_find_common_words_counts_keywords_sharing_each_word() -> None:
    common = find_common_words(["seo tools", "best seo tools", "seo audit", "seo seo"])

    assert common[0] == CommonWord("seo", 4, 1.0)
    assert common[1] == CommonWord("tools", 2, 0.5)
    assert len(common) == 2


def test_suggest_cluster_name_fallbacks() -> None:
    assert suggest_cluster_name(["garden", "flowers"]) == "garden"
    assert suggest_cluster_name(["seo audit", "seo tools", "audit tools"]) == "seo audit"
    assert suggest_cluster_name(["seo audit", "seo tools"]) == "seo audit"
    assert suggest_cluster_name(["alpha seo", "beta tools", "seo gamma", "tools delta"]) == "seo tools"
    assert suggest_cluster_name([]) == ""


def test_cluster_quality_penalises_near_duplicates() -> None:
    cluster = KeywordCluster(
        primary="seo tools",
        related=[RelatedKeyword(f"seo tools {index}", 90) for index in range(4)],
        common_words=[CommonWord("seo", 5, 1.0), CommonWord("tools", 5, 1.0), CommonWord("best", 2, 0.4)],
    )

    assert cluster_quality(cluster) == 30 + 25 + 20 - 10


def test_insights_report_quality_and_standalone_share() -> None:
    result = cluster_keywords(["garden", "seo", "marketing"])

    assert result.singleton == 3
    messages = [insight.message for insight in result.insights]
    assert messages[0].startswith("Clustering quality could be improved")
    assert "100% of keywords are standalone" in messages[1]


def test_custom_theme_catalog_labels_clusters() -> None:
    themes = ThemeCatalog([Theme("Pets", ("cats", "dogs"))])

    result = cluster_keywords(["cats food", "cats toys", "garden"], themes=themes)

    assert [cluster.theme for cluster in result.clusters] == ["Pets", "General"]


def test_to_dict_includes_cluster_size() -> None:
    payload = cluster_keywords(["seo tools", "best seo tools"]).to_dict()

    assert payload["clusters"][0]["size"] == 2
    assert payload["clusters"][0]["related"] == [{"keyword": "best seo tools", "similarity": 67}]
