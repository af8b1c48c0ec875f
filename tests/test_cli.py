from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from keywordlens.scripts.analyze import INPUT_ERROR_STATUS, build_parser, main


def _run(argv: list[str], stdin: str = "") -> tuple[int, object]:
    stdout = io.StringIO()
    status = main(argv, stdin=io.StringIO(stdin), stdout=stdout)
    output = stdout.getvalue()
    return status, json.loads(output) if output else None


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("THEMES_PATH", "CLUSTER_STRATEGY", "OBSERVABILITY_PROMETHEUS_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OBSERVABILITY_METRICS_ENABLED", "false")


def test_density_from_file(tmp_path: Path) -> None:
    article = tmp_path / "article.html"
    article.write_text("<p>SEO is important. SEO helps. SEO tools are great.</p>", encoding="utf-8")

    status, payload = _run(["density", str(article), "--keywords", "seo, tools"])

    assert status == 0
    assert [item["count"] for item in payload["density_results"]] == [3, 1]


def test_suggest_reads_stdin() -> None:
    text = "Python tutorials teach python programming. Python tutorials explain python basics clearly."

    status, payload = _run(["suggest", "-", "--max", "1"], stdin=text)

    assert status == 0
    assert payload == [{"keyword": "python tutorials", "frequency": 2, "relevance": 85, "type": "phrase"}]


def test_cluster_and_difficulty_take_keyword_arguments() -> None:
    status, clusters = _run(["cluster", "seo tools, best seo tools, content marketing", "--threshold", "0.3"])
    assert status == 0
    assert clusters["total_clusters"] == 2

    status, difficulty = _run(["difficulty", "how to fix a leaky faucet"])
    assert status == 0
    assert difficulty["estimates"][0]["level"] == "easy"


def test_long_tail_and_lsi_commands(tmp_path: Path) -> None:
    article = tmp_path / "article.txt"
    article.write_text("Organic gardening tips help beginners grow tomatoes. " * 4, encoding="utf-8")

    status, long_tail = _run(["long-tail", str(article), "--seeds", "tomatoes", "--max", "2"])
    assert status == 0
    assert long_tail["total_phrases"] == 2

    status, lsi = _run(["lsi", str(article), "--keywords", "gardening", "--max", "3"])
    assert status == 0
    assert lsi["total_suggestions"] <= 3


def test_input_errors_exit_with_status_two(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    status, payload = _run(["cluster", "seo"])

    assert status == INPUT_ERROR_STATUS == 2
    assert payload is None
    assert "Need at least 2 keywords" in capsys.readouterr().err

    status, _ = _run(["density", str(tmp_path / "missing.txt"), "--keywords", "seo"])
    assert status == INPUT_ERROR_STATUS


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_invalid_environment_settings_exit_with_status_two(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("CLUSTER_STRATEGY", "cosine")

    status, payload = _run(["difficulty", "seo"])

    assert status == INPUT_ERROR_STATUS
    assert payload is None
    err = capsys.readouterr().err
    assert err.startswith("error: ")
    assert "CLUSTER_STRATEGY" in err
