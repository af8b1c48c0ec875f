from __future__ import annotations

from pathlib import Path

import pytest

from keywordlens.themes import DEFAULT_THEME, DEFAULT_THEMES, ThemeCatalog, ThemeLoadError, load_themes


def test_default_catalog_identifies_themes() -> None:
    catalog = ThemeCatalog()

    assert len(catalog) == len(DEFAULT_THEMES) == 7
    assert catalog.identify(["local business map"]) == "Local SEO"
    assert catalog.identify(["buy product on sale"]) == "E-commerce"
    assert catalog.identify(["garden flowers"]) == DEFAULT_THEME


def test_ties_go_to_the_earlier_theme() -> None:
    assert ThemeCatalog().identify(["seo content"]) == "SEO Tools"


def test_load_themes_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "themes.yaml"
    path.write_text(
        "- theme: Pets\n"
        "  terms: [Cats, dogs]\n"
        "- theme: Gardening\n"
        "  terms:\n"
        "    - garden\n"
        "    - soil\n"
        "- theme: Empty\n"
        "  terms: []\n",
        encoding="utf-8",
    )

    catalog = load_themes(path)

    assert [theme.name for theme in catalog.themes()] == ["Pets", "Gardening"]
    assert catalog.themes()[0].terms == ("cats", "dogs")
    assert catalog.identify(["garden soil tips"]) == "Gardening"
    assert catalog.identify(["seo tools"]) == DEFAULT_THEME


def test_missing_theme_file_uses_defaults(tmp_path: Path) -> None:
    assert len(load_themes(tmp_path / "missing.yaml")) == 7
    assert len(load_themes(None)) == 7


def test_invalid_theme_files_raise(tmp_path: Path) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text("- theme: [unclosed\n", encoding="utf-8")
    mapping = tmp_path / "mapping.yaml"
    mapping.write_text("theme: Pets\n", encoding="utf-8")

    with pytest.raises(ThemeLoadError):
        load_themes(broken)
    with pytest.raises(ThemeLoadError, match="must contain a list"):
        load_themes(mapping)
