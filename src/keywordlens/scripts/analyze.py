"""CLI for running keyword analyses against local content files."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, TextIO

from keywordlens.config import Settings
from keywordlens.services import KeywordServices
from keywordlens.text import KeywordInputError
from keywordlens.themes import ThemeLoadError

INPUT_ERROR_STATUS = 2


def _add_content_argument(parser: argparse.ArgumentParser, *, required: bool = True) -> None:
    if required:
        parser.add_argument("content", help="Path to a text or HTML file, or '-' to read stdin")
    else:
        parser.add_argument(
            "--content",
            dest="content",
            default=None,
            help="Optional path to a text or HTML file used as context ('-' for stdin)",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="keywordlens", description="Analyse keywords in content")
    parser.add_argument("--log-level", default=None, help="Logging level (default: KEYWORDLENS_LOG_LEVEL or WARNING)")
    commands = parser.add_subparsers(dest="command", required=True)

    density = commands.add_parser("density", help="Keyword density, distribution and recommendations")
    _add_content_argument(density)
    density.add_argument("--keywords", "-k", required=True, help="Comma-separated keywords")

    long_tail = commands.add_parser("long-tail", help="Long-tail phrase suggestions")
    _add_content_argument(long_tail)
    long_tail.add_argument("--seeds", "-s", default="", help="Comma-separated seed keywords")
    long_tail.add_argument("--max", dest="max_suggestions", type=int, default=None)

    difficulty = commands.add_parser("difficulty", help="Heuristic keyword difficulty")
    difficulty.add_argument("keywords", help="Comma-separated keywords")
    _add_content_argument(difficulty, required=False)

    cluster = commands.add_parser("cluster", help="Group keywords into topical clusters")
    cluster.add_argument("keywords", help="Comma-separated keywords")
    cluster.add_argument("--threshold", type=float, default=None, help="Similarity threshold (0-1)")
    cluster.add_argument("--strategy", choices=("jaccard", "semantic"), default=None)

    lsi = commands.add_parser("lsi", help="LSI-style related keywords")
    _add_content_argument(lsi)
    lsi.add_argument("--keywords", "-k", default="", help="Comma-separated main keywords")
    lsi.add_argument("--max", dest="max_suggestions", type=int, default=None)

    suggest = commands.add_parser("suggest", help="Frequent keyword and phrase suggestions")
    _add_content_argument(suggest)
    suggest.add_argument("--max", dest="max_suggestions", type=int, default=None)
    suggest.add_argument("--language", default=None)

    return parser


def _read_content(source: str | None, stdin: TextIO) -> str:
    if source is None:
        return ""
    if source == "-":
        return stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _run(args: argparse.Namespace, services: KeywordServices, stdin: TextIO) -> Any:
    command = args.command
    if command == "density":
        return services.analyze_density(_read_content(args.content, stdin), args.keywords).to_dict()
    if command == "long-tail":
        content = _read_content(args.content, stdin)
        return services.generate_long_tail(content, args.seeds, args.max_suggestions).to_dict()
    if command == "difficulty":
        return services.estimate_difficulty(args.keywords, _read_content(args.content, stdin)).to_dict()
    if command == "cluster":
        return services.cluster_keywords(
            args.keywords,
            similarity_threshold=args.threshold,
            strategy=args.strategy,
        ).to_dict()
    if command == "lsi":
        content = _read_content(args.content, stdin)
        return services.generate_lsi(content, args.keywords, args.max_suggestions).to_dict()
    suggestions = services.suggest_keywords(
        _read_content(args.content, stdin), args.max_suggestions, args.language
    )
    return [item.to_dict() for item in suggestions]


def main(
    argv: list[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    level_name = args.log_level or os.getenv("KEYWORDLENS_LOG_LEVEL") or "WARNING"
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        settings = Settings.from_env()
        services = KeywordServices(settings=settings)
        result = _run(args, services, stdin)
    except (KeywordInputError, ValueError, ThemeLoadError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return INPUT_ERROR_STATUS

    json.dump(result, stdout, indent=2, ensure_ascii=False)
    stdout.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
