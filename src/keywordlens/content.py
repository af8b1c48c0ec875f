"""Plain-text extraction for HTML or text content passed to the pipelines."""

from __future__ import annotations

import logging
import re
from html import unescape
from dataclasses import asdict, dataclass
from typing import Any

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<(?:[a-zA-Z][\w:-]*|/[a-zA-Z][\w:-]*|!--|!doctype)[^>]*>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_DROPPED_TAGS = ("script", "style", "noscript", "template")


@dataclass(slots=True)
class ParsedContent:
    """Text extracted from a raw document together with basic counts."""

    text: str
    word_count: int
    character_count: int
    is_html: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def looks_like_html(raw: str) -> bool:
    return bool(_TAG_RE.search(raw))


def strip_html(html: str) -> str:
    """Return visible text from *html* with whitespace collapsed."""

    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(list(_DROPPED_TAGS)):
        tag.extract()
    text = soup.get_text(separator=" ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def count_words(text: str) -> int:
    if not text:
        return 0
    return len(text.split())


def parse(raw: str | None) -> ParsedContent:
    """Extract plain text and its word count from HTML or text input."""

    if not raw or not isinstance(raw, str):
        return ParsedContent(text="", word_count=0, character_count=0)

    is_html = looks_like_html(raw)
    if is_html:
        text = strip_html(raw)
        logger.debug("content.parse html_chars=%s text_chars=%s", len(raw), len(text))
    else:
        text = _WHITESPACE_RE.sub(" ", unescape(raw)).strip()
    return ParsedContent(
        text=text,
        word_count=count_words(text),
        character_count=len(text),
        is_html=is_html,
    )


__all__ = ["ParsedContent", "count_words", "looks_like_html", "parse", "strip_html"]
