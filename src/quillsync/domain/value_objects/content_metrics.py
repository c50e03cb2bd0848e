"""Derived metrics of rich-text document content.

Every write path derives text and counts through ``ContentMetrics.from_content``
so the stored projection of a document always matches its canonical tree.
"""

import json
import math
from dataclasses import dataclass
from typing import Any

DEFAULT_WORDS_PER_PAGE = 500


def extract_text(content: Any) -> str:
    """Concatenate leaf text depth-first, left to right, then strip the result.

    A node with a string ``text`` contributes that text; otherwise its ``content``
    children are visited in order. Anything else (images, unknown shapes, None)
    contributes nothing. Siblings are joined without separators.
    """
    parts: list[str] = []
    stack: list[Any] = [content]
    while stack:
        node = stack.pop()
        if isinstance(node, str):
            parts.append(node)
            continue
        if not isinstance(node, dict):
            continue
        text = node.get("text")
        if isinstance(text, str) and text:
            parts.append(text)
            continue
        children = node.get("content")
        if isinstance(children, list):
            stack.extend(reversed(children))
    return "".join(parts).strip()


def count_words(text: str) -> int:
    return len(text.split())


def estimate_pages(word_count: int, words_per_page: int = DEFAULT_WORDS_PER_PAGE) -> int:
    """Pages needed for ``word_count`` words; at least one page for any text."""
    if word_count <= 0:
        return 0
    return max(1, math.ceil(word_count / words_per_page))


def serialize_content(content: Any) -> str:
    """Canonical string form of content (compact JSON, insertion-ordered keys)."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return json.dumps(content, separators=(",", ":"), ensure_ascii=False)


def content_size_bytes(content: Any) -> int:
    return len(serialize_content(content).encode("utf-8"))


@dataclass(frozen=True)
class ContentMetrics:
    """Plain-text projection and counts derived from canonical content."""

    derived_text: str
    word_count: int
    character_count: int
    page_count: int
    size_bytes: int

    @classmethod
    def from_content(
        cls, content: Any, words_per_page: int = DEFAULT_WORDS_PER_PAGE
    ) -> "ContentMetrics":
        if words_per_page <= 0:
            raise ValueError("words_per_page must be positive")
        text = extract_text(content)
        words = count_words(text)
        return cls(
            derived_text=text,
            word_count=words,
            character_count=len(text),
            page_count=estimate_pages(words, words_per_page),
            size_bytes=content_size_bytes(content),
        )

    @classmethod
    def empty(cls) -> "ContentMetrics":
        return cls(derived_text="", word_count=0, character_count=0, page_count=0, size_bytes=0)
