"""
Blog archive helpers: text extraction, reading time, search and tags.
"""

from __future__ import annotations

import math
import re
from typing import Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup

from content.types import BlogPost

WORDS_PER_MINUTE = 200
EXCERPT_LIMIT = 300


def html_to_text(content: str) -> str:
    """Returns the visible text of rich-text editor HTML."""
    if not content:
        return ""
    soup = BeautifulSoup(content, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    text = soup.get_text(separator=" ")
    return re.sub(r"\s+", " ", text).strip()


def reading_time(content: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    words = len(html_to_text(content).split())
    return max(1, math.ceil(words / words_per_minute))


def make_excerpt(content: str, limit: int = EXCERPT_LIMIT) -> str:
    text = html_to_text(content)
    if len(text) <= limit:
        return text
    cut = text[: limit - 3]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip(" ,.;:") + "..."


def collect_tags(posts: Iterable[BlogPost]) -> List[str]:
    seen: dict[str, None] = {}
    for post in posts:
        for tag in post.tags or []:
            seen.setdefault(tag, None)
    return list(seen)


def _matches_query(post: BlogPost, needle: str) -> bool:
    haystacks = (post.title, post.excerpt, html_to_text(post.content))
    return any(needle in (value or "").lower() for value in haystacks)


def filter_posts(
    posts: Sequence[BlogPost],
    query: Optional[str] = None,
    tags: Optional[Sequence[str]] = None,
) -> List[BlogPost]:
    """
    Filters the archive by free-text search and selected tags.

    Args:
        posts: Posts to filter, order is preserved.
        query: Case-insensitive text matched against title, excerpt and
            content. Blank matches everything.
        tags: A post must carry every selected tag.

    Returns:
        List[BlogPost]: The matching posts.
    """
    needle = (query or "").strip().lower()
    selected = [tag for tag in (tags or []) if tag]
    results = []
    for post in posts:
        if needle and not _matches_query(post, needle):
            continue
        post_tags = set(post.tags or [])
        if any(tag not in post_tags for tag in selected):
            continue
        results.append(post)
    return results


def toggle_tag(selected: Sequence[str], tag: str) -> List[str]:
    if tag in selected:
        return [value for value in selected if value != tag]
    return [*selected, tag]


def related_posts(
    post: BlogPost, candidates: Iterable[BlogPost], limit: int = 3
) -> List[BlogPost]:
    """Published posts sharing tags with ``post``, most overlap first."""
    own_tags = set(post.tags or [])
    if not own_tags:
        return []
    scored = []
    for candidate in candidates:
        if candidate.id == post.id or not candidate.published:
            continue
        shared = len(own_tags & set(candidate.tags or []))
        if shared:
            scored.append((shared, candidate.published_at or candidate.created_at, candidate))
    scored.sort(key=lambda item: (item[0], item[1]), reverse=True)
    return [candidate for _, _, candidate in scored[:limit]]
