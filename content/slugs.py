"""
URL slug helpers for blog posts.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable

MAX_SLUG_LENGTH = 200

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(text: str) -> str:
    """
    Converts a string into a URL-friendly slug.

    Accents are folded to their base letter, anything outside ``[a-z0-9]``
    is dropped and runs of whitespace, underscores and hyphens become a
    single hyphen.

    Args:
        text (str): The text to convert, usually a post title.

    Returns:
        str: The slug, at most 200 characters. Empty for empty input.
    """
    if not text:
        return ""

    value = str(text).lower().strip()
    value = unicodedata.normalize("NFKD", value)
    value = "".join(ch for ch in value if not unicodedata.combining(ch))
    value = re.sub(r"[^a-z0-9\s-]", "", value)
    value = re.sub(r"[\s_]+", "-", value)
    value = re.sub(r"-+", "-", value)
    value = value.strip("-")
    return value[:MAX_SLUG_LENGTH]


def generate_unique_slug(base: str, existing_slugs: Iterable[str]) -> str:
    """
    Returns ``slugify(base)``, suffixed with ``-1``, ``-2``, ... until it
    no longer collides with ``existing_slugs``.
    """
    taken = set(existing_slugs)
    original = slugify(base)
    slug = original
    counter = 1
    while slug in taken:
        slug = f"{original}-{counter}"
        counter += 1
    return slug


def is_valid_slug(slug: str) -> bool:
    return bool(_SLUG_PATTERN.match(slug or ""))
