"""
Table of contents extraction for blog post HTML.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import List, Optional

_HEADING_RE = re.compile(r"<h([2-6])([^>]*)>(.*?)</h\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_ID_ATTR_RE = re.compile(r"\s+id\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s>]+)", re.IGNORECASE)


@dataclass
class TocItem:
    id: str
    title: str
    level: int
    children: List["TocItem"] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "level": self.level,
            "children": [child.as_dict() for child in self.children],
        }


def _heading_text(inner_html: str) -> str:
    return html.unescape(_TAG_RE.sub("", inner_html)).strip()


def heading_id(title: str) -> str:
    """
    Anchor id for a heading. Tags are ignored but entities are not decoded,
    so ``Q &amp; A`` becomes ``q-amp-a`` and existing anchors keep working.
    """
    text = _TAG_RE.sub("", title).strip().lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return re.sub(r"(^-|-$)", "", text)


def generate_table_of_contents(content: str) -> List[TocItem]:
    """
    Builds a two-level table of contents from ``h2``..``h6`` headings.

    ``h2`` headings are top-level entries; deeper headings are nested
    under the closest preceding ``h2`` and dropped when none precedes
    them.
    """
    toc: List[TocItem] = []
    for match in _HEADING_RE.finditer(content or ""):
        level = int(match.group(1))
        inner = match.group(3)
        item = TocItem(id=heading_id(inner), title=_heading_text(inner), level=level)
        if level == 2:
            toc.append(item)
            continue
        last_h2: Optional[TocItem] = toc[-1] if toc else None
        if last_h2 is not None:
            last_h2.children.append(item)
    return toc


def inject_heading_ids(content: str) -> str:
    """Adds an ``id`` attribute to each heading so TOC links resolve."""

    def _replace(match: re.Match) -> str:
        level, attrs, inner = match.group(1), match.group(2), match.group(3)
        attrs = _ID_ATTR_RE.sub("", attrs or "")
        return f'<h{level}{attrs} id="{heading_id(inner)}">{inner}</h{level}>'

    return _HEADING_RE.sub(_replace, content or "")
