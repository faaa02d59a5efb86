"""
Visitor tracking and the admin analytics dashboard.
"""

from __future__ import annotations

import logging
import re
import time
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional

from content.types import AnalyticsEvent, BlogPost, PageView
from portfolio.db import DbClient
from portfolio.errors import ValidationFailed

logger = logging.getLogger(__name__)

DEFAULT_RANGE_DAYS = 30
UNKNOWN_COUNTRY = "Unknown"

_TABLET_RE = re.compile(r"ipad|tablet|playbook|silk|(android(?!.*mobile))", re.IGNORECASE)
_MOBILE_RE = re.compile(
    r"mobi|iphone|ipod|android|blackberry|opera mini|iemobile|windows phone", re.IGNORECASE
)
_BROWSERS = (
    ("Edge", re.compile(r"edg(e|a|ios)?/", re.IGNORECASE)),
    ("Opera", re.compile(r"opr/|opera", re.IGNORECASE)),
    ("Firefox", re.compile(r"firefox|fxios", re.IGNORECASE)),
    ("Chrome", re.compile(r"chrome|crios", re.IGNORECASE)),
    ("Safari", re.compile(r"safari", re.IGNORECASE)),
)


def detect_device(user_agent: Optional[str]) -> str:
    """Classifies a user agent as ``tablet``, ``mobile`` or ``desktop``."""
    user_agent = user_agent or ""
    if _TABLET_RE.search(user_agent):
        return "tablet"
    if _MOBILE_RE.search(user_agent):
        return "mobile"
    return "desktop"


def detect_browser(user_agent: Optional[str]) -> str:
    for name, pattern in _BROWSERS:
        if pattern.search(user_agent or ""):
            return name
    return "Other"


def track_page_view(
    db: DbClient,
    path: str,
    *,
    user_agent: Optional[str] = None,
    referrer: Optional[str] = None,
    session_id: Optional[str] = None,
    country: Optional[str] = None,
) -> PageView:
    return db.add(
        PageView(
            path=path,
            session_id=session_id,
            user_agent=user_agent,
            referrer=referrer or None,
            country=country or None,
            device_type=detect_device(user_agent),
            browser=detect_browser(user_agent),
        )
    )


def track_event(
    db: DbClient,
    event_name: str,
    *,
    page_path: Optional[str] = None,
    session_id: Optional[str] = None,
    properties: Optional[Dict[str, Any]] = None,
) -> AnalyticsEvent:
    return db.add(
        AnalyticsEvent(
            event_name=event_name,
            page_path=page_path,
            session_id=session_id,
            properties=properties or {},
        )
    )


def _day(timestamp: float) -> date:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date()


def default_range(now: Optional[float] = None) -> tuple[date, date]:
    end = _day(now if now is not None else time.time())
    return end - timedelta(days=DEFAULT_RANGE_DAYS - 1), end


def dashboard_analytics(db: DbClient, start: date, end: date) -> dict:
    """
    Page views and unique visitors per UTC day from ``start`` to ``end``
    inclusive. A view without a session id counts as its own visitor.
    """
    if end < start:
        raise ValidationFailed("end date must not be before start date")

    days = [start + timedelta(days=offset) for offset in range((end - start).days + 1)]
    views: Dict[date, int] = dict.fromkeys(days, 0)
    visitors: Dict[date, set] = {day: set() for day in days}
    for view in db.list(PageView):
        day = _day(view.created_at)
        if day not in views:
            continue
        views[day] += 1
        visitors[day].add(view.session_id or view.id)

    return {
        "dates": [day.isoformat() for day in days],
        "visitors": [len(visitors[day]) for day in days],
        "page_views": [views[day] for day in days],
    }


def device_stats(db: DbClient) -> dict:
    counts = Counter(view.device_type or "desktop" for view in db.list(PageView))
    return {kind: counts.get(kind, 0) for kind in ("desktop", "mobile", "tablet")}


def geo_stats(db: DbClient, limit: int = 10) -> list[dict]:
    counts = Counter(view.country or UNKNOWN_COUNTRY for view in db.list(PageView))
    return [
        {"country": country, "value": value}
        for country, value in sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:limit]
    ]


def blog_performance(db: DbClient, limit: int = 10) -> list[dict]:
    posts = db.list(BlogPost, order_by="view_count", descending=True, limit=limit)
    return [
        {
            "id": post.id,
            "title": post.title,
            "views": post.view_count,
            "likes": post.like_count,
            "comments": post.comment_count,
        }
        for post in posts
    ]


def analytics_summary(db: DbClient, start: date, end: date) -> dict:
    return {
        "visitor_trends": dashboard_analytics(db, start, end),
        "blog_performance": blog_performance(db),
        "device_stats": device_stats(db),
        "geo_data": geo_stats(db),
    }
