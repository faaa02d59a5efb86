"""
Admin inbox for contact form submissions: filtering, pagination, archive,
tags, replies and inbox analytics.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Literal, Optional

from content.email_templates import render_email, reply_subject
from content.types import ContactSubmission, EmailJob, EmailKind, EmailStatus, MessageStatus
from portfolio.db import DbClient
from portfolio.errors import DeliveryFailed, NotFoundError, ValidationFailed
from portfolio.mailer import Mailer, MailerError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
TREND_DAYS = 7

StatusFilter = Literal["all", "read", "unread", "replied"]
SortOrder = Literal["asc", "desc"]


@dataclass
class MessageFilters:
    search: str = ""
    status: StatusFilter = "all"
    sort: SortOrder = "desc"
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class Pagination:
    current_page: int
    total_pages: int
    page_size: int
    total_messages: int


def _matches_search(message: ContactSubmission, needle: str) -> bool:
    fields = (message.full_name, message.email, message.subject, message.message)
    return any(needle in (value or "").lower() for value in fields)


def _matches_status(message: ContactSubmission, status: StatusFilter) -> bool:
    if status == "read":
        return message.is_read
    if status == "unread":
        return not message.is_read
    if status == "replied":
        return message.status == MessageStatus.REPLIED.value
    return True


def filter_messages(
    messages: Iterable[ContactSubmission], filters: MessageFilters
) -> list[ContactSubmission]:
    needle = filters.search.strip().lower()
    matched = [
        message
        for message in messages
        if message.status != MessageStatus.ARCHIVED.value
        and _matches_status(message, filters.status)
        and (not needle or _matches_search(message, needle))
    ]
    matched.sort(key=lambda message: message.created_at, reverse=filters.sort == "desc")
    return matched


def _paginate(
    items: list[ContactSubmission], page: int, page_size: int
) -> tuple[list[ContactSubmission], Pagination]:
    if page < 1 or page_size < 1:
        raise ValidationFailed("page and page_size must be positive")
    start = (page - 1) * page_size
    pagination = Pagination(
        current_page=page,
        total_pages=math.ceil(len(items) / page_size),
        page_size=page_size,
        total_messages=len(items),
    )
    return items[start : start + page_size], pagination


def list_messages(
    db: DbClient, filters: MessageFilters
) -> tuple[list[ContactSubmission], Pagination]:
    """
    Returns one page of the inbox. Archived messages are listed separately
    by ``list_archived``.
    """
    matched = filter_messages(db.list(ContactSubmission), filters)
    return _paginate(matched, filters.page, filters.page_size)


def get_message(db: DbClient, message_id: str) -> ContactSubmission:
    message = db.get(ContactSubmission, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    return message


def _update_each(
    db: DbClient, ids: Iterable[str], changes: Callable[[ContactSubmission], Optional[dict]]
) -> int:
    updated = 0
    for message_id in ids:
        message = db.get(ContactSubmission, message_id)
        if message is None:
            continue
        values = changes(message)
        if values is None:
            continue
        db.update(ContactSubmission, message_id, values)
        updated += 1
    return updated


def mark_read(db: DbClient, ids: Iterable[str]) -> int:
    def _read(message: ContactSubmission) -> dict:
        values = {"is_read": True}
        if message.status == MessageStatus.NEW.value:
            values["status"] = MessageStatus.READ.value
        return values

    return _update_each(db, ids, _read)


def delete_messages(db: DbClient, ids: Iterable[str]) -> int:
    removed = db.delete(ContactSubmission, list(ids))
    logger.info("Deleted %s contact submissions", removed)
    return removed


def archive_messages(db: DbClient, ids: Iterable[str]) -> int:
    return _update_each(db, ids, lambda _: {"status": MessageStatus.ARCHIVED.value})


def restore_messages(db: DbClient, ids: Iterable[str]) -> int:
    def _restore(message: ContactSubmission) -> Optional[dict]:
        if message.status != MessageStatus.ARCHIVED.value:
            return None
        return {"status": MessageStatus.NEW.value}

    return _update_each(db, ids, _restore)


def list_archived(
    db: DbClient, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
) -> tuple[list[ContactSubmission], Pagination]:
    archived = db.list(
        ContactSubmission,
        order_by="updated_at",
        descending=True,
        status=MessageStatus.ARCHIVED.value,
    )
    return _paginate(archived, page, page_size)


def add_tag(db: DbClient, message_id: str, tag: str) -> ContactSubmission:
    message = get_message(db, message_id)
    tag = (tag or "").strip()
    if not tag or tag in message.tags:
        return message
    return db.update(ContactSubmission, message_id, {"tags": [*message.tags, tag]})


def remove_tag(db: DbClient, message_id: str, tag: str) -> ContactSubmission:
    message = get_message(db, message_id)
    if tag not in message.tags:
        return message
    tags = [value for value in message.tags if value != tag]
    return db.update(ContactSubmission, message_id, {"tags": tags})


def reply(
    db: DbClient,
    mailer: Mailer,
    message_id: str,
    reply_message: str,
    *,
    site_name: str,
) -> ContactSubmission:
    """
    Emails a reply to the sender and records it on the message.

    The message is only marked as replied once the provider accepted the
    email; a delivery failure leaves it untouched and raises
    ``DeliveryFailed``.
    """
    message = get_message(db, message_id)
    reply_message = (reply_message or "").strip()
    if not reply_message:
        raise ValidationFailed("Reply message is required")

    context = {
        "reply_message": reply_message,
        "original_message": message.message,
        "site_name": site_name,
    }
    subject = reply_subject(message.subject)
    try:
        provider_id = mailer.send(
            message.email, subject, render_email(EmailKind.REPLY.value, context)
        )
    except MailerError as exc:
        logger.exception("Reply to message %s failed", message_id)
        raise DeliveryFailed(f"Failed to send reply: {exc}") from exc

    db.add(
        EmailJob(
            kind=EmailKind.REPLY.value,
            to=message.email,
            subject=subject,
            context=context,
            status=EmailStatus.SENT.value,
            attempts=1,
            provider_id=provider_id,
        )
    )
    return db.update(
        ContactSubmission,
        message_id,
        {
            "status": MessageStatus.REPLIED.value,
            "is_read": True,
            "reply_message": reply_message,
            "replied_at": time.time(),
        },
    )


def _day(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date().isoformat()


def message_analytics(db: DbClient, now: Optional[float] = None) -> dict:
    """
    Inbox totals plus a per-day count of messages received over the last
    seven days (UTC), oldest day first and including days with none.
    """
    messages = db.list(ContactSubmission)
    today = datetime.fromtimestamp(now if now is not None else time.time(), tz=timezone.utc).date()
    days = [(today - timedelta(days=offset)).isoformat() for offset in range(TREND_DAYS - 1, -1, -1)]
    counts = dict.fromkeys(days, 0)
    for message in messages:
        day = _day(message.created_at)
        if day in counts:
            counts[day] += 1

    return {
        "total_messages": len(messages),
        "unread_messages": sum(1 for m in messages if not m.is_read),
        "replied_messages": sum(1 for m in messages if m.status == MessageStatus.REPLIED.value),
        "archived_messages": sum(1 for m in messages if m.status == MessageStatus.ARCHIVED.value),
        "daily_message_trend": [{"date": day, "count": count} for day, count in counts.items()],
    }
