"""
Admin inbox routes for contact form submissions.
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from content.types import ContactSubmission
from portfolio.config import get_settings
from portfolio.db import DbClient
from portfolio.dependencies import get_db_client, get_mailer, require_admin
from portfolio.mailer import Mailer
from portfolio.schemas import (
    CountResponse,
    IdsPayload,
    MessageAnalyticsResponse,
    MessageListResponse,
    PaginationResponse,
    ReplyPayload,
    TagPayload,
)
from portfolio.services import messages
from portfolio.services.messages import DEFAULT_PAGE_SIZE, MessageFilters, SortOrder, StatusFilter

router = APIRouter(prefix="/admin/messages", dependencies=[Depends(require_admin)])


def _page(items: list[ContactSubmission], pagination) -> MessageListResponse:
    return MessageListResponse(
        messages=items, pagination=PaginationResponse(**asdict(pagination))
    )


@router.get("", response_model=MessageListResponse)
def list_messages(
    search: str = Query(default="", max_length=200),
    status: StatusFilter = Query(default="all"),
    sort: SortOrder = Query(default="desc"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: DbClient = Depends(get_db_client),
):
    filters = MessageFilters(
        search=search, status=status, sort=sort, page=page, page_size=page_size
    )
    return _page(*messages.list_messages(db, filters))


@router.get("/archived", response_model=MessageListResponse)
def list_archived_messages(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100),
    db: DbClient = Depends(get_db_client),
):
    return _page(*messages.list_archived(db, page=page, page_size=page_size))


@router.get("/analytics", response_model=MessageAnalyticsResponse)
def message_analytics(db: DbClient = Depends(get_db_client)):
    return messages.message_analytics(db)


@router.post("/read", response_model=CountResponse)
def mark_messages_read(payload: IdsPayload, db: DbClient = Depends(get_db_client)):
    return CountResponse(count=messages.mark_read(db, payload.ids))


@router.post("/delete", response_model=CountResponse)
def delete_messages(payload: IdsPayload, db: DbClient = Depends(get_db_client)):
    return CountResponse(count=messages.delete_messages(db, payload.ids))


@router.post("/archive", response_model=CountResponse)
def archive_messages(payload: IdsPayload, db: DbClient = Depends(get_db_client)):
    return CountResponse(count=messages.archive_messages(db, payload.ids))


@router.post("/restore", response_model=CountResponse)
def restore_messages(payload: IdsPayload, db: DbClient = Depends(get_db_client)):
    return CountResponse(count=messages.restore_messages(db, payload.ids))


@router.get("/{message_id}", response_model=ContactSubmission)
def get_message(message_id: str, db: DbClient = Depends(get_db_client)):
    return messages.get_message(db, message_id)


@router.post("/{message_id}/tags", response_model=ContactSubmission)
def add_message_tag(
    message_id: str, payload: TagPayload, db: DbClient = Depends(get_db_client)
):
    return messages.add_tag(db, message_id, payload.tag)


@router.delete("/{message_id}/tags/{tag}", response_model=ContactSubmission)
def remove_message_tag(message_id: str, tag: str, db: DbClient = Depends(get_db_client)):
    return messages.remove_tag(db, message_id, tag)


@router.post("/{message_id}/reply", response_model=ContactSubmission)
def reply_to_message(
    message_id: str,
    payload: ReplyPayload,
    db: DbClient = Depends(get_db_client),
    mailer: Mailer = Depends(get_mailer),
):
    return messages.reply(
        db,
        mailer,
        message_id,
        payload.reply_message,
        site_name=get_settings().site_name,
    )
