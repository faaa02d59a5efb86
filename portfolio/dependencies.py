"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from content.types import AdminUser
from portfolio.auth import InMemorySessionStore, RedisSessionStore, SessionStore
from portfolio.config import get_settings
from portfolio.db import DbClient, InMemoryDbClient, SqlDbClient
from portfolio.errors import InvalidSession
from portfolio.mailer import InMemoryMailer, Mailer, ResendMailer
from portfolio.queue import InMemoryJobQueue, JobQueue, RedisJobQueue
from portfolio.storage import InMemoryStorageClient, S3StorageClient, StorageClient

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_storage_client: StorageClient | None = None
_queue_client: JobQueue | None = None
_mailer: Mailer | None = None
_session_store: SessionStore | None = None

bearer_scheme = HTTPBearer(auto_error=False)


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        logger.info("Using in-memory database")
        _db_client = InMemoryDbClient()
    else:
        _db_client = SqlDbClient(settings.database_url)
    return _db_client


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.storage_bucket:
        _storage_client = InMemoryStorageClient()
    else:
        _storage_client = S3StorageClient(
            bucket=settings.storage_bucket,
            region=settings.storage_region or "",
            endpoint=settings.storage_endpoint or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
            public_base_url=settings.storage_public_base_url,
        )
    return _storage_client


def get_queue_client() -> JobQueue:
    """
    Return a singleton queue client for dispatching email jobs to workers.
    """
    global _queue_client
    if _queue_client:
        return _queue_client

    settings = get_settings()
    if settings.redis_url and not settings.use_in_memory_backends:
        _queue_client = RedisJobQueue(
            url=settings.redis_url,
            queue_key=settings.redis_queue_key,
        )
    else:
        _queue_client = InMemoryJobQueue()
    return _queue_client


def get_mailer() -> Mailer:
    global _mailer
    if _mailer:
        return _mailer

    settings = get_settings()
    if settings.resend_api_key and not settings.use_in_memory_backends:
        _mailer = ResendMailer(api_key=settings.resend_api_key, sender=settings.email_from)
    else:
        logger.warning("No email provider configured; outgoing mail is kept in memory")
        _mailer = InMemoryMailer()
    return _mailer


def get_session_store() -> SessionStore:
    global _session_store
    if _session_store:
        return _session_store

    settings = get_settings()
    if settings.redis_url and not settings.use_in_memory_backends:
        _session_store = RedisSessionStore(
            url=settings.redis_url,
            secret_key=settings.secret_key,
            timeout_seconds=settings.session_timeout_seconds,
            prefix=settings.redis_session_prefix,
        )
    else:
        _session_store = InMemorySessionStore(
            secret_key=settings.secret_key,
            timeout_seconds=settings.session_timeout_seconds,
        )
    return _session_store


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise InvalidSession()
    return credentials.credentials


def require_admin(
    token: str = Depends(get_bearer_token),
    sessions: SessionStore = Depends(get_session_store),
    db: DbClient = Depends(get_db_client),
) -> AdminUser:
    """
    Resolve the signed-in admin, resetting the session's inactivity timer.
    """
    user_id = sessions.touch(token)
    user = db.get(AdminUser, user_id)
    if user is None:
        sessions.revoke(token)
        raise InvalidSession()
    return user
