"""
Admin authentication: password hashing and inactivity-limited sessions.

A session token is a signed session id. The store remembers when each
session was last used; a session idle for longer than the timeout is
discarded and the next request with its token gets ``SessionExpired``.
"""

from __future__ import annotations

import secrets
import time
from typing import Callable, Dict, Optional, Protocol, Tuple

import redis
from itsdangerous import BadSignature, URLSafeSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from portfolio.errors import InvalidSession, SessionExpired

TOKEN_SALT = "admin-session"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


class SessionStore(Protocol):
    def create(self, user_id: str) -> str:
        ...

    def touch(self, token: str) -> str:
        """Validates a token, resets its idle timer and returns the user id."""
        ...

    def revoke(self, token: str) -> None:
        ...


class _TokenSigner:
    def __init__(self, secret_key: str):
        self._serializer = URLSafeSerializer(secret_key, salt=TOKEN_SALT)

    def dumps(self, session_id: str) -> str:
        return self._serializer.dumps(session_id)

    def loads(self, token: str) -> str:
        try:
            session_id = self._serializer.loads(token)
        except BadSignature:
            raise InvalidSession() from None
        if not isinstance(session_id, str):
            raise InvalidSession()
        return session_id


class InMemorySessionStore:
    """Process-local sessions for development and tests."""

    def __init__(
        self,
        secret_key: str,
        timeout_seconds: int = 600,
        clock: Callable[[], float] = time.time,
    ):
        self._signer = _TokenSigner(secret_key)
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._sessions: Dict[str, Tuple[str, float]] = {}

    def create(self, user_id: str) -> str:
        session_id = secrets.token_urlsafe(24)
        self._sessions[session_id] = (user_id, self._clock())
        return self._signer.dumps(session_id)

    def touch(self, token: str) -> str:
        session_id = self._signer.loads(token)
        entry = self._sessions.get(session_id)
        if entry is None:
            raise InvalidSession()
        user_id, last_seen = entry
        now = self._clock()
        if now - last_seen > self.timeout_seconds:
            del self._sessions[session_id]
            raise SessionExpired()
        self._sessions[session_id] = (user_id, now)
        return user_id

    def revoke(self, token: str) -> None:
        try:
            session_id = self._signer.loads(token)
        except InvalidSession:
            return
        self._sessions.pop(session_id, None)


class RedisSessionStore:
    """Sessions kept in Redis; the key TTL is the idle timeout."""

    def __init__(
        self,
        url: str,
        secret_key: str,
        timeout_seconds: int = 600,
        prefix: str = "portfolio:session:",
        client: Optional[redis.Redis] = None,
    ):
        self._signer = _TokenSigner(secret_key)
        self.timeout_seconds = timeout_seconds
        self.prefix = prefix
        self.client = client or redis.Redis.from_url(url)

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    def create(self, user_id: str) -> str:
        session_id = secrets.token_urlsafe(24)
        self.client.setex(self._key(session_id), self.timeout_seconds, user_id)
        return self._signer.dumps(session_id)

    def touch(self, token: str) -> str:
        key = self._key(self._signer.loads(token))
        user_id = self.client.get(key)
        if user_id is None:
            # A validly signed token whose key is gone has idled out.
            raise SessionExpired()
        self.client.expire(key, self.timeout_seconds)
        return user_id.decode("utf-8") if isinstance(user_id, bytes) else user_id

    def revoke(self, token: str) -> None:
        try:
            session_id = self._signer.loads(token)
        except InvalidSession:
            return
        self.client.delete(self._key(session_id))
