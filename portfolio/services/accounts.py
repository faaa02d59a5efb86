"""
Admin accounts: creation, sign-in and sign-out.
"""

from __future__ import annotations

import logging
import time

from content.types import AdminUser
from portfolio.auth import SessionStore, hash_password, verify_password
from portfolio.db import DbClient
from portfolio.errors import ConflictError, InvalidCredentials, ValidationFailed

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def create_admin(db: DbClient, email: str, password: str) -> AdminUser:
    email = _normalize_email(email)
    if not email:
        raise ValidationFailed("Email is required")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if db.find_one(AdminUser, email=email):
        raise ConflictError(f"Admin {email} already exists")
    user = db.add(AdminUser(email=email, password_hash=hash_password(password)))
    logger.info("Created admin user %s", email)
    return user


def login(
    db: DbClient, sessions: SessionStore, email: str, password: str
) -> tuple[str, AdminUser]:
    """Checks the credentials and opens a session. Returns ``(token, user)``."""
    user = db.find_one(AdminUser, email=_normalize_email(email))
    if user is None or not verify_password(user.password_hash, password):
        logger.warning("Failed admin login for %s", email)
        raise InvalidCredentials()
    user = db.update(AdminUser, user.id, {"last_login": time.time()})
    return sessions.create(user.id), user


def logout(sessions: SessionStore, token: str) -> None:
    sessions.revoke(token)
