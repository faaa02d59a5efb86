"""
Admin sign-in routes.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from content.types import AdminUser
from portfolio.auth import SessionStore
from portfolio.config import get_settings
from portfolio.db import DbClient
from portfolio.dependencies import (
    get_bearer_token,
    get_db_client,
    get_session_store,
    require_admin,
)
from portfolio.schemas import (
    AdminUserResponse,
    LoginRequest,
    LoginResponse,
    SessionResponse,
    StatusResponse,
)
from portfolio.services import accounts

router = APIRouter(prefix="/auth")


def _user_response(user: AdminUser) -> AdminUserResponse:
    return AdminUserResponse(id=user.id, email=user.email, last_login=user.last_login)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    db: DbClient = Depends(get_db_client),
    sessions: SessionStore = Depends(get_session_store),
):
    token, user = accounts.login(db, sessions, str(payload.email), payload.password)
    return LoginResponse(
        token=token,
        timeout_seconds=get_settings().session_timeout_seconds,
        user=_user_response(user),
    )


@router.post("/logout", response_model=StatusResponse)
def logout(
    token: str = Depends(get_bearer_token),
    sessions: SessionStore = Depends(get_session_store),
):
    accounts.logout(sessions, token)
    return StatusResponse(status="ok")


@router.get("/session", response_model=SessionResponse)
def current_session(user: AdminUser = Depends(require_admin)):
    return SessionResponse(
        user=_user_response(user),
        timeout_seconds=get_settings().session_timeout_seconds,
    )
