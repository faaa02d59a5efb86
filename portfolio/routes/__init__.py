"""
HTTP routes for the portfolio API.
"""

from fastapi import APIRouter

from portfolio.routes import admin, analytics, auth, media, messages, public

router = APIRouter()
router.include_router(public.router)
router.include_router(auth.router)
router.include_router(messages.router)
router.include_router(analytics.router)
router.include_router(media.router)
router.include_router(admin.router)
