"""
FastAPI application entry point for the portfolio backend.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio.config import get_settings
from portfolio.errors import AuthError, PortfolioError
from portfolio.routes import router

logger = logging.getLogger(__name__)


async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code, content={"detail": exc.detail}, headers=headers
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Logs the failure under an error id the client can report back."""
    error_id = uuid.uuid4().hex[:12]
    logger.error(
        "Unhandled exception [%s] in %s %s: %s",
        error_id,
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_id": error_id},
    )


def create_app() -> FastAPI:
    settings = get_settings()
    logging.getLogger("portfolio").setLevel(settings.log_level.upper())

    app = FastAPI(title="Portfolio Backend (FastAPI)", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PortfolioError, portfolio_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get(f"{settings.api_prefix}/health")
    def health():
        return {"status": "ok"}

    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
