"""
Domain errors raised by services and mapped to HTTP responses in app.py.
"""

from __future__ import annotations


class PortfolioError(Exception):
    """Base class for errors the API reports to clients."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(PortfolioError):
    status_code = 404


class ConflictError(PortfolioError):
    status_code = 409


class ValidationFailed(PortfolioError):
    status_code = 422


class DeliveryFailed(PortfolioError):
    """An email could not be handed to the provider."""

    status_code = 502


class AuthError(PortfolioError):
    status_code = 401


class InvalidCredentials(AuthError):
    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail)


class InvalidSession(AuthError):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail)


class SessionExpired(AuthError):
    def __init__(
        self, detail: str = "Your previous session ended due to inactivity"
    ):
        super().__init__(detail)
