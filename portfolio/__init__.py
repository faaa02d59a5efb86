"""
Backend package for the portfolio site.

This package provides a FastAPI application serving the public portfolio
content and the admin dashboard API, with storage, database, queue and
mailer abstractions so it runs fully in-memory for development and tests.
"""
