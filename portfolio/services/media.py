"""
Media uploads for blog images, project images, the profile photo and the
resume.
"""

from __future__ import annotations

import logging
import os
import uuid

from portfolio.errors import ValidationFailed
from portfolio.storage import StorageClient

logger = logging.getLogger(__name__)

MEDIA_FOLDERS = ("blog", "projects", "profile", "resume")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def media_path(folder: str, filename: str) -> str:
    """Builds ``<folder>/<folder>_<uuid>.<ext>`` from the uploaded filename."""
    if folder not in MEDIA_FOLDERS:
        raise ValidationFailed(f"Unknown media folder: {folder}")
    ext = os.path.splitext(filename or "")[1].lower().lstrip(".")
    name = f"{folder}_{uuid.uuid4().hex}"
    return f"{folder}/{name}.{ext}" if ext else f"{folder}/{name}"


def upload_media(
    storage: StorageClient,
    folder: str,
    filename: str,
    data: bytes,
    content_type: str,
) -> tuple[str, str]:
    """Stores the file and returns ``(path, public_url)``."""
    if not data:
        raise ValidationFailed("Uploaded file is empty")
    if len(data) > MAX_UPLOAD_BYTES:
        raise ValidationFailed("File size must be less than 10MB")
    if folder != "resume" and not (content_type or "").startswith("image/"):
        raise ValidationFailed("Only image uploads are allowed")

    path = media_path(folder, filename)
    storage.upload_bytes(path, data, content_type or "application/octet-stream")
    logger.info("Uploaded %s (%d bytes)", path, len(data))
    return path, storage.public_url(path)


def _check_path(path: str) -> None:
    if not path or path.startswith("/") or ".." in path.split("/"):
        raise ValidationFailed("Invalid storage path")


def sign_url(storage: StorageClient, path: str, expires_in: int = 3600) -> str:
    _check_path(path)
    return storage.presign_get(path, expires_in=expires_in)


def presign_upload(
    storage: StorageClient, folder: str, filename: str, content_type: str
) -> tuple[str, str, str]:
    """
    Reserves a media path for a direct browser upload.

    Returns ``(path, upload_url, public_url)``; the client PUTs the file to
    ``upload_url`` with the same ``Content-Type``.
    """
    if folder != "resume" and not (content_type or "").startswith("image/"):
        raise ValidationFailed("Only image uploads are allowed")
    path = media_path(folder, filename)
    upload_url = storage.presign_put(path, content_type)
    return path, upload_url, storage.public_url(path)


def delete_media(storage: StorageClient, path: str) -> None:
    _check_path(path)
    storage.delete(path)
    logger.info("Deleted %s", path)
