"""Upload post images and avatars to object storage (Supabase storage REST API)."""

from __future__ import annotations

import logging
import re
import time
from typing import TYPE_CHECKING

import httpx

from app.schemas.auth import SessionData
from app.schemas.upload import UploadResponse
from app.services.errors import UploadError
from app.services.session_manager import require_session

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Raster formats only; no SVG.
ALLOWED_IMAGE_TYPES = frozenset({"image/png", "image/jpeg", "image/gif", "image/webp"})

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def is_storage_configured(settings: Settings) -> bool:
    if not settings.STORAGE_URL or not settings.STORAGE_URL.strip():
        return False
    if settings.STORAGE_SERVICE_KEY is None:
        return False
    return bool(settings.STORAGE_SERVICE_KEY.get_secret_value().strip())


def safe_filename(filename: str) -> str:
    """Strip directories and anything outside [A-Za-z0-9._-] from a client filename."""
    base = filename.replace("\\", "/").rsplit("/", 1)[-1]
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", base).strip("._")
    return cleaned[:200] or "upload"


def build_object_path(user_id: int, filename: str, timestamp_ms: int | None = None) -> str:
    """Object key: {user_id}/{timestamp}_{filename}."""
    ts = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    return f"{user_id}/{ts}_{safe_filename(filename)}"


def public_url(settings: Settings, path: str) -> str:
    base = (settings.STORAGE_URL or "").rstrip("/")
    return f"{base}/storage/v1/object/public/{settings.STORAGE_BUCKET}/{path}"


async def upload_image(
    session: SessionData | None,
    filename: str | None,
    content: bytes | None,
    content_type: str | None,
    settings: Settings,
) -> UploadResponse:
    """
    Store an image under the session user's folder and return its public URL.

    Raises AccessDenied without a session and UploadError when no file was
    supplied, the file is not an acceptable image, or the store rejects it.
    """
    session = require_session(session)
    if not filename or not content:
        raise UploadError("No file supplied")
    media_type = (content_type or "").split(";")[0].strip().lower()
    if media_type not in ALLOWED_IMAGE_TYPES:
        raise UploadError(f"Unsupported file type: {media_type or 'unknown'}")
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise UploadError(
            f"File size must not exceed {settings.MAX_UPLOAD_BYTES // 1024} KB"
        )
    if not is_storage_configured(settings):
        raise UploadError("Image storage is not configured", status_code=503)

    path = build_object_path(session.user.id, filename)
    url = f"{settings.STORAGE_URL}/storage/v1/object/{settings.STORAGE_BUCKET}/{path}"
    key = settings.STORAGE_SERVICE_KEY.get_secret_value()
    headers = {
        "Authorization": f"Bearer {key}",
        "apikey": key,
        "Content-Type": media_type,
        "x-upsert": "false",
    }
    try:
        async with httpx.AsyncClient() as client:
            resp = await client.post(
                url,
                content=content,
                headers=headers,
                timeout=settings.STORAGE_REQUEST_TIMEOUT_SEC,
            )
    except httpx.HTTPError as e:
        logger.warning("Storage upload failed for path=%s: %s", path, e)
        raise UploadError(f"Storage unreachable: {e!s}", status_code=502) from e

    if resp.status_code >= 400:
        try:
            detail = resp.json().get("message") or resp.text[:500]
        except ValueError:
            detail = resp.text[:500] if resp.text else "Unknown error"
        logger.warning("Storage rejected upload path=%s status=%s", path, resp.status_code)
        raise UploadError(
            f"Storage returned {resp.status_code}: {detail}", status_code=502
        )

    logger.info("Uploaded image: user_id=%s path=%s", session.user.id, path)
    return UploadResponse(public_url=public_url(settings, path), path=path)
