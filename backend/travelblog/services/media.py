"""Object and image storage used for uploaded media.

Only the reference returned by storage (id and URL) is ever persisted; raw
bytes never reach the database.
"""
from __future__ import annotations

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx

from travelblog.core.config import get_settings
from travelblog.core.errors import InvalidInput, ServerError

logger = logging.getLogger(__name__)

PHOTO_CONTENT_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif", "image/heic"}
VIDEO_CONTENT_TYPES = {"video/mp4", "video/webm", "video/quicktime"}
_VIDEO_SUFFIXES = {"video/mp4": ".mp4", "video/webm": ".webm", "video/quicktime": ".mov"}


class MediaStorageError(RuntimeError):
    """Raised when remote or local storage rejects an upload."""


@dataclass(slots=True)
class StoredObject:
    id: str
    url: str


class MediaStorage(Protocol):
    async def upload(
        self, data: bytes, filename: str, content_type: str, metadata: dict[str, str] | None = None
    ) -> StoredObject:
        ...

    async def delete(self, object_id: str) -> bool:
        ...


def check_declared_size(size: int | None, max_size_mb: int) -> None:
    """Reject an upload by its declared size before its body is read."""
    if size is not None and size > max_size_mb * 1024 * 1024:
        raise InvalidInput(f"File size exceeds {max_size_mb}MB limit")


def validate_upload(data: bytes, content_type: str | None, allowed: set[str], max_size_mb: int) -> None:
    if not data:
        raise InvalidInput("Uploaded file is empty")
    if len(data) > max_size_mb * 1024 * 1024:
        raise InvalidInput(f"File size exceeds {max_size_mb}MB limit")
    if content_type not in allowed:
        raise InvalidInput(f"Invalid file type {content_type!r}. Supported: {', '.join(sorted(allowed))}")


class CloudflareImagesClient:
    """Thin client for the Cloudflare Images v1 API."""

    def __init__(
        self,
        account_id: str,
        api_token: str,
        account_hash: str | None = None,
        api_base: str = "https://api.cloudflare.com/client/v4",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = f"{api_base}/accounts/{account_id}/images/v1"
        self._headers = {"Authorization": f"Bearer {api_token}"}
        self._account_hash = account_hash
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=30, headers=self._headers, transport=self._transport)

    def delivery_url(self, image_id: str, variant: str = "public") -> str:
        return f"https://imagedelivery.net/{self._account_hash}/{image_id}/{variant}"

    def _public_url(self, result: dict) -> str:
        variants = result.get("variants") or []
        for url in variants:
            if url.rsplit("/", 1)[-1] == "public":
                return url
        if variants:
            return variants[0]
        if self._account_hash:
            return self.delivery_url(result["id"])
        raise MediaStorageError("Cloudflare Images returned no delivery URL")

    async def upload(
        self, data: bytes, filename: str, content_type: str, metadata: dict[str, str] | None = None
    ) -> StoredObject:
        form = {"metadata": json.dumps(metadata)} if metadata else None
        async with self._client() as client:
            response = await client.post(self._base_url, files={"file": (filename, data, content_type)}, data=form)
        if response.status_code >= 400:
            logger.error("Cloudflare Images upload failed (%s): %s", response.status_code, response.text)
            raise MediaStorageError(f"Cloudflare Images upload failed ({response.status_code})")
        payload = response.json()
        if not payload.get("success"):
            errors = payload.get("errors") or [{}]
            raise MediaStorageError(f"Cloudflare Images upload failed: {errors[0].get('message', 'Unknown error')}")
        result = payload["result"]
        return StoredObject(id=result["id"], url=self._public_url(result))

    async def delete(self, object_id: str) -> bool:
        async with self._client() as client:
            response = await client.delete(f"{self._base_url}/{object_id}")
        if response.status_code >= 400:
            logger.warning("Failed to delete image %s: %s", object_id, response.text)
            return False
        return bool(response.json().get("success"))


class LocalObjectStore:
    """Store objects as files under a directory served at ``base_url``."""

    def __init__(self, root: str | Path, base_url: str = "/media") -> None:
        self._root = Path(root)
        self._base_url = base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if self._root.resolve() not in path.parents:
            raise InvalidInput("Invalid object key")
        return path

    async def upload(
        self, data: bytes, filename: str, content_type: str, metadata: dict[str, str] | None = None
    ) -> StoredObject:
        suffix = _VIDEO_SUFFIXES.get(content_type) or Path(filename).suffix
        key = f"videos/{uuid.uuid4()}{suffix}"
        path = self._path(key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as exc:
            raise MediaStorageError(f"Unable to store {key}: {exc}") from exc
        return StoredObject(id=key, url=f"{self._base_url}/{key}")

    async def delete(self, object_id: str) -> bool:
        path = self._path(object_id)
        if not path.exists():
            return False
        await asyncio.to_thread(path.unlink)
        return True


async def check_remote_url(url: str, transport: httpx.AsyncBaseTransport | None = None) -> tuple[bool, int | None, str | None]:
    """HEAD an external media URL; network failures count as invalid."""
    if not url.startswith(("http://", "https://")):
        return False, None, None
    try:
        async with httpx.AsyncClient(timeout=10, follow_redirects=True, transport=transport) as client:
            response = await client.head(url)
    except httpx.HTTPError as exc:
        logger.info("URL validation failed for %s: %s", url, exc)
        return False, None, None
    return response.status_code < 400, response.status_code, response.headers.get("content-type")


def get_photo_storage() -> MediaStorage:
    settings = get_settings()
    if not settings.images_account_id or not settings.images_api_token:
        raise ServerError("Cloudflare Images is not configured")
    return CloudflareImagesClient(
        account_id=settings.images_account_id,
        api_token=settings.images_api_token,
        account_hash=settings.images_account_hash,
        api_base=settings.images_api_base,
    )


def get_video_storage() -> MediaStorage:
    settings = get_settings()
    return LocalObjectStore(settings.media_root, settings.media_base_url)
