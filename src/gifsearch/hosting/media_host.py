"""First-party media host adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import httpx

from ..exceptions import UploadError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MediaHostUpload:
    """Response of a single upload call."""

    media_url: str


class MediaHost(ABC):
    """Platform service that copies a remote file onto its own CDN."""

    @abstractmethod
    async def upload(self, source_url: str, media_type: str) -> MediaHostUpload:
        """Upload ``source_url`` once; implementations must not retry."""


@dataclass(slots=True)
class HttpMediaHost(MediaHost):
    """Call a JSON upload endpoint of the media host."""

    endpoint: str
    token: str | None = None
    timeout_seconds: float = 10.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def upload(self, source_url: str, media_type: str) -> MediaHostUpload:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        payload = {"url": source_url, "type": media_type}

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(self.endpoint, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise UploadError(f"Media host HTTP error: {exc}") from exc

        if response.status_code >= 300:
            self.log.warning(
                "media_host.upload.rejected",
                extra={"status_code": response.status_code, "source_url": source_url},
            )
            raise UploadError(f"Media host upload failed with status {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise UploadError("Media host returned malformed JSON") from exc

        if not isinstance(body, dict):
            raise UploadError("Media host returned an unexpected payload")
        media_url = body.get("mediaUrl") or body.get("media_url")
        if not media_url:
            raise UploadError("Media host response missing mediaUrl")
        return MediaHostUpload(media_url=str(media_url))


__all__ = ["HttpMediaHost", "MediaHost", "MediaHostUpload"]
