"""Hybrid video data API client (aiohttp-based)."""

import asyncio
import sys
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp

from douyin_parser.config import CONFIG
from douyin_parser.domain.errors import ErrorKind, UpstreamError

VIDEO_DATA_PATH = "/api/hybrid/video_data"
DOWNLOAD_PATH = "/api/download"

# Douyin photo-set media types, for the success log only
_PHOTO_MEDIA_TYPES = (2, 42)


def _log(msg: str):
    print(msg, file=sys.stderr)


def _status_kind(status: int) -> ErrorKind:
    if status >= 500 or status == 429:
        return ErrorKind.UPSTREAM_UNAVAILABLE
    return ErrorKind.UPSTREAM_REJECTED


class HybridApiClient:
    """Async client for a self-hosted Douyin/TikTok hybrid parsing API.

    Two calls are used: the video_data lookup for metadata and the
    download endpoint for watermark-free video bytes.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self._base_url = (base_url if base_url is not None else CONFIG["url"]).rstrip("/")
        self._timeout = aiohttp.ClientTimeout(
            total=timeout if timeout is not None else CONFIG["http_timeout_seconds"]
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._base_url)

    @property
    def base_url(self) -> str:
        return self._base_url

    def download_url(self, link: str) -> str:
        return (
            f"{self._base_url}{DOWNLOAD_PATH}"
            f"?url={quote(link, safe='')}&prefix=true&with_watermark=false"
        )

    async def fetch_media(self, link: str) -> Dict[str, Any]:
        """Look up one share link and return the payload's `data` object.

        Raises:
            UpstreamError: non-2xx status, timeout, connection failure, or a
                body without a `data` object.
        """
        if not self.is_configured:
            raise UpstreamError(ErrorKind.UPSTREAM_UNAVAILABLE, link, detail="PARSER_API_URL not configured")

        url = f"{self._base_url}{VIDEO_DATA_PATH}"
        params = {"url": link, "minimal": "false"}
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(url, params=params) as resp:
                    if not 200 <= resp.status < 300:
                        body = await resp.text()
                        _log(f"[hybrid] lookup failed - HTTP {resp.status}, URL: {link}")
                        raise UpstreamError(_status_kind(resp.status), link, resp.status, body[:200])
                    try:
                        payload = await resp.json(content_type=None)
                    except ValueError as e:
                        raise UpstreamError(
                            ErrorKind.UPSTREAM_REJECTED, link, resp.status, f"invalid JSON: {e}"
                        )
        except asyncio.TimeoutError:
            raise UpstreamError(ErrorKind.UPSTREAM_UNAVAILABLE, link, detail="timed out")
        except aiohttp.ClientError as e:
            raise UpstreamError(ErrorKind.UPSTREAM_UNAVAILABLE, link, detail=str(e))

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise UpstreamError(ErrorKind.UPSTREAM_REJECTED, link, detail="response has no data object")

        media_label = "photo_set" if data.get("media_type") in _PHOTO_MEDIA_TYPES else "video"
        _log(f"[hybrid] lookup ok - URL: {link}, media: {media_label}")
        return data

    async def download_bytes(self, url: str) -> bytes:
        """Fetch raw media bytes; Referer is set to the URL itself for CDN checks."""
        headers = {"Referer": url}
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(url, headers=headers) as resp:
                    if not 200 <= resp.status < 300:
                        raise UpstreamError(_status_kind(resp.status), url, resp.status, "download failed")
                    return await resp.read()
        except asyncio.TimeoutError:
            raise UpstreamError(ErrorKind.UPSTREAM_UNAVAILABLE, url, detail="download timed out")
        except aiohttp.ClientError as e:
            raise UpstreamError(ErrorKind.UPSTREAM_UNAVAILABLE, url, detail=str(e))
