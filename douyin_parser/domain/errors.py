"""Error taxonomy for link resolution."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    NO_LINK_FOUND = "no_link_found"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UPSTREAM_REJECTED = "upstream_rejected"
    NORMALIZATION_FAILURE = "normalization_failure"
    NO_STREAM_AVAILABLE = "no_stream_available"
    LIMIT_DENIED = "limit_denied"
    SLIDE_DOWNLOAD_FAILURE = "slide_download_failure"
    SEND_FAILURE = "send_failure"


class ResolverError(Exception):
    """Base class; `kind` places the error in the taxonomy."""

    kind: ErrorKind = ErrorKind.NORMALIZATION_FAILURE


class UpstreamError(ResolverError):
    """Raised when the hybrid API or a media CDN cannot serve a request."""

    def __init__(
        self,
        kind: ErrorKind,
        url: str,
        status: Optional[int] = None,
        detail: str = "",
    ):
        self.kind = kind
        self.url = url
        self.status = status
        self.detail = detail
        status_part = f"HTTP {status}" if status is not None else "no response"
        message = f"{kind.value} ({status_part}) for {url}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class NormalizationError(ResolverError):
    """Raised when an upstream payload lacks the fields a record needs."""

    kind = ErrorKind.NORMALIZATION_FAILURE


class NoStreamAvailable(ResolverError):
    """Raised when a video exposes no playable variant at all."""

    kind = ErrorKind.NO_STREAM_AVAILABLE
