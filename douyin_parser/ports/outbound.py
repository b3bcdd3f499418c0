"""Outbound ports: interfaces for external system adapters."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable


@dataclass(frozen=True)
class ForwardNode:
    """One sub-message of a forward bundle. Exactly one field is set."""

    text: Optional[str] = None
    image_url: Optional[str] = None
    video_data: Optional[bytes] = None
    mime_type: str = "video/mp4"


@runtime_checkable
class MessagePort(Protocol):
    """Interface for replying into the chat an inbound message came from.

    Every send returns the ids of the delivered messages; an empty list
    means nothing was delivered.
    """

    async def send_quoted(
        self,
        quote_id: str,
        text: str,
        image_url: Optional[str] = None,
    ) -> List[str]: ...

    async def send_video(
        self,
        url: Optional[str] = None,
        data: Optional[bytes] = None,
        mime_type: str = "video/mp4",
    ) -> List[str]: ...

    async def send_forward(self, nodes: Sequence[ForwardNode]) -> List[str]: ...

    async def cancel_queued(self) -> None: ...


@runtime_checkable
class MediaSourcePort(Protocol):
    """Interface for the hybrid video data API."""

    @property
    def is_configured(self) -> bool: ...

    def download_url(self, link: str) -> str: ...

    async def fetch_media(self, link: str) -> Dict[str, Any]: ...

    async def download_bytes(self, url: str) -> bytes: ...
