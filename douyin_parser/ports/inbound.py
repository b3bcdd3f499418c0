"""Inbound port: platform-agnostic message representation."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class InboundMessage:
    """Transport-agnostic chat message, as the resolver sees it."""

    content: str
    message_id: str
    channel_id: str
    author_id: str
    author_name: str
    is_self: bool = False
    guild_id: Optional[str] = None
