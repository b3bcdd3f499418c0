"""Douyin Parser: Douyin/TikTok share-link resolver for chat bots."""

from douyin_parser.config import CONFIG, AppConfig, VideoConfig, __version__
from douyin_parser.domain import (
    ErrorKind,
    LinkResolver,
    MediaKind,
    Platform,
    ResolvedMedia,
    ResolveResult,
    normalize,
)
from douyin_parser.ports import ForwardNode, InboundMessage, MediaSourcePort, MessagePort
from douyin_parser.adapters.upstream.hybrid_client import HybridApiClient

__all__ = [
    "CONFIG",
    "AppConfig",
    "VideoConfig",
    "__version__",
    "ErrorKind",
    "LinkResolver",
    "MediaKind",
    "Platform",
    "ResolvedMedia",
    "ResolveResult",
    "normalize",
    "ForwardNode",
    "InboundMessage",
    "MediaSourcePort",
    "MessagePort",
    "HybridApiClient",
]
