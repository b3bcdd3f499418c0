"""LinkResolver: per-message orchestration, no framework dependencies.

Wires extraction, upstream lookup, normalization and dispatch for one
inbound message and guarantees the transport's queued sends are released
exactly once per handled message.
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from douyin_parser.domain.caption import mask_numbers
from douyin_parser.domain.dispatcher import Dispatcher, send_with_timeout
from douyin_parser.domain.errors import ErrorKind, NormalizationError, UpstreamError
from douyin_parser.domain.models import (
    DispatchOutcome,
    Platform,
    ResolvedMedia,
)
from douyin_parser.domain.normalizer import normalize
from douyin_parser.domain.url_extractor import detect_platform, extract_url
from douyin_parser.ports.inbound import InboundMessage
from douyin_parser.ports.outbound import MediaSourcePort, MessagePort

if TYPE_CHECKING:
    from douyin_parser.config import AppConfig

NOTICE_NO_LINK = "未找到有效链接"
NOTICE_PARSE_FAILED = "解析失败"


def _log(msg: str):
    print(msg, file=sys.stderr)


@dataclass
class ResolveResult:
    """What happened to one handled message."""

    platform: Platform
    link: Optional[str] = None
    media: Optional[ResolvedMedia] = None
    outcome: Optional[DispatchOutcome] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None


@asynccontextmanager
async def queue_scope(port: MessagePort):
    """Release the port's queued sends on exit, whatever happened inside."""
    try:
        yield port
    finally:
        await port.cancel_queued()


class LinkResolver:
    """Turns Douyin/TikTok share links in chat messages into media replies.

    Holds only configuration and a stateless upstream client, so one
    instance serves any number of concurrent messages.
    """

    def __init__(self, source: MediaSourcePort, config: "AppConfig"):
        self._source = source
        self._config = config
        self._dispatcher = Dispatcher(
            source,
            config.video,
            send_timeout=config.send_timeout_seconds,
        )

    @staticmethod
    def should_handle(message: InboundMessage) -> Optional[Platform]:
        """Platform to resolve for, or None when the message is not ours."""
        if message.is_self:
            return None
        return detect_platform(message.content)

    async def preview(self, link: str, platform: Platform) -> ResolvedMedia:
        """Fetch and normalize a link without sending anything."""
        raw = await self._source.fetch_media(link)
        return normalize(
            raw,
            platform,
            prefer_thumbs=self._config.is_thumbs,
            profile=self._config.quality_profile,
        )

    async def handle(self, message: InboundMessage, port: MessagePort) -> Optional[ResolveResult]:
        platform = self.should_handle(message)
        if platform is None:
            return None

        who = f"user={message.author_name} guild={mask_numbers(message.guild_id)}"
        result = ResolveResult(platform=platform)
        async with queue_scope(port):
            try:
                await self._resolve(message, port, result, who)
            except Exception as e:
                result.error = str(e)
                _log(f"[resolver] error - {who} url={result.link}: {e!r}")
        return result

    async def _notice(self, port: MessagePort, message: InboundMessage, text: str):
        ids = await send_with_timeout(
            lambda: port.send_quoted(message.message_id, text),
            self._config.send_timeout_seconds,
        )
        if not ids:
            _log(f"[resolver] notice {text!r} could not be delivered")

    async def _resolve(
        self,
        message: InboundMessage,
        port: MessagePort,
        result: ResolveResult,
        who: str,
    ):
        link = extract_url(message.content)
        if not link:
            _log(f"[resolver] no link found - {who} content={message.content!r}")
            result.error_kind = ErrorKind.NO_LINK_FOUND
            await self._notice(port, message, NOTICE_NO_LINK)
            return
        result.link = link
        _log(f"[resolver] resolving - {who} url={link}")

        try:
            media = await self.preview(link, result.platform)
        except (UpstreamError, NormalizationError) as e:
            status = getattr(e, "status", None)
            _log(f"[resolver] parse failed ({e.kind.value}, status={status}) - {who} url={link}: {e}")
            result.error_kind = e.kind
            result.error = str(e)
            await self._notice(port, message, NOTICE_PARSE_FAILED)
            return
        result.media = media

        outcome = await self._dispatcher.dispatch(media, message, port, link)
        result.outcome = outcome
        if any(s.error_kind is ErrorKind.SEND_FAILURE for s in outcome.failures):
            result.error_kind = ErrorKind.SEND_FAILURE
            _log(f"[resolver] {media.kind.value} send failed - {who} url={link}")
        _log(f"[resolver] done ({outcome.status.value}) - {who} url={link}")
