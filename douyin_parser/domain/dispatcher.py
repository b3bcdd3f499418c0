"""Reply sequencing: caption, cover, video or forward bundle.

Pure Python, no framework dependencies. The dispatcher itself is
stateless; everything that belongs to one reply lives in a _Reply that is
created per dispatch() call.
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Sequence

from douyin_parser.domain.caption import build_caption_text
from douyin_parser.domain.errors import ErrorKind, UpstreamError
from douyin_parser.domain.limits import check_limits, check_size
from douyin_parser.domain.models import (
    DispatchOutcome,
    DispatchState,
    MediaKind,
    ResolvedMedia,
    Slide,
    StepResult,
)
from douyin_parser.ports.inbound import InboundMessage
from douyin_parser.ports.outbound import ForwardNode, MediaSourcePort, MessagePort

if TYPE_CHECKING:
    from douyin_parser.config import VideoConfig

NOTICE_SEND_FAILED = "发送失败"
NOTICE_VIDEO_FAILED = "视频发送失败"
NOTICE_PHOTO_FAILED = "图文发送失败"
NOTICE_LIMIT_DENIED = "视频超出发送限制，已取消发送"
NOTICE_NO_STREAM = "未找到可用的视频流，已取消发送"

VIDEO_MIME = "video/mp4"


def _log(msg: str):
    print(msg, file=sys.stderr)


async def send_with_timeout(
    factory: Callable[[], Awaitable[List[str]]], timeout: float
) -> List[str]:
    """Run one transport send; a timeout counts as nothing delivered."""
    try:
        ids = await asyncio.wait_for(factory(), timeout=timeout)
    except asyncio.TimeoutError:
        _log(f"[dispatch] send timed out after {timeout}s")
        return []
    return [str(i) for i in ids or []]


class _Reply:
    """Per-dispatch bookkeeping: outcome, states, last delivered id."""

    def __init__(self, port: MessagePort, message: InboundMessage, timeout: float):
        self.port = port
        self.message = message
        self.timeout = timeout
        self.outcome = DispatchOutcome()
        self.last_sent_id = message.message_id

    def enter(self, state: DispatchState):
        self.outcome.states.append(state)

    def skip(self, step: str, reason: str, kind: ErrorKind):
        self.outcome.steps.append(StepResult(step=step, ok=False, reason=reason, error_kind=kind))

    async def _call(self, factory: Callable[[], Awaitable[List[str]]]) -> List[str]:
        return await send_with_timeout(factory, self.timeout)

    async def send(self, step: str, factory: Callable[[], Awaitable[List[str]]]) -> List[str]:
        ids = await self._call(factory)
        if ids:
            self.outcome.steps.append(StepResult(step=step, ok=True, message_ids=ids))
            self.last_sent_id = ids[-1]
        else:
            self.outcome.steps.append(
                StepResult(
                    step=step,
                    ok=False,
                    reason="transport returned no message ids",
                    error_kind=ErrorKind.SEND_FAILURE,
                )
            )
        return ids

    async def notice(self, text: str, quote_id: Optional[str] = None):
        """User-visible notice; not recorded as a reply step."""
        quote = quote_id or self.last_sent_id
        ids = await self._call(lambda: self.port.send_quoted(quote, text))
        if not ids:
            _log(f"[dispatch] notice {text!r} could not be delivered")


class Dispatcher:
    """Sends one ResolvedMedia as a reply to one inbound message."""

    def __init__(
        self,
        source: MediaSourcePort,
        video: "VideoConfig",
        send_timeout: float = 60,
    ):
        self._source = source
        self._video = video
        self._send_timeout = send_timeout

    async def dispatch(
        self,
        media: ResolvedMedia,
        message: InboundMessage,
        port: MessagePort,
        link: str,
    ) -> DispatchOutcome:
        reply = _Reply(port, message, self._send_timeout)
        if media.kind is MediaKind.PHOTO_SET:
            if len(media.slides) > 1:
                await self._send_bundle(media, reply)
            else:
                await self._send_single_slide(media, reply)
        else:
            await self._send_video(media, reply, link)
        reply.enter(DispatchState.DONE)
        return reply.outcome

    # -- VIDEO --

    async def _send_video(self, media: ResolvedMedia, reply: _Reply, link: str):
        duration = media.duration_ms if self._video.is_send else None
        text = build_caption_text(media.caption, duration)
        caption_ids = await reply.send(
            "caption",
            lambda: reply.port.send_quoted(reply.message.message_id, text, media.cover_url),
        )
        if not caption_ids:
            await reply.notice(NOTICE_SEND_FAILED)
            return
        reply.enter(DispatchState.CAPTION_SENT)
        if not self._video.is_send:
            return

        reply.enter(DispatchState.MEDIA_PENDING)
        if media.video is None:
            await self._deny(reply, "no playable stream", ErrorKind.NO_STREAM_AVAILABLE, link)
            return
        decision = check_limits(media, self._video.limits)
        if not decision.allowed:
            await self._deny(reply, decision.reason, ErrorKind.LIMIT_DENIED, link)
            return

        if self._video.use_download_endpoint:
            url = self._source.download_url(link)
        else:
            url = media.video.play_url

        if self._video.is_cache:
            try:
                data = await self._source.download_bytes(url)
            except UpstreamError as e:
                _log(f"[dispatch] video download failed: {e}")
                reply.skip("video_download", str(e), e.kind)
                reply.enter(DispatchState.MEDIA_FAILED)
                await reply.notice(NOTICE_VIDEO_FAILED, caption_ids[-1])
                return
            decision = check_size(len(data), self._video.limits)
            if not decision.allowed:
                await self._deny(reply, decision.reason, ErrorKind.LIMIT_DENIED, link)
                return
            video_ids = await reply.send(
                "video", lambda: reply.port.send_video(data=data, mime_type=VIDEO_MIME)
            )
        else:
            video_ids = await reply.send("video", lambda: reply.port.send_video(url=url))

        if video_ids:
            reply.enter(DispatchState.MEDIA_SENT)
        else:
            _log(f"[dispatch] video send failed for {link}")
            reply.enter(DispatchState.MEDIA_FAILED)
            await reply.notice(NOTICE_VIDEO_FAILED, caption_ids[-1])

    async def _deny(self, reply: _Reply, reason: str, kind: ErrorKind, link: str):
        _log(f"[dispatch] video withheld ({kind.value}): {reason} - URL: {link}")
        reply.skip("video", reason, kind)
        reply.enter(DispatchState.MEDIA_DENIED)
        if self._video.notify_denial:
            text = NOTICE_NO_STREAM if kind is ErrorKind.NO_STREAM_AVAILABLE else NOTICE_LIMIT_DENIED
            await reply.notice(text)

    # -- PHOTO_SET --

    async def _download_slide_videos(
        self, slides: Sequence[Slide], reply: _Reply
    ) -> List[Optional[bytes]]:
        """Download every embedded slide video; None where there is none or it failed."""
        indexed = [(i, s.video_url) for i, s in enumerate(slides) if s.video_url]
        results = await asyncio.gather(
            *(self._source.download_bytes(url) for _, url in indexed),
            return_exceptions=True,
        )
        videos: List[Optional[bytes]] = [None] * len(slides)
        for (index, url), result in zip(indexed, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                _log(
                    f"[dispatch] slide {index + 1}/{len(slides)} video download failed, "
                    f"falling back to image: {url}: {result}"
                )
                reply.skip(f"slide_{index + 1}", str(result), ErrorKind.SLIDE_DOWNLOAD_FAILURE)
                continue
            videos[index] = result
        return videos

    async def _send_bundle(self, media: ResolvedMedia, reply: _Reply):
        reply.enter(DispatchState.MEDIA_PENDING)
        videos = await self._download_slide_videos(media.slides, reply)
        nodes = [ForwardNode(text=build_caption_text(media.caption))]
        for slide, data in zip(media.slides, videos):
            if data is not None:
                nodes.append(ForwardNode(video_data=data, mime_type=VIDEO_MIME))
            else:
                nodes.append(ForwardNode(image_url=slide.image_url))

        ids = await reply.send("bundle", lambda: reply.port.send_forward(nodes))
        if ids:
            reply.enter(DispatchState.CAPTION_SENT)
            reply.enter(DispatchState.MEDIA_SENT)
        else:
            reply.enter(DispatchState.MEDIA_FAILED)
            await reply.notice(NOTICE_PHOTO_FAILED)

    async def _send_single_slide(self, media: ResolvedMedia, reply: _Reply):
        slide = media.slides[0]
        text = build_caption_text(media.caption)
        caption_ids = await reply.send(
            "caption",
            lambda: reply.port.send_quoted(reply.message.message_id, text, slide.image_url),
        )
        if not caption_ids:
            await reply.notice(NOTICE_PHOTO_FAILED)
            return
        reply.enter(DispatchState.CAPTION_SENT)
        if not slide.video_url:
            return

        reply.enter(DispatchState.MEDIA_PENDING)
        try:
            data = await self._source.download_bytes(slide.video_url)
        except UpstreamError as e:
            _log(f"[dispatch] slide 1/1 video download failed: {e}")
            reply.skip("slide_1", str(e), ErrorKind.SLIDE_DOWNLOAD_FAILURE)
            reply.enter(DispatchState.MEDIA_FAILED)
            await reply.notice(NOTICE_VIDEO_FAILED, caption_ids[-1])
            return
        video_ids = await reply.send(
            "video", lambda: reply.port.send_video(data=data, mime_type=VIDEO_MIME)
        )
        if video_ids:
            reply.enter(DispatchState.MEDIA_SENT)
        else:
            reply.enter(DispatchState.MEDIA_FAILED)
            await reply.notice(NOTICE_VIDEO_FAILED, caption_ids[-1])
