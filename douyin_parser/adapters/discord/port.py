"""MessagePort implementation on top of a discord.py channel.

One DiscordMessagePort is created per inbound message. Sends go through a
small serialized queue with a minimum spacing between messages; once
cancel_queued() has run, queued and later sends deliver nothing.
"""

import asyncio
import io
import sys
import time
from typing import Awaitable, Callable, List, Optional, Sequence

import discord

from douyin_parser.ports.outbound import ForwardNode

# Discord per-message caps
MAX_CONTENT = 2000
MAX_EMBEDS = 10
MAX_FILES = 10

_EXTENSIONS = {"video/mp4": "mp4", "video/webm": "webm", "video/quicktime": "mov"}


def _log(msg: str):
    print(msg, file=sys.stderr)


def _video_file(data: bytes, mime_type: str, index: int = 0) -> discord.File:
    ext = _EXTENSIONS.get(mime_type, "mp4")
    name = f"video.{ext}" if index == 0 else f"video_{index}.{ext}"
    return discord.File(io.BytesIO(data), filename=name)


def _image_embed(url: str) -> discord.Embed:
    return discord.Embed().set_image(url=url)


class DiscordMessagePort:
    """Replies into the channel of one inbound Discord message."""

    def __init__(self, channel: discord.abc.Messageable, send_interval: float = 0.5):
        self._channel = channel
        self._send_interval = send_interval
        self._lock = asyncio.Lock()
        self._last_send = 0.0
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _reference(self, message_id: Optional[str]) -> Optional[discord.MessageReference]:
        if not message_id:
            return None
        return discord.MessageReference(
            message_id=int(message_id),
            channel_id=self._channel.id,
            fail_if_not_exists=False,
        )

    async def _enqueue(self, send: Callable[[], Awaitable[discord.Message]]) -> List[str]:
        async with self._lock:
            if self._cancelled:
                return []
            wait = self._send_interval - (time.monotonic() - self._last_send)
            if wait > 0:
                await asyncio.sleep(wait)
            if self._cancelled:
                return []
            try:
                message = await send()
            except discord.HTTPException as e:
                _log(f"[discord] send failed (HTTP {e.status}): {e.text}")
                return []
            finally:
                self._last_send = time.monotonic()
            return [str(message.id)] if message else []

    async def send_quoted(
        self,
        quote_id: str,
        text: str,
        image_url: Optional[str] = None,
    ) -> List[str]:
        kwargs = {
            "content": text[:MAX_CONTENT],
            "reference": self._reference(quote_id),
            "mention_author": False,
        }
        if image_url:
            kwargs["embed"] = _image_embed(image_url)
        return await self._enqueue(lambda: self._channel.send(**kwargs))

    async def send_video(
        self,
        url: Optional[str] = None,
        data: Optional[bytes] = None,
        mime_type: str = "video/mp4",
    ) -> List[str]:
        if data is not None:
            return await self._enqueue(lambda: self._channel.send(file=_video_file(data, mime_type)))
        if url:
            # Discord unfurls a bare video link into a player
            return await self._enqueue(lambda: self._channel.send(content=url))
        raise ValueError("send_video needs a url or data")

    async def send_forward(self, nodes: Sequence[ForwardNode]) -> List[str]:
        """Render a forward bundle as one message, or as few as the caps allow.

        Text nodes become the message content, image nodes embeds and video
        nodes attachments, each kept in bundle order.
        """
        text = "\n".join(n.text for n in nodes if n.text)
        images = [n.image_url for n in nodes if n.image_url]
        videos = [n for n in nodes if n.video_data is not None]

        ids: List[str] = []
        chunks = max(
            1,
            -(-len(images) // MAX_EMBEDS),
            -(-len(videos) // MAX_FILES),
        )
        for i in range(chunks):
            embeds = [_image_embed(u) for u in images[i * MAX_EMBEDS:(i + 1) * MAX_EMBEDS]]
            files = [
                _video_file(n.video_data, n.mime_type, i * MAX_FILES + j)
                for j, n in enumerate(videos[i * MAX_FILES:(i + 1) * MAX_FILES])
            ]
            kwargs = {}
            if i == 0 and text:
                kwargs["content"] = text[:MAX_CONTENT]
            if embeds:
                kwargs["embeds"] = embeds
            if files:
                kwargs["files"] = files
            sent = await self._enqueue(lambda kw=kwargs: self._channel.send(**kw))
            if not sent:
                # A partially delivered bundle counts as not delivered
                return []
            ids.extend(sent)
        return ids

    async def cancel_queued(self) -> None:
        self._cancelled = True
