"""Tests for the Discord adapter: send port and message conversion."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import discord
import pytest

from douyin_parser.adapters.discord.bot import ResolverBot
from douyin_parser.adapters.discord.port import MAX_EMBEDS, DiscordMessagePort
from douyin_parser.ports.inbound import InboundMessage
from douyin_parser.ports.outbound import ForwardNode, MessagePort


def _channel(ids=(555,)):
    channel = MagicMock()
    channel.id = 10
    channel.send = AsyncMock(side_effect=[SimpleNamespace(id=i) for i in ids])
    return channel


def _port(channel):
    return DiscordMessagePort(channel, send_interval=0)


class TestSendQuoted:
    @pytest.mark.asyncio
    async def test_reference_and_embed(self):
        channel = _channel()
        ids = await _port(channel).send_quoted("42", "caption", "https://cdn/cover.jpg")
        assert ids == ["555"]
        kwargs = channel.send.call_args.kwargs
        assert kwargs["content"] == "caption"
        assert kwargs["reference"].message_id == 42
        assert kwargs["reference"].channel_id == 10
        assert kwargs["mention_author"] is False
        assert kwargs["embed"].image.url == "https://cdn/cover.jpg"

    @pytest.mark.asyncio
    async def test_text_only(self):
        channel = _channel()
        await _port(channel).send_quoted("42", "解析失败")
        assert "embed" not in channel.send.call_args.kwargs

    @pytest.mark.asyncio
    async def test_long_text_truncated(self):
        channel = _channel()
        await _port(channel).send_quoted("42", "x" * 2500)
        assert len(channel.send.call_args.kwargs["content"]) == 2000


class TestSendVideo:
    @pytest.mark.asyncio
    async def test_bytes_become_attachment(self):
        channel = _channel()
        ids = await _port(channel).send_video(data=b"mp4data", mime_type="video/mp4")
        assert ids == ["555"]
        file = channel.send.call_args.kwargs["file"]
        assert isinstance(file, discord.File)
        assert file.filename == "video.mp4"

    @pytest.mark.asyncio
    async def test_url_sent_as_link(self):
        channel = _channel()
        await _port(channel).send_video(url="http://api/api/download?url=x")
        assert channel.send.call_args.kwargs == {"content": "http://api/api/download?url=x"}

    @pytest.mark.asyncio
    async def test_requires_source(self):
        with pytest.raises(ValueError):
            await _port(_channel()).send_video()


class TestSendForward:
    @pytest.mark.asyncio
    async def test_single_message_bundle(self):
        channel = _channel()
        nodes = [
            ForwardNode(text="caption"),
            ForwardNode(image_url="https://cdn/0.jpg"),
            ForwardNode(video_data=b"v1"),
            ForwardNode(image_url="https://cdn/2.jpg"),
        ]
        ids = await _port(channel).send_forward(nodes)
        assert ids == ["555"]
        assert channel.send.await_count == 1
        kwargs = channel.send.call_args.kwargs
        assert kwargs["content"] == "caption"
        assert [e.image.url for e in kwargs["embeds"]] == ["https://cdn/0.jpg", "https://cdn/2.jpg"]
        assert len(kwargs["files"]) == 1

    @pytest.mark.asyncio
    async def test_chunks_beyond_embed_cap(self):
        channel = _channel(ids=(1, 2))
        nodes = [ForwardNode(text="caption")] + [
            ForwardNode(image_url=f"https://cdn/{i}.jpg") for i in range(MAX_EMBEDS + 2)
        ]
        ids = await _port(channel).send_forward(nodes)
        assert ids == ["1", "2"]
        first, second = channel.send.call_args_list
        assert first.kwargs["content"] == "caption"
        assert len(first.kwargs["embeds"]) == MAX_EMBEDS
        assert "content" not in second.kwargs
        assert [e.image.url for e in second.kwargs["embeds"]] == [
            f"https://cdn/{MAX_EMBEDS}.jpg",
            f"https://cdn/{MAX_EMBEDS + 1}.jpg",
        ]


class TestQueue:
    @pytest.mark.asyncio
    async def test_http_error_delivers_nothing(self):
        channel = _channel()
        response = MagicMock(status=413, reason="Payload Too Large")
        channel.send = AsyncMock(side_effect=discord.HTTPException(response, "too large"))
        ids = await _port(channel).send_video(data=b"big")
        assert ids == []

    @pytest.mark.asyncio
    async def test_cancel_drops_later_sends(self):
        channel = _channel()
        port = _port(channel)
        await port.cancel_queued()
        assert port.cancelled is True
        assert await port.send_quoted("1", "late") == []
        channel.send.assert_not_awaited()

    def test_satisfies_message_port(self):
        assert isinstance(_port(_channel()), MessagePort)


def _discord_message(content="https://v.douyin.com/abc/", author_id=20, guild_id=999):
    message = MagicMock()
    message.id = 1
    message.content = content
    message.channel.id = 10
    message.author.id = author_id
    message.author.__str__.return_value = "user#0001"
    message.guild = SimpleNamespace(id=guild_id) if guild_id else None
    return message


class TestResolverBot:
    def _bot(self, resolver=None):
        resolver = resolver or MagicMock()
        return ResolverBot(resolver, send_interval=0), resolver

    def test_to_inbound(self):
        bot, _ = self._bot()
        inbound = bot._to_inbound(_discord_message())
        assert inbound == InboundMessage(
            content="https://v.douyin.com/abc/",
            message_id="1",
            channel_id="10",
            author_id="20",
            author_name="user#0001",
            is_self=False,
            guild_id="999",
        )

    def test_direct_message_has_no_guild(self):
        bot, _ = self._bot()
        assert bot._to_inbound(_discord_message(guild_id=None)).guild_id is None

    def test_own_message_flagged(self):
        bot, _ = self._bot()
        with patch.object(ResolverBot, "user", new_callable=PropertyMock) as user:
            user.return_value = SimpleNamespace(id=20)
            assert bot._to_inbound(_discord_message(author_id=20)).is_self is True

    @pytest.mark.asyncio
    async def test_on_message_delegates_with_fresh_port(self):
        resolver = MagicMock()
        resolver.should_handle.return_value = "douyin"
        resolver.handle = AsyncMock(return_value="result")
        bot, _ = self._bot(resolver)
        assert await bot.on_message(_discord_message()) == "result"
        inbound, port = resolver.handle.call_args.args
        assert inbound.message_id == "1"
        assert isinstance(port, DiscordMessagePort)

    @pytest.mark.asyncio
    async def test_on_message_skips_unrelated(self):
        resolver = MagicMock()
        resolver.should_handle.return_value = None
        resolver.handle = AsyncMock()
        bot, _ = self._bot(resolver)
        assert await bot.on_message(_discord_message("hello")) is None
        resolver.handle.assert_not_awaited()
