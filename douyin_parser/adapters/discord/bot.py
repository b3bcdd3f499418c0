"""Discord adapter: bridges discord.Client to LinkResolver.

Converts discord.Message to InboundMessage and hands it to the resolver
together with a fresh DiscordMessagePort for the reply.
"""

import sys
from typing import Optional

import discord

from douyin_parser.adapters.discord.port import DiscordMessagePort
from douyin_parser.domain.resolver import LinkResolver, ResolveResult
from douyin_parser.ports.inbound import InboundMessage


def _log(msg: str):
    print(msg, file=sys.stderr)


class ResolverBot(discord.Client):
    """Thin Discord client that resolves share links posted in any channel it can read."""

    def __init__(self, resolver: LinkResolver, send_interval: float = 0.5, **discord_kwargs):
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(intents=intents, **discord_kwargs)
        self._resolver = resolver
        self._send_interval = send_interval

    def _to_inbound(self, message: discord.Message) -> InboundMessage:
        """Convert a Discord message to platform-agnostic InboundMessage."""
        return InboundMessage(
            content=message.content,
            message_id=str(message.id),
            channel_id=str(message.channel.id),
            author_id=str(message.author.id),
            author_name=str(message.author),
            is_self=bool(self.user) and message.author.id == self.user.id,
            guild_id=str(message.guild.id) if message.guild else None,
        )

    def make_port(self, message: discord.Message) -> DiscordMessagePort:
        return DiscordMessagePort(message.channel, send_interval=self._send_interval)

    async def on_ready(self):
        _log(f"[discord] logged in as {self.user}")

    async def on_message(self, message: discord.Message) -> Optional[ResolveResult]:
        """Each event runs in its own task, so messages never share state."""
        inbound = self._to_inbound(message)
        if self._resolver.should_handle(inbound) is None:
            return None
        return await self._resolver.handle(inbound, self.make_port(message))
