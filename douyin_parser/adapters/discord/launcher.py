"""Launcher for the Discord link-resolver bot."""

import asyncio
import sys
from typing import Optional

from douyin_parser.config import AppConfig
from douyin_parser.adapters.discord.bot import ResolverBot
from douyin_parser.adapters.upstream.hybrid_client import HybridApiClient
from douyin_parser.domain.resolver import LinkResolver


def _log(msg: str):
    print(msg, file=sys.stderr)


def build_bot(config: AppConfig) -> ResolverBot:
    client = HybridApiClient(base_url=config.url, timeout=config.http_timeout_seconds)
    resolver = LinkResolver(client, config)
    return ResolverBot(resolver, send_interval=config.send_interval_seconds)


async def launch_bot(config: Optional[AppConfig] = None) -> bool:
    """Start the bot; returns False without connecting when config is unusable."""
    config = config or AppConfig.from_env()
    problems = config.validate()
    if not config.discord_token:
        problems.append("DISCORD_BOT_TOKEN is required")
    if problems:
        for p in problems:
            _log(f"Config error: {p}")
        return False

    bot = build_bot(config)
    _log(
        f"Launching resolver bot (api={config.url}, send_video={config.video.is_send}, "
        f"cache={config.video.is_cache})"
    )
    try:
        await bot.start(config.discord_token)
    except Exception as e:
        _log(f"[discord] crashed: {e}")
        raise
    finally:
        if not bot.is_closed():
            await bot.close()
    return True


if __name__ == "__main__":
    if not asyncio.run(launch_bot()):
        sys.exit(1)
