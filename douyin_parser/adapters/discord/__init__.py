from douyin_parser.adapters.discord.port import DiscordMessagePort
from douyin_parser.adapters.discord.bot import ResolverBot

__all__ = ["DiscordMessagePort", "ResolverBot"]
