"""Configuration and shared state."""

__version__ = "0.1.0"

import os
import sys
from dataclasses import dataclass, field
from typing import List, Tuple

from dotenv import load_dotenv

from douyin_parser.domain.models import DeliveryLimits, QualityProfile

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

# Douyin gear names, best degraded quality first
DEFAULT_QUALITY_PROFILE = (
    "adapt_lowest_1080_1",
    "adapt_lowest_720_1",
    "normal_1080_0",
    "normal_720_0",
    "adapt_lowest_540_1",
    "normal_540_0",
)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, falling back to {default}")
        return default


def _env_profile(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return DEFAULT_QUALITY_PROFILE
    return tuple(t.strip() for t in raw.split(",") if t.strip())


CONFIG = {
    "port": int(_env_number("PORT", 3000)),
    # Hybrid video data API, e.g. http://127.0.0.1:80
    "url": os.getenv("PARSER_API_URL", "").strip().rstrip("/"),
    "is_thumbs": _env_bool("PARSER_IS_THUMBS", _env_bool("VIDEO_IS_THUMBS")),
    "video": {
        "is_send": _env_bool("VIDEO_IS_SEND"),
        "is_cache": _env_bool("VIDEO_IS_CACHE"),
        "max_duration": _env_number("VIDEO_MAX_DURATION", 0),
        "max_size": _env_number("VIDEO_MAX_SIZE", 0),
        # Limit denials are logged; set true to also tell the chat
        "notify_denial": _env_bool("VIDEO_NOTIFY_DENIAL"),
        "use_download_endpoint": _env_bool("VIDEO_USE_DOWNLOAD_ENDPOINT", True),
    },
    "quality_profile": _env_profile("QUALITY_PROFILE"),
    "http_timeout_seconds": _env_number("HTTP_TIMEOUT_SECONDS", 30),
    "send_timeout_seconds": _env_number("SEND_TIMEOUT_SECONDS", 60),
    "send_interval_seconds": _env_number("SEND_INTERVAL_SECONDS", 0.5),
    "discord_token": os.getenv("DISCORD_BOT_TOKEN", ""),
}


# ── Typed config ──────────────────────────────────────


@dataclass
class VideoConfig:
    is_send: bool = False
    is_cache: bool = False
    max_duration: float = 0
    max_size: float = 0
    notify_denial: bool = False
    use_download_endpoint: bool = True

    @property
    def limits(self) -> DeliveryLimits:
        return DeliveryLimits(
            max_duration_seconds=self.max_duration,
            max_size_mb=self.max_size,
        )


@dataclass
class AppConfig:
    """Typed configuration, built from CONFIG by from_env()."""

    url: str = ""
    port: int = 3000
    is_thumbs: bool = False
    video: VideoConfig = field(default_factory=VideoConfig)
    quality_profile: QualityProfile = field(
        default_factory=lambda: QualityProfile(DEFAULT_QUALITY_PROFILE)
    )
    http_timeout_seconds: float = 30
    send_timeout_seconds: float = 60
    send_interval_seconds: float = 0.5
    discord_token: str = ""

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables."""
        return cls(
            url=CONFIG["url"],
            port=CONFIG["port"],
            is_thumbs=CONFIG["is_thumbs"],
            video=VideoConfig(**CONFIG["video"]),
            quality_profile=QualityProfile(CONFIG["quality_profile"]),
            http_timeout_seconds=CONFIG["http_timeout_seconds"],
            send_timeout_seconds=CONFIG["send_timeout_seconds"],
            send_interval_seconds=CONFIG["send_interval_seconds"],
            discord_token=CONFIG["discord_token"],
        )

    def validate(self) -> List[str]:
        """Return a list of problems; empty when the config is usable."""
        problems = []
        if not self.url:
            problems.append("PARSER_API_URL is required")
        elif not self.url.startswith(("http://", "https://")):
            problems.append(f"PARSER_API_URL must be an http(s) address, got {self.url!r}")
        if self.video.max_duration < 0:
            problems.append("VIDEO_MAX_DURATION must be >= 0")
        if self.video.max_size < 0:
            problems.append("VIDEO_MAX_SIZE must be >= 0")
        if self.http_timeout_seconds <= 0:
            problems.append("HTTP_TIMEOUT_SECONDS must be > 0")
        if self.send_timeout_seconds <= 0:
            problems.append("SEND_TIMEOUT_SECONDS must be > 0")
        if not self.quality_profile.tiers:
            problems.append("QUALITY_PROFILE must name at least one tier")
        return problems
