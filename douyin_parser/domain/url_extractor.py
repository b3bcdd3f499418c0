"""Link extraction from free-form chat text."""

import re
from typing import Optional

from douyin_parser.domain.models import Platform

URL_RE = re.compile(r"(https?://[^\s]+)")

# Domain token -> platform, checked in order
PLATFORM_TOKENS = (
    ("douyin.com", Platform.DOUYIN),
    ("tiktok.com", Platform.TIKTOK),
)


def extract_url(text: str) -> Optional[str]:
    """Return the first http(s) URL in `text`, or None when there is none."""
    if not text:
        return None
    match = URL_RE.search(text)
    return match.group(1) if match else None


def detect_platform(text: str) -> Optional[Platform]:
    """Return the platform whose domain token appears in `text`."""
    if not text:
        return None
    for token, platform in PLATFORM_TOKENS:
        if token in text:
            return platform
    return None
