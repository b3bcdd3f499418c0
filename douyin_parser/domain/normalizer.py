"""Normalize hybrid-API payloads into ResolvedMedia.

Douyin and TikTok payloads differ by platform and by content type. This
module is the only place that reads the raw JSON; everything downstream
works on the ResolvedMedia it builds.

Pure Python, no framework dependencies.
"""

from typing import Any, Dict, List, Optional

from douyin_parser.domain.errors import ErrorKind, NoStreamAvailable, NormalizationError
from douyin_parser.domain.models import (
    Caption,
    MediaKind,
    Platform,
    QualityProfile,
    ResolvedMedia,
    Slide,
    VideoStream,
)
from douyin_parser.domain.quality import select_variant

# Douyin media_type values for photo carousels (42 = carousel with music/live photos)
PHOTO_MEDIA_TYPES = (2, 42)


def _first(values: Any) -> Optional[Any]:
    if isinstance(values, list) and values:
        return values[0]
    return None


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _first_url(addr: Any) -> Optional[str]:
    """`{"url_list": [...]}` -> first URL."""
    url = _first(_dict(addr).get("url_list"))
    return url if isinstance(url, str) and url else None


def _count(stats: Dict[str, Any], key: str) -> int:
    try:
        return int(stats.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def _size(addr: Dict[str, Any]) -> Optional[int]:
    """`data_size` as an int; None when absent or not a number."""
    value = addr.get("data_size")
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def is_photo_payload(raw: Dict[str, Any], platform: Platform) -> bool:
    return platform is Platform.DOUYIN and raw.get("media_type") in PHOTO_MEDIA_TYPES


def parse_caption(raw: Dict[str, Any]) -> Caption:
    desc = raw.get("desc")
    nickname = _dict(raw.get("author")).get("nickname")
    stats = raw.get("statistics")
    if desc is None:
        raise NormalizationError("payload has no desc")
    if nickname is None:
        raise NormalizationError("payload has no author.nickname")
    if not isinstance(stats, dict):
        raise NormalizationError("payload has no statistics")
    return Caption(
        title=str(desc),
        author=str(nickname),
        likes=_count(stats, "digg_count"),
        shares=_count(stats, "share_count"),
        comments=_count(stats, "comment_count"),
        collects=_count(stats, "collect_count"),
    )


def parse_duration(raw: Dict[str, Any]) -> int:
    """Top-level duration wins; video.duration is the fallback."""
    duration = raw.get("duration") or _dict(raw.get("video")).get("duration") or 0
    try:
        return int(duration)
    except (TypeError, ValueError):
        return 0


def parse_thumb(raw: Dict[str, Any]) -> Optional[str]:
    thumb = _first(_dict(raw.get("video")).get("big_thumbs"))
    url = _dict(thumb).get("img_url")
    return url if isinstance(url, str) and url else None


def parse_cover(raw: Dict[str, Any]) -> Optional[str]:
    return _first_url(_dict(raw.get("video")).get("cover"))


def douyin_variants(video: Dict[str, Any]) -> List[VideoStream]:
    """Douyin exposes named quality tiers under video.bit_rate."""
    variants = []
    for entry in video.get("bit_rate") or []:
        entry = _dict(entry)
        play_addr = _dict(entry.get("play_addr"))
        url = _first_url(play_addr)
        if not url:
            continue
        variants.append(
            VideoStream(
                play_url=url,
                format=str(entry.get("format") or ""),
                tier_name=str(entry.get("gear_name") or ""),
                size_bytes=_size(play_addr),
            )
        )
    if not variants:
        direct = _direct_stream(video, "play_addr")
        if direct:
            variants.append(direct)
    return variants


def tiktok_variants(video: Dict[str, Any]) -> List[VideoStream]:
    """TikTok exposes direct play_addr_h264 / play_addr fields."""
    variants = []
    for key in ("play_addr_h264", "play_addr"):
        stream = _direct_stream(video, key)
        if stream:
            variants.append(stream)
    return variants


def _direct_stream(video: Dict[str, Any], key: str) -> Optional[VideoStream]:
    addr = _dict(video.get(key))
    url = _first_url(addr)
    if not url:
        return None
    return VideoStream(play_url=url, format="mp4", tier_name=key, size_bytes=_size(addr))


def parse_slides(raw: Dict[str, Any]) -> List[Slide]:
    images = raw.get("images")
    if not isinstance(images, list) or not images:
        raise NormalizationError("photo payload has no images")
    slides = []
    for index, image in enumerate(images, start=1):
        image = _dict(image)
        image_url = _first(image.get("download_url_list"))
        if not image_url:
            raise NormalizationError(f"photo slide {index} has no download_url_list")
        video_url = _first_url(_dict(_dict(image.get("video")).get("download_addr")))
        slides.append(Slide(image_url=image_url, video_url=video_url))
    return slides


def normalize(
    raw: Dict[str, Any],
    platform: Platform,
    *,
    prefer_thumbs: bool = False,
    profile: QualityProfile = QualityProfile(),
) -> ResolvedMedia:
    """Build a fresh ResolvedMedia from one upstream `data` object.

    Raises NormalizationError when required fields are missing.
    """
    if not isinstance(raw, dict):
        raise NormalizationError(f"payload is {type(raw).__name__}, expected an object")

    caption = parse_caption(raw)
    duration_ms = parse_duration(raw)
    thumb_url = parse_thumb(raw)
    cover_url = parse_cover(raw)
    if prefer_thumbs and thumb_url:
        cover_url = thumb_url

    if is_photo_payload(raw, platform):
        slides = parse_slides(raw)
        return ResolvedMedia(
            kind=MediaKind.PHOTO_SET,
            platform=platform,
            caption=caption,
            cover_url=cover_url or slides[0].image_url,
            thumb_url=thumb_url,
            duration_ms=duration_ms,
            slides=tuple(slides),
        )

    if not cover_url:
        raise NormalizationError("video payload has no video.cover.url_list")
    video = _dict(raw.get("video"))
    variants = douyin_variants(video) if platform is Platform.DOUYIN else tiktok_variants(video)
    try:
        stream = select_variant(variants, profile)
        stream_error = None
    except NoStreamAvailable:
        stream, stream_error = None, ErrorKind.NO_STREAM_AVAILABLE
    return ResolvedMedia(
        kind=MediaKind.VIDEO,
        platform=platform,
        caption=caption,
        cover_url=cover_url,
        thumb_url=thumb_url,
        duration_ms=duration_ms,
        video=stream,
        stream_error=stream_error,
    )
