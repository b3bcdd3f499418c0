"""Delivery limit checks. A denial withholds the video only."""

from typing import Optional

from douyin_parser.domain.models import DeliveryLimits, LimitDecision, ResolvedMedia

_ALLOWED = LimitDecision(allowed=True)


def check_size(size_bytes: Optional[int], limits: DeliveryLimits) -> LimitDecision:
    if size_bytes is None or limits.max_size_mb <= 0:
        return _ALLOWED
    size_mb = size_bytes / 1024 / 1024
    if size_mb > limits.max_size_mb:
        return LimitDecision(
            allowed=False,
            reason=f"video size {size_mb:.2f}MB exceeds limit {limits.max_size_mb:g}MB",
        )
    return _ALLOWED


def check_limits(media: ResolvedMedia, limits: DeliveryLimits) -> LimitDecision:
    seconds = media.duration_seconds
    if limits.max_duration_seconds > 0 and seconds > limits.max_duration_seconds:
        return LimitDecision(
            allowed=False,
            reason=f"video duration {seconds:g}s exceeds limit {limits.max_duration_seconds:g}s",
        )
    size_bytes = media.video.size_bytes if media.video else None
    return check_size(size_bytes, limits)
