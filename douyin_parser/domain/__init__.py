"""Domain layer: pure Python, no framework dependencies."""

from douyin_parser.domain.errors import (
    ErrorKind,
    NoStreamAvailable,
    NormalizationError,
    ResolverError,
    UpstreamError,
)
from douyin_parser.domain.models import (
    Caption,
    DeliveryLimits,
    DispatchOutcome,
    DispatchState,
    DispatchStatus,
    LimitDecision,
    MediaKind,
    Platform,
    QualityProfile,
    ResolvedMedia,
    Slide,
    StepResult,
    VideoStream,
)
from douyin_parser.domain.url_extractor import detect_platform, extract_url
from douyin_parser.domain.caption import build_caption_text, format_duration, mask_numbers
from douyin_parser.domain.quality import select_stream, select_variant
from douyin_parser.domain.limits import check_limits, check_size
from douyin_parser.domain.normalizer import normalize
from douyin_parser.domain.dispatcher import Dispatcher
from douyin_parser.domain.resolver import LinkResolver, ResolveResult, queue_scope

__all__ = [
    "ErrorKind",
    "NoStreamAvailable",
    "NormalizationError",
    "ResolverError",
    "UpstreamError",
    "Caption",
    "DeliveryLimits",
    "DispatchOutcome",
    "DispatchState",
    "DispatchStatus",
    "LimitDecision",
    "MediaKind",
    "Platform",
    "QualityProfile",
    "ResolvedMedia",
    "Slide",
    "StepResult",
    "VideoStream",
    "detect_platform",
    "extract_url",
    "build_caption_text",
    "format_duration",
    "mask_numbers",
    "select_stream",
    "select_variant",
    "check_limits",
    "check_size",
    "normalize",
    "Dispatcher",
    "LinkResolver",
    "ResolveResult",
    "queue_scope",
]
