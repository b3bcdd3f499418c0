"""Domain data models: pure Python dataclasses."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from douyin_parser.domain.errors import ErrorKind


class Platform(str, Enum):
    DOUYIN = "douyin"
    TIKTOK = "tiktok"


class MediaKind(str, Enum):
    VIDEO = "video"
    PHOTO_SET = "photo_set"


@dataclass(frozen=True)
class Caption:
    title: str
    author: str
    likes: int = 0
    shares: int = 0
    comments: int = 0
    collects: int = 0


@dataclass(frozen=True)
class VideoStream:
    """One encoding variant of a video as exposed by the upstream."""

    play_url: str
    format: str = "mp4"
    tier_name: str = ""
    size_bytes: Optional[int] = None


@dataclass(frozen=True)
class Slide:
    """One entry of a photo carousel; video_url is set for live-photo slides."""

    image_url: str
    video_url: Optional[str] = None


@dataclass(frozen=True)
class ResolvedMedia:
    """Normalized result of one upstream lookup.

    `kind` decides which payload is populated: `video` for VIDEO,
    `slides` for PHOTO_SET. A VIDEO may carry `video=None` only together
    with a `stream_error`.
    """

    kind: MediaKind
    platform: Platform
    caption: Caption
    cover_url: str
    duration_ms: int = 0
    thumb_url: Optional[str] = None
    video: Optional[VideoStream] = None
    slides: Tuple[Slide, ...] = ()
    stream_error: Optional[ErrorKind] = None

    def __post_init__(self):
        if self.kind is MediaKind.VIDEO:
            if self.slides:
                raise ValueError("VIDEO media cannot carry slides")
            if self.video is None and self.stream_error is None:
                raise ValueError("VIDEO media needs a stream or a stream_error")
        elif self.kind is MediaKind.PHOTO_SET:
            if self.video is not None:
                raise ValueError("PHOTO_SET media cannot carry a video stream")
            if not self.slides:
                raise ValueError("PHOTO_SET media needs at least one slide")

    @property
    def duration_seconds(self) -> float:
        return self.duration_ms / 1000

    @property
    def has_slide_video(self) -> bool:
        return any(s.video_url for s in self.slides)


@dataclass(frozen=True)
class QualityProfile:
    """Ordered tier names; earlier tiers win."""

    tiers: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tiers", tuple(self.tiers))


@dataclass(frozen=True)
class DeliveryLimits:
    max_duration_seconds: float = 0
    max_size_mb: float = 0


@dataclass(frozen=True)
class LimitDecision:
    allowed: bool
    reason: Optional[str] = None


class DispatchState(str, Enum):
    CAPTION_SENT = "caption_sent"
    MEDIA_PENDING = "media_pending"
    MEDIA_SENT = "media_sent"
    MEDIA_DENIED = "media_denied"
    MEDIA_FAILED = "media_failed"
    DONE = "done"


class DispatchStatus(str, Enum):
    ALL_SENT = "all_sent"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class StepResult:
    """Outcome of one send (or skipped send) in a reply sequence."""

    step: str  # e.g. "caption", "video", "bundle", "slide_3"
    ok: bool
    message_ids: List[str] = field(default_factory=list)
    reason: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


@dataclass
class DispatchOutcome:
    steps: List[StepResult] = field(default_factory=list)
    states: List[DispatchState] = field(default_factory=list)

    @property
    def sent_ids(self) -> List[str]:
        return [mid for s in self.steps if s.ok for mid in s.message_ids]

    @property
    def failures(self) -> List[StepResult]:
        return [s for s in self.steps if not s.ok]

    @property
    def status(self) -> DispatchStatus:
        if not self.sent_ids:
            return DispatchStatus.FAILED
        if self.failures:
            return DispatchStatus.PARTIAL
        return DispatchStatus.ALL_SENT
