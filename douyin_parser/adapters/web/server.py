"""HTTP preview surface: resolve a link without sending anything to chat."""

from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from douyin_parser.config import CONFIG, AppConfig, __version__
from douyin_parser.adapters.upstream.hybrid_client import HybridApiClient
from douyin_parser.domain.caption import build_caption_text
from douyin_parser.domain.errors import ErrorKind, NormalizationError, UpstreamError
from douyin_parser.domain.models import MediaKind, ResolvedMedia
from douyin_parser.domain.resolver import LinkResolver
from douyin_parser.domain.url_extractor import detect_platform, extract_url

app = FastAPI(title="Douyin Parser", version=__version__)

app_config = AppConfig.from_env()
hybrid_client = HybridApiClient(base_url=app_config.url, timeout=app_config.http_timeout_seconds)
resolver = LinkResolver(hybrid_client, app_config)


class ResolveRequest(BaseModel):
    text: str


class SlideModel(BaseModel):
    image_url: str
    video_url: Optional[str] = None


class ResolveResponse(BaseModel):
    link: str
    platform: str
    kind: str
    caption: str
    cover_url: str
    duration_ms: int
    video_url: Optional[str] = None
    video_tier: Optional[str] = None
    video_size_bytes: Optional[int] = None
    stream_error: Optional[str] = None
    slides: List[SlideModel] = []


class HealthResponse(BaseModel):
    status: str
    version: str
    upstream_configured: bool


def _to_response(link: str, media: ResolvedMedia) -> ResolveResponse:
    duration = media.duration_ms if media.kind is MediaKind.VIDEO else None
    video = media.video
    return ResolveResponse(
        link=link,
        platform=media.platform.value,
        kind=media.kind.value,
        caption=build_caption_text(media.caption, duration),
        cover_url=media.cover_url,
        duration_ms=media.duration_ms,
        video_url=video.play_url if video else None,
        video_tier=video.tier_name if video else None,
        video_size_bytes=video.size_bytes if video else None,
        stream_error=media.stream_error.value if media.stream_error else None,
        slides=[SlideModel(image_url=s.image_url, video_url=s.video_url) for s in media.slides],
    )


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="ok",
        version=__version__,
        upstream_configured=hybrid_client.is_configured,
    )


@app.post("/resolve", response_model=ResolveResponse)
async def resolve(req: ResolveRequest):
    """Normalize the first Douyin/TikTok link in `text`."""
    platform = detect_platform(req.text)
    link = extract_url(req.text)
    if platform is None or not link:
        raise HTTPException(status_code=400, detail=ErrorKind.NO_LINK_FOUND.value)
    if not hybrid_client.is_configured:
        raise HTTPException(status_code=503, detail="PARSER_API_URL not configured")
    try:
        media = await resolver.preview(link, platform)
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=f"{e.kind.value}: {e}")
    except NormalizationError as e:
        raise HTTPException(status_code=422, detail=f"{e.kind.value}: {e}")
    return _to_response(link, media)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=CONFIG["port"])
