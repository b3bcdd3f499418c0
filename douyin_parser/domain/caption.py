"""Caption text shared by every reply kind."""

from typing import Optional

from douyin_parser.domain.models import Caption


def format_duration(milliseconds: int) -> str:
    """Format a millisecond duration as HH时MM分SS秒."""
    seconds = int(milliseconds // 1000)
    minutes = seconds // 60
    hours = minutes // 60
    return f"{hours:02d}时{minutes % 60:02d}分{seconds % 60:02d}秒"


def build_caption_text(caption: Caption, duration_ms: Optional[int] = None) -> str:
    """Render the summary block; the duration line is added only when given."""
    text = (
        f"标题：{caption.title}"
        f"\n作者：{caption.author}"
        f"\n点赞数：{caption.likes}\t  分享数：{caption.shares}"
        f"\n评论数：{caption.comments}\t  收藏数：{caption.collects}"
    )
    if duration_ms is not None:
        text += f"\n时长：{format_duration(duration_ms)}"
    return text


def mask_numbers(value: Optional[object], show: int = 3) -> str:
    """Mask the middle of an identifier for log output."""
    if value is None:
        return ""
    text = str(value)
    if len(text) <= show * 2:
        return text
    return text[:show] + "****" + text[-show:]
