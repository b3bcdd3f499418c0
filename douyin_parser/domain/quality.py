"""Stream selection over the upstream's bitrate variants."""

from typing import Sequence

from douyin_parser.domain.errors import NoStreamAvailable
from douyin_parser.domain.models import QualityProfile, VideoStream


def select_variant(variants: Sequence[VideoStream], profile: QualityProfile) -> VideoStream:
    """Pick the variant to deliver.

    Tiers are tried in profile order and the first mp4 variant whose tier
    name matches wins. Only when no tier matches at all does the first raw
    variant get returned.
    """
    if not variants:
        raise NoStreamAvailable("upstream exposed no video variants")
    for tier in profile.tiers:
        for variant in variants:
            if variant.format == "mp4" and variant.tier_name == tier:
                return variant
    return variants[0]


def select_stream(variants: Sequence[VideoStream], profile: QualityProfile) -> str:
    return select_variant(variants, profile).play_url
