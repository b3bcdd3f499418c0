"""Tests for domain/quality.py: two-phase stream selection."""

import pytest

from douyin_parser.domain.errors import ErrorKind, NoStreamAvailable
from douyin_parser.domain.models import QualityProfile, VideoStream
from douyin_parser.domain.quality import select_stream, select_variant

PROFILE = QualityProfile(("adapt_lowest_1080_1", "adapt_lowest_720_1", "normal_1080_0"))


def _v(tier, url=None, fmt="mp4"):
    return VideoStream(play_url=url or f"https://cdn/{tier}", format=fmt, tier_name=tier)


class TestSelectStream:
    def test_highest_priority_tier_wins(self):
        variants = [_v("normal_1080_0"), _v("adapt_lowest_720_1"), _v("adapt_lowest_1080_1")]
        assert select_stream(variants, PROFILE) == "https://cdn/adapt_lowest_1080_1"

    def test_lower_tier_when_top_missing(self):
        variants = [_v("normal_540_0"), _v("normal_1080_0"), _v("adapt_lowest_720_1")]
        assert select_stream(variants, PROFILE) == "https://cdn/adapt_lowest_720_1"

    def test_non_mp4_skipped(self):
        variants = [_v("adapt_lowest_1080_1", fmt="dash"), _v("normal_1080_0")]
        assert select_stream(variants, PROFILE) == "https://cdn/normal_1080_0"

    def test_earlier_match_not_overwritten_by_later_misses(self):
        variants = [_v("x1"), _v("adapt_lowest_720_1"), _v("x2")]
        assert select_stream(variants, PROFILE) == "https://cdn/adapt_lowest_720_1"

    def test_fallback_to_first_variant(self):
        variants = [_v("lower_540_0"), _v("normal_360_0")]
        assert select_stream(variants, PROFILE) == "https://cdn/lower_540_0"

    def test_fallback_ignores_format(self):
        variants = [_v("adapt_lowest_1080_1", fmt="dash")]
        assert select_stream(variants, PROFILE) == "https://cdn/adapt_lowest_1080_1"

    def test_empty_profile_falls_back(self):
        variants = [_v("a"), _v("b")]
        assert select_stream(variants, QualityProfile()) == "https://cdn/a"

    def test_deterministic(self):
        variants = [_v("normal_1080_0"), _v("adapt_lowest_720_1")]
        results = {select_stream(variants, PROFILE) for _ in range(5)}
        assert results == {"https://cdn/adapt_lowest_720_1"}

    def test_empty_list_raises(self):
        with pytest.raises(NoStreamAvailable) as exc:
            select_stream([], PROFILE)
        assert exc.value.kind is ErrorKind.NO_STREAM_AVAILABLE


class TestSelectVariant:
    def test_returns_variant_with_size(self):
        v = VideoStream(play_url="u", tier_name="normal_1080_0", size_bytes=1234)
        assert select_variant([v], PROFILE).size_bytes == 1234
