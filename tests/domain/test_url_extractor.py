"""Tests for domain/url_extractor.py."""

import pytest

from douyin_parser.domain.models import Platform
from douyin_parser.domain.url_extractor import detect_platform, extract_url


class TestExtractUrl:
    def test_url_inside_text(self):
        text = "check this out https://v.douyin.com/abc123/ lol"
        assert extract_url(text) == "https://v.douyin.com/abc123/"

    def test_first_url_wins(self):
        text = "http://a.example/1 and https://v.douyin.com/x/"
        assert extract_url(text) == "http://a.example/1"

    def test_url_at_end_of_text(self):
        assert extract_url("see https://www.tiktok.com/@u/video/1") == "https://www.tiktok.com/@u/video/1"

    def test_share_text_with_cjk(self):
        text = "7.43 复制打开抖音，看看【作品】 https://v.douyin.com/iRNBho6u/ a@b.cn 11/02 :7pm"
        assert extract_url(text) == "https://v.douyin.com/iRNBho6u/"

    def test_no_url(self):
        assert extract_url("douyin.com is great") is None

    def test_empty(self):
        assert extract_url("") is None

    def test_non_http_scheme_ignored(self):
        assert extract_url("ftp://douyin.com/file") is None


class TestDetectPlatform:
    def test_douyin(self):
        assert detect_platform("https://v.douyin.com/abc/") is Platform.DOUYIN

    def test_tiktok(self):
        assert detect_platform("https://vm.tiktok.com/ZM/") is Platform.TIKTOK

    def test_douyin_takes_precedence(self):
        assert detect_platform("tiktok.com vs douyin.com") is Platform.DOUYIN

    def test_unrelated(self):
        assert detect_platform("https://example.com/video") is None

    @pytest.mark.parametrize("text", ["", None])
    def test_empty(self, text):
        assert detect_platform(text) is None
