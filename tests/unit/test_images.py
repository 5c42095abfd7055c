"""
Unit tests for image URL handling.
"""

import os

import pytest

from tickerfeed.feed.images import image_filename, is_image_url, to_local_cache_path


@pytest.mark.unit
class TestIsImageUrl:
    """Tests for is_image_url."""

    @pytest.mark.parametrize(
        "value",
        [
            "http://cdn.example.com/a/photo.jpg",
            "https://cdn.example.com/PHOTO.JPG?x=1",
            "https://cdn.example.com/logo.png#top",
            "https://cdn.example.com/anim.webp",
        ],
    )
    def test_images(self, value):
        assert is_image_url(value) is True

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "photo.jpg",
            "ftp://cdn.example.com/photo.jpg",
            "https://cdn.example.com/report.pdf",
            "https://cdn.example.com/page?file=photo.jpg",
        ],
    )
    def test_not_images(self, value):
        assert is_image_url(value) is False


@pytest.mark.unit
class TestCachePath:
    """Tests for local cache path rewriting."""

    def test_filename(self):
        assert image_filename("https://cdn.example.com/a/b/photo.jpg?x=1") == "photo.jpg"

    def test_windows_prefix(self):
        result = to_local_cache_path("https://cdn.example.com/a/photo.jpg", "C:\\ticker\\images\\")
        assert result == "C:\\ticker\\images\\photo.jpg"

    def test_native_prefix(self):
        result = to_local_cache_path("https://cdn.example.com/a/photo.jpg", "cache")
        assert result == f"cache{os.sep}photo.jpg"

    def test_non_image_unchanged(self):
        assert to_local_cache_path("Storm warning", "C:\\cache") == "Storm warning"

    def test_no_cache_path(self):
        url = "https://cdn.example.com/a/photo.jpg"
        assert to_local_cache_path(url, None) == url
