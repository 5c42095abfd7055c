"""
Image URL detection and local cache path rewriting.
"""

import logging
import os
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".webp",
    ".bmp",
    ".svg",
    ".tif",
    ".tiff",
)


def is_image_url(value: str | None) -> bool:
    """
    Check whether a value is an http(s) URL to an image.

    The extension is matched case-insensitively on the URL path, so query
    strings and fragments are ignored.
    """
    if not value or not isinstance(value, str):
        return False

    lowered = value.strip().lower()
    if not lowered.startswith(("http://", "https://")):
        return False

    try:
        path = urlsplit(lowered).path
    except ValueError:
        return False
    return path.endswith(IMAGE_EXTENSIONS)


def image_filename(url: str) -> str:
    """Last path segment of a URL."""
    path = urlsplit(url.strip()).path
    return path.rstrip("/").rsplit("/", 1)[-1]


def to_local_cache_path(value: str | None, cache_path: str | None) -> str | None:
    """
    Rewrite an image URL to its file under the local image cache.

    Non-image values, and all values when no cache path is configured, are
    returned unchanged.

    Args:
        value: Stored field value
        cache_path: Local cache directory prefix

    Returns:
        Local path such as ``C:\\cache\\photo.jpg`` or the original value
    """
    if not cache_path or not is_image_url(value):
        return value

    filename = image_filename(value)
    if not filename:
        return value

    separator = "\\" if "\\" in cache_path else os.sep
    return f"{cache_path.rstrip(separator)}{separator}{filename}"
