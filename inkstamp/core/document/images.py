"""
Fetching and identifying stamp and signature images.
"""
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlparse
import urllib.error
import urllib.request

from inkstamp.utils.logging_service import get_logger

logger = get_logger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


def detect_image_format(data: bytes) -> Optional[str]:
    """
    Identify an image from its leading bytes.

    Returns:
        "png", "jpeg" or None when the format is not supported
    """
    if data.startswith(PNG_SIGNATURE):
        return "png"
    if data.startswith(JPEG_SIGNATURE):
        return "jpeg"
    return None


class ImageLoader:
    """
    Reads asset images from http(s) URLs, file URLs or local paths.

    Results are cached per loader, so thumbnails and the overlay share
    one download per asset.
    """

    def __init__(self, timeout: float = 15.0):
        self.timeout = timeout
        self._cache: Dict[str, bytes] = {}

    def __call__(self, url: str) -> bytes:
        return self.fetch(url)

    def fetch(self, url: str) -> bytes:
        """
        Get the bytes behind an image URL.

        Raises:
            OSError: If the image cannot be read
        """
        if url in self._cache:
            return self._cache[url]

        scheme = urlparse(url).scheme.lower()
        if scheme in ("http", "https", "file"):
            data = self._download(url)
        else:
            data = Path(url).read_bytes()

        self._cache[url] = data
        return data

    def _download(self, url: str) -> bytes:
        logger.debug(f"Fetching image {url}")
        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as response:
                return response.read()
        except urllib.error.HTTPError as e:
            raise OSError(f"HTTP {e.code} while fetching {url}") from e

    def clear(self) -> None:
        self._cache.clear()
