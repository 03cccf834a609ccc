"""
Remote asset fetching for cockpit_graph.

Downloads images referenced inline in rich text, identifies them by the md5
digest of their bytes and keeps a copy in a local cache directory.
"""

import hashlib
import logging
import mimetypes
from pathlib import Path, PurePosixPath
from typing import Optional
from urllib.parse import unquote, urlparse

import httpx

from ..config import config
from ..errors import AssetFetchError
from ..models import RemoteAsset


def _extension_for(url_path: str, content_type: Optional[str]) -> str:
    suffix = PurePosixPath(url_path).suffix.lower()
    if suffix:
        return suffix
    if content_type:
        guessed = mimetypes.guess_extension(content_type.split(";")[0].strip())
        if guessed:
            return ".jpg" if guessed == ".jpe" else guessed
    return ""


class RemoteAssetCache:
    """
    Async fetch-and-cache operation for remote assets.

    Instances are callable, so they can be passed wherever a fetcher is
    expected.
    """

    def __init__(self, cache_dir: Optional[str] = None, timeout: Optional[float] = None,
                 client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the cache.

        Args:
            cache_dir: Directory downloaded files are stored in (defaults to config value)
            timeout: Request timeout in seconds (defaults to config value)
            client: Preconfigured HTTP client, mainly for tests
        """
        self.cache_dir = Path(cache_dir or config.asset_cache_dir)
        self.client = client or httpx.AsyncClient(
            timeout=timeout or config.asset_timeout,
            follow_redirects=True,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.client.aclose()

    async def __call__(self, url: str) -> RemoteAsset:
        return await self.fetch(url)

    async def fetch(self, url: str) -> RemoteAsset:
        """
        Download a URL and store it in the cache directory.

        Args:
            url: Absolute URL of the asset

        Returns:
            RemoteAsset describing the cached file

        Raises:
            AssetFetchError: If the request fails or returns an error status
        """
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AssetFetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise AssetFetchError(url, str(e)) from e

        data = response.content
        url_path = unquote(urlparse(url).path)
        asset = RemoteAsset(
            content_digest=hashlib.md5(data).hexdigest(),
            ext=_extension_for(url_path, response.headers.get("Content-Type")),
            name=PurePosixPath(url_path).stem or "asset",
        )

        destination = self.cache_dir / asset.static_filename
        if not destination.exists():
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(data)
            logging.info(f"Cached {url} as {destination}")
        else:
            logging.debug(f"Asset {url} already cached at {destination}")
        return asset
