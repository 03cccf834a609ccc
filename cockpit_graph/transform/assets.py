"""
Asset resolution for cockpit_graph.

Two kinds of asset references show up in CMS entries:

- path references ({"path": "/storage/uploads/a.png"}) pointing at assets that were
  already downloaded; these are looked up in the asset table built by the
  download step.
- inline <img src="..."> references inside rich text; these are fetched and cached
  on demand through the configured fetcher.
"""

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Mapping, Optional
from urllib.parse import urlparse

from ..errors import AmbiguousAssetPathError
from ..models import RemoteAsset

SRC_PATTERN = re.compile(r'src\s*=\s*"(.+?)"', re.IGNORECASE)

Fetcher = Callable[[str], Awaitable[RemoteAsset]]


def normalize_asset_path(value: str) -> str:
    """
    Reduce a URL or path to a comparable relative path.

    Scheme and host are dropped, as are leading './' and '/' segments.
    """
    value = value.strip()
    parsed = urlparse(value)
    if parsed.scheme and parsed.netloc:
        value = parsed.path
    while value.startswith("./"):
        value = value[2:]
    return value.lstrip("/")


def is_absolute_url(value: str) -> bool:
    """Whether a src attribute already carries a scheme."""
    return bool(urlparse(value).scheme)


class AssetLookup:
    """
    Path lookup over the table of pre-downloaded assets.

    A table key matches a path when their normalized forms are equal, or when
    the key ends with '/' followed by the normalized path. The first matching
    key in table order wins; further matches are logged, or raise in strict mode.
    """

    def __init__(self, table: Mapping[str, str], strict: bool = False):
        """
        Initialize the lookup.

        Args:
            table: Mapping from asset path or URL to asset node identity
            strict: Raise AmbiguousAssetPathError instead of picking the first match
        """
        self.strict = strict
        self._entries = [(normalize_asset_path(key), key, identity) for key, identity in table.items()]
        self._resolved: Dict[str, Optional[str]] = {}

    @classmethod
    def from_file(cls, manifest_path: str, strict: bool = False) -> "AssetLookup":
        """
        Load the asset table from a JSON manifest of {path: identity}.
        """
        with open(Path(manifest_path), 'r', encoding='utf-8') as f:
            table = json.load(f)
        logging.info(f"Loaded {len(table)} assets from {manifest_path}")
        return cls(table, strict=strict)

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, path: Optional[str]) -> Optional[str]:
        """
        Find the asset identity for a path.

        Args:
            path: Source path (or URL) of the asset

        Returns:
            The asset identity, or None when nothing matches
        """
        if not path or not isinstance(path, str):
            return None
        if path in self._resolved:
            return self._resolved[path]

        wanted = normalize_asset_path(path)
        matches = [
            (key, identity) for normalized, key, identity in self._entries
            if wanted and (normalized == wanted or normalized.endswith("/" + wanted))
        ]

        identity = None
        if matches:
            if len(matches) > 1:
                candidates = [key for key, _ in matches]
                if self.strict:
                    raise AmbiguousAssetPathError(path, candidates)
                logging.warning(f"Asset path {path} matches {len(matches)} assets, using {candidates[0]}")
            identity = matches[0][1]

        self._resolved[path] = identity
        return identity


@dataclass
class InlineAssets:
    """
    Inline images found in one rich-text value.

    images is parallel to source_urls: images[i] is the cached copy of the
    image referenced by source_urls[i].
    """
    images: List[RemoteAsset] = field(default_factory=list)
    assets_by_digest: Dict[str, RemoteAsset] = field(default_factory=dict)
    source_urls: List[str] = field(default_factory=list)

    def url_map(self) -> Dict[str, RemoteAsset]:
        """Map each original src attribute to its cached asset."""
        return dict(zip(self.source_urls, self.images))


class InlineAssetResolver:
    """
    Resolves inline rich-text images into locally cached assets.

    Each absolute URL is fetched at most once per resolver; concurrent
    requests for the same URL share a single in-flight fetch.
    """

    def __init__(self, fetch: Fetcher, host: str = "", static_prefix: str = "/static/"):
        """
        Initialize the resolver.

        Args:
            fetch: Async fetch-and-cache operation returning a RemoteAsset
            host: Prefix for src attributes that are not absolute URLs
            static_prefix: URL prefix cached assets are published under
        """
        self._fetch = fetch
        self.host = host
        self.static_prefix = static_prefix
        self._inflight: Dict[str, "asyncio.Future[RemoteAsset]"] = {}

    @property
    def fetched_urls(self) -> List[str]:
        """Absolute URLs with a pending or successful fetch."""
        return list(self._inflight)

    def absolute_url(self, src: str) -> str:
        return src if is_absolute_url(src) else self.host + src

    def static_url(self, asset: RemoteAsset) -> str:
        return self.static_prefix + asset.static_filename

    async def fetch_once(self, url: str) -> RemoteAsset:
        """Fetch a URL, reusing an earlier or in-flight fetch of the same URL."""
        task = self._inflight.get(url)
        if task is None:
            logging.debug(f"Fetching inline asset {url}")
            task = asyncio.ensure_future(self._fetch(url))
            self._inflight[url] = task
        try:
            return await task
        except Exception:
            # Failed fetches are not cached; a later reference retries the URL.
            if self._inflight.get(url) is task:
                del self._inflight[url]
            raise

    async def resolve(self, rich_text: Optional[str]) -> InlineAssets:
        """
        Fetch every image referenced by src="..." in a rich-text value.

        Args:
            rich_text: HTML or text content; anything else yields an empty result

        Returns:
            InlineAssets with one image per src occurrence, deduplicated by digest
        """
        if not isinstance(rich_text, str):
            return InlineAssets()
        sources = SRC_PATTERN.findall(rich_text)
        if not sources:
            return InlineAssets()

        # Wait for every fetch before reporting a failure, so none is left running.
        images = await asyncio.gather(
            *(self.fetch_once(self.absolute_url(src)) for src in sources),
            return_exceptions=True,
        )
        for image in images:
            if isinstance(image, BaseException):
                raise image

        by_digest: Dict[str, RemoteAsset] = {}
        for image in images:
            by_digest.setdefault(image.content_digest, image)

        return InlineAssets(
            images=list(images),
            assets_by_digest=by_digest,
            source_urls=list(sources),
        )

    async def rewrite(self, rich_text: Optional[str]) -> Optional[str]:
        """
        Replace every inline image src with the URL of its cached copy.
        """
        inline = await self.resolve(rich_text)
        if not inline.source_urls:
            return rich_text
        return self.substitute(rich_text, inline)

    def substitute(self, rich_text: str, inline: InlineAssets) -> str:
        """
        Point every src="..." attribute found in inline at its static copy.

        Attribute values are matched whole in a single pass, so a source that is
        a substring of another source never touches it.
        """
        urls = inline.url_map()

        def replace(match: "re.Match[str]") -> str:
            asset = urls.get(match.group(1))
            if asset is None:
                return match.group(0)
            whole, offset = match.group(0), match.start(0)
            start, end = match.span(1)
            return whole[:start - offset] + self.static_url(asset) + whole[end - offset:]

        return SRC_PATTERN.sub(replace, rich_text)
