"""
HTTP artifact fetcher.
Downloads document artifacts over http(s) (or from the local artifact root)
and decodes multi-page documents so the viewer knows their page count.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx
from cachetools import TTLCache

from models import ArtifactKind
from core.artifacts import Artifact, ArtifactLoadError, ImageArtifact, open_paginated

logger = logging.getLogger(__name__)


def _is_remote(location: str) -> bool:
    return location.lower().startswith(("http://", "https://"))


class HttpArtifactFetcher:
    """
    Artifact fetcher backed by httpx.

    Images are not downloaded: the front end loads them from their URL.
    Decoded documents are cached briefly so flipping between tabs does not
    re-download the same file.
    """

    def __init__(
        self,
        artifact_root: str = "data/artifacts",
        timeout: float = 30.0,
        cache_ttl: int = 300,
        cache_size: int = 32,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.artifact_root = Path(artifact_root)
        self.timeout = timeout
        self.transport = transport
        self._cache: TTLCache = TTLCache(maxsize=cache_size, ttl=cache_ttl)

    async def fetch(self, location: str, kind: ArtifactKind) -> Artifact:
        if not location:
            raise ArtifactLoadError("Document has no artifact location")

        if kind == ArtifactKind.IMAGE:
            return ImageArtifact(url=location)

        cached = self._cache.get(location)
        if cached is not None:
            return cached

        data = await self._read_bytes(location)
        artifact = open_paginated(location, data)
        self._cache[location] = artifact
        logger.info(f"Loaded {artifact.page_count}-page document from {location} ({len(data)} bytes)")
        return artifact

    async def _read_bytes(self, location: str) -> bytes:
        if _is_remote(location):
            return await self._download(location)

        path = (self.artifact_root / location.removeprefix("file://").lstrip("/")).resolve()
        if not path.is_file():
            raise ArtifactLoadError(f"Artifact not found: {location}")
        return await asyncio.to_thread(path.read_bytes)

    async def _download(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                r = await client.get(url)
                r.raise_for_status()
                return r.content
        except httpx.TimeoutException as e:
            raise ArtifactLoadError(f"Timeout fetching {url}") from e
        except httpx.HTTPStatusError as e:
            raise ArtifactLoadError(f"Failed to fetch {url}: HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise ArtifactLoadError(f"Failed to fetch {url}: {e}") from e
