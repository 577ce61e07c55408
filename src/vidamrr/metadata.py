from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from .config import DEFAULT_FETCH_TIMEOUT, DEFAULT_OEMBED_ENDPOINT
from .errors import IncompleteMetadata, MetadataFetchFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoMetadata:
    title: str
    thumbnail: str


class MetadataFetcher:
    """Looks up title and thumbnail through an oEmbed endpoint."""

    def __init__(
        self,
        endpoint: str = DEFAULT_OEMBED_ENDPOINT,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport

    def build_endpoint(self, url: str) -> str:
        return self.endpoint.format(url=quote(url, safe=""))

    async def fetch(self, url: str) -> VideoMetadata:
        endpoint = self.build_endpoint(url)
        logger.debug("Fetching metadata from %s", endpoint)
        try:
            async with httpx.AsyncClient(
                follow_redirects=True,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(endpoint)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("Metadata request timed out for %s", url)
            raise MetadataFetchFailed("Timed out fetching video metadata.") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Metadata request for %s failed with status %s", url, exc.response.status_code
            )
            raise MetadataFetchFailed() from exc
        except httpx.HTTPError as exc:
            logger.warning("Metadata request for %s failed: %s", url, exc)
            raise MetadataFetchFailed() from exc
        except ValueError as exc:
            raise IncompleteMetadata() from exc
        return _parse_metadata(data)


def _parse_metadata(data: Any) -> VideoMetadata:
    if not isinstance(data, dict):
        raise IncompleteMetadata()
    title = _as_str(data.get("title"))
    thumbnail = _as_str(data.get("thumbnail_url"))
    if title is None or thumbnail is None:
        raise IncompleteMetadata()
    return VideoMetadata(title=title, thumbnail=thumbnail)


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None
