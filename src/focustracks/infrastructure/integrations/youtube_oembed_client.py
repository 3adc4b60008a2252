"""YouTube availability check via the public oEmbed endpoint."""

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from focustracks.config.settings import YouTubeSettings
from focustracks.domain.value_objects import validate_youtube_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoAvailability:
    """Result of one oEmbed lookup."""

    url: str
    is_valid: bool
    error: str | None = None
    title: str | None = None
    author: str | None = None


@dataclass
class BatchAvailability:
    """Batch check outcome split into playable and broken URLs."""

    valid: list[str] = field(default_factory=list)
    invalid: list[VideoAvailability] = field(default_factory=list)


class YouTubeOEmbedClient:
    """Checks whether YouTube videos exist and are public. No API key needed."""

    # Hey future me - oEmbed answers 200 with title/author for public videos and 404 for
    # deleted OR private ones (they look the same from outside). 401/403 show up for
    # embedding-disabled videos. Every failure is REPORTED in the result, never raised:
    # a batch check over the catalog must not die on one dead link or a network blip.
    def __init__(
        self,
        settings: YouTubeSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: oEmbed URL and timeout
            client: Pre-built httpx client (tests pass one with a MockTransport)
        """
        self.settings = settings
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client (only if we created it)."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def check_video(self, url: str) -> VideoAvailability:
        """Look up a single video.

        Args:
            url: Any accepted YouTube URL form

        Returns:
            VideoAvailability with title/author when the video is public
        """
        canonical = validate_youtube_url(url)
        if canonical is None:
            return VideoAvailability(
                url=url, is_valid=False, error="Invalid YouTube URL format"
            )

        client = await self._get_client()
        try:
            response = await client.get(
                self.settings.oembed_url,
                params={"url": canonical, "format": "json"},
            )
        except httpx.HTTPError as e:
            logger.warning(
                "youtube.oembed.request_failed",
                extra={"url": canonical, "error": str(e) or type(e).__name__},
            )
            return VideoAvailability(
                url=url, is_valid=False, error=str(e) or "Network error"
            )

        if response.status_code == 404:
            return VideoAvailability(
                url=url, is_valid=False, error="Video not found or private"
            )
        if not response.is_success:
            return VideoAvailability(
                url=url,
                is_valid=False,
                error=f"HTTP {response.status_code}: {response.reason_phrase}",
            )

        try:
            data = response.json()
        except ValueError:
            return VideoAvailability(
                url=url, is_valid=False, error="Malformed oEmbed response"
            )
        return VideoAvailability(
            url=url,
            is_valid=True,
            title=data.get("title"),
            author=data.get("author_name"),
        )

    async def check_videos(self, urls: list[str]) -> BatchAvailability:
        """Check many videos concurrently and partition the results."""
        results = await asyncio.gather(*(self.check_video(url) for url in urls))
        batch = BatchAvailability()
        for result in results:
            if result.is_valid:
                batch.valid.append(result.url)
            else:
                batch.invalid.append(result)
        logger.info(
            "youtube.oembed.batch_checked",
            extra={"valid": len(batch.valid), "invalid": len(batch.invalid)},
        )
        return batch
