"""External integration client implementations."""

from focustracks.infrastructure.integrations.youtube_oembed_client import (
    BatchAvailability,
    VideoAvailability,
    YouTubeOEmbedClient,
)

__all__ = ["BatchAvailability", "VideoAvailability", "YouTubeOEmbedClient"]
