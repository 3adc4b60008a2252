"""Tests for YouTubeOEmbedClient using httpx.MockTransport."""

from collections.abc import Callable

import httpx
import pytest

from focustracks.config.settings import YouTubeSettings
from focustracks.infrastructure.integrations.youtube_oembed_client import (
    YouTubeOEmbedClient,
)

VIDEO = "https://youtu.be/dQw4w9WgXcQ"
CANONICAL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

Handler = Callable[[httpx.Request], httpx.Response]


def build(handler: Handler) -> tuple[YouTubeOEmbedClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return YouTubeOEmbedClient(YouTubeSettings(), client=http), http


class TestCheckVideo:
    """Every outcome is reported, never raised."""

    async def test_public_video(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json={"title": "Lofi Beats", "author_name": "Lofi Lab"}
            )

        client, _ = build(handler)
        result = await client.check_video(VIDEO)

        assert result.is_valid
        assert result.url == VIDEO
        assert result.title == "Lofi Beats"
        assert result.author == "Lofi Lab"
        assert seen[0].url.params["url"] == CANONICAL
        assert seen[0].url.params["format"] == "json"

    async def test_not_found(self) -> None:
        client, _ = build(lambda request: httpx.Response(404))

        result = await client.check_video(VIDEO)

        assert not result.is_valid
        assert result.error == "Video not found or private"

    async def test_server_error(self) -> None:
        client, _ = build(lambda request: httpx.Response(500))

        result = await client.check_video(VIDEO)

        assert not result.is_valid
        assert result.error == "HTTP 500: Internal Server Error"

    async def test_malformed_body(self) -> None:
        client, _ = build(lambda request: httpx.Response(200, text="<html>"))

        result = await client.check_video(VIDEO)

        assert not result.is_valid
        assert result.error == "Malformed oEmbed response"

    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = build(handler)
        result = await client.check_video(VIDEO)

        assert not result.is_valid
        assert result.error == "connection refused"

    async def test_invalid_url_skips_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            pytest.fail("no request expected")

        client, _ = build(handler)
        result = await client.check_video("https://vimeo.com/123")

        assert not result.is_valid
        assert result.error == "Invalid YouTube URL format"


class TestCheckVideos:
    async def test_partitions_results(self) -> None:
        dead = "https://www.youtube.com/watch?v=aaaaaaaaaaa"

        def handler(request: httpx.Request) -> httpx.Response:
            if "aaaaaaaaaaa" in request.url.params["url"]:
                return httpx.Response(404)
            return httpx.Response(200, json={"title": "ok"})

        client, _ = build(handler)
        batch = await client.check_videos([VIDEO, dead, "nonsense"])

        assert batch.valid == [VIDEO]
        assert [r.url for r in batch.invalid] == [dead, "nonsense"]

    async def test_empty_batch(self) -> None:
        client, _ = build(lambda request: httpx.Response(200, json={}))

        batch = await client.check_videos([])

        assert batch.valid == []
        assert batch.invalid == []


class TestClose:
    async def test_injected_client_is_left_open(self) -> None:
        client, http = build(lambda request: httpx.Response(200, json={}))

        await client.close()

        assert not http.is_closed
        await http.aclose()

    async def test_own_client_is_closed(self) -> None:
        client = YouTubeOEmbedClient(YouTubeSettings(timeout=2.0))
        http = await client._get_client()

        await client.close()

        assert http.is_closed
