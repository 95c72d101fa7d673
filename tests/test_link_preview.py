"""
Link previews over httpx.MockTransport.
"""

import httpx
import pytest
from unittest.mock import patch

from agentloop.domain.context import LinkPreview
from agentloop.prompt.link_preview import LinkPreviewProvider, extract_title, extract_urls


def handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "old.example.com":
        return httpx.Response(301, headers={"location": "https://new.example.com/"})
    if request.url.host == "new.example.com":
        return httpx.Response(
            200, html="<html><head><title>  New &amp; Improved </title></head></html>"
        )
    if request.url.host == "data.example.com":
        return httpx.Response(200, json={"title": "not html"})
    return httpx.Response(404)


@pytest.fixture
def provider():
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return LinkPreviewProvider(timeout=1.0, client=client)


def test_extract_urls_strips_punctuation_and_duplicates():
    text = "See https://a.io/x, then (https://b.io/y). Again: https://a.io/x!"

    assert extract_urls(text) == ["https://a.io/x", "https://b.io/y"]


def test_extract_title():
    assert extract_title("<TITLE>Hello</TITLE>") == "Hello"
    assert extract_title("<title>   </title>") is None
    assert extract_title("<p>no title</p>") is None


@pytest.mark.asyncio
async def test_redirects_are_followed(provider):
    preview = await provider.fetch("http://old.example.com/")

    assert preview == LinkPreview(
        original_url="http://old.example.com/",
        url="https://new.example.com/",
        title="New & Improved",
    )


@pytest.mark.asyncio
async def test_non_html_has_no_title(provider):
    preview = await provider.fetch("https://data.example.com/")

    assert preview.title is None


@pytest.mark.asyncio
async def test_failed_previews_are_dropped(provider):
    with patch("agentloop.prompt.link_preview.logger") as mock_logger:
        previews = await provider.previews_for(
            "Compare https://missing.example.com/ with https://new.example.com/."
        )

    assert [p.url for p in previews] == ["https://new.example.com/"]
    assert mock_logger.warning.call_args[0][0] == "link_preview_failed"
    assert mock_logger.warning.call_args[1]["url"] == "https://missing.example.com/"


@pytest.mark.asyncio
async def test_no_urls_no_requests():
    provider = LinkPreviewProvider(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    assert await provider.previews_for("nothing to see") == []


@pytest.mark.asyncio
async def test_malformed_urls_are_dropped(provider):
    with patch("agentloop.prompt.link_preview.logger") as mock_logger:
        previews = await provider.previews_for(
            "Broken http://[::1]:notaport/ and working https://new.example.com/"
        )

    assert [p.url for p in previews] == ["https://new.example.com/"]
    assert mock_logger.warning.call_args[0][0] == "link_preview_failed"
    assert mock_logger.warning.call_args[1]["url"] == "http://[::1]:notaport/"
    assert mock_logger.warning.call_args[1]["error_type"] == "InvalidURL"
