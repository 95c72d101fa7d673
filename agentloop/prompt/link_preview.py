"""
Link previews for URLs found in user input.

URLs are extracted from the input text, fetched concurrently with httpx
(following redirects) and turned into LinkPreview records with the final URL
and the page title. Previews that fail to load are dropped.
"""

import asyncio
import html
import re

import httpx

from agentloop.domain.context import LinkPreview
from agentloop.utils.logging import get_logger

logger = get_logger(__name__)

URL_PATTERN = re.compile(r"https?://[^\s<>\"'`]+", re.IGNORECASE)
TITLE_PATTERN = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)

# Sentence punctuation that commonly trails a URL in prose
TRAILING_PUNCTUATION = ".,;:!?)]}"

MAX_BODY_CHARS = 200_000


def extract_urls(text: str) -> list[str]:
    """URLs in order of first appearance, without duplicates."""
    urls: list[str] = []
    for match in URL_PATTERN.finditer(text):
        url = match.group(0).rstrip(TRAILING_PUNCTUATION)
        if url not in urls:
            urls.append(url)
    return urls


def extract_title(body: str) -> str | None:
    match = TITLE_PATTERN.search(body[:MAX_BODY_CHARS])
    if not match:
        return None
    title = " ".join(html.unescape(match.group(1)).split())
    return title or None


class LinkPreviewProvider:
    """
    Fetches link previews.

    Args:
        timeout: Per-request timeout in seconds
        client: Optional shared httpx.AsyncClient (not closed by the provider)
    """

    def __init__(self, timeout: float = 5.0, client: httpx.AsyncClient | None = None):
        self._timeout = timeout
        self._client = client

    async def fetch(self, url: str) -> LinkPreview:
        """
        Fetch a single preview.

        Raises:
            httpx.HTTPError: Request failed or returned an error status
            httpx.InvalidURL: The URL cannot be requested
        """
        if self._client is not None:
            response = await self._client.get(url, follow_redirects=True, timeout=self._timeout)
        else:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                response = await client.get(url)
        response.raise_for_status()

        title = None
        if "html" in response.headers.get("content-type", "html"):
            title = extract_title(response.text)

        return LinkPreview(original_url=url, url=str(response.url), title=title)

    async def fetch_all(self, urls: list[str]) -> list[LinkPreview]:
        """
        Fetch previews concurrently.

        Any failed fetch (HTTP error, malformed URL, ...) is logged and left
        out. Only cancellation propagates.
        """
        if not urls:
            return []

        results = await asyncio.gather(*(self.fetch(url) for url in urls), return_exceptions=True)

        previews: list[LinkPreview] = []
        for url, result in zip(urls, results):
            if isinstance(result, Exception):
                logger.warning(
                    "link_preview_failed",
                    url=url,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                continue
            if isinstance(result, BaseException):
                raise result
            previews.append(result)
        return previews

    async def previews_for(self, text: str) -> list[LinkPreview]:
        return await self.fetch_all(extract_urls(text))


__all__ = ["LinkPreviewProvider", "extract_title", "extract_urls"]
