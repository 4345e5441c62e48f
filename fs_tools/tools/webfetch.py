"""WebFetch tool for fetching a webpage as readable text."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Annotated

import httpx
from bs4 import BeautifulSoup

from ..data_structures import TextContent
from .base import Desc, Tool, error_result, parse_int, success_result

logger = logging.getLogger(__name__)

_USER_AGENT = "fs-tools/0.1 (+https://modelcontextprotocol.io)"
_NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]


@dataclass
class FetchWebpageInput:
    """Input for FetchWebpageTool."""

    url: Annotated[str, Desc("The URL of the webpage to fetch or read")]
    timeoutMs: Annotated[
        int, Desc("Optional: Connection timeout in milliseconds (default: 10000)")
    ] = 0


def html_to_text(html: str) -> tuple[str, str]:
    """Return (title, visible text) for an HTML document.

    Whitespace runs in the text are collapsed to single spaces.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = ""
    if soup.title and soup.title.string:
        title = soup.title.string.strip()

    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()

    root = soup.body or soup
    text = " ".join(root.get_text(separator=" ").split())
    return title, text


@dataclass
class FetchWebpageTool(Tool):
    """Fetches a URL and returns its title and visible text."""

    name: str = "fetchWebpage"
    description: str = """Fetch or read a webpage from a URL and return its text content.

The page is downloaded over HTTP(S), redirects are followed, and the HTML is reduced to
its visible text (scripts and styles removed) together with the page title.

Usage:
- URL must be a fully-formed http:// or https:// URL
- timeoutMs sets the request timeout in milliseconds (default 10000)"""

    default_timeout_ms: int = 10000
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    async def __call__(self, input: FetchWebpageInput) -> TextContent:
        """Fetch URL content and return it as text."""
        url = (input.url or "").strip()
        if not url.startswith(("http://", "https://")):
            return error_result(
                "Failed to access url: URL must start with http:// or https://",
                url=input.url,
            )

        timeout_ms = parse_int(input.timeoutMs, "timeoutMs")
        if timeout_ms <= 0:
            timeout_ms = self.default_timeout_ms

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout_ms / 1000),
                follow_redirects=True,
                headers={"User-Agent": _USER_AGENT},
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                title, content = html_to_text(response.text)
        except httpx.TimeoutException:
            return error_result(
                f"Failed to access url: request timed out after {timeout_ms} ms",
                url=input.url,
            )
        except httpx.HTTPError as e:
            logger.warning("fetchWebpage %s: %s", url, e)
            return error_result(f"Failed to access url: {e}", url=input.url)
        except Exception as e:
            logger.exception("fetchWebpage %s: unexpected failure", url)
            return error_result(f"Failed to access url: {e}", url=input.url)

        return success_result(url=input.url, title=title, content=content)
