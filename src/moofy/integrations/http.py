"""Outbound HTTP used by the whois and Webtoon commands.

Every request gets an explicit timeout so a slow remote server can only hold
up the one command that asked for it.
"""

from __future__ import annotations

import logging

import httpx

from moofy.config import get_settings
from moofy.errors import FetchError

__all__ = [
    "USER_AGENT",
    "fetch_text",
]

_log = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; moofy-bot; +https://github.com/SheepTester/ornery-bot)"


async def fetch_text(url: str, *, timeout: float | None = None, client: httpx.AsyncClient | None = None) -> str:
    """GET *url* and return the decoded body.

    Raises :class:`FetchError` on transport errors, timeouts and non-2xx
    responses. A caller-supplied *client* is used as-is (handy in tests).
    """

    if timeout is None:
        timeout = get_settings().http_timeout

    headers = {"User-Agent": USER_AGENT}
    try:
        if client is not None:
            response = await client.get(url, headers=headers, timeout=timeout, follow_redirects=True)
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
                response = await owned.get(url, headers=headers)
    except httpx.TimeoutException as exc:
        _log.info("Timed out fetching %s", url)
        raise FetchError(url, f"timed out after {timeout:g} seconds") from exc
    except (httpx.InvalidURL, ValueError) as exc:
        _log.info("Refusing to fetch malformed URL %s: %s", url, exc)
        raise FetchError(url, "invalid URL") from exc
    except httpx.HTTPError as exc:
        _log.info("Failed to fetch %s: %s", url, exc)
        raise FetchError(url, str(exc) or exc.__class__.__name__) from exc

    if not response.is_success:
        raise FetchError(url, f"HTTP {response.status_code}")
    return response.text
