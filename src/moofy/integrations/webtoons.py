"""Scraping of Webtoons series pages (``webtoons.com/<lang>/<genre>/<name>/list``).

Only the parts shown by ``:webtoon check`` are extracted: the series title,
the thumbnail of the newest episode and the five newest episodes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup

from .http import fetch_text

__all__ = [
    "VALID_ID",
    "VALID_URL",
    "WebtoonEpisode",
    "WebtoonPage",
    "parse_webtoon_page",
    "fetch_webtoon",
]

_log = logging.getLogger(__name__)

# The Korean site lives on Naver and is not supported
VALID_ID = re.compile(r"^[\w-]+$")
VALID_URL = re.compile(r"^https?://(\w+\.)?webtoons.com/")

EPISODE_LIMIT = 5

NO_TITLE = "[Couldn't get title]"
NO_EPISODE_NAME = "[Couldn't get episode name]"
NO_EPISODE_DATE = "[Couldn't get episode date]"


@dataclass
class WebtoonEpisode:
    name: str
    date: str
    link: str
    up: bool = False


@dataclass
class WebtoonPage:
    url: str
    title: str
    image: Optional[str] = None
    episodes: list[WebtoonEpisode] = field(default_factory=list)


def _text(node) -> Optional[str]:
    if node is None:
        return None
    text = node.get_text(strip=True)
    return text or None


def parse_webtoon_page(html: str, url: str) -> WebtoonPage:
    """Extract a :class:`WebtoonPage` from a series list page.

    Missing pieces are replaced by placeholders rather than raising, since
    Webtoons changes its markup from time to time.
    """

    soup = BeautifulSoup(html, "html.parser")

    title = _text(soup.select_one("h1.subj")) or NO_TITLE

    # Webtoons checks the Referer header for these, so they may not render
    image_node = soup.select_one(".detail_lst .thmb > img")
    image = image_node.get("src") if image_node is not None else None

    episodes: list[WebtoonEpisode] = []
    for item in soup.select(".detail_lst li")[:EPISODE_LIMIT]:
        anchor = item.find("a", href=True)
        episodes.append(
            WebtoonEpisode(
                name=_text(item.select_one(".subj > span")) or NO_EPISODE_NAME,
                date=_text(item.select_one(".date")) or NO_EPISODE_DATE,
                link=anchor["href"] if anchor is not None else url,
                up=item.select_one(".tx_up") is not None,
            )
        )

    return WebtoonPage(url=url, title=title, image=image or None, episodes=episodes)


async def fetch_webtoon(url: str) -> WebtoonPage:
    """Download and parse the series page at *url*. Raises ``FetchError``."""

    html = await fetch_text(url)
    page = parse_webtoon_page(html, url)
    _log.debug("Scraped %s: %d episode(s)", url, len(page.episodes))
    return page
