"""
Sitemap and robots.txt probes

Both probes are independent network calls with their own timeouts and run
concurrently. Neither raises: an unreachable sitemap or robots file yields
the empty result.
"""
import asyncio
import warnings
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import aiohttp
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from core.config import get_settings
from core.logging import get_logger
from core.utils import origin_of
from d0_gateway.http_client import fetch_text

logger = get_logger(__name__, domain="d1")

SITEMAP_CANDIDATES = ("/sitemap.xml", "/sitemap_index.xml")

EMPTY_SITEMAP = {"sitemapUrl": None, "pages": None, "latestSitemapDate": None}
EMPTY_ROBOTS = {"robots": None, "crawlAllowed": True}


def _parse_lastmod(value: str) -> Optional[datetime]:
    value = value.strip()
    if not value:
        return None
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_sitemap(xml: str) -> Dict[str, Any]:
    """Count <url> entries and find the most recent <lastmod>"""
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        soup = BeautifulSoup(xml, "html.parser")
    pages = len(soup.find_all("url"))
    dates: List[datetime] = [d for d in (_parse_lastmod(el.get_text()) for el in soup.find_all("lastmod")) if d]
    latest = max(dates).isoformat().replace("+00:00", "Z") if dates else None
    return {"pages": pages or None, "latestSitemapDate": latest}


def parse_robots(text: str) -> bool:
    """False when any Disallow rule targets the site root"""
    for line in text.splitlines():
        line = line.strip()
        if not line.lower().startswith("disallow:"):
            continue
        if line.split(":", 1)[1].strip() == "/":
            return False
    return True


async def probe_sitemap(url: str, session: Optional[aiohttp.ClientSession] = None) -> Dict[str, Any]:
    """First responding sitemap candidate wins"""
    settings = get_settings()
    base = origin_of(url)
    for path in SITEMAP_CANDIDATES:
        candidate = f"{base}{path}"
        response = await fetch_text(candidate, timeout=settings.sitemap_timeout, session=session)
        if response is None or not response.ok or not response.text:
            continue
        info = parse_sitemap(response.text)
        logger.debug(f"Sitemap found at {candidate}: {info['pages']} pages")
        return {"sitemapUrl": candidate, **info}
    return dict(EMPTY_SITEMAP)


async def probe_robots(url: str, session: Optional[aiohttp.ClientSession] = None) -> Dict[str, Any]:
    settings = get_settings()
    response = await fetch_text(f"{origin_of(url)}/robots.txt", timeout=settings.robots_timeout, session=session)
    if response is None or not response.ok or not response.text:
        return dict(EMPTY_ROBOTS)
    return {"robots": response.text, "crawlAllowed": parse_robots(response.text)}


async def probe_site(url: str) -> Dict[str, Dict[str, Any]]:
    """Run the sitemap and robots probes concurrently"""
    sitemap, robots = await asyncio.gather(probe_sitemap(url), probe_robots(url))
    return {"sitemap": sitemap, "robots": robots}
