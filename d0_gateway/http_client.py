"""
Lightweight HTTP fetch used before any browser escalation
"""
import asyncio
from typing import Optional

import aiohttp

from core.config import get_settings
from core.logging import get_logger

from .types import HttpResponse

logger = get_logger(__name__, domain="d0")


async def fetch_text(
    url: str,
    timeout: Optional[float] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> Optional[HttpResponse]:
    """
    GET a URL and return its decoded body, status and headers.

    Network errors and timeouts are not raised: they return None so the
    caller can fall back to another strategy. Non-2xx responses are returned
    as-is; callers decide via ``HttpResponse.ok``.

    Args:
        url: Absolute URL to fetch
        timeout: Total timeout in seconds (defaults to FETCH_TIMEOUT)
        session: Optional shared ClientSession

    Returns:
        HttpResponse or None on failure
    """
    settings = get_settings()
    client_timeout = aiohttp.ClientTimeout(total=timeout or settings.fetch_timeout)
    headers = {"User-Agent": settings.user_agent, "Accept": "text/html,application/xhtml+xml,*/*"}

    own_session = session is None
    if own_session:
        session = aiohttp.ClientSession(timeout=client_timeout, headers=headers)

    try:
        async with session.get(url, allow_redirects=True, timeout=client_timeout, headers=headers) as response:
            text = await response.text(errors="replace")
            return HttpResponse(
                url=str(response.url),
                status=response.status,
                text=text,
                headers={k.lower(): v for k, v in response.headers.items()},
            )
    except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
        logger.warning(f"Fetch failed for {url}: {e!r}")
        return None
    finally:
        if own_session:
            await session.close()
