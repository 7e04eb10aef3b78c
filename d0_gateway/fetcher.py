"""
Fetch orchestration: lightweight request first, browser render when needed

The two stages are strictly sequential. Escalation happens when the
lightweight fetch failed, returned no body or an implausibly small one, or
when resource metrics are requested (those only exist in a real render).
"""
import asyncio
from typing import Callable, Optional

from playwright.async_api import Error as PlaywrightError

from core.config import get_settings
from core.exceptions import CouldNotFetch
from core.logging import get_logger

from .browser import BrowserSession
from .http_client import fetch_text
from .resources import summarize_resources
from .types import FetchOptions, FetchSource, PageFetch

logger = get_logger(__name__, domain="d0")


async def fetch_page(
    url: str,
    options: Optional[FetchOptions] = None,
    session_factory: Callable[..., BrowserSession] = BrowserSession,
) -> PageFetch:
    """
    Retrieve HTML, response headers and (optionally) resource metrics

    Args:
        url: Normalized absolute URL
        options: Fetch behaviour; defaults come from settings
        session_factory: Browser session constructor (swappable in tests)

    Returns:
        PageFetch

    Raises:
        CouldNotFetch: neither strategy produced any HTML
    """
    settings = get_settings()
    options = options or FetchOptions(collect_resources=settings.collect_resources)
    log = logger.with_context(url=url)

    html: Optional[str] = None
    headers = {}

    response = await fetch_text(url, timeout=settings.fetch_timeout)
    if response is None:
        log.info("Lightweight fetch failed; escalating to browser render")
    elif not response.ok:
        log.info(f"Lightweight fetch returned HTTP {response.status}; escalating to browser render")
    elif not response.text:
        log.info("Lightweight fetch returned an empty body; escalating to browser render")
    else:
        html = response.text
        headers = response.headers

    too_small = html is not None and len(html.encode("utf-8")) < settings.min_html_bytes
    if too_small:
        log.info(f"Lightweight body below {settings.min_html_bytes} bytes; escalating to browser render")

    if html is not None and not too_small and not (options.collect_resources or options.force_render):
        return PageFetch(url=url, html=html, headers=headers, source=FetchSource.HTTP)

    try:
        async with session_factory(settings) as browser:
            rendered = await browser.render(url, collect_resources=options.collect_resources)
    except (PlaywrightError, OSError, asyncio.TimeoutError) as e:
        if not html:
            raise CouldNotFetch(url, e) from e
        log.warning(f"Browser render failed, keeping lightweight HTML: {e!r}")
        return PageFetch(url=url, html=html, headers=headers, source=FetchSource.HTTP)

    source = FetchSource.HTTP
    if (html is None or too_small or options.force_render) and rendered.html:
        html = rendered.html
        source = FetchSource.BROWSER
    if not html:
        raise CouldNotFetch(url)

    if not headers:
        headers = rendered.document_headers() or {}

    summary = None
    if options.collect_resources:
        summary = summarize_resources(rendered.resources, url, rendered.dom_nodes)

    return PageFetch(
        url=url,
        html=html,
        headers=headers,
        source=source,
        resource_summary=summary,
        render_timed_out=rendered.timed_out,
    )
