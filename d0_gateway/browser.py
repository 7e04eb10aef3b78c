"""
Headless browser rendering with network response interception

Each BrowserSession owns its Playwright driver and Chromium instance for the
duration of one ``async with`` block; nothing is shared between analyses.
"""
import asyncio
import re
from typing import List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Response
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from core.config import Settings, get_settings
from core.exceptions import RenderTimeout
from core.logging import get_logger

from .types import RenderedPage, ResourceRecord

logger = get_logger(__name__, domain="d0")

_HTTP_URL = re.compile(r"^https?://", re.I)


class ResponseRecorder:
    """Collects ResourceRecords from page response events"""

    def __init__(self):
        self.records: List[ResourceRecord] = []
        self._lock = asyncio.Lock()
        self._tasks: List[asyncio.Task] = []

    def on_response(self, response: Response) -> None:
        """Playwright 'response' event handler"""
        if not _HTTP_URL.match(response.url):
            return
        self._tasks.append(asyncio.ensure_future(self._record(response)))

    async def _record(self, response: Response) -> None:
        try:
            try:
                body = await response.body()
                size = len(body) if body is not None else None
            except PlaywrightError:
                # redirects and opaque responses have no readable body
                size = None

            record = ResourceRecord(
                url=response.url,
                resource_type=response.request.resource_type,
                status=response.status,
                size=size,
                headers={k.lower(): v for k, v in response.headers.items()},
            )
        except PlaywrightError as e:
            logger.debug(f"Skipping response {response.url}: {e}")
            return

        async with self._lock:
            self.records.append(record)

    async def drain(self, timeout: float) -> List[ResourceRecord]:
        """Wait (bounded) for in-flight handlers, then return a snapshot"""
        if self._tasks:
            _, pending = await asyncio.wait(self._tasks, timeout=timeout)
            for task in pending:
                task.cancel()
            if pending:
                logger.warning(f"Dropped {len(pending)} unfinished response handlers after {timeout}s")

        async with self._lock:
            return list(self.records)


class BrowserSession:
    """
    Scoped Chromium session

    Usage:
        async with BrowserSession() as browser:
            rendered = await browser.render(url)
    """

    def __init__(self, settings: Optional[Settings] = None, headless: bool = True):
        self.settings = settings or get_settings()
        self.headless = headless
        self._playwright = None
        self._browser = None

    async def __aenter__(self) -> "BrowserSession":
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless, args=["--no-sandbox"]
            )
        except BaseException:
            await self._playwright.stop()
            self._playwright = None
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        """Release the browser and the driver; safe to call twice"""
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.warning(f"Browser close failed: {e}")
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def new_page(self) -> Page:
        """Open a page in a fresh context with the configured user agent"""
        if self._browser is None:
            raise RuntimeError("BrowserSession used outside of 'async with'")
        context = await self._browser.new_context(user_agent=self.settings.user_agent)
        return await context.new_page()

    async def navigate(self, page: Page, url: str) -> None:
        """Navigate and wait for a mostly settled network; raises RenderTimeout"""
        timeout_ms = self.settings.render_timeout * 1000
        try:
            await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise RenderTimeout(url, self.settings.render_timeout) from e

    async def render(self, url: str, collect_resources: bool = True) -> RenderedPage:
        """
        Render a page and optionally intercept every response it loads

        A navigation timeout is a partial success: whatever loaded is used.

        Args:
            url: Page to render
            collect_resources: Record network responses for resource metrics

        Returns:
            RenderedPage with HTML, DOM size and resource records
        """
        page = await self.new_page()
        recorder = ResponseRecorder()
        if collect_resources:
            page.on("response", recorder.on_response)

        timed_out = False
        try:
            try:
                await self.navigate(page, url)
            except RenderTimeout as e:
                logger.warning(f"{e.message}; using partially loaded content")
                timed_out = True

            html = await page.content()
            dom_nodes = await self._count_dom_nodes(page)
            resources = await recorder.drain(self.settings.resource_drain_timeout) if collect_resources else []
        finally:
            await page.context.close()

        logger.info(f"Rendered {url}: {len(html)} chars, {len(resources)} responses")
        return RenderedPage(url=url, html=html, dom_nodes=dom_nodes, resources=resources, timed_out=timed_out)

    @staticmethod
    async def _count_dom_nodes(page: Page) -> Optional[int]:
        try:
            return await page.evaluate("() => document.getElementsByTagName('*').length")
        except PlaywrightError as e:
            logger.debug(f"DOM node count unavailable: {e}")
            return None
