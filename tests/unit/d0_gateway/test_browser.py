"""
Unit tests for the browser session helpers that do not need Chromium
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from core.config import Settings
from core.exceptions import RenderTimeout
from d0_gateway.browser import BrowserSession, ResponseRecorder
from d0_gateway.types import RenderedPage, ResourceRecord

pytestmark = pytest.mark.unit


def fake_response(url, resource_type="script", body=b"x" * 10, status=200, headers=None):
    response = MagicMock()
    response.url = url
    response.status = status
    response.headers = headers or {"Content-Type": "application/javascript"}
    response.request.resource_type = resource_type
    if isinstance(body, Exception):
        response.body = AsyncMock(side_effect=body)
    else:
        response.body = AsyncMock(return_value=body)
    return response


class TestResponseRecorder:
    @pytest.mark.asyncio
    async def test_records_http_responses(self):
        recorder = ResponseRecorder()

        recorder.on_response(fake_response("https://shop.example/app.js"))
        recorder.on_response(fake_response("data:image/png;base64,AAAA", resource_type="image"))
        records = await recorder.drain(timeout=1)

        assert records == [
            ResourceRecord(
                url="https://shop.example/app.js",
                resource_type="script",
                status=200,
                size=10,
                headers={"content-type": "application/javascript"},
            )
        ]

    @pytest.mark.asyncio
    async def test_unreadable_body_has_no_size(self):
        recorder = ResponseRecorder()

        recorder.on_response(fake_response("https://shop.example/", "document", body=PlaywrightError("redirect")))
        records = await recorder.drain(timeout=1)

        assert records[0].size is None
        assert records[0].resource_type == "document"

    @pytest.mark.asyncio
    async def test_drain_drops_stuck_handlers(self):
        recorder = ResponseRecorder()

        async def never():
            await asyncio.sleep(10)

        stuck = fake_response("https://shop.example/slow.js")
        stuck.body = AsyncMock(side_effect=never)
        recorder.on_response(stuck)
        records = await recorder.drain(timeout=0.05)

        assert records == []


class TestBrowserSession:
    @pytest.mark.asyncio
    async def test_new_page_requires_context_manager(self):
        session = BrowserSession(settings=Settings(_env_file=None))

        with pytest.raises(RuntimeError):
            await session.new_page()

    @pytest.mark.asyncio
    async def test_navigate_timeout_becomes_render_timeout(self):
        session = BrowserSession(settings=Settings(_env_file=None, render_timeout=2))
        page = MagicMock()
        page.goto = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 2000ms exceeded"))

        with pytest.raises(RenderTimeout):
            await session.navigate(page, "https://slow.example/")

        page.goto.assert_awaited_once_with("https://slow.example/", wait_until="networkidle", timeout=2000)

    @pytest.mark.asyncio
    async def test_render_uses_partial_content_after_timeout(self):
        session = BrowserSession(settings=Settings(_env_file=None))
        page = MagicMock()
        page.content = AsyncMock(return_value="<html>partial</html>")
        page.evaluate = AsyncMock(return_value=12)
        page.context.close = AsyncMock()
        session.new_page = AsyncMock(return_value=page)
        session.navigate = AsyncMock(side_effect=RenderTimeout("https://slow.example/", 30))

        rendered = await session.render("https://slow.example/", collect_resources=False)

        assert rendered == RenderedPage(
            url="https://slow.example/", html="<html>partial</html>", dom_nodes=12, resources=[], timed_out=True
        )
        page.context.close.assert_awaited_once()

    def test_document_headers(self):
        page = RenderedPage(
            url="https://shop.example/",
            html="",
            resources=[
                ResourceRecord("https://shop.example/app.js", "script", 200, 1, {"a": "1"}),
                ResourceRecord("https://shop.example/", "document", 200, 1, {"server": "nginx"}),
            ],
        )

        assert page.document_headers() == {"server": "nginx"}
        assert RenderedPage(url="u", html="").document_headers() is None
