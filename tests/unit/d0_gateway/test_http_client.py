"""
Unit tests for the lightweight HTTP fetch
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from d0_gateway.http_client import fetch_text

pytestmark = pytest.mark.unit


def mock_session(status=200, text="<html></html>", headers=None, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
        return session
    response = MagicMock()
    response.status = status
    response.url = "https://example.com/final"
    response.headers = headers or {"Content-Type": "text/html", "Strict-Transport-Security": "max-age=1"}
    response.text = AsyncMock(return_value=text)
    session.get.return_value.__aenter__ = AsyncMock(return_value=response)
    session.get.return_value.__aexit__ = AsyncMock(return_value=False)
    return session


class TestFetchText:
    @pytest.mark.asyncio
    async def test_success(self):
        session = mock_session()

        response = await fetch_text("https://example.com/", timeout=3, session=session)

        assert response.ok
        assert response.url == "https://example.com/final"
        assert response.text == "<html></html>"
        assert response.headers["strict-transport-security"] == "max-age=1"
        session.close.assert_not_called()

    @pytest.mark.asyncio
    async def test_error_status_is_returned(self):
        response = await fetch_text("https://example.com/", session=mock_session(status=404, text="nope"))

        assert response.status == 404
        assert not response.ok

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()])
    async def test_network_errors_return_none(self, error):
        assert await fetch_text("https://example.com/", session=mock_session(error=error)) is None
