"""
Unit tests for the axe-core accessibility auditor
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from core.config import Settings
from core.exceptions import RenderTimeout
from d3_assessment.assessors.axe import AXE_RUN, MAX_VIOLATIONS, AxeAuditor, summarize_axe_results
from d3_assessment.types import AuditStatus, AuditType

pytestmark = pytest.mark.unit

AXE_RESULTS = {
    "testEngine": {"name": "axe-core", "version": "4.9.1"},
    "violations": [
        {"id": "color-contrast", "impact": "serious", "help": "Elements must have sufficient contrast", "nodes": [1]},
        {"id": "image-alt", "impact": "critical", "description": "Images must have alt text", "nodes": [1, 2, 3]},
    ],
}


class FakeBrowser:
    """BrowserSession stand-in exposing new_page/navigate"""

    def __init__(self, page, navigate_error=None, enter_error=None):
        self.page = page
        self.navigate_error = navigate_error
        self.enter_error = enter_error

    def __call__(self, settings=None):
        return self

    async def __aenter__(self):
        if self.enter_error is not None:
            raise self.enter_error
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def new_page(self):
        return self.page

    async def navigate(self, page, url):
        if self.navigate_error is not None:
            raise self.navigate_error


def fake_page(results=AXE_RESULTS):
    page = MagicMock()
    page.add_script_tag = AsyncMock()
    page.evaluate = AsyncMock(return_value=results)
    page.context.close = AsyncMock()
    return page


@pytest.fixture
def axe_script(tmp_path):
    path = tmp_path / "axe.min.js"
    path.write_text("window.axe = {};")
    return str(path)


class TestSummarizeAxeResults:
    def test_sorted_by_affected_nodes(self):
        summary = summarize_axe_results(AXE_RESULTS)

        assert summary["violationCount"] == 2
        assert summary["axeVersion"] == "4.9.1"
        assert summary["violations"][0] == {
            "id": "image-alt",
            "impact": "critical",
            "description": "Images must have alt text",
            "nodes": 3,
        }

    def test_violation_list_is_capped(self):
        results = {"violations": [{"id": f"rule-{i}", "nodes": []} for i in range(40)]}

        summary = summarize_axe_results(results)

        assert summary["violationCount"] == 40
        assert len(summary["violations"]) == MAX_VIOLATIONS


class TestAxeAuditor:
    def test_audit_type(self):
        assert AxeAuditor(settings=Settings(_env_file=None)).audit_type == AuditType.ACCESSIBILITY

    @pytest.mark.asyncio
    async def test_skipped_without_script(self):
        auditor = AxeAuditor(settings=Settings(_env_file=None, axe_script_path=None))

        result = await auditor.audit("https://example.com")

        assert result.status == AuditStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_successful_audit(self, axe_script):
        page = fake_page()
        auditor = AxeAuditor(settings=Settings(_env_file=None, axe_script_path=axe_script), session_factory=FakeBrowser(page))

        result = await auditor.audit("https://example.com")

        assert result.status == AuditStatus.COMPLETED
        assert result.data["violationCount"] == 2
        page.add_script_tag.assert_awaited_once_with(path=axe_script)
        page.evaluate.assert_awaited_once_with(AXE_RUN)
        page.context.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_render_timeout_still_audits(self, axe_script):
        page = fake_page()
        browser = FakeBrowser(page, navigate_error=RenderTimeout("https://example.com", 30))
        auditor = AxeAuditor(settings=Settings(_env_file=None, axe_script_path=axe_script), session_factory=browser)

        result = await auditor.audit("https://example.com")

        assert result.status == AuditStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_browser_failure(self, axe_script):
        browser = FakeBrowser(fake_page(), enter_error=PlaywrightError("Executable doesn't exist"))
        auditor = AxeAuditor(settings=Settings(_env_file=None, axe_script_path=axe_script), session_factory=browser)

        result = await auditor.audit("https://example.com")

        assert result.status == AuditStatus.FAILED
        assert "Executable doesn't exist" in result.error_message
