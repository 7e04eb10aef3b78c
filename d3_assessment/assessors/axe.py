"""
Automated accessibility auditor using axe-core in the browser

axe-core is injected from a local script file (AXE_SCRIPT_PATH) into a page
rendered through a scoped BrowserSession.
"""

import asyncio
import os
from typing import Any, Callable

from playwright.async_api import Error as PlaywrightError

from core.config import Settings, get_settings
from core.exceptions import RenderTimeout
from core.logging import get_logger
from d0_gateway.browser import BrowserSession
from d3_assessment.assessors.base import AuditResult, BaseAuditor
from d3_assessment.types import AuditStatus, AuditType

logger = get_logger(__name__, domain="d3")

AXE_RUN = "async () => await axe.run(document, {resultTypes: ['violations']})"
MAX_VIOLATIONS = 25


def summarize_axe_results(results: dict[str, Any]) -> dict[str, Any]:
    """Violation count plus a compact violation list, most impacted nodes first"""
    violations = results.get("violations") or []
    compact = [
        {
            "id": v.get("id"),
            "impact": v.get("impact"),
            "description": v.get("help") or v.get("description"),
            "nodes": len(v.get("nodes") or []),
        }
        for v in violations
    ]
    compact.sort(key=lambda v: -v["nodes"])
    return {
        "violationCount": len(violations),
        "violations": compact[:MAX_VIOLATIONS],
        "axeVersion": (results.get("testEngine") or {}).get("version"),
    }


class AxeAuditor(BaseAuditor):
    """Audit accessibility by running axe-core against the rendered page"""

    def __init__(
        self,
        settings: Settings | None = None,
        session_factory: Callable[..., BrowserSession] = BrowserSession,
    ):
        super().__init__()
        self.settings = settings or get_settings()
        self.script_path = self.settings.axe_script_path
        self.timeout = self.settings.axe_timeout
        self.session_factory = session_factory

    @property
    def audit_type(self) -> AuditType:
        return AuditType.ACCESSIBILITY

    async def _run_axe(self, url: str) -> dict[str, Any]:
        async with self.session_factory(self.settings) as browser:
            page = await browser.new_page()
            try:
                try:
                    await browser.navigate(page, url)
                except RenderTimeout as e:
                    logger.warning(f"{e.message}; auditing partially loaded page")
                await page.add_script_tag(path=self.script_path)
                return await page.evaluate(AXE_RUN)
            finally:
                await page.context.close()

    async def audit(self, url: str) -> AuditResult:
        if not self.is_available():
            return AuditResult(
                audit_type=self.audit_type,
                status=AuditStatus.SKIPPED,
                error_message="axe-core script not configured",
            )

        try:
            results = await asyncio.wait_for(self._run_axe(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"axe audit timed out after {self.timeout}s for {url}")
            return AuditResult(
                audit_type=self.audit_type,
                status=AuditStatus.TIMEOUT,
                error_message=f"axe audit timed out after {self.timeout}s",
            )
        except (PlaywrightError, OSError) as e:
            logger.error(f"axe audit failed for {url}: {e}")
            return AuditResult(
                audit_type=self.audit_type,
                status=AuditStatus.FAILED,
                error_message=f"axe audit error: {str(e)}",
            )

        return AuditResult(
            audit_type=self.audit_type,
            status=AuditStatus.COMPLETED,
            data=summarize_axe_results(results or {}),
        )

    def is_available(self) -> bool:
        """axe runs only when a readable script file is configured"""
        return bool(self.script_path) and os.path.isfile(self.script_path)
