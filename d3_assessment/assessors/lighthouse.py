"""
Page performance auditor using the Lighthouse CLI

Runs the CLI as a subprocess with JSON output to a temp file and reduces the
report to category scores, core metrics and a few key audit summaries.
"""

import asyncio
import json
import os
import shutil
import tempfile
from typing import Any

from core.config import Settings, get_settings
from core.logging import get_logger
from d3_assessment.assessors.base import AuditResult, BaseAuditor
from d3_assessment.types import AuditStatus, AuditType

logger = get_logger(__name__, domain="d3")

CATEGORIES = ("performance", "accessibility", "seo")

KEY_AUDITS = {
    "renderBlocking": "render-blocking-resources",
    "unusedJS": "unused-javascript",
    "imageOptimization": "uses-optimized-images",
    "thirdPartyRequests": "third-party-summary",
}


def _category_score(categories: dict[str, Any], name: str) -> int | None:
    score = (categories.get(name) or {}).get("score")
    if score is None:
        return None
    return round(score * 100)


def _numeric(audits: dict[str, Any], audit_id: str) -> float | None:
    return (audits.get(audit_id) or {}).get("numericValue")


def parse_lighthouse_report(report: dict[str, Any]) -> dict[str, Any]:
    """Reduce a Lighthouse JSON report to the performance section of an analysis"""
    categories = report.get("categories", {})
    audits = report.get("audits", {})

    return {
        "performanceScore": _category_score(categories, "performance"),
        "accessibilityScore": _category_score(categories, "accessibility"),
        "seoScore": _category_score(categories, "seo"),
        "lcp": _numeric(audits, "largest-contentful-paint"),
        "cls": _numeric(audits, "cumulative-layout-shift"),
        "tbt": _numeric(audits, "total-blocking-time"),
        "keyAudits": {
            key: (audits.get(audit_id) or {}).get("displayValue") or None for key, audit_id in KEY_AUDITS.items()
        },
        "lighthouseVersion": report.get("lighthouseVersion"),
    }


class LighthouseAuditor(BaseAuditor):
    """Audit page performance using the Lighthouse CLI"""

    def __init__(self, settings: Settings | None = None):
        super().__init__()
        self.settings = settings or get_settings()
        self.binary = self.settings.lighthouse_binary
        self.timeout = self.settings.lighthouse_timeout

    @property
    def audit_type(self) -> AuditType:
        return AuditType.PERFORMANCE

    def _build_command(self, url: str, output_path: str) -> list[str]:
        return [
            self.binary,
            url,
            "--output=json",
            "--output-path=" + output_path,
            "--only-categories=" + ",".join(CATEGORIES),
            "--chrome-flags=--headless --no-sandbox",
            "--quiet",
            "--no-enable-error-reporting",
        ]

    async def _run_lighthouse(self, url: str) -> dict[str, Any]:
        """Run the CLI and return the parsed JSON report"""
        with tempfile.NamedTemporaryFile(mode="w+", suffix=".json", delete=False) as tmp_file:
            tmp_path = tmp_file.name

        try:
            cmd = self._build_command(url, tmp_path)
            logger.info(f"Running Lighthouse CLI: {' '.join(cmd)}")

            process = await asyncio.create_subprocess_exec(
                *cmd, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
            )
            try:
                _, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
            except asyncio.TimeoutError:
                process.kill()
                await process.wait()
                raise

            if process.returncode != 0:
                message = stderr.decode(errors="replace").strip()
                logger.error(f"Lighthouse CLI failed with return code {process.returncode}: {message}")
                raise RuntimeError(f"Lighthouse CLI failed: {message}")

            with open(tmp_path) as f:
                return json.load(f)
        finally:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass

    async def audit(self, url: str) -> AuditResult:
        """
        Audit page performance with Lighthouse

        Args:
            url: Page URL to audit

        Returns:
            AuditResult whose data is the performance section
        """
        if not self.is_available():
            return AuditResult(
                audit_type=self.audit_type,
                status=AuditStatus.SKIPPED,
                error_message=f"Lighthouse CLI '{self.binary}' not found",
            )

        try:
            report = await self._run_lighthouse(url)
        except asyncio.TimeoutError:
            logger.warning(f"Lighthouse audit timed out after {self.timeout}s for {url}")
            return AuditResult(
                audit_type=self.audit_type,
                status=AuditStatus.TIMEOUT,
                error_message=f"Lighthouse audit timed out after {self.timeout}s",
            )
        except (OSError, RuntimeError, ValueError) as e:
            logger.error(f"Lighthouse audit failed for {url}: {e}")
            return AuditResult(
                audit_type=self.audit_type,
                status=AuditStatus.FAILED,
                error_message=f"Lighthouse audit error: {str(e)}",
            )

        return AuditResult(
            audit_type=self.audit_type,
            status=AuditStatus.COMPLETED,
            data=parse_lighthouse_report(report),
        )

    def is_available(self) -> bool:
        """Check the Lighthouse CLI is on PATH"""
        available = shutil.which(self.binary) is not None
        if not available:
            logger.warning(f"Lighthouse CLI '{self.binary}' not found")
        return available
