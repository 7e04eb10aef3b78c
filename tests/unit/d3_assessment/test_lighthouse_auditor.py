"""
Unit tests for the Lighthouse auditor

Tests cover:
1. Report reduction to the performance section
2. Successful audit
3. Timeout, CLI failure and missing binary statuses
4. Subprocess invocation and temp file handling
"""
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from core.config import Settings
from d3_assessment.assessors.lighthouse import LighthouseAuditor, parse_lighthouse_report
from d3_assessment.types import AuditStatus, AuditType

pytestmark = pytest.mark.unit


@pytest.fixture
def lighthouse_report():
    """Trimmed Lighthouse JSON report"""
    return {
        "lighthouseVersion": "11.4.0",
        "categories": {
            "performance": {"score": 0.87},
            "accessibility": {"score": 0.93},
            "seo": {"score": None},
        },
        "audits": {
            "largest-contentful-paint": {"numericValue": 2310.5},
            "cumulative-layout-shift": {"numericValue": 0.04},
            "total-blocking-time": {"numericValue": 120},
            "render-blocking-resources": {"displayValue": "Potential savings of 450 ms"},
            "unused-javascript": {"displayValue": ""},
        },
    }


@pytest.fixture
def auditor():
    return LighthouseAuditor(settings=Settings(_env_file=None, lighthouse_timeout=5))


class TestParseReport:
    def test_scores_and_metrics(self, lighthouse_report):
        section = parse_lighthouse_report(lighthouse_report)

        assert section["performanceScore"] == 87
        assert section["accessibilityScore"] == 93
        assert section["seoScore"] is None
        assert section["lcp"] == 2310.5
        assert section["cls"] == 0.04
        assert section["tbt"] == 120
        assert section["lighthouseVersion"] == "11.4.0"
        assert section["keyAudits"] == {
            "renderBlocking": "Potential savings of 450 ms",
            "unusedJS": None,
            "imageOptimization": None,
            "thirdPartyRequests": None,
        }

    def test_empty_report(self):
        section = parse_lighthouse_report({})

        assert section["performanceScore"] is None
        assert section["lcp"] is None


class TestLighthouseAuditor:
    def test_audit_type(self, auditor):
        assert auditor.audit_type == AuditType.PERFORMANCE

    @pytest.mark.asyncio
    async def test_successful_audit(self, auditor, lighthouse_report):
        with patch.object(auditor, "is_available", return_value=True), patch.object(
            auditor, "_run_lighthouse", new=AsyncMock(return_value=lighthouse_report)
        ) as mock_run:
            result = await auditor.audit("https://example.com")

        mock_run.assert_awaited_once_with("https://example.com")
        assert result.status == AuditStatus.COMPLETED
        assert result.succeeded
        assert result.data["performanceScore"] == 87

    @pytest.mark.asyncio
    async def test_timeout(self, auditor):
        with patch.object(auditor, "is_available", return_value=True), patch.object(
            auditor, "_run_lighthouse", new=AsyncMock(side_effect=asyncio.TimeoutError())
        ):
            result = await auditor.audit("https://example.com")

        assert result.status == AuditStatus.TIMEOUT
        assert "timed out after 5.0s" in result.error_message

    @pytest.mark.asyncio
    async def test_cli_failure(self, auditor):
        with patch.object(auditor, "is_available", return_value=True), patch.object(
            auditor, "_run_lighthouse", new=AsyncMock(side_effect=RuntimeError("Lighthouse CLI failed: boom"))
        ):
            result = await auditor.audit("https://example.com")

        assert result.status == AuditStatus.FAILED
        assert result.data == {}

    @pytest.mark.asyncio
    async def test_missing_binary_is_skipped(self, auditor):
        with patch("d3_assessment.assessors.lighthouse.shutil.which", return_value=None):
            result = await auditor.audit("https://example.com")

        assert result.status == AuditStatus.SKIPPED
        assert not result.succeeded

    @pytest.mark.asyncio
    async def test_run_lighthouse_reads_output_file(self, auditor, lighthouse_report):
        """The CLI writes its report to --output-path; the temp file is removed afterwards"""
        written = {}

        async def fake_exec(*cmd, **kwargs):
            output = next(arg for arg in cmd if arg.startswith("--output-path="))
            path = output.split("=", 1)[1]
            with open(path, "w") as f:
                json.dump(lighthouse_report, f)
            written["path"] = path
            written["cmd"] = cmd
            process = MagicMock()
            process.returncode = 0
            process.communicate = AsyncMock(return_value=(b"", b""))
            return process

        with patch("d3_assessment.assessors.lighthouse.asyncio.create_subprocess_exec", new=fake_exec):
            report = await auditor._run_lighthouse("https://example.com")

        assert report == lighthouse_report
        assert written["cmd"][:2] == ("lighthouse", "https://example.com")
        assert "--only-categories=performance,accessibility,seo" in written["cmd"]
        with pytest.raises(FileNotFoundError):
            open(written["path"])

    @pytest.mark.asyncio
    async def test_run_lighthouse_non_zero_exit(self, auditor):
        process = MagicMock()
        process.returncode = 1
        process.communicate = AsyncMock(return_value=(b"", b"Chrome failed to start"))

        with patch(
            "d3_assessment.assessors.lighthouse.asyncio.create_subprocess_exec",
            new=AsyncMock(return_value=process),
        ):
            with pytest.raises(RuntimeError, match="Chrome failed to start"):
                await auditor._run_lighthouse("https://example.com")
