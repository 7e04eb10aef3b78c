"""
Deep audit coordinator

Runs the optional auditors concurrently. A failing, timed-out or unavailable
auditor contributes None; deep audits never fail an analysis.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.logging import get_logger

from .assessors.axe import AxeAuditor
from .assessors.base import BaseAuditor
from .assessors.lighthouse import LighthouseAuditor
from .types import AuditType

logger = get_logger(__name__, domain="d3")


@dataclass
class DeepAuditReport:
    """Sections contributed to an analysis by the deep audits"""

    performance: Optional[Dict[str, Any]] = None
    accessibility: Optional[Dict[str, Any]] = None


class DeepAuditCoordinator:
    """Fan out to every configured auditor and collect their data sections"""

    def __init__(self, auditors: Optional[List[BaseAuditor]] = None):
        self.auditors = auditors if auditors is not None else [LighthouseAuditor(), AxeAuditor()]

    async def run(self, url: str) -> DeepAuditReport:
        results = await asyncio.gather(*(a.audit(url) for a in self.auditors), return_exceptions=True)

        report = DeepAuditReport()
        for auditor, result in zip(self.auditors, results):
            if isinstance(result, Exception):
                logger.error(f"{type(auditor).__name__} raised for {url}: {result!r}")
                continue
            if not result.succeeded:
                logger.info(f"{result.audit_type.value} audit {result.status.value}: {result.error_message}")
                continue

            if result.audit_type == AuditType.PERFORMANCE:
                report.performance = result.data
            elif result.audit_type == AuditType.ACCESSIBILITY:
                report.accessibility = result.data

        return report


async def run_deep_audits(url: str, auditors: Optional[List[BaseAuditor]] = None) -> DeepAuditReport:
    return await DeepAuditCoordinator(auditors).run(url)
