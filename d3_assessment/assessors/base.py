"""
Base auditor class for optional deep audits
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from d3_assessment.types import AuditStatus, AuditType


@dataclass
class AuditResult:
    """Result of a deep audit"""

    audit_type: AuditType
    status: AuditStatus
    data: dict[str, Any] = field(default_factory=dict)
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == AuditStatus.COMPLETED


class BaseAuditor(ABC):
    """Abstract base class for all deep auditors"""

    timeout: float = 30

    @property
    @abstractmethod
    def audit_type(self) -> AuditType:
        """Get the type of audit this auditor performs"""

    @abstractmethod
    async def audit(self, url: str) -> AuditResult:
        """
        Perform the audit

        Implementations never raise for audit failures; they return a result
        with a failed/timeout/skipped status instead.

        Args:
            url: Page URL to audit

        Returns:
            AuditResult with data specific to the audit type
        """

    def is_available(self) -> bool:
        """Check if this auditor can run (tooling installed, assets configured)"""
        return True
