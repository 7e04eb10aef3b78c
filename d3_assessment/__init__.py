"""
D3 Assessment - optional deep audits (Lighthouse performance, axe-core accessibility)
"""

from .assessors import AuditResult, AxeAuditor, BaseAuditor, LighthouseAuditor
from .coordinator import DeepAuditCoordinator, DeepAuditReport, run_deep_audits
from .types import AuditStatus, AuditType

__all__ = [
    "AuditResult",
    "AxeAuditor",
    "BaseAuditor",
    "LighthouseAuditor",
    "DeepAuditCoordinator",
    "DeepAuditReport",
    "run_deep_audits",
    "AuditStatus",
    "AuditType",
]
