"""
Deep audit auditors
"""

from d3_assessment.assessors.axe import AxeAuditor
from d3_assessment.assessors.base import AuditResult, BaseAuditor
from d3_assessment.assessors.lighthouse import LighthouseAuditor

__all__ = [
    "AuditResult",
    "BaseAuditor",
    "LighthouseAuditor",
    "AxeAuditor",
]
