"""
Type definitions for deep audits
"""
from enum import Enum


class AuditType(str, Enum):
    """Kinds of optional deep audit"""

    PERFORMANCE = "performance"
    ACCESSIBILITY = "accessibility"


class AuditStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    TIMEOUT = "timeout"
    SKIPPED = "skipped"
