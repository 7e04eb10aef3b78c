"""
Imputation builder

Works on a private deep copy of an AnalysisResult document, collects
``_imputed`` records and audit log entries, and builds a new result. The
source result is never mutated. Log entries are de-duplicated so replaying
the same corrections is a no-op.
"""
import copy
from typing import Any, Dict, List, Optional

from core.logging import get_logger
from core.utils import get_nested, set_nested
from d5_audit.models import AnalysisResult

logger = get_logger(__name__, domain="d4")


class ImputationBuilder:
    """Accumulates corrections to one analysis document"""

    def __init__(self, result: AnalysisResult):
        self.data: Dict[str, Any] = copy.deepcopy(result.to_dict(json_safe=False))
        self.imputed: Dict[str, Dict[str, Any]] = dict(self.data.pop("_imputed", None) or {})
        self.log: List[str] = list(self.data.pop("imputationLog", None) or [])

    def get(self, path: str, default: Any = None) -> Any:
        return get_nested(self.data, path, default)

    def set(self, path: str, value: Any) -> None:
        set_nested(self.data, path, value)

    def section(self, path: str) -> Dict[str, Any]:
        """Dict at ``path``, created (or replaced if not a dict) when needed"""
        value = self.get(path)
        if not isinstance(value, dict):
            value = {}
            self.set(path, value)
        return value

    def note(self, message: str) -> None:
        if message not in self.log:
            self.log.append(message)
            logger.debug(message)

    def estimated(self, field: str, method: str, message: Optional[str] = None) -> None:
        """Record that ``field`` now holds a heuristic estimate"""
        self.imputed[field] = {"estimated": True, "method": method}
        if message:
            self.note(message)

    def gap(self, field: str, reason: str, message: Optional[str] = None) -> None:
        """Record that ``field`` could not be estimated"""
        self.imputed[field] = {"estimated": False, "reason": reason}
        if message:
            self.note(message)

    def build(self) -> AnalysisResult:
        data = copy.deepcopy(self.data)
        data["_imputed"] = dict(self.imputed)
        data["imputationLog"] = list(self.log)
        return AnalysisResult.from_dict(data)
