"""
Analysis result models

AnalysisResult is the root output record. Sections are kept as plain dicts
so the imputation pass can repair whatever the extractors produced;
serialization uses camelCase keys plus the ``_imputed`` audit map.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.config import Settings, get_settings

SUMMARY_SCORE_FIELDS = ("seoScore", "accessibilityScore", "securityScore", "performanceEstimate")
PERFORMANCE_SCORE_FIELDS = ("performanceScore", "accessibilityScore", "seoScore")
PERFORMANCE_METRIC_FIELDS = ("lcp", "cls", "tbt")
RESOURCE_FIELDS = (
    "domNodes",
    "resourcesCount",
    "totalImageKB",
    "totalJsKB",
    "thirdPartyRequests",
    "thirdPartyScripts",
)


def empty_resources() -> Dict[str, Any]:
    return {name: None for name in RESOURCE_FIELDS}


def empty_summary() -> Dict[str, Any]:
    return {name: None for name in SUMMARY_SCORE_FIELDS}


def _finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _finite(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_finite(item) for item in value]
    return value


class AnalysisResult(BaseModel):
    """Structured digital audit profile of one page"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str
    domain: str
    canonical: Optional[str] = None
    page_type: str = "landing"
    site_signals: Dict[str, Any] = Field(default_factory=dict)
    security: Dict[str, Any] = Field(default_factory=dict)
    hosting: Dict[str, Any] = Field(default_factory=dict)
    html_metrics: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    open_graph: Dict[str, Any] = Field(default_factory=dict)
    seo: Dict[str, Any] = Field(default_factory=dict)
    content: Dict[str, Any] = Field(default_factory=dict)
    resources: Dict[str, Any] = Field(default_factory=empty_resources)
    performance: Optional[Dict[str, Any]] = None
    accessibility_audit: Optional[Dict[str, Any]] = None
    social: Dict[str, Any] = Field(default_factory=dict)
    conversion_signals: Dict[str, Any] = Field(default_factory=dict)
    support_widgets: Dict[str, Any] = Field(default_factory=dict)
    crm_indicators: Dict[str, Any] = Field(default_factory=dict)
    accessibility: Dict[str, Any] = Field(default_factory=dict)
    summary_signals: Dict[str, Any] = Field(default_factory=empty_summary)
    business_insights: Dict[str, Any] = Field(default_factory=dict)
    imputed: Dict[str, Dict[str, Any]] = Field(default_factory=dict, alias="_imputed")
    imputation_log: List[str] = Field(default_factory=list)
    analyzed_at: Optional[str] = None
    version: Optional[str] = None

    def to_dict(self, json_safe: bool = True) -> Dict[str, Any]:
        """camelCase document; ``json_safe`` turns NaN/inf into null"""
        data = self.model_dump(by_alias=True)
        return _finite(data) if json_safe else data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        return cls.model_validate(data)


@dataclass
class AnalysisOptions:
    """Per-call analysis behaviour"""

    run_deep_audit: bool = False
    collect_resources: bool = True
    force_render: bool = False

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AnalysisOptions":
        settings = settings or get_settings()
        return cls(run_deep_audit=settings.run_deep_audit, collect_resources=settings.collect_resources)
