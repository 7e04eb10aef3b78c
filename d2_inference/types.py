"""
Type definitions for the inference layer
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from d0_gateway.types import ResourceSummary


class BusinessModel(str, Enum):
    """
    Inferred business model

    Declaration order of the concrete models is the tie-break order when
    several signals fire.
    """

    ECOMMERCE = "ecommerce"
    SAAS = "saas"
    MARKETPLACE = "marketplace"
    ENTERPRISE = "enterprise"
    AGENCY = "agency"
    MEDIA = "media"
    APP_PRODUCT = "app_product"
    CONSULTING = "consulting"
    UNKNOWN = "unknown"

    @classmethod
    def precedence(cls) -> List["BusinessModel"]:
        return [m for m in cls if m is not cls.UNKNOWN]


class Audience(str, Enum):
    B2B = "B2B"
    B2C = "B2C"
    UNKNOWN = "unknown"


class TrafficClass(str, Enum):
    HIGH = "High (500k+/mo)"
    MID = "Mid (50k–300k/mo)"
    SMALL = "Small (<50k/mo)"
    UNKNOWN = "Unknown"


class MaturityLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass
class InferenceInputs:
    """
    Everything the scorers read

    Built once per analysis from extractor outputs; scorers treat it as
    read-only.
    """

    html: str
    soup: BeautifulSoup
    url: str
    tech: Dict[str, Any] = field(default_factory=dict)
    conversion: Dict[str, Any] = field(default_factory=dict)
    json_ld: List[Dict[str, Any]] = field(default_factory=list)
    site_pages: Dict[str, bool] = field(default_factory=dict)
    keywords: List[str] = field(default_factory=list)
    resource_summary: Optional[ResourceSummary] = None
    hosting: Dict[str, bool] = field(default_factory=dict)
    support: Dict[str, bool] = field(default_factory=dict)
    crm: Dict[str, bool] = field(default_factory=dict)
    social_profiles: Dict[str, str] = field(default_factory=dict)
    metadata: Dict[str, Optional[str]] = field(default_factory=dict)
    sitemap_pages: Optional[int] = None
    blog_links: int = 0
    multi_language: bool = False
