"""
Type definitions for the fetch layer
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ResourceCategory(str, Enum):
    """Coarse category of an intercepted network response"""

    DOCUMENT = "document"
    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    IMAGE = "image"
    FONT = "font"
    MEDIA = "media"
    XHR = "xhr"
    OTHER = "other"


class FetchSource(str, Enum):
    """Which fetch strategy supplied the HTML"""

    HTTP = "http"
    BROWSER = "browser"


@dataclass
class HttpResponse:
    """Result of a lightweight HTTP fetch"""

    url: str
    status: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass
class ResourceRecord:
    """One network response observed while rendering a page"""

    url: str
    resource_type: Optional[str]
    status: int
    size: Optional[int]
    headers: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "resourceType": self.resource_type,
            "status": self.status,
            "size": self.size,
            "headers": self.headers,
        }


@dataclass(frozen=True)
class ResourceSummary:
    """Aggregated counts and sizes of the assets loaded by a rendered page"""

    dom_nodes: Optional[int] = None
    resources_count: Optional[int] = None
    total_image_kb: Optional[float] = None
    total_js_kb: Optional[float] = None
    third_party_requests: Optional[int] = None
    third_party_scripts: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domNodes": self.dom_nodes,
            "resourcesCount": self.resources_count,
            "totalImageKB": self.total_image_kb,
            "totalJsKB": self.total_js_kb,
            "thirdPartyRequests": self.third_party_requests,
            "thirdPartyScripts": self.third_party_scripts,
        }


@dataclass
class RenderedPage:
    """Output of a browser render"""

    url: str
    html: str
    dom_nodes: Optional[int] = None
    resources: List[ResourceRecord] = field(default_factory=list)
    timed_out: bool = False

    def document_headers(self) -> Optional[Dict[str, str]]:
        """Headers of the main document response, if it was intercepted"""
        for record in self.resources:
            if record.resource_type == ResourceCategory.DOCUMENT.value or record.url == self.url:
                return record.headers
        return self.resources[0].headers if self.resources else None


@dataclass
class FetchOptions:
    """Per-call fetch behaviour"""

    collect_resources: bool = True
    force_render: bool = False


@dataclass
class PageFetch:
    """Everything the fetch layer hands to extraction"""

    url: str
    html: str
    headers: Dict[str, str] = field(default_factory=dict)
    source: FetchSource = FetchSource.HTTP
    resource_summary: Optional[ResourceSummary] = None
    render_timed_out: bool = False
