"""
Aggregation of intercepted network responses into a ResourceSummary
"""
import re
from typing import Dict, Iterable, List, Optional

from core.utils import extract_host

from .types import ResourceCategory, ResourceRecord, ResourceSummary

# Playwright request.resource_type values folded into our categories
_REQUEST_TYPE_MAP = {
    "document": ResourceCategory.DOCUMENT,
    "script": ResourceCategory.SCRIPT,
    "stylesheet": ResourceCategory.STYLESHEET,
    "image": ResourceCategory.IMAGE,
    "font": ResourceCategory.FONT,
    "media": ResourceCategory.MEDIA,
    "xhr": ResourceCategory.XHR,
    "fetch": ResourceCategory.XHR,
}

_CONTENT_TYPE_RULES = [
    (re.compile(r"image/", re.I), ResourceCategory.IMAGE),
    (re.compile(r"javascript|ecmascript", re.I), ResourceCategory.SCRIPT),
    (re.compile(r"text/css", re.I), ResourceCategory.STYLESHEET),
    (re.compile(r"font/|woff|ttf|otf", re.I), ResourceCategory.FONT),
    (re.compile(r"text/html|xhtml", re.I), ResourceCategory.DOCUMENT),
    (re.compile(r"video/|audio/", re.I), ResourceCategory.MEDIA),
    (re.compile(r"json", re.I), ResourceCategory.XHR),
]


def categorize(resource_type: Optional[str], headers: Optional[Dict[str, str]] = None) -> ResourceCategory:
    """Category from the request type, falling back to the response content-type"""
    if resource_type and resource_type.lower() in _REQUEST_TYPE_MAP:
        return _REQUEST_TYPE_MAP[resource_type.lower()]

    content_type = (headers or {}).get("content-type", "")
    for pattern, category in _CONTENT_TYPE_RULES:
        if pattern.search(content_type):
            return category
    return ResourceCategory.OTHER


def _is_category(record: ResourceRecord, category: ResourceCategory) -> bool:
    # request type or content-type, whichever is available
    if record.resource_type and record.resource_type.lower() == category.value:
        return True
    return categorize(None, record.headers) == category


def _total_kb(records: Iterable[ResourceRecord]) -> float:
    return round(sum(r.size or 0 for r in records) / 1024, 2)


def summarize_resources(
    records: List[ResourceRecord],
    page_url: str,
    dom_nodes: Optional[int] = None,
) -> ResourceSummary:
    """
    Aggregate resource records using the page host as the first-party boundary.

    Args:
        records: Intercepted responses
        page_url: URL of the analyzed page
        dom_nodes: Element count of the rendered DOM, if known

    Returns:
        Frozen ResourceSummary
    """
    page_host = extract_host(page_url)

    images = [r for r in records if _is_category(r, ResourceCategory.IMAGE)]
    scripts = [r for r in records if _is_category(r, ResourceCategory.SCRIPT)]

    def is_third_party(record: ResourceRecord) -> bool:
        host = extract_host(record.url)
        return host is not None and host != page_host

    return ResourceSummary(
        dom_nodes=dom_nodes,
        resources_count=len(records),
        total_image_kb=_total_kb(images),
        total_js_kb=_total_kb(scripts),
        third_party_requests=sum(1 for r in records if is_third_party(r)),
        third_party_scripts=sum(1 for r in scripts if is_third_party(r)),
    )
