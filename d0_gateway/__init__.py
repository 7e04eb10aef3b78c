"""
D0 Gateway - Fetch layer

Every outbound request for the analyzed page goes through here: the
lightweight HTTP fetch, the scoped browser render and its resource metrics.
"""

from .browser import BrowserSession, ResponseRecorder
from .fetcher import fetch_page
from .http_client import fetch_text
from .resources import categorize, summarize_resources
from .types import (
    FetchOptions,
    FetchSource,
    HttpResponse,
    PageFetch,
    RenderedPage,
    ResourceCategory,
    ResourceRecord,
    ResourceSummary,
)

__all__ = [
    "BrowserSession",
    "ResponseRecorder",
    "fetch_page",
    "fetch_text",
    "categorize",
    "summarize_resources",
    "FetchOptions",
    "FetchSource",
    "HttpResponse",
    "PageFetch",
    "RenderedPage",
    "ResourceCategory",
    "ResourceRecord",
    "ResourceSummary",
]
