"""
Traffic class banding

Thresholds are hand-tuned and configurable through settings. The same
classifier is used by inference and by the imputation pass.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.config import Settings, get_settings

from .types import InferenceInputs, TrafficClass


@dataclass(frozen=True)
class TrafficThresholds:
    high_pages: int = 1000
    high_blog_links: int = 100
    mid_pages: int = 200
    mid_blog_links: int = 20
    high_resources: int = 1000

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "TrafficThresholds":
        settings = settings or get_settings()
        return cls(
            high_pages=settings.traffic_high_pages,
            high_blog_links=settings.traffic_high_blog_links,
            mid_pages=settings.traffic_mid_pages,
            mid_blog_links=settings.traffic_mid_blog_links,
            high_resources=settings.traffic_high_resources,
        )


def classify_traffic(
    pages: Optional[int],
    blog_links: Optional[int],
    thresholds: Optional[TrafficThresholds] = None,
    resources_count: Optional[int] = None,
) -> TrafficClass:
    """
    Band a site by sitemap size and blog link count

    Thresholds are strict (greater than). A rendered page loading more than
    ``high_resources`` assets is High on its own; it never lifts a site into
    Mid or Small. With no signal at all the class is Unknown rather than Small.
    """
    thresholds = thresholds or TrafficThresholds.from_settings()
    pages = pages or 0
    blog_links = blog_links or 0
    resources_count = resources_count or 0

    if (
        pages > thresholds.high_pages
        or blog_links > thresholds.high_blog_links
        or resources_count > thresholds.high_resources
    ):
        return TrafficClass.HIGH
    if pages > thresholds.mid_pages or blog_links > thresholds.mid_blog_links:
        return TrafficClass.MID
    if pages > 0 or blog_links > 0:
        return TrafficClass.SMALL
    return TrafficClass.UNKNOWN


def estimate_traffic(inputs: InferenceInputs, thresholds: Optional[TrafficThresholds] = None) -> Dict[str, Any]:
    summary = inputs.resource_summary
    footprint = summary.resources_count if summary else None
    traffic_class = classify_traffic(inputs.sitemap_pages, inputs.blog_links, thresholds, resources_count=footprint)
    return {
        "estimatedTrafficClass": traffic_class.value,
        "indicators": {
            "pagesIndexed": inputs.sitemap_pages or 0,
            "blogPostsEstimate": inputs.blog_links,
            "multiLanguage": inputs.multi_language,
            "resourceFootprint": footprint,
        },
    }
