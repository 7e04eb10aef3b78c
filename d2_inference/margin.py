"""
Gross margin band estimation

Requires the business model to be inferred first.
"""
from typing import Any, Dict, Mapping, Optional, Tuple

from core.utils import round_half_up
from d0_gateway.types import ResourceSummary

MARGIN_BANDS: Dict[str, Tuple[int, int]] = {
    "saas": (70, 90),
    "ecommerce": (20, 60),
    "marketplace": (10, 40),
    "agency": (30, 60),
    "consulting": (30, 60),
    "media": (10, 40),
    "unknown": (20, 60),
}
DEFAULT_BAND = (20, 60)

HEAVY_JS_KB = 2000


def margin_adjustment(
    tech: Mapping[str, Any],
    hosting: Mapping[str, Any],
    resource_summary: Optional[ResourceSummary],
) -> int:
    adjustment = 0
    if tech.get("shopify") or tech.get("wordpress"):
        adjustment -= 10
    if tech.get("nextjs") or tech.get("react"):
        adjustment += 5
    if resource_summary and (resource_summary.total_js_kb or 0) > HEAVY_JS_KB:
        adjustment -= 5
    if hosting.get("cloudflare"):
        adjustment += 3
    return adjustment


def estimate_margin(
    model: str,
    tech: Mapping[str, Any],
    hosting: Mapping[str, Any],
    resource_summary: Optional[ResourceSummary] = None,
) -> Dict[str, Any]:
    """Base band per model, shifted by tech/resource adjustments and clipped to [0, 100]"""
    low, high = MARGIN_BANDS.get(model, DEFAULT_BAND)
    adjustment = margin_adjustment(tech, hosting, resource_summary)

    low = max(0, low + adjustment)
    high = min(100, high + adjustment)
    midpoint = (low + high) / 2

    return {
        "low": low,
        "high": high,
        "estimate": f"{round_half_up(midpoint)}%",
        "notes": f"Heuristic based on model={model}; adjustments applied: {adjustment}",
    }
