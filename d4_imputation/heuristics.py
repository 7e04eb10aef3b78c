"""
Fallback formulas shared by the draft assembly and the imputation pass
"""
from typing import Any, Optional

from core.utils import clamp, is_number, round_half_up

SEO_CHECK_WEIGHT = 20
DEFAULT_ACCESSIBILITY_SCORE = 50
IMAGE_KB_PER_IMAGE = 120
JS_KB_PER_RESOURCE = 15


def seo_checklist_score(
    title: Any,
    description: Any,
    keywords: Any,
    has_sitemap: Any,
    h1_present: Any,
) -> int:
    """20 points each for title, meta description, keywords, sitemap and a non-empty H1"""
    checks = [
        bool(title),
        bool(description),
        isinstance(keywords, list) and len(keywords) > 0,
        bool(has_sitemap),
        bool(h1_present),
    ]
    return SEO_CHECK_WEIGHT * sum(checks)


def _as_number(value: Any) -> float:
    return value if is_number(value) else 0


def resource_performance_estimate(js_kb: Any, image_kb: Any, dom_nodes: Any) -> Optional[int]:
    """
    100 minus capped penalties for script weight, image weight and DOM size

    Returns None when there is no resource signal at all.
    """
    js_kb, image_kb, dom_nodes = _as_number(js_kb), _as_number(image_kb), _as_number(dom_nodes)
    if not (js_kb or image_kb or dom_nodes):
        return None
    estimate = 100
    estimate -= min(60, round_half_up(js_kb / 10))
    estimate -= min(30, round_half_up(image_kb / 100))
    estimate -= min(20, round_half_up(dom_nodes / 200))
    return clamp(estimate)


def tidy_number(value: Any) -> Any:
    """Integral floats become ints so 80.0 and 80 read the same"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
