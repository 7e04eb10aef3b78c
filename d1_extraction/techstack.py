"""
Technology fingerprinting over raw markup

A flat table of (category, technology, pattern) rows evaluated in one pass.
Every technology gets a boolean; each category reports the first technology
in table order that matched. Categories do not exclude each other.
"""
import re
from typing import Any, Dict, List, Optional, Pattern, Tuple

SIGNATURES: List[Tuple[str, str, Pattern[str]]] = [
    # Platforms / CMS
    ("platform", "wordpress", re.compile(r"wp-content|wp-json|wordpress", re.I)),
    ("platform", "shopify", re.compile(r"cdn\.shopify\.com|x-shopify", re.I)),
    ("platform", "webflow", re.compile(r"webflow", re.I)),
    ("platform", "wix", re.compile(r"wixstatic|wix-code|wix\.com", re.I)),
    ("platform", "squarespace", re.compile(r"squarespace", re.I)),
    ("platform", "ghost", re.compile(r"ghost\.org|ghostapi", re.I)),
    ("platform", "laravel", re.compile(r"laravel", re.I)),
    # Frontend frameworks
    ("framework", "nextjs", re.compile(r"_next/|__NEXT_DATA__|nextjs", re.I)),
    ("framework", "react", re.compile(r"react(?:\.|js|-dom)|data-reactroot", re.I)),
    ("framework", "angular", re.compile(r"ng-version|angular", re.I)),
    ("framework", "vue", re.compile(r"\bvue(?:\.js)?\b|__vue__|data-v-|nuxt", re.I)),
    # Libraries and languages
    ("library", "jquery", re.compile(r"jquery\.", re.I)),
    ("language", "php", re.compile(r"<\?php", re.I)),
]

ANALYTICS_SIGNATURES: List[Tuple[str, Pattern[str]]] = [
    ("GA", re.compile(r"gtag\(|google-analytics|measurementid=G-", re.I)),
    ("GTM", re.compile(r"googletagmanager\.com/gtm\.js", re.I)),
    ("Facebook Pixel", re.compile(r"fbq\(|facebook\.net/tr\.js", re.I)),
]


def detect_technologies(html: str) -> Dict[str, Any]:
    """
    Fingerprint technologies in raw HTML

    Returns:
        {"<technology>": bool, ..., "categories": {"<category>": first match or None},
         "analytics": [names]}
    """
    flags: Dict[str, bool] = {}
    categories: Dict[str, Optional[str]] = {}

    for category, technology, pattern in SIGNATURES:
        matched = bool(pattern.search(html))
        flags[technology] = matched
        categories.setdefault(category, None)
        if matched and categories[category] is None:
            categories[category] = technology

    analytics = [name for name, pattern in ANALYTICS_SIGNATURES if pattern.search(html)]

    return {**flags, "categories": categories, "analytics": analytics}
