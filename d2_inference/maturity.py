"""
Sales and marketing maturity levels
"""
import re
from typing import Any, Dict

from d1_extraction.base import links_matching

from .types import InferenceInputs, MaturityLevel

CONTACT_SALES = re.compile(r"contact sales|request demo|enterprise", re.I)


def detect_sales_maturity(inputs: InferenceInputs) -> Dict[str, Any]:
    """Weighted checklist: case studies 2, contact sales 2, live chat 1, pricing 1, CRM 1"""
    has_case_studies = bool(links_matching(inputs.soup, ["case-study"], ["case study", "case studies"]))
    has_contact_sales = bool(CONTACT_SALES.search(inputs.html))
    crm_present = any(inputs.crm.values())
    has_live_chat = any(inputs.support.values()) or crm_present
    has_pricing = bool(inputs.site_pages.get("hasPricing"))

    score = (
        (2 if has_case_studies else 0)
        + (2 if has_contact_sales else 0)
        + (1 if has_live_chat else 0)
        + (1 if has_pricing else 0)
        + (1 if crm_present else 0)
    )
    if score >= 5:
        level = MaturityLevel.HIGH
    elif score >= 3:
        level = MaturityLevel.MEDIUM
    else:
        level = MaturityLevel.LOW

    return {
        "salesMaturity": level.value,
        "signals": {
            "hasCaseStudies": has_case_studies,
            "hasContactSales": has_contact_sales,
            "hasLiveChat": has_live_chat,
            "hasPricing": has_pricing,
            "crmPresent": crm_present,
            "score": score,
        },
    }


def detect_marketing_maturity(inputs: InferenceInputs) -> Dict[str, Any]:
    blog_links = len(links_matching(inputs.soup, ["/blog", "/news", "/articles"]))
    social_count = len(inputs.social_profiles)
    has_og = bool(inputs.metadata.get("image") or inputs.metadata.get("title"))

    if blog_links > 20 and social_count >= 3 and has_og:
        level = MaturityLevel.HIGH
    elif blog_links > 5 and social_count >= 1 and has_og:
        level = MaturityLevel.MEDIUM
    else:
        level = MaturityLevel.LOW

    return {
        "marketingMaturity": level.value,
        "signals": {"blogLinks": blog_links, "socialCount": social_count, "hasOg": has_og},
    }
