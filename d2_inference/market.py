"""
Target market, product complexity and moat signals
"""
import re
from typing import Any, Dict, List

from d1_extraction.base import links_matching

from .types import Audience, InferenceInputs, MaturityLevel

REGION_HINT = re.compile(r"/(us|uk|ca|au|in|de|fr)\b", re.I)
CURRENCY = re.compile(r"USD|GBP|AUD|€|\$|£", re.I)
B2B_MARKET = re.compile(r"for teams|for enterprises|enterprise|for businesses|B2B", re.I)
B2C_MARKET = re.compile(r"shop|buy now|shop now|retail", re.I)

INTEGRATIONS = re.compile(r"integrations|zapier|salesforce|slack|github|shopify", re.I)

MOAT_RULES = [
    ("Patents mentioned", re.compile(r"patent|patented|patents", re.I)),
    ("Proprietary tech claims", re.compile(r"proprietary", re.I)),
    (
        "ML/AI capability",
        re.compile(r"machine learning|deep learning|neural network|ai model|\bnlp\b|ml models", re.I),
    ),
    ("API-first architecture", re.compile(r"api-first|api docs|developer api|rest api|open api", re.I)),
    ("Enterprise integrations", re.compile(r"salesforce|\bsap\b|servicenow|oracle|workday", re.I)),
]
MAX_MOAT_SIGNALS = 10


def infer_target_market(inputs: InferenceInputs) -> Dict[str, Any]:
    html = inputs.html
    html_tag = inputs.soup.find("html")
    region = REGION_HINT.search(html)
    currency = CURRENCY.search(html)

    if B2B_MARKET.search(html):
        audience = Audience.B2B
    elif B2C_MARKET.search(html):
        audience = Audience.B2C
    else:
        audience = Audience.UNKNOWN

    return {
        "language": (html_tag.get("lang") if html_tag else None) or None,
        "regionHint": region.group(1) if region else None,
        "currencySample": currency.group(0) if currency else None,
        "audience": audience.value,
    }


def score_product_complexity(inputs: InferenceInputs) -> Dict[str, Any]:
    """docs 40, integrations 30, more than 3 feature links 20, more than 200 links 10"""
    soup = inputs.soup
    has_docs = bool(links_matching(soup, ["/docs", "/developer", "/api"], ["api"]))
    integrations = bool(INTEGRATIONS.search(inputs.html))
    feature_pages = len(links_matching(soup, ["features"], ["features"]))
    link_count = len(soup.find_all("a"))

    score = 0
    if has_docs:
        score += 40
    if integrations:
        score += 30
    if feature_pages > 3:
        score += 20
    if link_count > 200:
        score += 10

    if score >= 70:
        tier = MaturityLevel.HIGH
    elif score >= 40:
        tier = MaturityLevel.MEDIUM
    else:
        tier = MaturityLevel.LOW

    return {
        "productComplexity": tier.value,
        "score": score,
        "signals": {"hasDocs": has_docs, "integrations": integrations, "featurePages": feature_pages},
    }


def detect_moat_signals(html: str) -> Dict[str, List[str]]:
    signals = [label for label, pattern in MOAT_RULES if pattern.search(html)]
    return {"moatSignals": signals[:MAX_MOAT_SIGNALS]}
