"""
Business model and audience inference

Eight independent boolean signals are evaluated over CTA text, link patterns,
technology flags, JSON-LD and the raw markup. The first model in precedence
order whose signal fires wins.
"""
import re
from typing import Any, Dict

from d1_extraction.base import links_matching
from d1_extraction.structured_data import has_type

from .types import Audience, BusinessModel, InferenceInputs

MODEL_PATTERNS = {
    BusinessModel.MARKETPLACE: re.compile(r"marketplace|sellers|sell on|vendors", re.I),
    BusinessModel.AGENCY: re.compile(r"agency|services|we help|we build|our services", re.I),
    BusinessModel.MEDIA: re.compile(r"blog|news|editorial|subscribe to our newsletter", re.I),
    BusinessModel.APP_PRODUCT: re.compile(r"download on the app store|play store|mobile app", re.I),
    BusinessModel.ENTERPRISE: re.compile(r"enterprise|contact sales|custom pricing", re.I),
    BusinessModel.CONSULTING: re.compile(r"consulting|advisory|consultants", re.I),
}

ECOMMERCE_CTA = re.compile(r"add to cart|shop now|buy now", re.I)
SAAS_CTA = re.compile(r"start free trial|book demo|request demo|sign up for free", re.I)
PRODUCT_MARKUP = re.compile(r"product|shop|cart|checkout", re.I)

B2B_PATTERN = re.compile(r"b2b|business customers|enterprise|for teams|for enterprises", re.I)
B2C_PATTERN = re.compile(r"direct to consumer|shop|buy now|for you|for customers", re.I)

CTA_SAMPLE_LENGTH = 400


def cta_text(inputs: InferenceInputs) -> str:
    """Lowercased text (or aria-label) of every link and button"""
    parts = []
    for el in inputs.soup.find_all(["a", "button"]):
        parts.append(el.get_text(" ", strip=True) or el.get("aria-label") or "")
    return " ".join(parts).lower()


def infer_audience(html: str) -> Audience:
    if B2B_PATTERN.search(html):
        return Audience.B2B
    if B2C_PATTERN.search(html):
        return Audience.B2C
    return Audience.UNKNOWN


def detect_business_model(inputs: InferenceInputs) -> Dict[str, Any]:
    """
    Score each business model and pick the first match in precedence order

    Returns:
        {"inferredModel", "modelScores", "audience", "hints"}
    """
    html = inputs.html
    ctas = cta_text(inputs)
    soup = inputs.soup

    url_patterns = {
        "pricing": bool(links_matching(soup, ["pricing"], ["pricing"])),
        "demo": bool(links_matching(soup, ["demo"], ["demo"])),
        "features": bool(links_matching(soup, ["features"], ["features"])),
        "product": bool(PRODUCT_MARKUP.search(html)) or bool(inputs.conversion.get("isEcommerce")),
    }

    is_shopify = bool(inputs.tech.get("shopify"))
    has_software_ld = has_type(inputs.json_ld, "softwareapplication")
    has_product_ld = has_type(inputs.json_ld, "product")

    signals = {
        BusinessModel.ECOMMERCE: is_shopify
        or has_product_ld
        or bool(ECOMMERCE_CTA.search(ctas))
        or url_patterns["product"],
        BusinessModel.SAAS: has_software_ld
        or bool(SAAS_CTA.search(ctas))
        or url_patterns["pricing"]
        or url_patterns["demo"],
    }
    for model, pattern in MODEL_PATTERNS.items():
        signals[model] = bool(pattern.search(html))

    inferred = next((m for m in BusinessModel.precedence() if signals.get(m)), BusinessModel.UNKNOWN)

    return {
        "inferredModel": inferred.value,
        "modelScores": {m.value: int(signals.get(m, False)) for m in BusinessModel.precedence()},
        "audience": infer_audience(html).value,
        "hints": {
            "ctaTextSample": ctas[:CTA_SAMPLE_LENGTH],
            "urlPatterns": url_patterns,
            "techHints": {
                "isShopify": is_shopify,
                "usesStripe": bool(re.search(r"stripe", html, re.I)),
                "usesIntercom": bool(re.search(r"intercom|hs-scripts|hubspot", html, re.I)),
            },
        },
    }
