"""
Pricing strategy signals
"""
import re
from typing import Any, Dict

from d1_extraction.base import links_matching

from .types import InferenceInputs

PRICE_AMOUNT = re.compile(r"\$\d{1,3}(?:,\d{3})*(?:\.\d{1,2})?")
ENTERPRISE_PRICING = re.compile(
    r"contact sales|contact us for pricing|custom pricing|enterprise pricing|request demo", re.I
)
SUBSCRIPTION = re.compile(r"per month|monthly|annual|yearly|billed", re.I)
FREE_TRIAL = re.compile(r"free trial|start free trial|try free", re.I)
FREEMIUM = re.compile(r"free plan|forever free|freemium", re.I)

PRICING_SAMPLE_LENGTH = 500


def detect_pricing(inputs: InferenceInputs) -> Dict[str, Any]:
    text = inputs.html.lower()
    return {
        "hasPricingPage": bool(links_matching(inputs.soup, ["pricing"], ["pricing"])),
        "hasTransparentPricing": bool(PRICE_AMOUNT.search(text)),
        "hasEnterprisePricing": bool(ENTERPRISE_PRICING.search(text)),
        "isSubscription": bool(SUBSCRIPTION.search(text)),
        "hasFreeTrial": bool(FREE_TRIAL.search(text)),
        "freemium": bool(FREEMIUM.search(text)),
        "pricingTextSample": text[:PRICING_SAMPLE_LENGTH],
    }
