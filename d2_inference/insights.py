"""
Business insights bundle

Runs every scorer over one InferenceInputs. The business model is inferred
first because the margin band depends on it.
"""
from typing import Any, Dict, Optional

from core.logging import get_logger
from d1_extraction.base import safe_extract

from .business_model import detect_business_model
from .competitors import METHOD as COMPETITOR_METHOD
from .competitors import discover_competitors
from .margin import estimate_margin
from .market import detect_moat_signals, infer_target_market, score_product_complexity
from .maturity import detect_marketing_maturity, detect_sales_maturity
from .pricing import detect_pricing
from .traffic import TrafficThresholds, estimate_traffic
from .types import BusinessModel, InferenceInputs, TrafficClass

logger = get_logger(__name__, domain="d2")


def detect_business_insights(
    inputs: InferenceInputs,
    thresholds: Optional[TrafficThresholds] = None,
) -> Dict[str, Any]:
    """
    Produce the BusinessInsights document

    Args:
        inputs: Extractor outputs for one page
        thresholds: Traffic banding thresholds (defaults from settings)

    Returns:
        Dict keyed businessModel, pricing, marginEstimate, competitors,
        trafficEstimate, salesMaturity, marketingMaturity, targetMarket,
        productComplexity, moatSignals
    """
    model = safe_extract(
        "businessModel",
        detect_business_model,
        {"inferredModel": BusinessModel.UNKNOWN.value, "modelScores": {}, "audience": "unknown", "hints": {}},
        inputs,
    )
    margin = safe_extract(
        "marginEstimate",
        estimate_margin,
        None,
        model["inferredModel"],
        inputs.tech,
        inputs.hosting,
        inputs.resource_summary,
    )

    insights = {
        "businessModel": model,
        "pricing": safe_extract("pricing", detect_pricing, {}, inputs),
        "marginEstimate": margin,
        "competitors": safe_extract(
            "competitors",
            discover_competitors,
            {"likelyCompetitors": [], "method": COMPETITOR_METHOD},
            inputs.keywords,
            inputs.html,
            inputs.soup,
        ),
        "trafficEstimate": safe_extract(
            "trafficEstimate",
            estimate_traffic,
            {"estimatedTrafficClass": TrafficClass.UNKNOWN.value, "indicators": {}},
            inputs,
            thresholds,
        ),
        "salesMaturity": safe_extract("salesMaturity", detect_sales_maturity, None, inputs),
        "marketingMaturity": safe_extract("marketingMaturity", detect_marketing_maturity, None, inputs),
        "targetMarket": safe_extract("targetMarket", infer_target_market, None, inputs),
        "productComplexity": safe_extract("productComplexity", score_product_complexity, None, inputs),
        "moatSignals": safe_extract("moatSignals", detect_moat_signals, {"moatSignals": []}, inputs.html),
    }

    logger.debug(
        f"Inferred model={model['inferredModel']} "
        f"traffic={insights['trafficEstimate']['estimatedTrafficClass']}"
    )
    return insights
