"""
D2 Inference - deterministic heuristic scorers producing BusinessInsights
"""

from .business_model import detect_business_model
from .insights import detect_business_insights
from .margin import estimate_margin
from .traffic import TrafficThresholds, classify_traffic, estimate_traffic
from .types import Audience, BusinessModel, InferenceInputs, MaturityLevel, TrafficClass

__all__ = [
    "detect_business_model",
    "detect_business_insights",
    "estimate_margin",
    "TrafficThresholds",
    "classify_traffic",
    "estimate_traffic",
    "Audience",
    "BusinessModel",
    "InferenceInputs",
    "MaturityLevel",
    "TrafficClass",
]
