"""
D4 Imputation - sanitize & impute pass over draft analysis results
"""

from .builder import ImputationBuilder
from .heuristics import resource_performance_estimate, seo_checklist_score
from .sanitize import sanitize

__all__ = [
    "ImputationBuilder",
    "resource_performance_estimate",
    "seo_checklist_score",
    "sanitize",
]
