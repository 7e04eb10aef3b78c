"""
D5 Audit - assembly of the analysis document

Import ``analyze_website`` from ``d5_audit.coordinator``; this package module
only exposes the models so the imputation layer can depend on them.
"""

from .models import AnalysisOptions, AnalysisResult

__all__ = ["AnalysisOptions", "AnalysisResult"]
