"""
Matched filtering, template-bank search and the detection engine.
"""

from .detection_engine import DetectionEngine, detect, detection_confidence
from .matched_filter import matched_filter_score, matched_filter_scores
from .template_bank import SearchResult, TemplateBankSearch, build_mass_grid

__all__ = [
    "DetectionEngine",
    "detect",
    "detection_confidence",
    "matched_filter_score",
    "matched_filter_scores",
    "SearchResult",
    "TemplateBankSearch",
    "build_mass_grid",
]
