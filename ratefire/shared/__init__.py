"""
Plain-data results shared between the analysis kernel and its renderers.
"""

from .models import AnalysisResult, Burst, BurstSegment, ShotSet, Summary

__all__ = ["AnalysisResult", "Burst", "BurstSegment", "ShotSet", "Summary"]
