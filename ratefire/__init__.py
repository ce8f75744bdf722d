"""Rate-of-fire analysis for recorded gunshot audio.

Typical use::

    from ratefire import AnalysisConfig, analyze

    result = analyze(samples, sample_rate, AnalysisConfig(min_burst_count=3))
    for burst in result.bursts:
        print(burst.burst_number, burst.num_shots, round(burst.rate_rpm))
"""

from .analysis import (
    AnalysisConfig,
    AnalysisSession,
    InvalidConfigurationError,
    analyze,
)
from .core import ToggleShot, toggle_shot
from .shared import AnalysisResult, Burst, BurstSegment, ShotSet, Summary

__version__ = "0.1.0"

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "AnalysisSession",
    "Burst",
    "BurstSegment",
    "InvalidConfigurationError",
    "ShotSet",
    "Summary",
    "ToggleShot",
    "analyze",
    "toggle_shot",
]
