"""Cadence statistics, configuration and the analysis session."""

from .cadence import burst_statistics, calculate_cadence, summarize
from .session import AnalysisSession, analyze
from .settings import (
    CONFIG_PARAMETERS,
    AnalysisConfig,
    ConfigParameter,
    InvalidConfigurationError,
)

__all__ = [
    "AnalysisConfig",
    "AnalysisSession",
    "CONFIG_PARAMETERS",
    "ConfigParameter",
    "InvalidConfigurationError",
    "analyze",
    "burst_statistics",
    "calculate_cadence",
    "summarize",
]
