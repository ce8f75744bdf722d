from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping


class InvalidConfigurationError(ValueError):
    """Raised when an analysis parameter is outside its valid range."""


@dataclass(frozen=True)
class ConfigParameter:
    name: str
    default: float | int
    min: float | int
    max: float | int
    help: str = ""
    key: str = ""


CONFIG_PARAMETERS: Dict[str, ConfigParameter] = {
    "peak_threshold_std": ConfigParameter(
        name="peak_threshold_std",
        default=1.2,
        min=0.1,
        max=5.0,
        help="Standard deviations above mean level. Lower = more sensitive.",
        key="peakThresholdStd",
    ),
    "min_shot_spacing": ConfigParameter(
        name="min_shot_spacing",
        default=0.05,
        min=0.01,
        max=1.0,
        help="Minimum time between shots (s). 0.05s = max ~1200 RPM.",
        key="minShotSpacing",
    ),
    "burst_gap_threshold": ConfigParameter(
        name="burst_gap_threshold",
        default=0.2,
        min=0.05,
        max=2.0,
        help="Max gap allowed within a single burst (s).",
        key="burstGapThreshold",
    ),
    "window_size": ConfigParameter(
        name="window_size",
        default=0.002,
        min=0.001,
        max=0.01,
        help="Envelope smoothing window (s). Smaller preserves transients.",
        key="windowSize",
    ),
    "min_peak_prominence": ConfigParameter(
        name="min_peak_prominence",
        default=0.1,
        min=0.01,
        max=1.0,
        help="Relative height required for a peak. Higher = sharper peaks only.",
        key="minPeakProminence",
    ),
    "min_burst_count": ConfigParameter(
        name="min_burst_count",
        default=5,
        min=1,
        max=50,
        help="Minimum shots required to count as a burst.",
        key="minBurstCount",
    ),
}

_KEY_TO_NAME = {param.key: name for name, param in CONFIG_PARAMETERS.items()}


@dataclass(frozen=True)
class AnalysisConfig:
    """Detection and grouping parameters for one analysis.

    Out-of-range values are rejected at construction; nothing is clamped.
    """

    peak_threshold_std: float = 1.2
    min_shot_spacing: float = 0.05
    burst_gap_threshold: float = 0.2
    window_size: float = 0.002
    min_peak_prominence: float = 0.1
    min_burst_count: int = 5

    def __post_init__(self) -> None:
        for name, param in CONFIG_PARAMETERS.items():
            value = getattr(self, name)
            if name == "min_burst_count":
                if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                    raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")
                object.__setattr__(self, name, int(value))
            else:
                if isinstance(value, bool) or not isinstance(value, numbers.Real):
                    raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")
                if not math.isfinite(value):
                    raise InvalidConfigurationError(f"{name} must be finite, got {value!r}")
                object.__setattr__(self, name, float(value))
            if not (param.min <= value <= param.max):
                raise InvalidConfigurationError(
                    f"{name} must be between {param.min} and {param.max}, got {value!r}"
                )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "AnalysisConfig":
        """Build a config from camelCase (``peakThresholdStd``) or snake_case keys."""
        if not isinstance(mapping, Mapping):
            raise TypeError("config must be a mapping type")
        kwargs: Dict[str, Any] = {}
        for key, value in mapping.items():
            name = _KEY_TO_NAME.get(key, key)
            if name not in CONFIG_PARAMETERS:
                raise InvalidConfigurationError(f"unknown configuration key {key!r}")
            if name in kwargs:
                raise InvalidConfigurationError(f"configuration key {key!r} given twice")
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {CONFIG_PARAMETERS[f.name].key: getattr(self, f.name) for f in fields(self)}


__all__ = [
    "AnalysisConfig",
    "CONFIG_PARAMETERS",
    "ConfigParameter",
    "InvalidConfigurationError",
]
