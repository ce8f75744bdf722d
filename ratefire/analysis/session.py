from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Tuple, Union

import numpy as np

from ratefire.core.detection import detect_shots
from ratefire.core.editing import DEFAULT_TOGGLE_TOLERANCE, ToggleShot
from ratefire.core.envelope import estimate_envelope
from ratefire.core.segmentation import segment_bursts
from ratefire.shared.models import AnalysisResult, Burst, ShotSet, Summary, _freeze_array

from .cadence import calculate_cadence
from .settings import AnalysisConfig

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

PHASE_ENVELOPE = "estimating envelope"
PHASE_PEAKS = "detecting peaks"
PHASE_BURSTS = "grouping bursts"
PHASE_RATES = "calculating rates"


ConfigLike = Union[AnalysisConfig, Mapping[str, Any], None]


def _as_config(config: ConfigLike) -> AnalysisConfig:
    if config is None:
        return AnalysisConfig()
    if isinstance(config, AnalysisConfig):
        return config
    return AnalysisConfig.from_mapping(config)


def _notify(progress: Optional[ProgressCallback], phase: str) -> None:
    logger.debug("Analysis phase: %s", phase)
    if progress is None:
        return
    try:
        progress(phase)
    except Exception as exc:
        # Best-effort notification.
        logger.debug("Progress callback failed during %r: %s", phase, exc)


def _prepare_samples(samples: np.ndarray, sample_rate: float) -> Tuple[np.ndarray, float]:
    if sample_rate is None or not math.isfinite(sample_rate) or sample_rate <= 0:
        raise ValueError(f"sample_rate must be a positive finite number, got {sample_rate!r}")
    arr = np.asarray(samples, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"samples must be a 1D array, got {arr.ndim}D")
    if not np.all(np.isfinite(arr)):
        logger.debug("Replacing non-finite samples with 0")
        arr = np.nan_to_num(arr, nan=0.0, posinf=0.0, neginf=0.0)
    return _freeze_array(arr, ndim=1), float(sample_rate)


def _cadence(shots: ShotSet, config: AnalysisConfig, progress: Optional[ProgressCallback]) -> Tuple[Tuple[Burst, ...], Summary]:
    _notify(progress, PHASE_BURSTS)
    segments = segment_bursts(shots, config)
    _notify(progress, PHASE_RATES)
    bursts, summary = calculate_cadence(segments)
    return tuple(bursts), summary


@dataclass(frozen=True, eq=False)
class AnalysisSession:
    """Immutable snapshot of one recording's analysis.

    Holds the read-only sample buffer and configuration together with the
    current shots and everything derived from them. Edits and configuration
    changes return a new session; derived values are always recomputed from
    scratch, never patched.
    """

    samples: np.ndarray = field(repr=False)
    sample_rate: float
    config: AnalysisConfig
    shots: ShotSet
    bursts: Tuple[Burst, ...]
    summary: Summary

    @classmethod
    def start(
        cls,
        samples: np.ndarray,
        sample_rate: float,
        config: ConfigLike = None,
        *,
        progress: Optional[ProgressCallback] = None,
    ) -> "AnalysisSession":
        """Run the full pipeline on a decoded mono sample buffer."""
        config = _as_config(config)
        buffer, rate = _prepare_samples(samples, sample_rate)
        return cls._detect(buffer, rate, config, progress)

    @classmethod
    def _detect(
        cls,
        samples: np.ndarray,
        sample_rate: float,
        config: AnalysisConfig,
        progress: Optional[ProgressCallback],
    ) -> "AnalysisSession":
        if samples.size == 0:
            logger.debug("Empty sample buffer; nothing to analyze")
        _notify(progress, PHASE_ENVELOPE)
        envelope = estimate_envelope(samples, sample_rate, config.window_size)
        _notify(progress, PHASE_PEAKS)
        shots = detect_shots(envelope, sample_rate, config)
        bursts, summary = _cadence(shots, config, progress)
        return cls(samples, sample_rate, config, shots, bursts, summary)

    @property
    def n_samples(self) -> int:
        return int(self.samples.size)

    @property
    def audio_duration(self) -> float:
        return self.n_samples / self.sample_rate

    @property
    def result(self) -> AnalysisResult:
        return AnalysisResult(
            shots=self.shots,
            bursts=self.bursts,
            summary=self.summary,
            audio_duration=self.audio_duration,
        )

    def apply(self, edit: ToggleShot) -> "AnalysisSession":
        """Apply a manual shot edit and recompute bursts and cadence."""
        shots = edit.apply(self.shots, n_samples=self.n_samples)
        if shots == self.shots:
            return self
        bursts, summary = _cadence(shots, self.config, None)
        return AnalysisSession(self.samples, self.sample_rate, self.config, shots, bursts, summary)

    def toggle_shot(self, timestamp: float, tolerance: float = DEFAULT_TOGGLE_TOLERANCE) -> "AnalysisSession":
        return self.apply(ToggleShot(timestamp, tolerance))

    def reconfigure(
        self,
        config: ConfigLike,
        *,
        progress: Optional[ProgressCallback] = None,
    ) -> "AnalysisSession":
        """Re-run detection with `config`, discarding shots and any manual edits."""
        return self._detect(self.samples, self.sample_rate, _as_config(config), progress)


def analyze(
    samples: np.ndarray,
    sample_rate: float,
    config: ConfigLike = None,
    *,
    progress: Optional[ProgressCallback] = None,
) -> AnalysisResult:
    """Analyze a decoded mono recording and return shots, bursts and summary."""
    return AnalysisSession.start(samples, sample_rate, config, progress=progress).result


__all__ = [
    "AnalysisSession",
    "PHASE_BURSTS",
    "PHASE_ENVELOPE",
    "PHASE_PEAKS",
    "PHASE_RATES",
    "ProgressCallback",
    "analyze",
]
