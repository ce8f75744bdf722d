"""Shot detection on an amplitude envelope.

A sample is a shot candidate when it is a local maximum of the envelope,
rises above ``mean + k * std`` of the whole envelope and is prominent enough
relative to its local baseline. Candidates closer together than the
refractory period compete and only the tallest survives.

Prominence follows the usual definition: the height of the peak above the
higher of its two bases, where each base is the lowest envelope value between
the peak and the nearest higher sample on that side. The search is limited to
one refractory period on either side of the peak. The local baseline is
``envelope[peak] - prominence`` and a candidate needs
``prominence / baseline >= min_peak_prominence``; a zero baseline counts as
infinitely prominent.
"""
from __future__ import annotations

import logging
import math
import warnings
from typing import Tuple

import numpy as np
from scipy import signal

from ratefire.shared.models import ShotSet

logger = logging.getLogger(__name__)

# Relative spread below which the envelope is treated as constant.
_DEGENERATE_REL_STD = 1e-9


def detection_threshold(envelope: np.ndarray, peak_threshold_std: float) -> Tuple[float, float, float]:
    """Return ``(threshold, mean, std)`` for the envelope."""
    env = np.asarray(envelope, dtype=np.float64)
    if env.size == 0:
        return 0.0, 0.0, 0.0
    mean = float(np.mean(env))
    std = float(np.std(env))
    return mean + peak_threshold_std * std, mean, std


def is_degenerate(mean: float, std: float) -> bool:
    """True when std is non-positive, non-finite, or at most 1e-9 of abs(mean)."""
    if not math.isfinite(std) or std <= 0.0:
        return True
    return std <= _DEGENERATE_REL_STD * abs(mean)


def relative_prominence(envelope: np.ndarray, peaks: np.ndarray, wlen: int) -> np.ndarray:
    """Prominence of each peak divided by its local baseline."""
    env = np.asarray(envelope, dtype=np.float64)
    peaks = np.asarray(peaks, dtype=np.intp)
    if peaks.size == 0:
        return np.zeros(0, dtype=np.float64)
    with warnings.catch_warnings():
        # Peaks on a plateau wider than the window get prominence 0 and a warning.
        warnings.simplefilter("ignore", RuntimeWarning)
        prominences, _, _ = signal.peak_prominences(env, peaks, wlen=max(3, int(wlen)))
    baseline = env[peaks] - prominences
    rel = np.full(peaks.size, np.inf, dtype=np.float64)
    positive = baseline > 0
    rel[positive] = prominences[positive] / baseline[positive]
    return rel


def enforce_refractory(peaks: np.ndarray, heights: np.ndarray, min_distance: float) -> np.ndarray:
    """Keep the tallest peak among any group closer than `min_distance` samples.

    Peaks are accepted in order of decreasing height (earlier index wins a
    tie); each accepted peak suppresses every remaining peak strictly closer
    than `min_distance`.
    """
    peaks = np.asarray(peaks, dtype=np.int64)
    heights = np.asarray(heights, dtype=np.float64)
    if peaks.size < 2 or min_distance <= 0:
        return peaks
    order = np.lexsort((peaks, -heights))
    keep = np.ones(peaks.size, dtype=bool)
    for i in order:
        if not keep[i]:
            continue
        lo = int(np.searchsorted(peaks, peaks[i] - min_distance, side="right"))
        hi = int(np.searchsorted(peaks, peaks[i] + min_distance, side="left"))
        keep[lo:i] = False
        keep[i + 1 : hi] = False
    return peaks[keep]


def detect_shots(envelope: np.ndarray, sample_rate: float, config) -> ShotSet:
    """Find shot sample indices in `envelope`.

    Args:
        envelope: Non-negative 1D envelope, one value per input sample.
        sample_rate: Sample rate in Hz.
        config: AnalysisConfig providing ``peak_threshold_std``,
            ``min_shot_spacing`` and ``min_peak_prominence``.

    Returns:
        ShotSet of strictly increasing indices within ``[0, len(envelope))``.
    """
    env = np.asarray(envelope, dtype=np.float64)
    if env.ndim != 1:
        raise ValueError(f"envelope must be 1D, got {env.ndim}D")
    if sample_rate <= 0:
        raise ValueError("sample_rate must be positive")
    if env.size < 3:
        logger.debug("Envelope too short for peak detection (%d samples)", env.size)
        return ShotSet.empty(sample_rate)

    threshold, mean, std = detection_threshold(env, config.peak_threshold_std)
    if is_degenerate(mean, std):
        logger.debug("Degenerate envelope (mean=%g, std=%g); no shots", mean, std)
        return ShotSet.empty(sample_rate)

    candidates, _ = signal.find_peaks(env)
    candidates = candidates[env[candidates] > threshold]
    if candidates.size == 0:
        return ShotSet.empty(sample_rate)

    spacing = config.min_shot_spacing * sample_rate
    rel = relative_prominence(env, candidates, 2 * int(math.ceil(spacing)) + 1)
    candidates = candidates[rel >= config.min_peak_prominence]

    shots = enforce_refractory(candidates, env[candidates], spacing)
    logger.debug(
        "Detected %d shots (threshold=%.4g, %d prominent candidates)",
        shots.size,
        threshold,
        candidates.size,
    )
    return ShotSet(shots, sample_rate)


__all__ = [
    "detect_shots",
    "detection_threshold",
    "enforce_refractory",
    "is_degenerate",
    "relative_prominence",
]
