"""Amplitude envelope estimation.

The envelope is a centered moving mean of the rectified signal. It is computed
from a cumulative sum so the cost is linear in the number of samples
regardless of the window length. One envelope value is produced per input
sample, so envelope index ``i`` maps to time ``i / sample_rate``.
"""
from __future__ import annotations

import numpy as np


def window_samples(window_size: float, sample_rate: float) -> int:
    """Number of samples covered by a smoothing window of `window_size` seconds."""
    if sample_rate <= 0:
        raise ValueError("sample_rate must be positive")
    if window_size < 0:
        raise ValueError("window_size must be non-negative")
    return max(1, int(round(window_size * sample_rate)))


def estimate_envelope(samples: np.ndarray, sample_rate: float, window_size: float) -> np.ndarray:
    """Return the moving mean-absolute envelope of `samples`.

    Args:
        samples: 1D array of amplitudes.
        sample_rate: Sample rate in Hz.
        window_size: Smoothing window length in seconds.

    Returns:
        1D float64 array, same length as `samples`, all values >= 0. Near the
        buffer edges the mean is taken over the samples inside the window only.
    """
    arr = np.asarray(samples, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"samples must be 1D, got {arr.ndim}D")
    width = window_samples(window_size, sample_rate)
    n = arr.size
    if n == 0:
        return np.zeros(0, dtype=np.float64)

    rectified = np.abs(np.nan_to_num(arr, nan=0.0, posinf=0.0, neginf=0.0))
    csum = np.zeros(n + 1, dtype=np.float64)
    np.cumsum(rectified, out=csum[1:])

    left = (width - 1) // 2
    right = width // 2
    idx = np.arange(n)
    lo = np.clip(idx - left, 0, n)
    hi = np.clip(idx + right + 1, 0, n)
    env = (csum[hi] - csum[lo]) / (hi - lo)
    np.maximum(env, 0.0, out=env)
    return env


__all__ = ["estimate_envelope", "window_samples"]
