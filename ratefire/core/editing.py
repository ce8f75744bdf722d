"""Manual correction of detected shots.

Detection is deterministic, so re-running it cannot fix a missed or spurious
shot. These helpers let a reviewer toggle individual shots instead; the
caller re-segments and recomputes cadence afterwards.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ratefire.shared.models import ShotSet

DEFAULT_TOGGLE_TOLERANCE = 0.01  # seconds


def toggle_shot(
    shots: ShotSet,
    timestamp: float,
    tolerance: float = DEFAULT_TOGGLE_TOLERANCE,
    *,
    n_samples: Optional[int] = None,
) -> ShotSet:
    """Remove the shot nearest `timestamp` or add one there.

    If the nearest existing shot is strictly closer than `tolerance` seconds it
    is removed; otherwise a shot is inserted at ``round(timestamp * sample_rate)``.

    Args:
        shots: Current shot set (left untouched).
        timestamp: Time of the edit in seconds.
        tolerance: Match radius in seconds.
        n_samples: Length of the sample buffer; inserting at or past it raises,
            as does inserting before sample 0.

    Returns:
        A new ShotSet.
    """
    if not math.isfinite(timestamp):
        raise ValueError(f"timestamp must be a finite number, got {timestamp!r}")
    if not math.isfinite(tolerance) or tolerance < 0:
        raise ValueError(f"tolerance must be a non-negative finite number, got {tolerance!r}")

    if len(shots):
        distances = np.abs(shots.times - timestamp)
        nearest = int(np.argmin(distances))
        if distances[nearest] < tolerance:
            return ShotSet(np.delete(shots.indices, nearest), shots.sample_rate)

    index = int(round(timestamp * shots.sample_rate))
    if index < 0:
        raise ValueError(f"timestamp {timestamp:.6f}s is before the start of the recording")
    if n_samples is not None and index >= n_samples:
        raise ValueError(f"timestamp {timestamp:.6f}s is past the end of the recording")
    if index in shots:
        return shots
    return ShotSet.from_indices(np.append(shots.indices, index), shots.sample_rate)


@dataclass(frozen=True)
class ToggleShot:
    """Edit that toggles the shot at `timestamp` (see `toggle_shot`)."""

    timestamp: float
    tolerance: float = DEFAULT_TOGGLE_TOLERANCE

    def apply(self, shots: ShotSet, *, n_samples: Optional[int] = None) -> ShotSet:
        return toggle_shot(shots, self.timestamp, self.tolerance, n_samples=n_samples)


__all__ = ["DEFAULT_TOGGLE_TOLERANCE", "ToggleShot", "toggle_shot"]
