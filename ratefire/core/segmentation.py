from __future__ import annotations

import logging
from typing import List

import numpy as np

from ratefire.shared.models import BurstSegment, ShotSet

logger = logging.getLogger(__name__)


def segment_bursts(shots: ShotSet, config) -> List[BurstSegment]:
    """Group consecutive shots into bursts by inter-shot gap.

    A new burst starts whenever the gap to the previous shot is strictly
    greater than ``config.burst_gap_threshold`` seconds. Groups with fewer than
    ``config.min_burst_count`` shots are dropped (the shots themselves stay in
    `shots`) and the survivors are numbered 1..N in time order.
    """
    if len(shots) == 0:
        return []

    indices = shots.indices
    times = shots.times
    gaps = np.diff(indices) / shots.sample_rate
    breaks = np.flatnonzero(gaps > config.burst_gap_threshold) + 1

    segments: List[BurstSegment] = []
    dropped = 0
    for group_idx, group_times in zip(np.split(indices, breaks), np.split(times, breaks)):
        if group_idx.size < config.min_burst_count:
            dropped += 1
            continue
        segments.append(
            BurstSegment(
                burst_number=len(segments) + 1,
                shot_indices=tuple(group_idx.tolist()),
                shot_times=tuple(group_times.tolist()),
            )
        )
    if dropped:
        logger.debug(
            "Dropped %d shot group(s) below min_burst_count=%d", dropped, config.min_burst_count
        )
    return segments


__all__ = ["segment_bursts"]
