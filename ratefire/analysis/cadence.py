"""Cadence statistics for detected bursts.

- burst_statistics: interval mean, population std, mean absolute deviation
  and rounds-per-minute for one burst
- summarize: aggregate over all reported bursts
- calculate_cadence: both of the above for a segmented shot set

Single-shot bursts have no intervals; every derived value is reported as 0,
never NaN.
"""
from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from ratefire.shared.models import Burst, BurstSegment, Summary


def interval_stats(times: Sequence[float]) -> Tuple[float, float, float]:
    """Return ``(mean_interval, std_interval, mean_deviation)`` for shot times."""
    arr = np.asarray(times, dtype=np.float64)
    if arr.size < 2:
        return 0.0, 0.0, 0.0
    intervals = np.diff(arr)
    mean = float(np.mean(intervals))
    std = float(np.std(intervals))
    mean_dev = float(np.mean(np.abs(intervals - mean)))
    return mean, std, mean_dev


def rate_rpm(mean_interval: float) -> float:
    if mean_interval <= 0:
        return 0.0
    return 60.0 / mean_interval


def burst_statistics(segment: BurstSegment) -> Burst:
    if segment.num_shots < 2:
        return Burst(
            burst_number=segment.burst_number,
            shot_indices=segment.shot_indices,
            shot_times=segment.shot_times,
            start_time=segment.start_time,
            end_time=segment.start_time,
            duration=0.0,
            num_shots=segment.num_shots,
        )
    mean, std, mean_dev = interval_stats(segment.shot_times)
    return Burst(
        burst_number=segment.burst_number,
        shot_indices=segment.shot_indices,
        shot_times=segment.shot_times,
        start_time=segment.start_time,
        end_time=segment.end_time,
        duration=segment.end_time - segment.start_time,
        num_shots=segment.num_shots,
        mean_interval=mean,
        std_interval=std,
        mean_deviation=mean_dev,
        rate_rpm=rate_rpm(mean),
    )


def summarize(bursts: Sequence[Burst]) -> Summary:
    if not bursts:
        return Summary.empty()
    total_shots = sum(b.num_shots for b in bursts)
    rated = [b for b in bursts if b.has_cadence]
    if not rated:
        return Summary(total_shots=total_shots, total_bursts=len(bursts))
    rates = np.array([b.rate_rpm for b in rated], dtype=np.float64)
    return Summary(
        total_shots=total_shots,
        total_bursts=len(bursts),
        mean_burst_rate_rpm=float(np.mean(rates)),
        min_burst_rate_rpm=float(np.min(rates)),
        max_burst_rate_rpm=float(np.max(rates)),
        avg_std_interval=float(np.mean([b.std_interval for b in rated])),
        avg_mean_deviation=float(np.mean([b.mean_deviation for b in rated])),
    )


def calculate_cadence(segments: Sequence[BurstSegment]) -> Tuple[List[Burst], Summary]:
    bursts = [burst_statistics(segment) for segment in segments]
    return bursts, summarize(bursts)


__all__ = [
    "burst_statistics",
    "calculate_cadence",
    "interval_stats",
    "rate_rpm",
    "summarize",
]
