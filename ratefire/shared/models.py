from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Sequence, Tuple

import numpy as np


def _freeze_array(array: np.ndarray, *, ndim: int | None = None, dtype=None) -> np.ndarray:
    """Return a read-only, C-contiguous copy of `array`, validating dimensions."""
    arr = np.array(array, dtype=dtype, copy=True, order="C")
    if ndim is not None and arr.ndim != ndim:
        raise ValueError(f"array must be {ndim}D, got {arr.ndim}D")
    arr.setflags(write=False)
    return arr


# ----------------------------
# Shot markers
# ----------------------------

@dataclass(frozen=True, eq=False)
class ShotSet:
    """Ordered, de-duplicated shot sample indices for one recording.

    A ShotSet is a snapshot: editing produces a new instance, so a renderer
    holding an older one never sees it change underneath.
    """

    indices: np.ndarray
    sample_rate: float

    def __post_init__(self) -> None:
        if not np.isfinite(self.sample_rate) or self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        indices = np.asarray(self.indices)
        if indices.size and not np.issubdtype(indices.dtype, np.integer):
            raise ValueError("indices must be integers")
        indices = _freeze_array(indices, ndim=1, dtype=np.int64)
        if indices.size and indices[0] < 0:
            raise ValueError("indices must be non-negative")
        if indices.size > 1 and np.any(np.diff(indices) <= 0):
            raise ValueError("indices must be strictly increasing")
        object.__setattr__(self, "indices", indices)
        object.__setattr__(self, "sample_rate", float(self.sample_rate))

    @classmethod
    def empty(cls, sample_rate: float) -> "ShotSet":
        return cls(np.zeros(0, dtype=np.int64), sample_rate)

    @classmethod
    def from_indices(cls, indices: Sequence[int], sample_rate: float) -> "ShotSet":
        """Build a ShotSet from unordered, possibly repeated indices."""
        arr = np.unique(np.asarray(indices, dtype=np.int64))
        return cls(arr, sample_rate)

    @property
    def times(self) -> np.ndarray:
        return self.indices / self.sample_rate

    def __len__(self) -> int:
        return int(self.indices.size)

    def __iter__(self) -> Iterator[int]:
        return (int(i) for i in self.indices)

    def __contains__(self, index: object) -> bool:
        if not isinstance(index, (int, np.integer)):
            return False
        pos = int(np.searchsorted(self.indices, index))
        return pos < self.indices.size and int(self.indices[pos]) == int(index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShotSet):
            return NotImplemented
        return self.sample_rate == other.sample_rate and np.array_equal(self.indices, other.indices)

    def __hash__(self) -> int:
        return hash((self.sample_rate, self.indices.tobytes()))

    def __repr__(self) -> str:
        return f"ShotSet(n={len(self)}, sample_rate={self.sample_rate:g})"

    def to_list(self) -> List[int]:
        return [int(i) for i in self.indices]


# ----------------------------
# Bursts and cadence
# ----------------------------

@dataclass(frozen=True)
class BurstSegment:
    """Contiguous run of shots before any cadence statistics are computed."""

    burst_number: int
    shot_indices: Tuple[int, ...]
    shot_times: Tuple[float, ...]

    def __post_init__(self) -> None:
        if self.burst_number < 1:
            raise ValueError("burst_number must be >= 1")
        if not self.shot_indices:
            raise ValueError("a burst needs at least one shot")
        if len(self.shot_indices) != len(self.shot_times):
            raise ValueError("shot_indices and shot_times length mismatch")
        object.__setattr__(self, "shot_indices", tuple(int(i) for i in self.shot_indices))
        object.__setattr__(self, "shot_times", tuple(float(t) for t in self.shot_times))

    @property
    def num_shots(self) -> int:
        return len(self.shot_indices)

    @property
    def start_time(self) -> float:
        return self.shot_times[0]

    @property
    def end_time(self) -> float:
        return self.shot_times[-1]


@dataclass(frozen=True)
class Burst:
    """A reported burst together with its cadence statistics.

    Attributes:
        burst_number: 1-based position among the reported bursts.
        shot_indices: Member shot sample indices, ascending.
        shot_times: Member shot timestamps (seconds), ascending.
        start_time: Timestamp of the first shot.
        end_time: Timestamp of the last shot.
        duration: ``end_time - start_time``; 0 for a single shot.
        num_shots: Number of member shots.
        mean_interval: Mean inter-shot interval (s); 0 for a single shot.
        std_interval: Population standard deviation of the intervals (s).
        mean_deviation: Mean absolute deviation of the intervals (s).
        rate_rpm: ``60 / mean_interval``; 0 for a single shot.
    """

    burst_number: int
    shot_indices: Tuple[int, ...]
    shot_times: Tuple[float, ...]
    start_time: float
    end_time: float
    duration: float
    num_shots: int
    mean_interval: float = 0.0
    std_interval: float = 0.0
    mean_deviation: float = 0.0
    rate_rpm: float = 0.0

    def __post_init__(self) -> None:
        if self.burst_number < 1:
            raise ValueError("burst_number must be >= 1")
        if len(self.shot_indices) == 0:
            raise ValueError("a burst needs at least one shot")
        if len(self.shot_indices) != len(self.shot_times):
            raise ValueError("shot_indices and shot_times length mismatch")
        if self.num_shots != len(self.shot_indices):
            raise ValueError(f"num_shots={self.num_shots} but burst holds {len(self.shot_indices)} shots")
        object.__setattr__(self, "shot_indices", tuple(int(i) for i in self.shot_indices))
        object.__setattr__(self, "shot_times", tuple(float(t) for t in self.shot_times))

    @property
    def has_cadence(self) -> bool:
        return self.num_shots >= 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "burstNumber": self.burst_number,
            "shotIndices": list(self.shot_indices),
            "shotTimes": list(self.shot_times),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "numShots": self.num_shots,
            "meanInterval": self.mean_interval,
            "stdInterval": self.std_interval,
            "meanDeviation": self.mean_deviation,
            "rateRpm": self.rate_rpm,
        }


@dataclass(frozen=True)
class Summary:
    """Aggregate cadence over every reported burst."""

    total_shots: int = 0
    total_bursts: int = 0
    mean_burst_rate_rpm: float = 0.0
    min_burst_rate_rpm: float = 0.0
    max_burst_rate_rpm: float = 0.0
    avg_std_interval: float = 0.0
    avg_mean_deviation: float = 0.0

    @classmethod
    def empty(cls) -> "Summary":
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalShots": self.total_shots,
            "totalBursts": self.total_bursts,
            "meanBurstRateRpm": self.mean_burst_rate_rpm,
            "minBurstRateRpm": self.min_burst_rate_rpm,
            "maxBurstRateRpm": self.max_burst_rate_rpm,
            "avgStdInterval": self.avg_std_interval,
            "avgMeanDeviation": self.avg_mean_deviation,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Everything a renderer needs: shot markers, burst overlays and the summary."""

    shots: ShotSet
    bursts: Tuple[Burst, ...] = field(default_factory=tuple)
    summary: Summary = field(default_factory=Summary)
    audio_duration: float = 0.0

    def __post_init__(self) -> None:
        if self.audio_duration < 0:
            raise ValueError("audio_duration must be non-negative")
        object.__setattr__(self, "bursts", tuple(self.bursts))

    @property
    def sample_rate(self) -> float:
        return self.shots.sample_rate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "peaks": self.shots.to_list(),
            "shotTimes": [float(t) for t in self.shots.times],
            "bursts": [burst.to_dict() for burst in self.bursts],
            "summary": self.summary.to_dict(),
            "audioDuration": self.audio_duration,
            "sampleRate": self.sample_rate,
        }


__all__ = [
    "ShotSet",
    "BurstSegment",
    "Burst",
    "Summary",
    "AnalysisResult",
]
