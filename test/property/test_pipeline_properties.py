"""
Property-based tests for the analysis pipeline using Hypothesis.

These tests verify invariants that must hold for any input:
1. Detected shots are strictly increasing and inside the buffer
2. Bursts are ordered, non-overlapping and never smaller than min_burst_count
3. Segmentation + cadence is a pure function of shots and config
4. Toggling the same timestamp twice restores the shot set
5. Statistics are always finite
"""
from __future__ import annotations

import math

import numpy as np
from hypothesis import assume, given, settings, strategies as st

from ratefire.analysis.cadence import calculate_cadence
from ratefire.analysis.session import analyze
from ratefire.analysis.settings import CONFIG_PARAMETERS, AnalysisConfig
from ratefire.core.editing import toggle_shot
from ratefire.core.segmentation import segment_bursts
from ratefire.shared.models import ShotSet


def _param(name: str):
    param = CONFIG_PARAMETERS[name]
    if name == "min_burst_count":
        return st.integers(min_value=param.min, max_value=param.max)
    return st.floats(min_value=param.min, max_value=param.max, allow_nan=False, allow_infinity=False)


configs = st.builds(AnalysisConfig, **{name: _param(name) for name in CONFIG_PARAMETERS})

sample_rates = st.sampled_from([1000.0, 8000.0, 22050.0, 48000.0])

shot_sets = st.builds(
    ShotSet.from_indices,
    st.lists(st.integers(min_value=0, max_value=200_000), max_size=80),
    sample_rates,
)


class TestDetectionInvariants:
    @given(
        samples=st.lists(
            st.floats(min_value=-1.0, max_value=1.0, allow_nan=False, width=32),
            max_size=3000,
        ),
        sample_rate=sample_rates,
        config=configs,
    )
    @settings(max_examples=75, deadline=None)
    def test_shots_strictly_increasing_and_in_range(self, samples, sample_rate, config):
        arr = np.asarray(samples, dtype=np.float32)
        result = analyze(arr, sample_rate, config)
        indices = result.shots.indices
        assert np.all(np.diff(indices) > 0)
        if indices.size:
            assert indices[0] >= 0
            assert indices[-1] < arr.size

    @given(
        n_shots=st.integers(min_value=1, max_value=12),
        interval=st.floats(min_value=0.06, max_value=0.3),
        seed=st.integers(min_value=0, max_value=10_000),
    )
    @settings(max_examples=25, deadline=None)
    def test_refractory_spacing_respected(self, n_shots, interval, seed):
        sample_rate = 8000.0
        rng = np.random.default_rng(seed)
        samples = rng.normal(0.0, 0.01, size=int(sample_rate * (0.2 + n_shots * interval)))
        for k in range(n_shots):
            samples[int((0.1 + k * interval) * sample_rate)] += 1.0
        config = AnalysisConfig(min_shot_spacing=0.05)
        result = analyze(samples, sample_rate, config)
        gaps = np.diff(result.shots.indices)
        assert np.all(gaps >= config.min_shot_spacing * sample_rate)


class TestSegmentationInvariants:
    @given(shots=shot_sets, config=configs)
    @settings(max_examples=100, deadline=None)
    def test_bursts_ordered_and_large_enough(self, shots, config):
        segments = segment_bursts(shots, config)
        assert [s.burst_number for s in segments] == list(range(1, len(segments) + 1))
        for seg in segments:
            assert seg.num_shots >= config.min_burst_count
            assert list(seg.shot_indices) == sorted(set(seg.shot_indices))
        for prev, nxt in zip(segments, segments[1:]):
            assert prev.end_time < nxt.start_time
            assert nxt.start_time - prev.end_time > config.burst_gap_threshold - 1e-12
        members = [i for seg in segments for i in seg.shot_indices]
        assert set(members) <= set(shots.indices.tolist())

    @given(shots=shot_sets, config=configs)
    @settings(max_examples=60, deadline=None)
    def test_segment_and_calculate_are_idempotent(self, shots, config):
        first = calculate_cadence(segment_bursts(shots, config))
        second = calculate_cadence(segment_bursts(shots, config))
        assert first == second

    @given(shots=shot_sets, config=configs)
    @settings(max_examples=60, deadline=None)
    def test_statistics_always_finite(self, shots, config):
        bursts, summary = calculate_cadence(segment_bursts(shots, config))
        for value in summary.to_dict().values():
            assert math.isfinite(value)
        for burst in bursts:
            for value in (burst.mean_interval, burst.std_interval, burst.mean_deviation, burst.rate_rpm, burst.duration):
                assert math.isfinite(value)
                assert value >= 0.0
        assert summary.total_shots == sum(b.num_shots for b in bursts)
        assert summary.total_bursts == len(bursts)
        if summary.total_bursts:
            assert summary.min_burst_rate_rpm <= summary.mean_burst_rate_rpm + 1e-9
            assert summary.mean_burst_rate_rpm <= summary.max_burst_rate_rpm + 1e-9


class TestToggleInvariants:
    @given(shots=shot_sets, timestamp=st.floats(min_value=0.0, max_value=200.0))
    @settings(max_examples=100, deadline=None)
    def test_toggle_twice_restores_shot_set(self, shots, timestamp):
        tolerance = 0.01
        assume(len(shots) == 0 or np.min(np.abs(shots.times - timestamp)) >= tolerance)
        added = toggle_shot(shots, timestamp, tolerance)
        assert len(added) == len(shots) + 1
        assert toggle_shot(added, timestamp, tolerance) == shots

    @given(shots=shot_sets, timestamp=st.floats(min_value=0.0, max_value=200.0))
    @settings(max_examples=100, deadline=None)
    def test_toggle_keeps_shot_set_valid(self, shots, timestamp):
        edited = toggle_shot(shots, timestamp)
        assert np.all(np.diff(edited.indices) > 0)
        assert abs(len(edited) - len(shots)) == 1
