from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest

from ratefire.analysis.settings import (
    CONFIG_PARAMETERS,
    AnalysisConfig,
    InvalidConfigurationError,
)


class TestAnalysisConfig:
    def test_defaults_match_parameter_table(self):
        config = AnalysisConfig()
        for name, param in CONFIG_PARAMETERS.items():
            assert getattr(config, name) == param.default

    @pytest.mark.parametrize(
        "field_name, value",
        [
            ("peak_threshold_std", 0.05),
            ("peak_threshold_std", 5.5),
            ("min_shot_spacing", 0.0),
            ("min_shot_spacing", 1.5),
            ("burst_gap_threshold", 0.01),
            ("burst_gap_threshold", 3.0),
            ("window_size", 0.0005),
            ("window_size", 0.02),
            ("min_peak_prominence", 0.0),
            ("min_peak_prominence", 1.1),
            ("min_burst_count", 0),
            ("min_burst_count", 51),
        ],
    )
    def test_out_of_range_rejected(self, field_name, value):
        with pytest.raises(InvalidConfigurationError):
            AnalysisConfig(**{field_name: value})

    @pytest.mark.parametrize("name", sorted(CONFIG_PARAMETERS))
    def test_range_bounds_are_inclusive(self, name):
        param = CONFIG_PARAMETERS[name]
        AnalysisConfig(**{name: param.min})
        AnalysisConfig(**{name: param.max})

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "1.2", None, True])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(InvalidConfigurationError):
            AnalysisConfig(peak_threshold_std=value)

    @pytest.mark.parametrize("value", [5.0, 5.5, True, "5"])
    def test_min_burst_count_must_be_integer(self, value):
        with pytest.raises(InvalidConfigurationError):
            AnalysisConfig(min_burst_count=value)

    def test_numpy_scalars_accepted(self):
        config = AnalysisConfig(peak_threshold_std=np.float32(2.0), min_burst_count=np.int64(3))
        assert isinstance(config.peak_threshold_std, float)
        assert type(config.min_burst_count) is int

    def test_replace_revalidates(self):
        with pytest.raises(InvalidConfigurationError):
            replace(AnalysisConfig(), window_size=1.0)

    def test_invalid_configuration_is_a_value_error(self):
        assert issubclass(InvalidConfigurationError, ValueError)

    def test_from_mapping_accepts_camel_case(self):
        config = AnalysisConfig.from_mapping(
            {
                "peakThresholdStd": 2.0,
                "minShotSpacing": 0.06,
                "burstGapThreshold": 0.3,
                "windowSize": 0.003,
                "minPeakProminence": 0.2,
                "minBurstCount": 3,
            }
        )
        assert config == AnalysisConfig(2.0, 0.06, 0.3, 0.003, 0.2, 3)

    def test_from_mapping_accepts_snake_case(self):
        config = AnalysisConfig.from_mapping({"min_burst_count": 2})
        assert config.min_burst_count == 2

    def test_from_mapping_rejects_unknown_key(self):
        with pytest.raises(InvalidConfigurationError):
            AnalysisConfig.from_mapping({"threshold": 1.0})

    def test_from_mapping_rejects_duplicate_spellings(self):
        with pytest.raises(InvalidConfigurationError):
            AnalysisConfig.from_mapping({"minBurstCount": 2, "min_burst_count": 3})

    def test_to_dict_round_trip(self):
        config = AnalysisConfig(min_burst_count=7, window_size=0.005)
        data = config.to_dict()
        assert data["minBurstCount"] == 7
        assert data["windowSize"] == 0.005
        assert AnalysisConfig.from_mapping(data) == config
