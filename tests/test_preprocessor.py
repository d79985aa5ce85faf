import math

import numpy as np
import pytest

from chirpsearch.data.gw_preprocessor import StrainPreprocessor, condition
from chirpsearch.data.gw_signal_params import DetectionConfig, StrainSeries
from chirpsearch.data.signal_validation import (
    DegenerateSignal,
    InsufficientSamples,
    InvalidParameter,
)


@pytest.fixture
def preprocessor():
    return StrainPreprocessor(DetectionConfig())


def test_highpass_coefficient(preprocessor):
    rc = 1.0 / (2.0 * math.pi * 20.0)
    dt = 1.0 / 4096.0
    assert preprocessor.highpass_coefficient(4096.0) == pytest.approx(rc / (rc + dt))


def test_highpass_matches_rc_recursion(preprocessor):
    rng = np.random.default_rng(0)
    x = rng.normal(size=1500)
    alpha = preprocessor.highpass_coefficient(1024.0)

    expected = np.zeros_like(x)
    for i in range(1, x.size):
        expected[i] = alpha * (expected[i - 1] + x[i] - x[i - 1])

    y = preprocessor.highpass(x, 1024.0)
    assert y[0] == 0.0
    np.testing.assert_allclose(y, expected, rtol=1e-10, atol=1e-12)


def test_highpass_removes_dc_offset(preprocessor):
    x = np.full(2000, 5.0)
    x[1000:] += 1.0  # step
    y = preprocessor.highpass(x, 4096.0)
    assert np.all(y[:1000] == 0.0)
    # step response decays towards zero
    assert abs(y[-1]) < abs(y[1000])


def test_condition_zero_mean_unit_variance(preprocessor, noise_series, sample_rate):
    conditioned = preprocessor.condition(noise_series, sample_rate)
    assert conditioned.shape == noise_series.shape
    assert np.mean(conditioned) == pytest.approx(0.0, abs=1e-10)
    assert np.std(conditioned) == pytest.approx(1.0, rel=1e-10)


def test_condition_accepts_strain_series(preprocessor, noise_series, sample_rate):
    series = StrainSeries.from_values(noise_series, sample_rate)
    np.testing.assert_array_equal(
        preprocessor.condition(series),
        preprocessor.condition(noise_series, sample_rate),
    )


def test_process_keeps_statistics(preprocessor, noise_series, sample_rate):
    result = preprocessor.process(noise_series, sample_rate)
    assert result.std > 0
    np.testing.assert_allclose(result.conditioned * result.std + result.mean, result.filtered,
                               rtol=1e-9, atol=1e-35)
    assert result.peak_strain == pytest.approx(np.max(np.abs(result.conditioned)))


def test_constant_input_is_degenerate(preprocessor):
    with pytest.raises(DegenerateSignal):
        preprocessor.condition(np.full(2048, 1e-21), 4096.0)


def test_non_finite_input_is_degenerate(preprocessor, noise_series):
    noise_series[10] = np.nan
    with pytest.raises(DegenerateSignal):
        preprocessor.condition(noise_series, 4096.0)


def test_short_input_rejected(preprocessor):
    with pytest.raises(InsufficientSamples) as exc_info:
        preprocessor.condition(np.random.default_rng(1).normal(size=999), 4096.0)
    assert exc_info.value.invalid_value == 999
    assert exc_info.value.context["min_samples"] == 1000


def test_minimum_window_accepted(preprocessor):
    x = np.random.default_rng(2).normal(size=1000)
    assert preprocessor.condition(x, 4096.0).size == 1000


def test_invalid_sample_rate(preprocessor, noise_series):
    with pytest.raises(InvalidParameter):
        preprocessor.condition(noise_series, 0.0)


def test_raw_array_needs_sample_rate(preprocessor, noise_series):
    with pytest.raises(ValueError):
        preprocessor.condition(noise_series)


def test_module_level_condition(noise_series, sample_rate):
    np.testing.assert_array_equal(
        condition(noise_series, sample_rate),
        StrainPreprocessor().condition(noise_series, sample_rate),
    )
