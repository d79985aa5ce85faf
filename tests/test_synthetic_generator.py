import numpy as np
import pytest

from chirpsearch.data.gw_physics_engine import PostNewtonianWaveformGenerator
from chirpsearch.data.gw_signal_params import SOLAR_MASS_KG
from chirpsearch.data.gw_synthetic_generator import SyntheticStrainGenerator
from chirpsearch.data.signal_validation import InvalidParameter


def test_uniform_noise_bounds(generator):
    noise = generator.uniform_noise(10000, amplitude=1e-22)
    assert noise.shape == (10000,)
    assert np.all(np.abs(noise) <= 1e-22)
    assert np.std(noise) > 0


def test_zero_amplitude_gives_zeros(generator):
    np.testing.assert_array_equal(generator.uniform_noise(16, amplitude=0.0), np.zeros(16))


def test_negative_amplitude_rejected(generator):
    with pytest.raises(InvalidParameter):
        generator.uniform_noise(16, amplitude=-1.0)


def test_seed_reproducible():
    a = SyntheticStrainGenerator(seed=1).noise_series(1024.0, 1.0)
    b = SyntheticStrainGenerator(seed=1).noise_series(1024.0, 1.0)
    np.testing.assert_array_equal(a.values, b.values)
    assert len(a) == 1024
    assert a.sample_rate == 1024.0


def test_inject_without_noise_equals_template(generator):
    series = generator.inject(36.0, 29.0, sample_rate=2048.0, duration=1.0, noise_amplitude=0.0)
    template = PostNewtonianWaveformGenerator().synthesize(
        36.0 * SOLAR_MASS_KG, 29.0 * SOLAR_MASS_KG, 2048.0, 1.0)
    np.testing.assert_array_equal(series.values, template.samples)


def test_inject_scale(generator):
    base = generator.inject(20.0, 20.0, 1024.0, 1.0, noise_amplitude=0.0)
    half = generator.inject(20.0, 20.0, 1024.0, 1.0, noise_amplitude=0.0, scale=0.5)
    np.testing.assert_allclose(half.values, 0.5 * base.values)


def test_inject_accepts_swapped_masses(generator):
    a = generator.inject(25.0, 30.0, 1024.0, 1.0, noise_amplitude=0.0)
    b = generator.inject(30.0, 25.0, 1024.0, 1.0, noise_amplitude=0.0)
    np.testing.assert_array_equal(a.values, b.values)
