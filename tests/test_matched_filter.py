import math

import numpy as np
import pytest

from chirpsearch.data.gw_physics_engine import PostNewtonianWaveformGenerator
from chirpsearch.data.gw_signal_params import SOLAR_MASS_KG
from chirpsearch.data.signal_validation import LengthMismatch
from chirpsearch.inference.matched_filter import matched_filter_score, matched_filter_scores


@pytest.fixture
def random_signal():
    return np.random.default_rng(3).normal(size=2048)


def test_self_match_scores_sqrt_n(random_signal):
    assert matched_filter_score(random_signal, random_signal) == pytest.approx(math.sqrt(2048))


def test_scale_invariant(random_signal):
    template = np.random.default_rng(4).normal(size=2048)
    base = matched_filter_score(random_signal, template)
    assert matched_filter_score(random_signal * 1e-21, template * 1e27) == pytest.approx(base)


def test_anti_correlated_is_negative(random_signal):
    assert matched_filter_score(random_signal, -random_signal) == pytest.approx(-math.sqrt(2048))


def test_zero_power_scores_zero(random_signal):
    zeros = np.zeros_like(random_signal)
    assert matched_filter_score(random_signal, zeros) == 0.0
    assert matched_filter_score(zeros, random_signal) == 0.0


def test_length_mismatch(random_signal):
    with pytest.raises(LengthMismatch):
        matched_filter_score(random_signal, random_signal[:-1])


def test_accepts_template_records():
    template = PostNewtonianWaveformGenerator().synthesize(
        20 * SOLAR_MASS_KG, 15 * SOLAR_MASS_KG, 1024.0, 1.0)
    assert matched_filter_score(template.samples, template) == pytest.approx(math.sqrt(1024))


def test_batch_matches_single(random_signal):
    rng = np.random.default_rng(5)
    bank = [rng.normal(size=2048) for _ in range(6)] + [np.zeros(2048)]
    expected = [matched_filter_score(random_signal, t) for t in bank]

    np.testing.assert_allclose(matched_filter_scores(random_signal, bank), expected, rtol=1e-10)
    assert matched_filter_scores(random_signal, bank)[-1] == 0.0


def test_jax_backend_matches_numpy(random_signal):
    rng = np.random.default_rng(6)
    bank = [rng.normal(size=2048) for _ in range(8)]
    numpy_scores = matched_filter_scores(random_signal, bank, backend="numpy")
    jax_scores = matched_filter_scores(random_signal, bank, backend="jax")

    assert jax_scores.dtype == np.float64
    np.testing.assert_allclose(jax_scores, numpy_scores, rtol=1e-9)


def test_batch_empty_and_invalid(random_signal):
    assert matched_filter_scores(random_signal, []).shape == (0,)
    with pytest.raises(ValueError):
        matched_filter_scores(random_signal, [random_signal], backend="torch")
    with pytest.raises(LengthMismatch):
        matched_filter_scores(random_signal, [random_signal, random_signal[:10]])
