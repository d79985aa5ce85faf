import math

import numpy as np
import pytest

from chirpsearch.data.gw_physics_engine import (
    PostNewtonianWaveformGenerator,
    chirp_mass,
    distance_light_years,
    estimate_distance_mpc,
    peak_luminosity,
    radiated_energy,
    radiated_mass,
    redshift,
    reduced_mass,
    symmetric_mass_ratio,
)
from chirpsearch.data.gw_signal_params import C, G, MEGAPARSEC_M, SOLAR_MASS_KG, DetectionConfig
from chirpsearch.data.signal_validation import InvalidParameter


@pytest.fixture
def waveform_generator():
    return PostNewtonianWaveformGenerator(DetectionConfig())


class TestMassFunctions:

    def test_chirp_mass_formula(self):
        assert chirp_mass(30.0, 25.0) == pytest.approx((30 * 25) ** 0.6 / 55 ** 0.2)

    def test_chirp_mass_equal_masses(self):
        assert chirp_mass(10.0, 10.0) == pytest.approx(10.0 * 2 ** -0.2)

    @pytest.mark.parametrize("m1,m2", [(5.0, 5.0), (36.0, 29.0), (95.0, 5.0), (1.46, 1.27)])
    def test_chirp_mass_bounds(self, m1, m2):
        mc = chirp_mass(m1, m2)
        assert 0 < mc <= (m1 + m2) * 0.25 ** 0.6 + 1e-12
        assert mc < max(m1, m2)

    def test_chirp_mass_symmetric(self):
        assert chirp_mass(36.0, 29.0) == chirp_mass(29.0, 36.0)

    def test_reduced_mass_and_eta(self):
        assert reduced_mass(10.0, 10.0) == pytest.approx(5.0)
        assert symmetric_mass_ratio(10.0, 10.0) == pytest.approx(0.25)
        assert symmetric_mass_ratio(90.0, 10.0) < 0.25

    @pytest.mark.parametrize("m1,m2", [(0.0, 10.0), (10.0, -1.0), (float("nan"), 10.0)])
    def test_invalid_masses(self, m1, m2):
        with pytest.raises(InvalidParameter):
            chirp_mass(m1, m2)


class TestDerivedPhysics:

    def test_radiated_energy_gw150914(self):
        energy = radiated_energy(36.0, 29.0, 62.0)
        assert energy == pytest.approx(3.0 * 1.989e30 * 299792458.0 ** 2, rel=1e-12)
        assert energy == pytest.approx(5.36e47, rel=1e-2)

    def test_radiated_mass(self):
        assert radiated_mass(36.0, 29.0, 62.0) == pytest.approx(3.0)
        assert radiated_mass(10.0, 10.0, 20.0) == 0.0

    def test_final_mass_above_total_rejected(self):
        with pytest.raises(InvalidParameter):
            radiated_energy(1.46, 1.27, 2.74)

    def test_peak_luminosity_scaling(self):
        ten_solar = 10.0 * SOLAR_MASS_KG
        assert peak_luminosity(ten_solar) == pytest.approx(C ** 5 / G)
        assert peak_luminosity(2 * ten_solar) == pytest.approx(4 * C ** 5 / G)

    def test_peak_luminosity_rejects_zero(self):
        with pytest.raises(InvalidParameter):
            peak_luminosity(0.0)

    def test_distance_estimate_formula(self):
        mc_kg = chirp_mass(36.0, 29.0) * SOLAR_MASS_KG
        expected = (4.0 * (G * mc_kg / C ** 2) ** 1.25 * (math.pi * 100.0) ** (2.0 / 3.0)
                    / 1e-21 / MEGAPARSEC_M)
        assert estimate_distance_mpc(1e-21, 36.0, 29.0) == pytest.approx(expected)

    def test_distance_inverse_in_strain(self):
        near = estimate_distance_mpc(2e-21, 36.0, 29.0)
        far = estimate_distance_mpc(1e-21, 36.0, 29.0)
        assert far == pytest.approx(2 * near)

    @pytest.mark.parametrize("strain", [0.0, -1e-21])
    def test_distance_rejects_non_positive_strain(self, strain):
        with pytest.raises(InvalidParameter):
            estimate_distance_mpc(strain, 36.0, 29.0)

    def test_redshift(self):
        assert redshift(410.0) == pytest.approx(70.0 * 410.0 / 299792.458)
        assert redshift(410.0, hubble_constant=67.4) < redshift(410.0)

    def test_redshift_rejects_zero_distance(self):
        with pytest.raises(InvalidParameter):
            redshift(0.0)

    def test_light_years(self):
        assert distance_light_years(40.0) == pytest.approx(40.0 * 3.26e6)


class TestWaveformGenerator:

    def test_template_length(self, waveform_generator):
        m1, m2 = 30.0 * SOLAR_MASS_KG, 25.0 * SOLAR_MASS_KG
        template = waveform_generator.synthesize(m1, m2, 4096.0, 1.0)
        assert len(template) == 4096
        assert template.masses.m1 == pytest.approx(30.0)
        assert template.masses.m2 == pytest.approx(25.0)
        assert np.all(np.isfinite(template.samples))

    def test_template_is_read_only(self, waveform_generator):
        template = waveform_generator.synthesize(10 * SOLAR_MASS_KG, 10 * SOLAR_MASS_KG, 1024.0, 1.0)
        with pytest.raises(ValueError):
            template.samples[0] = 1.0

    def test_deterministic(self, waveform_generator):
        args = (36 * SOLAR_MASS_KG, 29 * SOLAR_MASS_KG, 2048.0, 1.0)
        first = waveform_generator.synthesize(*args)
        second = PostNewtonianWaveformGenerator().synthesize(*args)
        assert np.array_equal(first.samples, second.samples)

    def test_frequency_increases_towards_coalescence(self, waveform_generator):
        waveform = waveform_generator.generate_pn_waveform(
            30 * SOLAR_MASS_KG, 25 * SOLAR_MASS_KG, 4096.0, 1.0)
        frequency = waveform['frequency']
        assert np.all(np.diff(frequency) > 0)
        assert np.all(np.diff(waveform['amplitude']) > 0)
        assert waveform['metadata']['chirp_mass'] == pytest.approx(chirp_mass(30.0, 25.0))
        np.testing.assert_allclose(waveform['strain'],
                                   waveform['amplitude'] * np.cos(waveform['phase']))

    def test_coalesced_samples_use_fallback(self, waveform_generator):
        tau = np.array([0.5, 0.0, -0.25])
        mc_kg = chirp_mass(30.0, 25.0) * SOLAR_MASS_KG

        frequency = waveform_generator.frequency_evolution(tau, mc_kg)
        amplitude = waveform_generator.amplitude_evolution(tau, mc_kg)
        phase = waveform_generator.phase_evolution(tau, mc_kg)

        assert frequency[0] > 0
        np.testing.assert_array_equal(frequency[1:], [100.0, 100.0])
        np.testing.assert_array_equal(amplitude[1:], [0.0, 0.0])
        np.testing.assert_array_equal(phase[1:], [0.0, 0.0])

    def test_custom_fallback_frequency(self):
        generator = PostNewtonianWaveformGenerator(DetectionConfig(fallback_frequency_hz=250.0))
        freq = generator.frequency_evolution(np.array([0.0]), 20 * SOLAR_MASS_KG)
        assert freq[0] == 250.0

    def test_frequency_formula(self, waveform_generator):
        mc_kg = chirp_mass(30.0, 25.0) * SOLAR_MASS_KG
        tau = 0.5
        expected = (1 / (8 * math.pi)) * (5 / tau) ** 0.375 * (G * mc_kg / C ** 3) ** -0.625
        assert waveform_generator.frequency_evolution(np.array([tau]), mc_kg)[0] == pytest.approx(expected)

    def test_invalid_duration(self, waveform_generator):
        with pytest.raises(InvalidParameter):
            waveform_generator.synthesize(SOLAR_MASS_KG, SOLAR_MASS_KG, 4096.0, 0.0)
