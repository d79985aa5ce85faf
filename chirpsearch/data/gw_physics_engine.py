"""
Gravitational wave physics engine: leading-order inspiral waveforms and
derived source quantities.

Masses passed to the waveform generator are in kilograms; the derived-physics
helpers take solar masses unless the argument name says otherwise.
"""

import logging
import math
from typing import Any, Dict, Optional

import numpy as np

from .gw_signal_params import (
    C,
    G,
    LIGHT_YEARS_PER_MPC,
    MEGAPARSEC_M,
    SOLAR_MASS_KG,
    DetectionConfig,
    MassPair,
    Template,
)
from .signal_validation import InvalidParameter, require_positive

logger = logging.getLogger(__name__)


def chirp_mass(m1: float, m2: float) -> float:
    """Chirp mass (m1*m2)^(3/5) / (m1+m2)^(1/5), in the units of the inputs."""
    m1 = require_positive("m1", m1)
    m2 = require_positive("m2", m2)
    return (m1 * m2) ** (3.0 / 5.0) / (m1 + m2) ** (1.0 / 5.0)


def reduced_mass(m1: float, m2: float) -> float:
    """Reduced mass m1*m2 / (m1+m2), in the units of the inputs."""
    m1 = require_positive("m1", m1)
    m2 = require_positive("m2", m2)
    return m1 * m2 / (m1 + m2)


def symmetric_mass_ratio(m1: float, m2: float) -> float:
    """eta = mu / M, in (0, 1/4]."""
    return reduced_mass(m1, m2) / (m1 + m2)


def radiated_mass(m1: float, m2: float, final_mass: float) -> float:
    """Mass deficit m1 + m2 - final_mass (solar masses)."""
    m1 = require_positive("m1", m1)
    m2 = require_positive("m2", m2)
    final_mass = require_positive("final_mass", final_mass)
    deficit = m1 + m2 - final_mass
    if deficit < 0:
        raise InvalidParameter("final_mass exceeds the initial total mass",
                               invalid_value=final_mass,
                               context={"total_mass": m1 + m2})
    return deficit


def radiated_energy(m1: float, m2: float, final_mass: float) -> float:
    """Energy radiated in gravitational waves, E = (m1 + m2 - M_final) c^2 (J)."""
    return radiated_mass(m1, m2, final_mass) * SOLAR_MASS_KG * C ** 2


def peak_luminosity(chirp_mass_kg: float) -> float:
    """
    Peak luminosity (W), scaled from the Planck luminosity c^5/G.

    L = (c^5 / G) * (Mc / 10 M_sun)^2
    """
    chirp_mass_kg = require_positive("chirp_mass_kg", chirp_mass_kg)
    return (C ** 5 / G) * (chirp_mass_kg / (10.0 * SOLAR_MASS_KG)) ** 2


def estimate_distance_mpc(observed_strain: float, m1: float, m2: float,
                          peak_frequency_hz: float = 100.0) -> float:
    """
    Luminosity distance (Mpc) from a peak strain amplitude.

    Inverts h = (4/D) (G Mc / c^2)^(5/4) (pi f)^(2/3) at a fixed peak
    frequency. Leading-order, non-relativistic.
    """
    observed_strain = require_positive("observed_strain", observed_strain)
    peak_frequency_hz = require_positive("peak_frequency_hz", peak_frequency_hz)
    mc_kg = chirp_mass(m1, m2) * SOLAR_MASS_KG

    numerator = 4.0 * (G * mc_kg / C ** 2) ** (5.0 / 4.0) * (math.pi * peak_frequency_hz) ** (2.0 / 3.0)
    distance_m = numerator / observed_strain
    return distance_m / MEGAPARSEC_M


def redshift(distance_mpc: float, hubble_constant: float = 70.0) -> float:
    """Hubble-law redshift z = H0 D / c, with H0 in km/s/Mpc."""
    distance_mpc = require_positive("distance_mpc", distance_mpc)
    hubble_constant = require_positive("hubble_constant", hubble_constant)
    return hubble_constant * distance_mpc / (C / 1000.0)


def distance_light_years(distance_mpc: float) -> float:
    return require_positive("distance_mpc", distance_mpc) * LIGHT_YEARS_PER_MPC


class PostNewtonianWaveformGenerator:
    """
    Leading-order (Newtonian quadrupole) inspiral chirp generator.

    For time-to-coalescence tau the template follows

        f(tau)   = 1/(8 pi) (5/tau)^(3/8) (G Mc / c^3)^(-5/8)
        Phi(tau) = -2 (tau/5)^(5/8) (G Mc / c^3)^(-5/8)
        A(tau)   = (G Mc / c^2)^(5/4) tau^(-1/4) * amplitude_scale

    and each sample is A cos(Phi). Samples with tau <= 0 have zero amplitude
    and the fallback frequency. Output is a pure function of the inputs.
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        config = config or DetectionConfig()
        self.G = G
        self.c = C
        self.Msun = SOLAR_MASS_KG
        self.fallback_frequency = config.fallback_frequency_hz
        self.amplitude_scale = config.amplitude_scale

    def _time_to_coalescence(self, sample_rate: float, duration: float) -> np.ndarray:
        n_samples = int(round(duration * sample_rate))
        return duration - np.arange(n_samples, dtype=np.float64) / sample_rate

    def _chirp_time_factor(self, chirp_mass_kg: float) -> float:
        # (G Mc / c^3)^(-5/8), units s^(-5/8)
        return ((self.G * chirp_mass_kg) / self.c ** 3) ** (-5.0 / 8.0)

    def frequency_evolution(self, tau: np.ndarray, chirp_mass_kg: float) -> np.ndarray:
        """Instantaneous GW frequency (Hz) at each time-to-coalescence."""
        tau = np.asarray(tau, dtype=np.float64)
        valid = tau > 0
        safe_tau = np.where(valid, tau, 1.0)
        freq = (1.0 / (8.0 * math.pi)) * (5.0 / safe_tau) ** (3.0 / 8.0) \
            * self._chirp_time_factor(chirp_mass_kg)
        return np.where(valid, freq, self.fallback_frequency)

    def phase_evolution(self, tau: np.ndarray, chirp_mass_kg: float) -> np.ndarray:
        """Orbital phase (rad) at each time-to-coalescence; zero where tau <= 0."""
        tau = np.asarray(tau, dtype=np.float64)
        valid = tau > 0
        safe_tau = np.where(valid, tau, 1.0)
        phase = -2.0 * (safe_tau / 5.0) ** (5.0 / 8.0) * self._chirp_time_factor(chirp_mass_kg)
        return np.where(valid, phase, 0.0)

    def amplitude_evolution(self, tau: np.ndarray, chirp_mass_kg: float) -> np.ndarray:
        """Scaled strain amplitude at each time-to-coalescence; zero where tau <= 0."""
        tau = np.asarray(tau, dtype=np.float64)
        valid = tau > 0
        safe_tau = np.where(valid, tau, 1.0)
        amplitude = ((self.G * chirp_mass_kg) / self.c ** 2) ** (5.0 / 4.0) \
            * safe_tau ** (-1.0 / 4.0) * self.amplitude_scale
        return np.where(valid, amplitude, 0.0)

    def generate_pn_waveform(self,
                             mass1_kg: float,
                             mass2_kg: float,
                             sample_rate: float,
                             duration: float) -> Dict[str, Any]:
        """
        Generate the chirp together with its frequency, phase and amplitude tracks.

        Args:
            mass1_kg, mass2_kg: Component masses (kg)
            sample_rate: Sampling rate (Hz)
            duration: Template duration (s); coalescence at ``duration``

        Returns:
            Dictionary with strain, frequency, phase, amplitude and metadata
        """
        mass1_kg = require_positive("mass1_kg", mass1_kg)
        mass2_kg = require_positive("mass2_kg", mass2_kg)
        sample_rate = require_positive("sample_rate", sample_rate)
        duration = require_positive("duration", duration)

        mc_kg = chirp_mass(mass1_kg, mass2_kg)
        eta = symmetric_mass_ratio(mass1_kg, mass2_kg)
        tau = self._time_to_coalescence(sample_rate, duration)

        frequency = self.frequency_evolution(tau, mc_kg)
        phase = self.phase_evolution(tau, mc_kg)
        amplitude = self.amplitude_evolution(tau, mc_kg)
        strain = amplitude * np.cos(phase)

        return {
            'strain': strain,
            'frequency': frequency,
            'phase': phase,
            'amplitude': amplitude,
            'metadata': {
                'chirp_mass': mc_kg / self.Msun,
                'eta': eta,
                'total_mass': (mass1_kg + mass2_kg) / self.Msun,
                'f_final': float(frequency[-1]) if frequency.size else self.fallback_frequency,
            }
        }

    def synthesize(self,
                   mass1_kg: float,
                   mass2_kg: float,
                   sample_rate: float,
                   duration: float) -> Template:
        """Synthesize an immutable inspiral Template for a pair of masses in kg."""
        waveform = self.generate_pn_waveform(mass1_kg, mass2_kg, sample_rate, duration)
        masses = MassPair(mass1_kg / self.Msun, mass2_kg / self.Msun)
        return Template(
            masses=masses,
            sample_rate=float(sample_rate),
            duration=float(duration),
            samples=waveform['strain'],
        )


def create_pn_waveform_generator(config: Optional[DetectionConfig] = None) -> PostNewtonianWaveformGenerator:
    """Create PN waveform generator."""
    return PostNewtonianWaveformGenerator(config)
