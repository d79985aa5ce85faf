"""
GW Synthetic Generator: simulated detector noise and signal injections.

Produces test inputs for the detection engine. Randomness lives only here;
the engine itself is deterministic for a given input.
"""

import logging
from typing import Optional

import numpy as np

from .gw_physics_engine import PostNewtonianWaveformGenerator
from .gw_signal_params import SOLAR_MASS_KG, DetectionConfig, MassPair, StrainSeries
from .signal_validation import require_positive

logger = logging.getLogger(__name__)

# Characteristic detector strain noise level
DEFAULT_NOISE_AMPLITUDE = 1e-22


class SyntheticStrainGenerator:
    """
    Generator of noise-only and injected strain series.

    Example:
        generator = SyntheticStrainGenerator(seed=42)
        series = generator.inject(30.0, 25.0, sample_rate=4096.0, duration=1.0,
                                  noise_amplitude=1e-24)
    """

    def __init__(self,
                 config: Optional[DetectionConfig] = None,
                 seed: Optional[int] = None):
        self.config = config or DetectionConfig()
        self.waveform_generator = PostNewtonianWaveformGenerator(self.config)
        self.rng = np.random.default_rng(seed)

    def uniform_noise(self, n_samples: int,
                      amplitude: float = DEFAULT_NOISE_AMPLITUDE) -> np.ndarray:
        """White noise drawn uniformly from [-amplitude, amplitude]."""
        if n_samples < 0:
            raise ValueError(f"n_samples must be non-negative, got {n_samples}")
        if amplitude == 0:
            return np.zeros(n_samples)
        amplitude = require_positive("amplitude", amplitude)
        return self.rng.uniform(-amplitude, amplitude, size=n_samples)

    def noise_series(self, sample_rate: float, duration: float,
                     amplitude: float = DEFAULT_NOISE_AMPLITUDE) -> StrainSeries:
        """Noise-only strain series."""
        n_samples = int(round(duration * sample_rate))
        return StrainSeries.from_values(self.uniform_noise(n_samples, amplitude), sample_rate)

    def inject(self,
               m1: float,
               m2: float,
               sample_rate: float,
               duration: float,
               noise_amplitude: float = DEFAULT_NOISE_AMPLITUDE,
               scale: float = 1.0) -> StrainSeries:
        """
        Template for (m1, m2) solar masses plus uniform noise.

        Args:
            m1, m2: Component masses (solar masses)
            sample_rate: Sampling rate (Hz)
            duration: Series duration (s)
            noise_amplitude: Half-width of the uniform noise
            scale: Multiplier applied to the template before adding noise
        """
        masses = MassPair(m1, m2)
        template = self.waveform_generator.synthesize(
            masses.m1 * SOLAR_MASS_KG,
            masses.m2 * SOLAR_MASS_KG,
            sample_rate,
            duration,
        )
        strain = scale * template.samples + self.uniform_noise(len(template), noise_amplitude)

        logger.info(
            f"Injected chirp m1={masses.m1:g} m2={masses.m2:g} M_sun "
            f"({len(template)} samples, noise={noise_amplitude:.1e})"
        )
        return StrainSeries.from_values(strain, sample_rate)
