"""
GW Data Preprocessor

Signal conditioning for strain data ahead of matched filtering:

- Causal single-pole high-pass filter removing low-frequency drift
- Whitening to zero mean and unit variance over the whole window
- Input validation (minimum window length, finite values, sample rate)
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from scipy import signal

from .gw_signal_params import DetectionConfig, StrainSeries
from .signal_validation import DegenerateSignal, require_positive, validate_strain_array

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessingResult:
    """Output of a full conditioning pass with the statistics used to whiten."""
    conditioned: np.ndarray
    filtered: np.ndarray
    mean: float
    std: float
    sample_rate: float

    @property
    def peak_strain(self) -> float:
        return float(np.max(np.abs(self.conditioned)))


class StrainPreprocessor:
    """
    High-pass filtering and whitening of strain series.

    Stateless apart from its configuration; ``condition`` is a pure
    function of its inputs and may be shared across threads.
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        self.config = config or DetectionConfig()
        self.cutoff_hz = self.config.highpass_cutoff_hz
        self.min_samples = self.config.min_samples

    def highpass_coefficient(self, sample_rate: float) -> float:
        """Return the smoothing factor alpha = RC / (RC + dt) of the RC high-pass."""
        sample_rate = require_positive("sample_rate", sample_rate)
        rc = 1.0 / (2.0 * math.pi * self.cutoff_hz)
        dt = 1.0 / sample_rate
        return rc / (rc + dt)

    def highpass(self, data: np.ndarray, sample_rate: float) -> np.ndarray:
        """
        Apply the causal RC high-pass filter.

        Implements ``y[i] = alpha * (y[i-1] + x[i] - x[i-1])`` with ``y[0] = 0``
        and the recursion seeded from ``x[0]``.

        Args:
            data: 1-D strain array
            sample_rate: Sampling rate (Hz)

        Returns:
            Filtered array of the same length
        """
        alpha = self.highpass_coefficient(sample_rate)
        data = np.asarray(data, dtype=np.float64)
        if data.size == 0:
            return data.copy()

        # First difference with x[-1] := x[0], so the first output is zero
        dx = np.empty_like(data)
        dx[0] = 0.0
        dx[1:] = np.diff(data)
        return signal.lfilter([alpha], [1.0, -alpha], dx)

    def whiten(self, data: np.ndarray) -> np.ndarray:
        """
        Normalize to zero mean and unit (population) variance.

        Raises:
            DegenerateSignal: Standard deviation is zero or not finite
        """
        data = np.asarray(data, dtype=np.float64)
        mean = float(np.mean(data))
        std = float(np.std(data))
        if std == 0.0 or not math.isfinite(std):
            raise DegenerateSignal("Cannot whiten a zero-variance signal",
                                   invalid_value=std)
        return (data - mean) / std

    def process(self,
                strain: Union[StrainSeries, np.ndarray],
                sample_rate: Optional[float] = None) -> ProcessingResult:
        """
        Run the full conditioning chain and keep intermediate statistics.

        Args:
            strain: StrainSeries, or raw array together with ``sample_rate``
            sample_rate: Sampling rate (Hz); taken from the series if omitted

        Returns:
            ProcessingResult with conditioned and filtered data
        """
        if isinstance(strain, StrainSeries):
            if sample_rate is None:
                sample_rate = strain.sample_rate
            strain = strain.values
        if sample_rate is None:
            raise ValueError("sample_rate is required for raw strain arrays")

        data = validate_strain_array(strain, self.min_samples)
        sample_rate = require_positive("sample_rate", sample_rate)

        filtered = self.highpass(data, sample_rate)
        mean = float(np.mean(filtered))
        std = float(np.std(filtered))
        conditioned = self.whiten(filtered)

        logger.debug(
            f"Conditioned {data.size} samples @ {sample_rate:g} Hz "
            f"(high-pass {self.cutoff_hz:g} Hz, mean={mean:.3e}, std={std:.3e})"
        )
        return ProcessingResult(
            conditioned=conditioned,
            filtered=filtered,
            mean=mean,
            std=std,
            sample_rate=sample_rate,
        )

    def condition(self,
                  strain: Union[StrainSeries, np.ndarray],
                  sample_rate: Optional[float] = None) -> np.ndarray:
        """
        High-pass filter and whiten a strain series.

        Raises:
            InsufficientSamples: Fewer than ``min_samples`` values
            DegenerateSignal: Constant or non-finite input
            InvalidParameter: Non-positive sample rate
        """
        return self.process(strain, sample_rate).conditioned


def condition(strain, sample_rate: float,
              config: Optional[DetectionConfig] = None) -> np.ndarray:
    """Convenience wrapper around ``StrainPreprocessor.condition``."""
    return StrainPreprocessor(config).condition(strain, sample_rate)
