"""
GW Signal Parameters: Dataclasses, Physical Constants and Configuration

Records passed between the preprocessing, synthesis, search and estimation
stages. All records are immutable; array payloads are stored read-only.
"""

import logging
from dataclasses import asdict, dataclass, fields
from datetime import datetime
from typing import Any, Dict, Iterator, Optional, Sequence

import numpy as np

from .event_types import EventType, parse_event_type
from .signal_validation import check_uniform_spacing, require_positive

logger = logging.getLogger(__name__)

# Physical constants (SI units)
G = 6.67430e-11             # Gravitational constant (m^3 kg^-1 s^-2)
C = 299792458.0             # Speed of light (m/s)
SOLAR_MASS_KG = 1.989e30    # Solar mass (kg)
MEGAPARSEC_M = 3.0857e22    # Megaparsec (m)
LIGHT_YEARS_PER_MPC = 3.26e6

# Detection defaults
DETECTION_SNR_THRESHOLD = 8.0
MIN_SAMPLES = 1000


def _readonly(values: Any) -> np.ndarray:
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class StrainSample:
    """A single strain measurement."""
    time: float   # seconds
    value: float  # dimensionless strain


@dataclass(frozen=True, eq=False)
class StrainSeries:
    """
    Uniformly sampled strain time series.

    ``times`` and ``values`` are read-only float64 arrays of equal length.
    Use the ``from_*`` constructors; they enforce uniform spacing.
    """
    times: np.ndarray
    values: np.ndarray
    sample_rate: float

    @classmethod
    def from_values(cls, values: Sequence[float], sample_rate: float,
                    start_time: float = 0.0) -> "StrainSeries":
        """Build a series from values at a known sample rate."""
        sample_rate = require_positive("sample_rate", sample_rate)
        values = _readonly(values).reshape(-1)
        times = _readonly(start_time + np.arange(values.size) / sample_rate)
        return cls(times=times, values=values, sample_rate=sample_rate)

    @classmethod
    def from_arrays(cls, times: Sequence[float], values: Sequence[float],
                    tolerance: float = 1e-6) -> "StrainSeries":
        """Build a series from explicit sample times, inferring the sample rate."""
        times = _readonly(times).reshape(-1)
        values = _readonly(values).reshape(-1)
        if times.size != values.size:
            raise ValueError(
                f"times ({times.size}) and values ({values.size}) must have equal length"
            )
        dt = check_uniform_spacing(times, tolerance)
        return cls(times=times, values=values, sample_rate=1.0 / dt)

    @classmethod
    def from_samples(cls, samples: Sequence[StrainSample],
                     tolerance: float = 1e-6) -> "StrainSeries":
        """Build a series from StrainSample records."""
        times = [s.time for s in samples]
        values = [s.value for s in samples]
        return cls.from_arrays(times, values, tolerance=tolerance)

    def __len__(self) -> int:
        return int(self.values.size)

    def __iter__(self) -> Iterator[StrainSample]:
        for t, v in zip(self.times, self.values):
            yield StrainSample(time=float(t), value=float(v))

    @property
    def duration(self) -> float:
        return len(self) / self.sample_rate


@dataclass(frozen=True)
class MassPair:
    """
    Component masses in solar masses, canonically ordered so ``m1 >= m2``.

    Inputs given in the wrong order are swapped on construction.
    """
    m1: float
    m2: float

    def __post_init__(self):
        m1 = require_positive("m1", self.m1)
        m2 = require_positive("m2", self.m2)
        if m1 < m2:
            m1, m2 = m2, m1
        object.__setattr__(self, "m1", m1)
        object.__setattr__(self, "m2", m2)

    @property
    def total_mass(self) -> float:
        return self.m1 + self.m2

    def to_kg(self) -> tuple:
        return self.m1 * SOLAR_MASS_KG, self.m2 * SOLAR_MASS_KG


@dataclass(frozen=True, eq=False)
class Template:
    """Synthetic inspiral waveform; ``samples`` is a read-only float64 array."""
    masses: MassPair
    sample_rate: float
    duration: float
    samples: np.ndarray

    def __post_init__(self):
        if not isinstance(self.samples, np.ndarray) or self.samples.flags.writeable:
            object.__setattr__(self, "samples", _readonly(self.samples))

    def __len__(self) -> int:
        return int(self.samples.size)


@dataclass(frozen=True)
class Detection:
    """Best-matching template parameters for a signal that cleared the SNR gate."""
    snr: float
    m1: float           # solar masses
    m2: float           # solar masses
    chirp_mass: float   # solar masses
    total_mass: float   # solar masses
    peak_strain: float  # max |conditioned strain|

    @property
    def mass_pair(self) -> MassPair:
        return MassPair(self.m1, self.m2)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DerivedPhysics:
    """Quantities derived on demand from a Detection or an Event."""
    radiated_energy_joules: Optional[float]
    peak_luminosity_watts: float
    distance_megaparsecs: float
    redshift: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Analysis:
    """A detection together with its derived physics and a confidence in [0, 1]."""
    detection: Detection
    physics: DerivedPhysics
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detection": self.detection.to_dict(),
            "physics": self.physics.to_dict(),
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class Event:
    """Historical catalog entry. Masses in solar masses, distance in Mpc."""
    name: str
    date: datetime
    event_type: EventType
    m1: float
    m2: float
    final_mass: float
    distance_mpc: float
    peak_strain: float
    significance_sigma: float
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "event_type", parse_event_type(self.event_type))
        masses = MassPair(self.m1, self.m2)
        object.__setattr__(self, "m1", masses.m1)
        object.__setattr__(self, "m2", masses.m2)
        require_positive("final_mass", self.final_mass)
        require_positive("distance_mpc", self.distance_mpc)
        require_positive("peak_strain", self.peak_strain)

    @property
    def mass_pair(self) -> MassPair:
        return MassPair(self.m1, self.m2)

    @property
    def radiated_mass(self) -> float:
        """Mass converted to gravitational radiation, in solar masses."""
        return self.m1 + self.m2 - self.final_mass

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        data["event_type"] = self.event_type.value
        return data


@dataclass(frozen=True)
class DetectionConfig:
    """
    Tunable parameters of the detection engine.

    Defaults: 20 Hz high-pass, SNR gate
    at 8, a 5-95 solar-mass grid in steps of 5.
    """
    # Preprocessing
    min_samples: int = MIN_SAMPLES
    highpass_cutoff_hz: float = 20.0
    spacing_tolerance: float = 1e-6

    # Waveform synthesis
    fallback_frequency_hz: float = 100.0
    amplitude_scale: float = 1e22

    # Template bank search
    mass_min: float = 5.0
    mass_max: float = 95.0
    mass_step: float = 5.0
    snr_threshold: float = DETECTION_SNR_THRESHOLD
    max_workers: int = 1
    backend: str = "numpy"
    show_progress: bool = False

    # Parameter estimation
    peak_frequency_hz: float = 100.0
    hubble_constant: float = 70.0  # km/s/Mpc

    def __post_init__(self):
        if self.min_samples < 2:
            raise ValueError(f"min_samples must be >= 2, got {self.min_samples}")
        for name in ("highpass_cutoff_hz", "spacing_tolerance", "fallback_frequency_hz",
                     "amplitude_scale", "mass_min", "mass_step", "peak_frequency_hz",
                     "hubble_constant"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.mass_max < self.mass_min:
            raise ValueError(f"mass_max ({self.mass_max}) must be >= mass_min ({self.mass_min})")
        if self.snr_threshold < 0:
            raise ValueError(f"snr_threshold must be non-negative, got {self.snr_threshold}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.backend not in ("numpy", "jax"):
            raise ValueError(f"Invalid backend: {self.backend}. Must be 'numpy' or 'jax'.")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "DetectionConfig":
        """
        Build from a loaded configuration dictionary.

        Reads the ``preprocessing``, ``waveform``, ``search`` and ``physics``
        sections; unknown keys are ignored, missing keys keep defaults.
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for section in ("preprocessing", "waveform", "search", "physics"):
            for key, value in (config.get(section) or {}).items():
                if key in known:
                    values[key] = value
                else:
                    logger.debug(f"Ignoring unknown config key {section}.{key}")
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonitorConfig:
    """Streaming monitor settings."""
    buffer_size: int = 100
    interval_s: float = 0.1
    noise_amplitude: float = 1e-22
    sample_rate: float = 10.0
    detect_every: int = 0  # ticks between detection runs, 0 disables
    seed: Optional[int] = None

    def __post_init__(self):
        if self.buffer_size < 1:
            raise ValueError(f"buffer_size must be >= 1, got {self.buffer_size}")
        if self.interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {self.interval_s}")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.detect_every < 0:
            raise ValueError(f"detect_every must be >= 0, got {self.detect_every}")

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "MonitorConfig":
        known = {f.name for f in fields(cls)}
        section = config.get("monitor") or {}
        return cls(**{k: v for k, v in section.items() if k in known})
