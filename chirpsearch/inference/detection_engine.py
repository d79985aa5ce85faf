"""
Detection engine: the public entry point tying conditioning, template-bank
search and parameter estimation together.

The engine holds configuration and collaborators only; every call is a pure
function of its arguments, so one instance can serve concurrent callers.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Sequence, Tuple, Union

from ..data.event_catalog import EventCatalog, load_default_catalog
from ..data.gw_physics_engine import (
    chirp_mass,
    estimate_distance_mpc,
    peak_luminosity,
    radiated_energy,
    redshift,
)
from ..data.gw_preprocessor import StrainPreprocessor
from ..data.gw_signal_params import (
    SOLAR_MASS_KG,
    Analysis,
    DerivedPhysics,
    Detection,
    DetectionConfig,
    Event,
    StrainSeries,
)
from .template_bank import SearchResult, TemplateBankSearch

logger = logging.getLogger(__name__)


def detection_confidence(snr: float, threshold: float) -> float:
    """Map an SNR above the gate to [0, 1): 0 at the threshold, -> 1 as SNR grows."""
    if snr <= threshold or snr <= 0:
        return 0.0
    return 1.0 - threshold / snr


class DetectionEngine:
    """
    Matched-filter detection and parameter estimation.

    Example:
        engine = DetectionEngine(DetectionConfig(), load_default_catalog())
        detection = engine.detect(strain, sample_rate=4096.0)
        if detection is not None:
            analysis = engine.analyze(detection)
    """

    def __init__(self,
                 config: Optional[DetectionConfig] = None,
                 catalog: Optional[EventCatalog] = None):
        self.config = config or DetectionConfig()
        self.catalog = catalog if catalog is not None else load_default_catalog()
        self.preprocessor = StrainPreprocessor(self.config)
        self.template_bank = TemplateBankSearch(self.config)

    def scan(self,
             strain: Union[StrainSeries, Sequence[float]],
             sample_rate: Optional[float] = None,
             cancel_event: Optional[threading.Event] = None) -> SearchResult:
        """Condition the strain and score the whole bank without gating."""
        conditioned = self.preprocessor.condition(strain, sample_rate)
        if sample_rate is None:
            sample_rate = strain.sample_rate
        return self.template_bank.scan(conditioned, sample_rate, cancel_event)

    def detect(self,
               strain: Union[StrainSeries, Sequence[float]],
               sample_rate: Optional[float] = None,
               cancel_event: Optional[threading.Event] = None) -> Optional[Detection]:
        """
        Search a strain series for an inspiral signal.

        Args:
            strain: StrainSeries, or raw values together with ``sample_rate``
            sample_rate: Sampling rate (Hz); taken from the series if omitted
            cancel_event: Optional cooperative cancellation flag

        Returns:
            Detection if the best template clears the SNR threshold, else None

        Raises:
            InsufficientSamples: Input shorter than the minimum window
            DegenerateSignal: Constant or non-finite input
            SearchCancelled: ``cancel_event`` was set mid-search
        """
        result = self.scan(strain, sample_rate, cancel_event)
        detection = self.template_bank.gate(result)
        if detection is not None:
            logger.info(
                f"Detection: SNR={detection.snr:.2f}, m1={detection.m1:g}, m2={detection.m2:g} M_sun, "
                f"Mc={detection.chirp_mass:.2f} M_sun"
            )
        return detection

    def catalog_events(self) -> Tuple[Event, ...]:
        return self.catalog.all()

    def derived_physics(self,
                        source: Union[Detection, Event],
                        final_mass: Optional[float] = None) -> DerivedPhysics:
        """
        Derived quantities for a detection or catalog event.

        For an Event, distance is the catalog distance and radiated energy uses
        its final mass. For a Detection, distance is estimated from the peak
        strain and radiated energy is only computed when ``final_mass`` is given.
        A final mass above the initial total leaves the radiated energy
        undefined (None).
        """
        m1, m2 = source.m1, source.m2
        mc_kg = chirp_mass(m1, m2) * SOLAR_MASS_KG

        if isinstance(source, Event):
            distance = source.distance_mpc
            final_mass = source.final_mass if final_mass is None else final_mass
        else:
            distance = estimate_distance_mpc(source.peak_strain, m1, m2,
                                             self.config.peak_frequency_hz)

        energy = None
        if final_mass is not None:
            if final_mass > m1 + m2:
                logger.warning(
                    f"Radiated energy undefined: final mass {final_mass:g} exceeds "
                    f"initial total {m1 + m2:g} M_sun"
                )
            else:
                energy = radiated_energy(m1, m2, final_mass)

        return DerivedPhysics(
            radiated_energy_joules=energy,
            peak_luminosity_watts=peak_luminosity(mc_kg),
            distance_megaparsecs=distance,
            redshift=redshift(distance, self.config.hubble_constant),
        )

    def analyze(self, detection: Detection, final_mass: Optional[float] = None) -> Analysis:
        """Attach derived physics and a confidence score to a detection."""
        return Analysis(
            detection=detection,
            physics=self.derived_physics(detection, final_mass=final_mass),
            confidence=detection_confidence(detection.snr, self.config.snr_threshold),
        )


def detect(strain, sample_rate: float,
           config: Optional[DetectionConfig] = None) -> Optional[Detection]:
    """One-shot detection with a throwaway engine."""
    return DetectionEngine(config).detect(strain, sample_rate)
