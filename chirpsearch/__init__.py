"""
chirpsearch: matched-filter search for compact-binary inspiral signals.

Conditions a strain series (RC high-pass, whitening), scores it against a
bank of post-Newtonian chirp templates, and derives physical quantities for
the best match and for a small catalog of confirmed events.
"""

__version__ = "0.1.0"

from .data.event_catalog import EventCatalog, load_default_catalog
from .data.gw_signal_params import (
    Analysis,
    DerivedPhysics,
    Detection,
    DetectionConfig,
    Event,
    MassPair,
    MonitorConfig,
    StrainSample,
    StrainSeries,
    Template,
)
from .data.signal_validation import (
    DegenerateSignal,
    InsufficientSamples,
    InvalidParameter,
    IrregularSampling,
    LengthMismatch,
    SearchCancelled,
    SignalError,
)
from .inference.detection_engine import DetectionEngine, detect

__all__ = [
    "__version__",
    "DetectionEngine",
    "detect",
    "DetectionConfig",
    "MonitorConfig",
    "EventCatalog",
    "load_default_catalog",
    "Analysis",
    "DerivedPhysics",
    "Detection",
    "Event",
    "MassPair",
    "StrainSample",
    "StrainSeries",
    "Template",
    "SignalError",
    "InsufficientSamples",
    "DegenerateSignal",
    "LengthMismatch",
    "InvalidParameter",
    "IrregularSampling",
    "SearchCancelled",
]
