"""
Strain data: value types, validation, conditioning, waveform synthesis,
the event catalog, file I/O and the streaming monitor.
"""

from .event_catalog import EventCatalog, load_default_catalog
from .event_types import EventType
from .gw_physics_engine import PostNewtonianWaveformGenerator, create_pn_waveform_generator
from .gw_preprocessor import ProcessingResult, StrainPreprocessor, condition
from .gw_synthetic_generator import SyntheticStrainGenerator
from .strain_io import load_strain, save_strain
from .strain_monitor import StrainMonitor

__all__ = [
    "EventCatalog",
    "load_default_catalog",
    "EventType",
    "PostNewtonianWaveformGenerator",
    "create_pn_waveform_generator",
    "ProcessingResult",
    "StrainPreprocessor",
    "condition",
    "SyntheticStrainGenerator",
    "load_strain",
    "save_strain",
    "StrainMonitor",
]
