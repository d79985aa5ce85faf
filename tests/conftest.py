"""
Shared fixtures for the chirpsearch test suite.
"""

import logging

import numpy as np
import pytest

from chirpsearch.data.event_catalog import load_default_catalog
from chirpsearch.data.gw_signal_params import DetectionConfig
from chirpsearch.data.gw_synthetic_generator import SyntheticStrainGenerator
from chirpsearch.inference.detection_engine import DetectionEngine

SAMPLE_RATE = 4096.0

# Rate and length at which the bank resolves both component masses
INJECTION_RATE = 1024.0
INJECTION_DURATION = 4.0


@pytest.fixture
def sample_rate():
    return SAMPLE_RATE


@pytest.fixture
def detection_config():
    return DetectionConfig()


@pytest.fixture(scope="session")
def catalog():
    return load_default_catalog()


@pytest.fixture
def engine(detection_config, catalog):
    return DetectionEngine(detection_config, catalog)


@pytest.fixture
def generator():
    return SyntheticStrainGenerator(seed=42)


@pytest.fixture(scope="session")
def injected_series():
    """(30, 25) solar-mass chirp in 1e-24 uniform noise, 4 s @ 1024 Hz."""
    generator = SyntheticStrainGenerator(seed=7)
    return generator.inject(30.0, 25.0, sample_rate=INJECTION_RATE, duration=INJECTION_DURATION,
                            noise_amplitude=1e-24)


@pytest.fixture
def noise_series():
    rng = np.random.default_rng(123)
    return rng.uniform(-1e-22, 1e-22, size=int(SAMPLE_RATE))


@pytest.fixture
def restore_root_logging():
    """Undo handler changes made by setup_logging(force=True)."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
