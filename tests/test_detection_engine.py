"""
End-to-end detection tests: conditioning, template-bank search and derived physics.
"""

import logging
import threading

import numpy as np
import pytest

from chirpsearch.data.gw_signal_params import Detection, DetectionConfig, StrainSeries
from chirpsearch.data.signal_validation import (
    DegenerateSignal,
    InsufficientSamples,
    InvalidParameter,
    SearchCancelled,
)
from chirpsearch.inference.detection_engine import DetectionEngine, detect, detection_confidence


class TestDetect:

    def test_recovers_injected_masses(self, engine, injected_series):
        detection = engine.detect(injected_series)
        assert detection is not None
        assert detection.snr > 8.0
        assert abs(detection.m1 - 30.0) <= 5.0
        assert abs(detection.m2 - 25.0) <= 5.0
        assert detection.m1 >= detection.m2

    def test_raw_values_with_sample_rate(self, engine, injected_series):
        from_series = engine.detect(injected_series)
        from_values = engine.detect(np.asarray(injected_series.values), injected_series.sample_rate)
        assert from_values == from_series

    def test_pure_noise_is_not_detected(self, engine, noise_series, sample_rate):
        assert engine.detect(noise_series, sample_rate) is None

    def test_pure_noise_scores_are_small(self, engine, noise_series, sample_rate):
        result = engine.scan(noise_series, sample_rate)
        assert result.best_snr < 8.0
        assert np.all(np.isfinite(result.scores))

    def test_detection_is_deterministic(self, engine, injected_series):
        assert engine.detect(injected_series) == engine.detect(injected_series)

    def test_threaded_engine_agrees(self, catalog, injected_series):
        sequential = DetectionEngine(DetectionConfig(), catalog).detect(injected_series)
        threaded = DetectionEngine(DetectionConfig(max_workers=4), catalog).detect(injected_series)
        assert threaded == sequential

    def test_engine_is_shareable_across_threads(self, engine, injected_series):
        results = []

        def worker():
            results.append(engine.detect(injected_series))

        threads = [threading.Thread(target=worker) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 3
        assert all(r == results[0] for r in results)

    def test_short_input(self, engine):
        with pytest.raises(InsufficientSamples):
            engine.detect(np.random.default_rng(0).normal(size=500), 4096.0)

    def test_constant_input(self, engine):
        with pytest.raises(DegenerateSignal):
            engine.detect(np.zeros(4096), 4096.0)

    def test_cancellation(self, engine, injected_series):
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(SearchCancelled):
            engine.detect(injected_series, cancel_event=cancel)

    def test_module_level_detect(self, injected_series):
        detection = detect(injected_series.values, injected_series.sample_rate)
        assert isinstance(detection, Detection)

    def test_custom_threshold(self, catalog, injected_series):
        engine = DetectionEngine(DetectionConfig(snr_threshold=1e6), catalog)
        assert engine.detect(injected_series) is None


class TestDerivedPhysics:

    def test_gw150914(self, engine, catalog):
        physics = engine.derived_physics(catalog.by_name("GW150914"))
        assert physics.radiated_energy_joules == pytest.approx(3.0 * 1.989e30 * 299792458.0 ** 2)
        assert physics.distance_megaparsecs == 410.0
        assert physics.redshift == pytest.approx(70.0 * 410.0 / 299792.458)
        assert physics.peak_luminosity_watts > 0

    def test_gw170817_energy_undefined(self, engine, catalog, caplog):
        with caplog.at_level(logging.WARNING):
            physics = engine.derived_physics(catalog.by_name("GW170817"))
        assert physics.radiated_energy_joules is None
        assert physics.distance_megaparsecs == 40.0
        assert "Radiated energy undefined" in caplog.text

    def test_every_catalog_event_has_physics(self, engine):
        for event in engine.catalog_events():
            physics = engine.derived_physics(event)
            assert physics.redshift > 0
            assert physics.peak_luminosity_watts > 0

    def test_detection_without_final_mass(self, engine):
        detection = Detection(snr=12.0, m1=30.0, m2=25.0, chirp_mass=23.8, total_mass=55.0,
                              peak_strain=3.5)
        physics = engine.derived_physics(detection)
        assert physics.radiated_energy_joules is None
        assert physics.distance_megaparsecs > 0

    def test_detection_with_final_mass(self, engine):
        detection = Detection(snr=12.0, m1=30.0, m2=25.0, chirp_mass=23.8, total_mass=55.0,
                              peak_strain=3.5)
        physics = engine.derived_physics(detection, final_mass=52.5)
        assert physics.radiated_energy_joules == pytest.approx(2.5 * 1.989e30 * 299792458.0 ** 2)

    def test_zero_peak_strain_rejected(self, engine):
        detection = Detection(snr=12.0, m1=30.0, m2=25.0, chirp_mass=23.8, total_mass=55.0,
                              peak_strain=0.0)
        with pytest.raises(InvalidParameter):
            engine.derived_physics(detection)


class TestAnalyze:

    def test_confidence_mapping(self):
        assert detection_confidence(8.0, 8.0) == 0.0
        assert detection_confidence(5.0, 8.0) == 0.0
        assert detection_confidence(16.0, 8.0) == pytest.approx(0.5)
        assert 0.0 < detection_confidence(100.0, 8.0) < 1.0

    def test_analysis_of_injection(self, engine, injected_series):
        detection = engine.detect(injected_series)
        analysis = engine.analyze(detection)

        assert analysis.detection is detection
        assert analysis.confidence == pytest.approx(1.0 - 8.0 / detection.snr)
        assert analysis.physics.radiated_energy_joules is None

        payload = analysis.to_dict()
        assert payload["detection"]["m1"] == detection.m1
        assert payload["physics"]["distance_megaparsecs"] == analysis.physics.distance_megaparsecs

    def test_series_round_trip_through_engine(self, engine, injected_series):
        shifted = StrainSeries.from_values(injected_series.values, injected_series.sample_rate,
                                           start_time=1126259462.0)
        assert engine.detect(shifted) == engine.detect(injected_series)
