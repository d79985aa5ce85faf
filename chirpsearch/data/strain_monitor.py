"""
Streaming strain monitor.

A background thread appends one sample per tick to a bounded circular
buffer and, optionally, re-runs detection on the latest window. The thread
is the only writer; readers receive immutable snapshots.
"""

import logging
import threading
from collections import deque
from typing import Callable, List, Optional, Tuple

import numpy as np

from .gw_signal_params import Detection, MonitorConfig, StrainSample, StrainSeries
from .signal_validation import SignalError

logger = logging.getLogger(__name__)

DetectionListener = Callable[[Detection], None]


class StrainMonitor:
    """
    Periodic sampler with a ring buffer of the most recent strain samples.

    Args:
        config: Buffer size, tick interval and noise settings
        engine: Optional DetectionEngine; used when ``config.detect_every`` > 0
        noise_source: Callable returning the next strain value; defaults to
            uniform noise in [-noise_amplitude, noise_amplitude]

    Example:
        with StrainMonitor(MonitorConfig(interval_s=0.01)) as monitor:
            time.sleep(0.5)
            samples = monitor.snapshot()
    """

    def __init__(self,
                 config: Optional[MonitorConfig] = None,
                 engine=None,
                 noise_source: Optional[Callable[[], float]] = None):
        self.config = config or MonitorConfig()
        self.engine = engine
        if noise_source is None:
            rng = np.random.default_rng(self.config.seed)
            amplitude = self.config.noise_amplitude
            noise_source = lambda: float(rng.uniform(-amplitude, amplitude))  # noqa: E731
        self.noise_source = noise_source

        self._buffer: deque = deque(maxlen=self.config.buffer_size)
        self._lock = threading.RLock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._sample_index = 0
        self._tick_count = 0
        self._listeners: List[DetectionListener] = []
        self.latest_detection: Optional[Detection] = None

    @property
    def is_monitoring(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def tick_count(self) -> int:
        with self._lock:
            return self._tick_count

    def add_listener(self, listener: DetectionListener):
        """Register a callback invoked (on the monitor thread) for each detection."""
        with self._lock:
            self._listeners.append(listener)

    def snapshot(self) -> Tuple[StrainSample, ...]:
        """Immutable copy of the buffered samples, oldest first."""
        with self._lock:
            return tuple(self._buffer)

    def snapshot_series(self) -> StrainSeries:
        samples = self.snapshot()
        return StrainSeries.from_values([s.value for s in samples], self.config.sample_rate,
                                        start_time=samples[0].time if samples else 0.0)

    def tick(self) -> StrainSample:
        """Acquire one sample; runs detection when due. Called by the monitor thread."""
        sample = StrainSample(
            time=self._sample_index / self.config.sample_rate,
            value=float(self.noise_source()),
        )
        with self._lock:
            self._buffer.append(sample)
            self._sample_index += 1
            self._tick_count += 1
            due = (self.config.detect_every > 0
                   and self._tick_count % self.config.detect_every == 0)

        if due and self.engine is not None:
            self._run_detection()
        return sample

    def _run_detection(self):
        samples = self.snapshot()
        if len(samples) < self.engine.config.min_samples:
            logger.debug(f"Skipping detection: {len(samples)} buffered samples")
            return
        try:
            detection = self.engine.detect(np.array([s.value for s in samples]),
                                           self.config.sample_rate)
        except SignalError as e:
            logger.warning(f"Detection on monitor window failed: {e}")
            return

        if detection is None:
            return
        with self._lock:
            self.latest_detection = detection
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(detection)
            except Exception:
                logger.exception(f"Detection listener {listener!r} failed")

    def _run(self):
        logger.info(f"Strain monitor started (interval={self.config.interval_s}s, "
                    f"buffer={self.config.buffer_size})")
        while not self._stop_event.wait(self.config.interval_s):
            try:
                self.tick()
            except Exception:
                logger.exception("Strain monitor tick failed; stopping")
                break
        logger.info(f"Strain monitor stopped after {self.tick_count} ticks")

    def start(self):
        if self.is_monitoring:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="strain-monitor", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning(f"Strain monitor thread still running after {timeout}s")
            else:
                self._thread = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False
