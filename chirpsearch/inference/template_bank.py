"""
Template bank search over a 2-D component-mass grid.

Every grid cell is scored independently (map) and the best cell is chosen by
a deterministic max reduction over grid order, so sequential, threaded and
batched backends return the same detection. Cancellation is cooperative:
a ``threading.Event`` is checked between cells.
"""

from __future__ import annotations

import concurrent.futures
import logging
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from ..data.gw_physics_engine import PostNewtonianWaveformGenerator, chirp_mass
from ..data.gw_signal_params import Detection, DetectionConfig, MassPair, Template
from ..data.signal_validation import SearchCancelled, require_positive
from .matched_filter import matched_filter_score, matched_filter_scores

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SearchResult:
    """Scores for every grid cell, in grid order."""
    grid: Tuple[MassPair, ...]
    scores: np.ndarray
    peak_strain: float

    @property
    def best_index(self) -> int:
        # np.argmax returns the first maximum: earliest grid cell wins ties
        return int(np.argmax(self.scores))

    @property
    def best_snr(self) -> float:
        return float(self.scores[self.best_index])

    @property
    def best_masses(self) -> MassPair:
        return self.grid[self.best_index]


def build_mass_grid(mass_min: float = 5.0,
                    mass_max: float = 95.0,
                    mass_step: float = 5.0) -> Tuple[MassPair, ...]:
    """
    Triangular grid of (m1, m2) with m1 in [mass_min, mass_max] and
    m2 in [mass_min, m1], both stepped by ``mass_step``.

    Iteration order is m1 ascending, then m2 ascending.
    """
    mass_min = require_positive("mass_min", mass_min)
    mass_step = require_positive("mass_step", mass_step)
    n_steps = int(np.floor((mass_max - mass_min) / mass_step + 1e-9))
    masses = [mass_min + k * mass_step for k in range(n_steps + 1)]

    return tuple(
        MassPair(m1, m2)
        for i, m1 in enumerate(masses)
        for m2 in masses[:i + 1]
    )


class TemplateBankSearch:
    """
    Matched-filter search across a bank of inspiral templates.

    Example:
        bank = TemplateBankSearch(DetectionConfig(max_workers=4))
        detection = bank.search(conditioned, sample_rate=4096.0)
    """

    def __init__(self,
                 config: Optional[DetectionConfig] = None,
                 waveform_generator: Optional[PostNewtonianWaveformGenerator] = None):
        self.config = config or DetectionConfig()
        self.waveform_generator = waveform_generator or PostNewtonianWaveformGenerator(self.config)
        self.grid = build_mass_grid(self.config.mass_min, self.config.mass_max, self.config.mass_step)

        logger.debug(
            f"Template bank: {len(self.grid)} cells, "
            f"m in [{self.config.mass_min:g}, {self.config.mass_max:g}] step {self.config.mass_step:g}, "
            f"backend={self.config.backend}, workers={self.config.max_workers}"
        )

    def template_for(self, masses: MassPair, sample_rate: float, n_samples: int) -> Template:
        """Synthesize the template for one grid cell, matching the signal length."""
        m1_kg, m2_kg = masses.to_kg()
        return self.waveform_generator.synthesize(m1_kg, m2_kg, sample_rate, n_samples / sample_rate)

    def _check_cancelled(self, cancel_event: Optional[threading.Event], index: int):
        if cancel_event is not None and cancel_event.is_set():
            raise SearchCancelled("Template bank search cancelled",
                                  context={"completed_cells": index, "total_cells": len(self.grid)})

    def _score_cell(self, signal: np.ndarray, sample_rate: float, index: int,
                    cancel_event: Optional[threading.Event]) -> float:
        self._check_cancelled(cancel_event, index)
        template = self.template_for(self.grid[index], sample_rate, signal.size)
        return matched_filter_score(signal, template)

    def _iter_cells(self, desc: str):
        indices = range(len(self.grid))
        if self.config.show_progress:
            return tqdm(indices, desc=desc, unit="template")
        return indices

    def _scores_sequential(self, signal, sample_rate, cancel_event) -> np.ndarray:
        scores = np.empty(len(self.grid), dtype=np.float64)
        for i in self._iter_cells("Template bank"):
            scores[i] = self._score_cell(signal, sample_rate, i, cancel_event)
        return scores

    def _scores_threaded(self, signal, sample_rate, cancel_event) -> np.ndarray:
        scores = np.empty(len(self.grid), dtype=np.float64)
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {
                executor.submit(self._score_cell, signal, sample_rate, i, cancel_event): i
                for i in range(len(self.grid))
            }
            completed = concurrent.futures.as_completed(futures)
            if self.config.show_progress:
                completed = tqdm(completed, total=len(futures), desc="Template bank", unit="template")
            try:
                for future in completed:
                    scores[futures[future]] = future.result()
            except SearchCancelled:
                for future in futures:
                    future.cancel()
                raise
        return scores

    def _scores_batched(self, signal, sample_rate, cancel_event) -> np.ndarray:
        templates: List[Template] = []
        for i in self._iter_cells("Synthesizing"):
            self._check_cancelled(cancel_event, i)
            templates.append(self.template_for(self.grid[i], sample_rate, signal.size))
        return matched_filter_scores(signal, templates, backend="jax")

    def scan(self,
             conditioned_signal: Sequence[float],
             sample_rate: float,
             cancel_event: Optional[threading.Event] = None) -> SearchResult:
        """
        Score every grid cell against the conditioned signal.

        Args:
            conditioned_signal: Preprocessed (high-passed, whitened) strain
            sample_rate: Sampling rate (Hz)
            cancel_event: Optional flag; when set the scan stops between cells

        Returns:
            SearchResult with one SNR per cell

        Raises:
            SearchCancelled: ``cancel_event`` was set before the scan finished
        """
        signal = np.asarray(conditioned_signal, dtype=np.float64)
        sample_rate = require_positive("sample_rate", sample_rate)

        start = time.perf_counter()
        if self.config.backend == "jax":
            scores = self._scores_batched(signal, sample_rate, cancel_event)
        elif self.config.max_workers > 1:
            scores = self._scores_threaded(signal, sample_rate, cancel_event)
        else:
            scores = self._scores_sequential(signal, sample_rate, cancel_event)
        elapsed = time.perf_counter() - start

        peak_strain = float(np.max(np.abs(signal))) if signal.size else 0.0
        result = SearchResult(grid=self.grid, scores=scores, peak_strain=peak_strain)
        logger.info(
            f"Scanned {len(self.grid)} templates in {elapsed * 1000:.1f}ms: "
            f"best SNR {result.best_snr:.2f} at m1={result.best_masses.m1:g}, m2={result.best_masses.m2:g}"
        )
        return result

    def gate(self, result: SearchResult) -> Optional[Detection]:
        """Turn a scan into a Detection if the best SNR exceeds the threshold."""
        if not result.best_snr > self.config.snr_threshold:
            logger.info(f"No detection: best SNR {result.best_snr:.2f} <= {self.config.snr_threshold:g}")
            return None

        masses = result.best_masses
        return Detection(
            snr=result.best_snr,
            m1=masses.m1,
            m2=masses.m2,
            chirp_mass=chirp_mass(masses.m1, masses.m2),
            total_mass=masses.total_mass,
            peak_strain=result.peak_strain,
        )

    def search(self,
               conditioned_signal: Sequence[float],
               sample_rate: float,
               cancel_event: Optional[threading.Event] = None) -> Optional[Detection]:
        """Scan the bank and apply the SNR gate; returns None when nothing clears it."""
        return self.gate(self.scan(conditioned_signal, sample_rate, cancel_event))
