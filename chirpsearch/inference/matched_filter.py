"""
Time-domain matched filter.

SNR statistic for a zero-lag match between a conditioned signal s and a
template h of equal length N:

    snr = <s, h> / sqrt(<s, s> <h, h>) * sqrt(N)

i.e. the normalized cross-correlation scaled by sqrt(N), so a perfect match
scores sqrt(N). If either power is exactly zero the score is defined as 0.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import jax.numpy as jnp
import numpy as np

from ..data.signal_validation import LengthMismatch
from ..utils.jax_safety import enable_x64, stack_to_device_f64, to_device_f64

logger = logging.getLogger(__name__)

BACKENDS = ("numpy", "jax")


def _as_samples(template) -> np.ndarray:
    # Accept Template records as well as raw arrays
    return np.asarray(getattr(template, "samples", template), dtype=np.float64)


def matched_filter_score(signal, template) -> float:
    """
    Score one template against a signal.

    Args:
        signal: Conditioned strain, 1-D
        template: Template record or 1-D array of the same length

    Returns:
        SNR (may be negative for anti-correlated inputs)

    Raises:
        LengthMismatch: Lengths differ
    """
    s = np.asarray(signal, dtype=np.float64)
    h = _as_samples(template)
    if s.shape != h.shape:
        raise LengthMismatch(
            "Signal and template lengths differ",
            context={"signal": s.size, "template": h.size},
        )

    signal_power = float(np.dot(s, s))
    template_power = float(np.dot(h, h))
    if signal_power == 0.0 or template_power == 0.0:
        return 0.0

    correlation = float(np.dot(s, h))
    return correlation / (math.sqrt(signal_power) * math.sqrt(template_power)) * math.sqrt(s.size)


def matched_filter_scores(signal, templates: Sequence, backend: str = "numpy") -> np.ndarray:
    """
    Score a batch of equal-length templates against one signal.

    Args:
        signal: Conditioned strain, 1-D of length N
        templates: Sequence of Template records or arrays, each of length N
        backend: "numpy" or "jax" (float64 via ``enable_x64``)

    Returns:
        float64 array of SNRs, one per template, in input order
    """
    if backend not in BACKENDS:
        raise ValueError(f"Invalid backend: {backend}. Must be one of {BACKENDS}.")

    s = np.asarray(signal, dtype=np.float64)
    rows = [_as_samples(t) for t in templates]
    if not rows:
        return np.zeros(0, dtype=np.float64)
    for i, row in enumerate(rows):
        if row.shape != s.shape:
            raise LengthMismatch(
                "Signal and template lengths differ",
                context={"signal": s.size, "template": row.size, "index": i},
            )

    if backend == "jax":
        return _scores_jax(s, rows)

    bank = np.stack(rows)
    correlation = bank @ s
    template_power = np.einsum("ij,ij->i", bank, bank)
    signal_power = float(np.dot(s, s))
    return _normalize(correlation, template_power, signal_power, s.size)


def _normalize(correlation: np.ndarray, template_power: np.ndarray,
               signal_power: float, n: int) -> np.ndarray:
    snr = np.zeros_like(correlation)
    if signal_power == 0.0:
        return snr
    valid = template_power != 0.0
    snr[valid] = (correlation[valid]
                  / (math.sqrt(signal_power) * np.sqrt(template_power[valid]))
                  * math.sqrt(n))
    return snr


def _scores_jax(signal: np.ndarray, rows: Sequence[np.ndarray]) -> np.ndarray:
    with enable_x64():
        s = to_device_f64(signal)
        bank = stack_to_device_f64(rows)
        correlation = jnp.matmul(bank, s)
        template_power = jnp.sum(bank * bank, axis=1)
        signal_power = jnp.dot(s, s)
        # Pull back to host before leaving 64-bit mode
        correlation = np.asarray(correlation, dtype=np.float64)
        template_power = np.asarray(template_power, dtype=np.float64)
        signal_power = float(signal_power)

    return _normalize(correlation, template_power, signal_power, signal.size)
