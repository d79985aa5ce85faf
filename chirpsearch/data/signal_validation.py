"""
Signal Validation and Error Handling

Typed error classes for the detection pipeline plus the input checks that
raise them. Every error is a ``ValueError`` subclass so callers that only
care about "bad input" can catch the builtin, while the pipeline itself
distinguishes:

- InsufficientSamples: input shorter than the minimum analyzable window
- DegenerateSignal: zero-variance or non-finite input, whitening undefined
- LengthMismatch: signal and template lengths differ
- InvalidParameter: non-positive mass, distance, strain or rate
- IrregularSampling: sample spacing outside the configured tolerance
- SearchCancelled: a template-bank search was cancelled between grid cells
"""

import logging
import math
from typing import Any, Dict, Optional

import numpy as np

logger = logging.getLogger(__name__)


class SignalError(ValueError):
    """
    Base exception for detection-pipeline errors with optional context.

    The context dictionary is appended to the message so failures in
    batch runs can be traced back to the offending input.
    """

    def __init__(self,
                 message: str,
                 invalid_value: Any = None,
                 context: Optional[Dict[str, Any]] = None):
        self.invalid_value = invalid_value
        self.context = context or {}

        enhanced_message = message
        if invalid_value is not None:
            enhanced_message += f" - invalid value: {invalid_value}"
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            enhanced_message += f" ({details})"

        super().__init__(enhanced_message)


class InsufficientSamples(SignalError):
    """Input series is shorter than the minimum analyzable window."""


class DegenerateSignal(SignalError):
    """Whitening is undefined for the input (zero variance or non-finite)."""


class LengthMismatch(SignalError):
    """Signal and template lengths differ."""


class InvalidParameter(SignalError):
    """A physical parameter is outside its valid (strictly positive) domain."""


class IrregularSampling(SignalError):
    """Sample spacing of a series is not uniform within tolerance."""


class SearchCancelled(SignalError):
    """Template-bank search was cancelled before it completed."""


def require_positive(name: str, value: float) -> float:
    """Return ``value`` as float, raising InvalidParameter unless finite and > 0."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{name} must be a number", invalid_value=value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameter(f"{name} must be strictly positive", invalid_value=value)
    return value


def validate_strain_array(strain: Any, min_samples: int) -> np.ndarray:
    """
    Convert strain input to a 1-D float64 array and check it is analyzable.

    Args:
        strain: Sequence or array of strain values
        min_samples: Minimum number of samples required

    Returns:
        Float64 copy of the input

    Raises:
        InsufficientSamples: Fewer than ``min_samples`` values
        DegenerateSignal: Input contains NaN or infinite values
    """
    data = np.asarray(strain, dtype=np.float64)
    if data.ndim != 1:
        data = data.reshape(-1)

    if data.size < min_samples:
        raise InsufficientSamples(
            "Strain series too short for detection",
            invalid_value=data.size,
            context={"min_samples": min_samples},
        )
    if not np.all(np.isfinite(data)):
        raise DegenerateSignal("Strain series contains non-finite values")

    return data


def check_uniform_spacing(times: np.ndarray, tolerance: float) -> float:
    """
    Check that sample times increase with constant spacing.

    Args:
        times: Monotonic sample times in seconds
        tolerance: Maximum allowed relative deviation of any interval
            from the median interval

    Returns:
        Median sample spacing in seconds

    Raises:
        IrregularSampling: Times are not strictly increasing or the spacing
            deviates by more than ``tolerance``
    """
    times = np.asarray(times, dtype=np.float64)
    if times.size < 2:
        raise IrregularSampling("At least two samples are needed to infer spacing",
                                invalid_value=times.size)

    intervals = np.diff(times)
    if np.any(intervals <= 0):
        raise IrregularSampling("Sample times must be strictly increasing")

    dt = float(np.median(intervals))
    worst = float(np.max(np.abs(intervals - dt)) / dt)
    if worst > tolerance:
        raise IrregularSampling(
            "Sample spacing is not uniform",
            invalid_value=worst,
            context={"tolerance": tolerance, "dt": dt},
        )

    logger.debug(f"Uniform spacing dt={dt:.3e}s (max deviation {worst:.2e})")
    return dt
