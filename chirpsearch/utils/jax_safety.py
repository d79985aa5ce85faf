"""
JAX safety utilities for float64 matched filtering.

- ``enable_x64`` temporarily switches JAX to 64-bit mode and restores the
  caller's setting afterwards
- Device arrays are created from NumPy float64 data via device_put, never
  directly from Python lists
"""

import threading
from contextlib import contextmanager
from typing import Any, Sequence

import jax
import numpy as np

# jax_enable_x64 is process-global; blocks that toggle it run one at a time
_X64_LOCK = threading.RLock()


@contextmanager
def enable_x64():
    """Enable ``jax_enable_x64`` for the duration of the block.

    Concurrent callers are serialized so one thread cannot restore the flag
    while another is still computing. Re-entrant within a thread.
    """
    with _X64_LOCK:
        previous_x64 = jax.config.jax_enable_x64
        jax.config.update("jax_enable_x64", True)
        try:
            yield
        finally:
            jax.config.update("jax_enable_x64", previous_x64)


def to_device_f64(data: Any):
    """Transfer ``data`` to the default device as float64.

    Must be called inside ``enable_x64()``; otherwise JAX silently
    truncates to float32.
    """
    return jax.device_put(np.asarray(data, dtype=np.float64))


def stack_to_device_f64(rows: Sequence[Any]):
    """Stack equal-length rows on the host and transfer them as one float64 matrix."""
    host_stack = np.stack([np.asarray(r, dtype=np.float64) for r in rows])
    return jax.device_put(host_stack)
