"""
Utilities for chirpsearch: logging setup, configuration and JAX helpers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

import jax


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
    force: bool = False,
    console_handler: Optional[logging.Handler] = None,
) -> None:
    """Setup logging configuration.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG)
        log_file: Optional file path for log output
        format_string: Custom log format string
        force: If True, removes existing handlers before setup
        console_handler: Handler for console output; defaults to a
            stdout StreamHandler
    """
    if format_string is None:
        format_string = (
            "[%(asctime)s] %(levelname)s [%(name)s:%(lineno)d] %(message)s"
        )

    formatter = logging.Formatter(format_string)

    # Clear any existing handlers only if force=True
    root_logger = logging.getLogger()
    if force:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    if console_handler is None:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(level)

    # Set JAX logging level to reduce noise
    logging.getLogger("jax").setLevel(logging.WARNING)


def get_jax_device_info() -> dict:
    """Get JAX device information for logging and debugging."""
    devices = jax.devices()
    return {
        'num_devices': len(devices),
        'devices': [
            {
                'id': i,
                'device_kind': str(device.device_kind),
                'platform': str(device.platform),
            }
            for i, device in enumerate(devices)
        ],
        'default_backend': jax.default_backend(),
    }


def print_system_info() -> None:
    """Log JAX backend and device information."""
    logger = logging.getLogger(__name__)
    device_info = get_jax_device_info()

    logger.info(f"JAX backend: {device_info['default_backend']}")
    logger.info(f"Available devices: {device_info['num_devices']}")
    for device in device_info['devices']:
        logger.info(
            f"  Device {device['id']}: {device['device_kind']} "
            f"({device['platform']})"
        )


__all__ = [
    "setup_logging",
    "get_jax_device_info",
    "print_system_info",
]
