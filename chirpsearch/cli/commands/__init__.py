"""
CLI command implementations.
"""

from .catalog import catalog_cmd
from .detect import detect_cmd
from .inject import inject_cmd
from .monitor import monitor_cmd

__all__ = [
    "detect_cmd",
    "inject_cmd",
    "catalog_cmd",
    "monitor_cmd",
]
