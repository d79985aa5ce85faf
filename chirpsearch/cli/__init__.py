"""
Command line interface for chirpsearch.
"""

from .main import main

__all__ = ["main"]
