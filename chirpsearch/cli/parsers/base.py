"""
Base argument parser for the chirpsearch CLI.
"""

import argparse
from pathlib import Path


def get_base_parser():
    """Create base argument parser with common options."""
    parser = argparse.ArgumentParser(add_help=True)

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="YAML config overriding the packaged defaults"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase verbosity (use -v or -vv)"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Log file path"
    )

    parser.add_argument(
        "--random-seed",
        type=int,
        default=None,
        help="Random seed for synthetic data"
    )

    return parser
