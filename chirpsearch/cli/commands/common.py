"""
Shared setup for CLI commands: configuration, logging and console reporter.
"""

import logging
from typing import Any, Dict, Tuple

from ...utils import print_system_info, setup_logging
from ...utils.config_loader import ConfigLoader
from ...utils.enhanced_logger import ScientificReporter

# Errors a command reports and turns into exit code 1
COMMAND_ERRORS = (ValueError, KeyError, OSError)


def prepare(args) -> Tuple[Dict[str, Any], ScientificReporter]:
    """Load configuration and route logging through a rich console."""
    if args.config is not None and not args.config.exists():
        raise FileNotFoundError(f"Config file not found: {args.config}")

    config = ConfigLoader().load_config("default", user_config=args.config)
    logging_cfg = config.get("logging") or {}

    if args.quiet:
        level = logging.WARNING
    elif args.verbose > 0:
        level = logging.DEBUG
    else:
        level = getattr(logging, str(logging_cfg.get("level", "INFO")).upper(), logging.INFO)

    reporter = ScientificReporter()
    setup_logging(
        level=level,
        log_file=args.log_file or logging_cfg.get("log_file"),
        force=True,
        console_handler=reporter.rich_handler(),
    )
    if args.verbose >= 2:
        print_system_info()

    return config, reporter
