"""
Monitor command: run the streaming strain monitor for a fixed number of ticks.
"""

import dataclasses
import logging
import time

from ...data.gw_signal_params import DetectionConfig, MonitorConfig
from ...data.strain_monitor import StrainMonitor
from ...inference.detection_engine import DetectionEngine
from ..parsers.base import get_base_parser
from .common import COMMAND_ERRORS, prepare

logger = logging.getLogger(__name__)


def monitor_cmd(argv=None) -> int:
    """Monitor command entry point."""
    parser = get_base_parser()
    parser.prog = "chirpsearch monitor"
    parser.description = "Sample simulated detector strain into a ring buffer"

    parser.add_argument("--ticks", type=int, default=20, help="Number of samples to acquire")
    parser.add_argument("--interval", type=float, help="Seconds between samples")
    parser.add_argument("--buffer-size", type=int, help="Ring buffer capacity")
    parser.add_argument("--detect-every", type=int,
                        help="Run detection every N ticks (0 disables)")

    args = parser.parse_args(argv)

    try:
        if args.ticks < 1:
            raise ValueError(f"--ticks must be >= 1, got {args.ticks}")
        config, reporter = prepare(args)

        monitor_config = MonitorConfig.from_dict(config)
        overrides = {
            "interval_s": args.interval,
            "buffer_size": args.buffer_size,
            "detect_every": args.detect_every,
            "seed": args.random_seed,
        }
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if overrides:
            monitor_config = dataclasses.replace(monitor_config, **overrides)

        engine = None
        if monitor_config.detect_every > 0:
            engine = DetectionEngine(DetectionConfig.from_dict(config))

        monitor = StrainMonitor(monitor_config, engine=engine)
        monitor.add_listener(lambda d: logger.info(f"Monitor detection: SNR={d.snr:.2f}"))
        with monitor:
            while monitor.tick_count < args.ticks and monitor.is_monitoring:
                time.sleep(monitor_config.interval_s / 2)

        if monitor.tick_count < args.ticks:
            logger.error(f"Monitor stopped after {monitor.tick_count} of {args.ticks} ticks")
            return 1

        reporter.print_monitor_summary(monitor.snapshot(), monitor.tick_count)

    except COMMAND_ERRORS as e:
        logger.error(f"Monitor failed: {e}")
        return 1

    return 0
