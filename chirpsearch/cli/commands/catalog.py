"""
Catalog command: list confirmed detections with derived physics.
"""

import json
import logging
from pathlib import Path

from ...data.event_catalog import load_default_catalog
from ...data.gw_signal_params import DetectionConfig
from ...inference.detection_engine import DetectionEngine
from ..parsers.base import get_base_parser
from .common import COMMAND_ERRORS, prepare

logger = logging.getLogger(__name__)


def catalog_cmd(argv=None) -> int:
    """Catalog command entry point."""
    parser = get_base_parser()
    parser.prog = "chirpsearch catalog"
    parser.description = "Show the catalog of confirmed gravitational-wave events"

    parser.add_argument("--name", "-n", help="Show a single event in detail")
    parser.add_argument("--sort", choices=["catalog", "date"], default="catalog",
                        help="Row order")
    parser.add_argument("--output", "-o", type=Path, help="Write the listing as JSON")

    args = parser.parse_args(argv)

    try:
        config, reporter = prepare(args)
        catalog = load_default_catalog()
        engine = DetectionEngine(DetectionConfig.from_dict(config), catalog)

        if args.name:
            event = catalog.by_name(args.name)
            if event is None:
                raise ValueError(f"Unknown event '{args.name}'; known: {', '.join(e.name for e in catalog)}")
            events = (event,)
        elif args.sort == "date":
            events = catalog.sorted_by_date()
        else:
            events = catalog.all()

        rows = [(event, engine.derived_physics(event)) for event in events]
        if args.name:
            reporter.print_event(*rows[0])
        else:
            reporter.console.print(reporter.catalog_table(rows))

        if args.output is not None:
            payload = [dict(event.to_dict(), physics=physics.to_dict()) for event, physics in rows]
            args.output.parent.mkdir(parents=True, exist_ok=True)
            with open(args.output, "w") as f:
                json.dump(payload, f, indent=2)
            logger.info(f"Catalog written to {args.output}")

    except COMMAND_ERRORS as e:
        logger.error(f"Catalog lookup failed: {e}")
        return 1

    return 0
