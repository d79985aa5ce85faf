"""
Detect command: run the matched-filter search on a strain file.
"""

import dataclasses
import json
import logging
from pathlib import Path

from ...data.event_catalog import load_default_catalog
from ...data.gw_signal_params import DetectionConfig
from ...data.strain_io import STRAIN_DATASET, load_strain
from ...inference.detection_engine import DetectionEngine
from ..parsers.base import get_base_parser
from .common import COMMAND_ERRORS, prepare

logger = logging.getLogger(__name__)


def detect_cmd(argv=None) -> int:
    """Detect command entry point."""
    parser = get_base_parser()
    parser.prog = "chirpsearch detect"
    parser.description = "Search a strain series for a binary inspiral signal"

    parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="Strain file (.h5/.hdf5, .npy, .txt/.dat/.csv)"
    )

    parser.add_argument(
        "--sample-rate",
        type=float,
        help="Sampling rate in Hz (required for .npy and single-column text)"
    )

    parser.add_argument(
        "--dataset",
        default=STRAIN_DATASET,
        help="HDF5 dataset name"
    )

    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Write the detection and derived physics as JSON"
    )

    parser.add_argument(
        "--final-mass",
        type=float,
        help="Remnant mass (solar masses) for the radiated-energy estimate"
    )

    parser.add_argument(
        "--workers",
        type=int,
        help="Thread pool size for the template bank"
    )

    parser.add_argument(
        "--backend",
        choices=["numpy", "jax"],
        help="Matched-filter backend"
    )

    args = parser.parse_args(argv)

    try:
        config, reporter = prepare(args)

        detection_config = DetectionConfig.from_dict(config)
        overrides = {}
        if args.workers is not None:
            overrides["max_workers"] = args.workers
        if args.backend is not None:
            overrides["backend"] = args.backend
        if overrides:
            detection_config = dataclasses.replace(detection_config, **overrides)

        series = load_strain(args.input, sample_rate=args.sample_rate, dataset=args.dataset,
                             tolerance=detection_config.spacing_tolerance)

        logger.info(f"Searching {len(series)} samples ({series.duration:.2f}s @ {series.sample_rate:g} Hz)")
        engine = DetectionEngine(detection_config, load_default_catalog())
        detection = engine.detect(series)
        analysis = engine.analyze(detection, final_mass=args.final_mass) if detection else None

        reporter.print_detection(analysis, detection_config.snr_threshold)

        if args.output is not None:
            payload = {
                "input": str(args.input),
                "sample_rate": series.sample_rate,
                "n_samples": len(series),
                "snr_threshold": detection_config.snr_threshold,
                "analysis": analysis.to_dict() if analysis else None,
            }
            args.output.parent.mkdir(parents=True, exist_ok=True)
            with open(args.output, "w") as f:
                json.dump(payload, f, indent=2)
            logger.info(f"Results written to {args.output}")

    except COMMAND_ERRORS as e:
        logger.error(f"Detection failed: {e}")
        return 1

    return 0
