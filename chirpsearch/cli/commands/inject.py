"""
Inject command: write a synthetic strain file with a chirp buried in noise.
"""

import logging
from pathlib import Path

from ...data.gw_signal_params import DetectionConfig
from ...data.gw_synthetic_generator import SyntheticStrainGenerator
from ...data.strain_io import save_strain
from ..parsers.base import get_base_parser
from .common import COMMAND_ERRORS, prepare

logger = logging.getLogger(__name__)


def inject_cmd(argv=None) -> int:
    """Inject command entry point."""
    parser = get_base_parser()
    parser.prog = "chirpsearch inject"
    parser.description = "Generate a synthetic strain series with an injected inspiral"

    parser.add_argument("--output", "-o", type=Path, required=True,
                        help="Output strain file (.h5/.hdf5, .npy, .txt/.dat/.csv)")
    parser.add_argument("--m1", type=float, default=30.0, help="Primary mass (solar masses)")
    parser.add_argument("--m2", type=float, default=25.0, help="Secondary mass (solar masses)")
    parser.add_argument("--sample-rate", type=float, default=4096.0, help="Sampling rate (Hz)")
    parser.add_argument("--duration", type=float, default=1.0, help="Duration (s)")
    parser.add_argument("--noise-amplitude", type=float, default=1e-22,
                        help="Half-width of the uniform noise")
    parser.add_argument("--scale", type=float, default=1.0,
                        help="Template amplitude multiplier (0 writes noise only)")

    args = parser.parse_args(argv)

    try:
        config, _ = prepare(args)
        generator = SyntheticStrainGenerator(DetectionConfig.from_dict(config), seed=args.random_seed)

        if args.scale == 0:
            series = generator.noise_series(args.sample_rate, args.duration, args.noise_amplitude)
        else:
            series = generator.inject(args.m1, args.m2, args.sample_rate, args.duration,
                                      noise_amplitude=args.noise_amplitude, scale=args.scale)
        save_strain(series, args.output)

    except COMMAND_ERRORS as e:
        logger.error(f"Injection failed: {e}")
        return 1

    return 0
