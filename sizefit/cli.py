"""
Command-Line Interface (CLI) setup for sizefit.

This module uses Python's `argparse` to define and parse the arguments that
describe one size-targeted encode.
"""
import argparse
import math
from pathlib import Path
from typing import List, Optional

from .config.common import BASE_ERROR_DIR, DEFAULT_LOG_LEVEL, LOG_LEVELS
from .config.convergence import POLICY_NAMES, POLICY_PROPORTIONAL
from .config.user_config import UserConfig


def finite_float(value: str) -> float:
    """argparse type for floating-point numbers that rejects nan and inf."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: '{value}'") from None
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"number must be finite: '{value}'")
    return number


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: '{value}'")
    return number


def build_parser(defaults: UserConfig) -> argparse.ArgumentParser:
    """
    Creates the argument parser.

    Args:
        defaults: Effective defaults for the encoder options, taken from the
                  user configuration file when one exists.
    """
    parser = argparse.ArgumentParser(
        prog="sizefit",
        description="Re-encode a video with ffmpeg two-pass encoding until it reaches a target file size.",
    )
    parser.add_argument("input_file", type=Path, help="Path to the input file.")
    parser.add_argument("output_file", type=Path, help="Path to the output file (overwritten on every attempt).")
    parser.add_argument(
        "target_size_mb", type=finite_float, help="Target file size in megabytes (accepts floating-point numbers)."
    )
    parser.add_argument(
        "tolerance",
        type=finite_float,
        help="Maximum allowed difference in megabytes between the output size and the target size.",
    )
    parser.add_argument(
        "--codec", type=str, default=defaults.codec,
        help=f"ffmpeg video encoder to use. Defaults to `{defaults.codec}`.",
    )
    parser.add_argument(
        "--hwaccel", type=str, default=defaults.hwaccel,
        help=f"Hardware acceleration passed to ffmpeg's -hwaccel. Defaults to `{defaults.hwaccel}`.",
    )
    parser.add_argument(
        "--max-iterations", type=positive_int, default=defaults.max_iterations,
        help=f"Maximum number of two-pass attempts. Defaults to {defaults.max_iterations}.",
    )
    parser.add_argument(
        "--policy", choices=POLICY_NAMES, default=POLICY_PROPORTIONAL,
        help="How the bitrate is corrected between attempts. `fixed` re-encodes at the initial estimate.",
    )
    parser.add_argument(
        "--passlog-dir", type=Path, default=None,
        help="Directory for ffmpeg's first-pass statistics files. Defaults to ffmpeg's own location.",
    )
    parser.add_argument(
        "--report", type=Path, default=None,
        help="Append a YAML summary of the run to this file.",
    )
    parser.add_argument(
        "--error-dir", type=Path, default=BASE_ERROR_DIR,
        help=f"Directory where fatal diagnostics are logged. Defaults to `{BASE_ERROR_DIR}`.",
    )
    parser.add_argument(
        "--skip-tool-check", action="store_true",
        help="Do not verify that ffmpeg and ffprobe run before starting.",
    )
    parser.add_argument(
        "--log-level", type=str.upper, default=DEFAULT_LOG_LEVEL, choices=LOG_LEVELS,
        help="Set the logging level.",
    )
    return parser


def get_args(defaults: UserConfig, argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses and validates the command line.

    Returns:
        argparse.Namespace: The parsed arguments.
    """
    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    if args.target_size_mb <= 0:
        parser.error(f"target_size_mb must be greater than 0, got {args.target_size_mb}")
    if args.tolerance < 0:
        parser.error(f"tolerance must not be negative, got {args.tolerance}")
    if not args.codec:
        parser.error("--codec must not be empty")
    if not args.hwaccel:
        parser.error("--hwaccel must not be empty")

    return args
