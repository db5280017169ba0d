"""
Application entry point for sizefit.

Wires the command line, the user configuration, the ffmpeg-backed tools and
the convergence controller together, and turns the controller's result into
console output and an exit code.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .cli import get_args
from .config.common import DEFAULT_LOG_LEVEL, LOGGER_FORMAT
from .config.user_config import load_user_config
from .domain.exceptions import InputNotFoundException
from .domain.media import FFprobeDurationProber, FileSizeQuerier
from .domain.models import EncodeRequest, IterationRecord, Outcome
from .services.controller import ConvergenceController, check_input
from .services.encoder import FFmpegTwoPassEncoder
from .services.logging_service import ErrorLog, RunReport
from .services.policies import get_policy
from .utils.format_utils import format_timedelta
from .utils.tool_paths import ToolPaths


def configure_logger(level: str = DEFAULT_LOG_LEVEL):
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOGGER_FORMAT)


def print_progress(record: IterationRecord, target_size_mb: float):
    print(
        f"Iteration: {record.iteration}, Current Size: {record.size_mb:.2f} MB, Target Size: {target_size_mb:.2f} MB",
        flush=True,
    )


def write_error_log(error_dir: Path, request: EncodeRequest, outcome: Outcome, message: str):
    ErrorLog(error_dir).write(
        f"Input: {request.input_path}",
        f"Output: {request.output_path}",
        f"Outcome: {outcome.value}",
        message,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs one size-targeted encode from the command line.

    Steps:
    1. Loads the user configuration, whose values become the CLI defaults.
    2. Parses the arguments and reconfigures the logger with `--log-level`.
    3. Checks that the input file is readable, then verifies ffmpeg and
       ffprobe unless `--skip-tool-check` is given.
    4. Runs the convergence controller and prints per-iteration progress.
    5. Writes the optional YAML report and, on failure, the error log.

    Returns:
        0 when the run produced an output file (converged or best effort after
        the iteration limit), 1 on any fatal error.
    """
    configure_logger()

    user_config = load_user_config()
    args = get_args(user_config, argv)
    configure_logger(args.log_level)
    logger.debug(f"Parsed arguments: {args}")

    request = EncodeRequest(
        input_path=args.input_file,
        output_path=args.output_file,
        target_size_mb=args.target_size_mb,
        tolerance_mb=args.tolerance,
        codec=args.codec,
        hwaccel=args.hwaccel,
    )
    try:
        check_input(request.input_path)
    except InputNotFoundException as e:
        logger.error(str(e))
        write_error_log(args.error_dir, request, Outcome.INPUT_NOT_FOUND, str(e))
        return 1

    tools = ToolPaths(user_config.ffmpeg_dir)
    if not args.skip_tool_check and not tools.verify_tools():
        logger.error("Required external tools are unavailable. Aborting.")
        return 1

    controller = ConvergenceController(
        prober=FFprobeDurationProber(tools.ffprobe),
        encoder=FFmpegTwoPassEncoder(tools.ffmpeg, passlog_dir=args.passlog_dir, error_log_dir=args.error_dir),
        size_querier=FileSizeQuerier(),
        max_iterations=args.max_iterations,
        step_policy=get_policy(args.policy),
        on_iteration=print_progress,
    )

    started_at = datetime.now()
    result = controller.run(request)
    finished_at = datetime.now()
    logger.info(f"Total time: {format_timedelta(finished_at - started_at)}")

    if args.report:
        try:
            RunReport(args.report).write(RunReport.build_entry(request, result, started_at, finished_at))
        except OSError as e:
            logger.error(f"Could not write report {args.report}: {e}")

    if not result.succeeded:
        write_error_log(args.error_dir, request, result.outcome, result.message)
        return 1

    print(f"Compressed video saved as {request.output_path}")
    return 0
