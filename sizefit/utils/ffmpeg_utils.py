"""
This module provides a helper for running external tools such as ffmpeg.
"""

import os
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union

from loguru import logger

from ..services.logging_service import ErrorLog


def format_cmd_for_display(cmd_list: Sequence[str]) -> str:
    """Return a copy-pasteable command string, quoted for the current platform."""
    if os.name == "nt":
        return subprocess.list2cmdline(list(cmd_list))
    return shlex.join(cmd_list)


def run_cmd(
    cmd_parts: Union[str, List[str]],
    src_file_for_log: Path = Path(),
    error_log_dir_for_run_cmd: Optional[Path] = None,
    show_cmd: bool = False,
) -> Optional[subprocess.CompletedProcess]:
    """
    Executes an external command and captures its output.

    This is a wrapper around `subprocess.run` that adds logging and turns
    launch failures into a `None` result instead of an exception.

    Args:
        cmd_parts: The command, as a list of arguments (preferred) or a single
                   string that is split with `shlex`.
        src_file_for_log: The file being processed, used as context in logs.
        error_log_dir_for_run_cmd: If set, launch failures are also appended to
                                   an `ErrorLog` in this directory.
        show_cmd: If True, the command is logged at DEBUG level before running.

    Returns:
        The `subprocess.CompletedProcess` (whatever the exit code), or `None`
        if the command could not be started.
    """
    if isinstance(cmd_parts, str):
        try:
            cmd_list = shlex.split(cmd_parts)
        except ValueError as e:
            logger.error(f"Error splitting command string with shlex: '{cmd_parts}'. Error: {e}")
            return None
    else:
        cmd_list = [str(part) for part in cmd_parts]

    if not cmd_list:
        logger.error("run_cmd received an empty command list.")
        return None

    display_cmd_str = format_cmd_for_display(cmd_list)
    if show_cmd:
        logger.debug(f"Executing: {display_cmd_str}")

    try:
        result = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
        )
    except OSError as e:
        logger.error(
            f"Error: Could not start '{cmd_list[0]}' ({type(e).__name__}). "
            "Ensure it's in your system's PATH or configured in the user config."
        )
        if error_log_dir_for_run_cmd:
            ErrorLog(error_log_dir_for_run_cmd).write(
                f"Command execution error for: {src_file_for_log.name or 'N/A'}",
                f"Command: {display_cmd_str}",
                f"Error: {type(e).__name__} - {e}",
            )
        return None

    if result.stdout and len(result.stdout) > 500:
        logger.trace(f"Command stdout (truncated): {result.stdout[:500]}...")
    elif result.stdout:
        logger.trace(f"Command stdout: {result.stdout}")

    if result.stderr and result.returncode != 0:
        logger.debug(f"Command stderr (error, rc={result.returncode}): {result.stderr}")
    elif result.stderr:
        logger.trace(f"Command stderr (non-error, rc={result.returncode}): {result.stderr}")

    return result
