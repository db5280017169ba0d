"""
This module provides file-based logs that outlive the console output.

Fatal diagnostics go to a plain text `ErrorLog`, which is easy to read after
the terminal is gone. Run summaries go to a YAML `RunReport`, which lists every
attempt with its bitrate and resulting size so that a run can be reviewed or
post-processed.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from loguru import logger

from ..config.common import ERROR_LOG_FILENAME
from ..domain.models import ConvergenceResult, EncodeRequest


class Log:
    """
    A base class for the file logs.

    Handles the log directory: it is derived from the given path and created
    if it does not exist yet.
    """

    # A separator line used in text-based logs.
    linesep_marker: str = "=" * 50

    def __init__(self, log_base_path: Path, is_dir: bool = True):
        """
        Args:
            log_base_path: A directory for the log, or the log file itself.
            is_dir: Whether `log_base_path` names a directory (True) or a file (False).
        """
        self.log_file_path: Path  # Set by the subclass.
        self.log_dir: Path = (log_base_path if is_dir else log_base_path.parent).resolve()
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def write(self, *args, **kwargs):
        raise NotImplementedError("Subclasses must implement the write() method.")


class ErrorLog(Log):
    """
    Appends human-readable error messages to a text file.

    Each call to `write` adds one block followed by a separator line, so the
    file reads as a chronological list of failures.
    """

    def __init__(self, error_log_dir: Path, filename: str = ERROR_LOG_FILENAME):
        super().__init__(error_log_dir)
        self.log_file_path = self.log_dir / filename

    def write(self, *error_messages: str):
        """
        Writes one or more error messages to the log file.

        Args:
            *error_messages: The lines of one error block.
        """
        if not error_messages:
            return

        timestamp = datetime.now().isoformat(timespec="seconds")
        content_to_write = "\n".join((timestamp,) + error_messages) + "\n" + self.linesep_marker + "\n"

        try:
            with self.log_file_path.open("a", encoding="utf-8") as f:
                f.write(content_to_write)
        except OSError as e:
            # Keep the message in the console log if the file is unwritable.
            logger.error(f"Failed to write to error log {self.log_file_path}: {e}")
            for msg in error_messages:
                logger.error(f"  - {msg}")


class RunReport(Log):
    """
    Structured summary of runs in YAML format.

    The report file holds a list of entries, one per run. Writing to an existing
    report appends a new entry with the next index instead of replacing it.
    """

    def __init__(self, report_path: Path):
        super().__init__(report_path, is_dir=False)
        self.log_file_path = self.log_dir / report_path.name
        self.log_entries: List[Dict] = []

    @staticmethod
    def build_entry(
        request: EncodeRequest,
        result: ConvergenceResult,
        started_at: datetime,
        finished_at: Optional[datetime] = None,
    ) -> Dict:
        """
        Turns a finished run into a plain dictionary ready for YAML.

        Args:
            request: The run configuration.
            result: What the controller returned.
            started_at: When the run began.
            finished_at: When it ended. Defaults to now.
        """
        finished_at = finished_at or datetime.now()
        attempts = []
        if result.state:
            attempts = [
                {
                    "iteration": record.iteration,
                    "bitrate_kbps": record.bitrate_kbps,
                    "size_mb": round(record.size_mb, 3),
                    "error_mb": round(record.error_mb, 3),
                }
                for record in result.state.history
            ]
        return {
            "input": str(request.input_path),
            "output": str(request.output_path),
            "target_size_mb": request.target_size_mb,
            "tolerance_mb": request.tolerance_mb,
            "codec": request.codec,
            "hwaccel": request.hwaccel,
            "duration_seconds": result.duration_seconds,
            "initial_bitrate_bps": (
                round(result.initial_bitrate, 1) if result.initial_bitrate is not None else None
            ),
            "outcome": result.outcome.value,
            "message": result.message,
            "iterations": result.iterations,
            "attempts": attempts,
            "started_at": started_at.isoformat(timespec="seconds"),
            "elapsed_seconds": round((finished_at - started_at).total_seconds(), 1),
        }

    def write(self, new_log_entry: Dict):
        """
        Appends `new_log_entry` to the report file.

        Args:
            new_log_entry: A dictionary, usually from `build_entry`.
        """
        if self.log_file_path.is_file():
            try:
                with self.log_file_path.open("r", encoding="utf-8") as f:
                    loaded_entries = yaml.safe_load(f)
                if isinstance(loaded_entries, list):
                    self.log_entries = loaded_entries
                elif loaded_entries is None:
                    self.log_entries = []
                else:
                    logger.warning(f"Report {self.log_file_path} contained unexpected data. Starting a new report.")
                    self.log_entries = []
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Error reading report {self.log_file_path}: {e}. Starting a new report.")
                self.log_entries = []

        current_max_index = max(
            (entry.get("index", 0) for entry in self.log_entries if isinstance(entry, dict)),
            default=0,
        )
        new_log_entry = {"index": current_max_index + 1, **new_log_entry}
        self.log_entries.append(new_log_entry)

        try:
            with self.log_file_path.open("w", encoding="utf-8") as f:
                yaml.dump(
                    self.log_entries,
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                    indent=4,
                    width=220,
                )
            logger.info(f"Run report written to {self.log_file_path}")
        except OSError as e:
            logger.error(f"Failed to write report {self.log_file_path}: {e}")
