import math
import re
from pathlib import Path
from pprint import pformat
from typing import Optional

import ffmpeg
from loguru import logger

from .exceptions import ProbeFailureException, SizeQueryFailureException
from ..config.common import FFPROBE_EXE_NAME
from ..config.convergence import BYTES_PER_MB


def parse_duration(duration_str: str) -> float:
    """
    Parses a duration string into total seconds.

    This function handles the two duration formats ffprobe produces:
    1. A plain number of seconds (e.g., "3600.5").
    2. A timecode in the format 'HH:MM:SS.sss' (e.g., "01:00:00.500").
       Hours are optional in the timecode format.

    Args:
        duration_str: The string containing the duration to parse.

    Returns:
        The total duration in seconds as a float. Returns 0.0 if parsing fails
        or the value is not a finite number.
    """
    duration_str = duration_str.strip()
    try:
        seconds = float(duration_str)
        return seconds if math.isfinite(seconds) else 0.0
    except ValueError:
        pattern = r"(?:(\d{1,2}):)?(\d{1,2}):(\d{1,2}(?:\.\d+)?)"
        match = re.fullmatch(pattern, duration_str)
        if match:
            hours_str, minutes_str, seconds_str = match.groups()
            hours = int(hours_str) if hours_str else 0
            minutes = int(minutes_str)
            seconds = float(seconds_str)
            return float(hours * 3600 + minutes * 60 + seconds)
        logger.warning(f"Could not parse duration string: {duration_str!r}")
    return 0.0


def extract_duration(probe: dict) -> Optional[float]:
    """
    Picks the duration out of `ffprobe -show_format -show_streams` output.

    The container duration in the 'format' section is preferred; the first
    stream that carries a duration is used otherwise.

    Returns:
        The parsed duration in seconds, or None if no duration key exists.
    """
    duration_val = (probe.get("format") or {}).get("duration")
    if duration_val is None:
        for stream in probe.get("streams") or []:
            if "duration" in stream:
                duration_val = stream["duration"]
                break
    if duration_val is None:
        return None
    return parse_duration(str(duration_val))


class FFprobeDurationProber:
    """
    Reads the duration of a media file with ffprobe.

    The probe goes through `ffmpeg.probe` from the ffmpeg-python library, which
    runs ffprobe with JSON output and raises `ffmpeg.Error` on a non-zero exit.

    Attributes:
        ffprobe_cmd (str): The ffprobe executable, a bare name resolved via PATH
                           or an absolute path from the user configuration.
    """

    def __init__(self, ffprobe_cmd: str = FFPROBE_EXE_NAME):
        self.ffprobe_cmd = ffprobe_cmd

    def probe_duration(self, path: Path) -> float:
        """
        Returns the duration of `path` in seconds.

        Raises:
            ProbeFailureException: If ffprobe cannot be started, exits with an
                                   error, prints something that is not JSON, or
                                   reports no positive duration.
        """
        try:
            probe = ffmpeg.probe(str(path), cmd=self.ffprobe_cmd)
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="replace") if isinstance(e.stderr, bytes) else str(e.stderr)
            logger.error(f"ffprobe failed for {path}: {stderr}")
            raise ProbeFailureException(f"ffprobe failed for {path}: {stderr.strip()}") from e
        except OSError as e:
            logger.error(
                f"Could not start '{self.ffprobe_cmd}'. Ensure it's in your system's PATH or configured in the user config."
            )
            raise ProbeFailureException(f"Could not run '{self.ffprobe_cmd}': {e}") from e
        except ValueError as e:
            # Raised by json.loads when ffprobe prints garbage.
            raise ProbeFailureException(f"Unreadable ffprobe output for {path}: {e}") from e

        logger.trace(f"Probe data for {path.name}:\n{pformat(probe)}")

        duration = extract_duration(probe)
        if duration is None:
            raise ProbeFailureException(f"ffprobe reported no duration for {path}")
        if duration <= 0:
            raise ProbeFailureException(f"No valid (positive) duration found for {path}: {duration}")

        logger.debug(f"Duration for {path.name}: {duration}s")
        return duration


class FileSizeQuerier:
    """Measures files through the filesystem."""

    def size_bytes(self, path: Path) -> int:
        try:
            return path.stat().st_size
        except OSError as e:
            raise SizeQueryFailureException(f"Unable to read file metadata for {path}: {e}") from e


def bytes_to_mb(size_bytes: int) -> float:
    return size_bytes / BYTES_PER_MB
