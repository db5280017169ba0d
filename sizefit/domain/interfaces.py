"""Protocols for the external tools driven by the convergence controller."""

from pathlib import Path
from typing import Protocol

from .models import PassResult


class DurationProber(Protocol):
    """Protocol for reading the duration of a media file.

    Implementations can use ffprobe or any other tool; tests use fixed values.
    """

    def probe_duration(self, path: Path) -> float:
        """Return the duration of the media at `path`.

        Args:
            path: Path to the source video.

        Returns:
            Duration in seconds, always > 0.

        Raises:
            ProbeFailureException: If the duration cannot be determined.
        """
        ...


class Encoder(Protocol):
    """Protocol for running a single pass of a two-pass encode."""

    def encode_pass(
        self,
        input_path: Path,
        output_path: Path,
        bitrate_kbps: int,
        codec: str,
        hwaccel: str,
        pass_number: int,
    ) -> PassResult:
        """Run pass `pass_number` (1 or 2) at `bitrate_kbps`.

        Pass 2 relies on the statistics written by pass 1, so callers must run
        them in order. Failures are reported through the returned
        `PassResult`, not raised.
        """
        ...


class SizeQuerier(Protocol):
    """Protocol for measuring a file on disk."""

    def size_bytes(self, path: Path) -> int:
        """Return the size of `path` in bytes.

        Raises:
            SizeQueryFailureException: If the file cannot be stat'ed.
        """
        ...
