"""
Data models for a single size-targeted encode run.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..config.common import DEFAULT_CODEC, DEFAULT_HWACCEL


class Outcome(Enum):
    """Terminal states of a run."""

    CONVERGED = "converged"
    ITERATION_LIMIT_REACHED = "iteration_limit_reached"
    INPUT_NOT_FOUND = "input_not_found"
    PROBE_FAILED = "probe_failed"
    ENCODE_FAILED = "encode_failed"
    SIZE_QUERY_FAILED = "size_query_failed"

    @property
    def succeeded(self) -> bool:
        # Running out of iterations still leaves a usable output file.
        return self in (Outcome.CONVERGED, Outcome.ITERATION_LIMIT_REACHED)


@dataclass(frozen=True)
class EncodeRequest:
    """
    Per-run configuration, built once from the command line.

    Attributes:
        input_path: The source video.
        output_path: Where each attempt writes its result (overwritten every iteration).
        target_size_mb: The desired output size in MB. Must be finite and > 0.
        tolerance_mb: Accepted absolute deviation from the target in MB. Must be finite and >= 0.
        codec: The ffmpeg video encoder name (e.g. 'libx264').
        hwaccel: The ffmpeg `-hwaccel` value, 'auto' by default.

    Raises:
        ValueError: If any of the constraints above is violated.
    """

    input_path: Path
    output_path: Path
    target_size_mb: float
    tolerance_mb: float
    codec: str = DEFAULT_CODEC
    hwaccel: str = DEFAULT_HWACCEL

    def __post_init__(self):
        if not math.isfinite(self.target_size_mb) or self.target_size_mb <= 0:
            raise ValueError(f"target_size_mb must be a finite number > 0, got {self.target_size_mb}")
        if not math.isfinite(self.tolerance_mb) or self.tolerance_mb < 0:
            raise ValueError(f"tolerance_mb must be a finite number >= 0, got {self.tolerance_mb}")
        if not self.codec:
            raise ValueError("codec must not be empty")
        if not self.hwaccel:
            raise ValueError("hwaccel must not be empty")


@dataclass(frozen=True)
class PassResult:
    """Outcome of one ffmpeg invocation."""

    success: bool
    diagnostic: str = ""


@dataclass(frozen=True)
class IterationRecord:
    """What a single two-pass attempt asked for and what it produced."""

    iteration: int
    bitrate_kbps: int
    size_mb: float
    error_mb: float


@dataclass
class ConvergenceState:
    """
    Mutable state of the convergence loop.

    `iteration` counts the attempts made so far, so it is 0 before the first
    encode and equals the number of the last finished attempt afterwards.
    """

    bitrate: float
    iteration: int = 0
    last_size_mb: float = 0.0
    history: List[IterationRecord] = field(default_factory=list)

    def record(self, bitrate_kbps: int, size_mb: float, error_mb: float) -> IterationRecord:
        self.iteration += 1
        self.last_size_mb = size_mb
        entry = IterationRecord(self.iteration, bitrate_kbps, size_mb, error_mb)
        self.history.append(entry)
        return entry


@dataclass
class ConvergenceResult:
    """
    What `ConvergenceController.run` hands back to its caller.

    Attributes:
        outcome: The terminal state.
        message: Human-readable summary, or the diagnostic for fatal outcomes.
        duration_seconds: Probed source duration, if probing got that far.
        initial_bitrate: First bitrate estimate in bits/s, if computed.
        state: The final loop state, if the loop started.
    """

    outcome: Outcome
    message: str = ""
    duration_seconds: Optional[float] = None
    initial_bitrate: Optional[float] = None
    state: Optional[ConvergenceState] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome.succeeded

    @property
    def iterations(self) -> int:
        return self.state.iteration if self.state else 0
