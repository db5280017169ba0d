"""
The bitrate convergence controller.

Given a target output size, the controller estimates a bitrate from the source
duration, runs a two-pass encode, measures the result and corrects the bitrate
until the output lands within tolerance or the attempt limit is reached.
"""
import math
import os
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from ..config.convergence import BITS_PER_BYTE, BYTES_PER_MB, MAX_ITERATIONS
from ..domain.exceptions import (
    EncodeFailureException,
    InputNotFoundException,
    ProbeFailureException,
    SizeQueryFailureException,
)
from ..domain.interfaces import DurationProber, Encoder, SizeQuerier
from ..domain.media import bytes_to_mb
from ..domain.models import (
    ConvergenceResult,
    ConvergenceState,
    EncodeRequest,
    IterationRecord,
    Outcome,
)
from ..utils.format_utils import formatted_bitrate
from .policies import StepPolicy, proportional_step_policy

IterationCallback = Callable[[IterationRecord, float], None]


def check_input(input_path: Path):
    """Raises `InputNotFoundException` unless `input_path` is a readable regular file."""
    if not input_path.is_file() or not os.access(input_path, os.R_OK):
        raise InputNotFoundException(f"Input file does not exist or is not accessible: {input_path}")


def calculate_bitrate(target_size_mb: float, duration_seconds: float) -> float:
    """
    Returns the bitrate (bits/s) that fills `target_size_mb` over `duration_seconds`.

    The whole target is assigned to the video stream; audio and container
    overhead are not subtracted.
    """
    return target_size_mb * BITS_PER_BYTE * BYTES_PER_MB / duration_seconds


class ConvergenceController:
    """
    Drives repeated two-pass encodes towards a target file size.

    The external tools are injected so the loop can run against real ffmpeg or
    against deterministic stand-ins.

    Attributes:
        prober: Provides the source duration.
        encoder: Runs the individual encode passes.
        size_querier: Measures the produced output.
        max_iterations: Upper bound on two-pass attempts.
        step_policy: Computes the next bitrate from the last one and the size error.
        on_iteration: Optional callback invoked after every measured attempt with
                      the attempt record and the target size in MB.
    """

    def __init__(
        self,
        prober: DurationProber,
        encoder: Encoder,
        size_querier: SizeQuerier,
        max_iterations: int = MAX_ITERATIONS,
        step_policy: StepPolicy = proportional_step_policy,
        on_iteration: Optional[IterationCallback] = None,
    ):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        self.prober = prober
        self.encoder = encoder
        self.size_querier = size_querier
        self.max_iterations = max_iterations
        self.step_policy = step_policy
        self.on_iteration = on_iteration

    def run(self, request: EncodeRequest) -> ConvergenceResult:
        """
        Runs the convergence loop for `request`.

        Fatal conditions (missing input, probe failure, encoder failure,
        unmeasurable output) stop the run immediately and are reported through
        the returned result rather than raised. Running out of iterations is a
        regular outcome; the last output file stays in place.
        """
        result = ConvergenceResult(outcome=Outcome.PROBE_FAILED)
        try:
            check_input(request.input_path)
            result.duration_seconds = self._probe_duration(request.input_path)
            result.initial_bitrate = calculate_bitrate(request.target_size_mb, result.duration_seconds)
            logger.info(
                f"Source duration {result.duration_seconds:.2f}s, initial bitrate "
                f"{formatted_bitrate(result.initial_bitrate)} for a {request.target_size_mb:.2f} MB target"
            )

            result.state = ConvergenceState(bitrate=result.initial_bitrate)
            result.outcome = self._converge(request, result.state)
        except InputNotFoundException as e:
            result.outcome, result.message = Outcome.INPUT_NOT_FOUND, str(e)
        except ProbeFailureException as e:
            result.outcome, result.message = Outcome.PROBE_FAILED, str(e)
        except EncodeFailureException as e:
            result.outcome, result.message = Outcome.ENCODE_FAILED, str(e)
        except SizeQueryFailureException as e:
            result.outcome, result.message = Outcome.SIZE_QUERY_FAILED, str(e)
        else:
            if result.outcome is Outcome.CONVERGED:
                result.message = (
                    f"Converged after {result.state.iteration} iteration(s) at {result.state.last_size_mb:.2f} MB"
                )
            else:
                result.message = (
                    f"Iteration limit of {self.max_iterations} reached; keeping last output "
                    f"at {result.state.last_size_mb:.2f} MB"
                )

        if result.succeeded:
            logger.info(result.message)
        else:
            logger.error(result.message)
        return result

    def _probe_duration(self, input_path: Path) -> float:
        duration = self.prober.probe_duration(input_path)
        if not isinstance(duration, (int, float)) or not math.isfinite(duration) or duration <= 0:
            raise ProbeFailureException(f"Invalid duration for {input_path}: {duration!r}")
        return float(duration)

    def _converge(self, request: EncodeRequest, state: ConvergenceState) -> Outcome:
        for _ in range(self.max_iterations):
            bitrate_kbps = math.floor(state.bitrate / 1000)
            self._encode_two_pass(request, bitrate_kbps)

            size_mb = bytes_to_mb(self.size_querier.size_bytes(request.output_path))
            error_mb = size_mb - request.target_size_mb
            record = state.record(bitrate_kbps, size_mb, error_mb)

            logger.info(
                f"Iteration {record.iteration}/{self.max_iterations}: {bitrate_kbps} kbps -> "
                f"{size_mb:.2f} MB (target {request.target_size_mb:.2f} MB, error {error_mb:+.2f} MB)"
            )
            if self.on_iteration:
                self.on_iteration(record, request.target_size_mb)

            if abs(error_mb) <= request.tolerance_mb:
                return Outcome.CONVERGED

            next_bitrate = self.step_policy(state.bitrate, error_mb)
            if not math.isfinite(next_bitrate) or next_bitrate <= 0:
                raise ValueError(f"Step policy produced an invalid bitrate: {next_bitrate!r}")
            logger.debug(
                f"Adjusting bitrate {formatted_bitrate(state.bitrate)} -> {formatted_bitrate(next_bitrate)}"
            )
            state.bitrate = next_bitrate

        return Outcome.ITERATION_LIMIT_REACHED

    def _encode_two_pass(self, request: EncodeRequest, bitrate_kbps: int):
        """Runs pass 1 then pass 2, raising on the first failure."""
        for pass_number in (1, 2):
            pass_result = self.encoder.encode_pass(
                request.input_path,
                request.output_path,
                bitrate_kbps,
                request.codec,
                request.hwaccel,
                pass_number,
            )
            if not pass_result.success:
                raise EncodeFailureException(pass_number, pass_result.diagnostic)
