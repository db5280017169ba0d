"""
Bitrate step policies for the convergence loop.

A policy takes the bitrate used for the last attempt and the signed size error
of its output (positive when the file came out too large) and returns the
bitrate for the next attempt.
"""
from typing import Callable, Dict, Sequence, Tuple

from ..config.convergence import POLICY_FIXED, POLICY_PROPORTIONAL, SIZE_ERROR_BRACKETS

StepPolicy = Callable[[float, float], float]


def proportional_step_policy(
    bitrate: float,
    error_mb: float,
    brackets: Sequence[Tuple[float, float, float]] = SIZE_ERROR_BRACKETS,
) -> float:
    """
    Scales the bitrate by a factor chosen from the size of the error.

    Brackets are checked in order; the first one whose threshold is <= |error|
    wins, so an error sitting exactly on a threshold takes the larger step.
    Oversized output lowers the bitrate, undersized output raises it.

    Args:
        bitrate: Bitrate of the last attempt in bits/s.
        error_mb: Output size minus target size, in MB.
        brackets: (threshold_mb, oversized_factor, undersized_factor) rows,
                  largest threshold first.

    Returns:
        The next bitrate in bits/s.
    """
    magnitude = abs(error_mb)
    for threshold, oversized_factor, undersized_factor in brackets:
        if magnitude >= threshold:
            return bitrate * (oversized_factor if error_mb > 0 else undersized_factor)
    # Only reachable if the last bracket has a threshold above zero.
    return bitrate


def fixed_step_policy(bitrate: float, error_mb: float) -> float:
    """Keeps the bitrate unchanged: every attempt re-encodes at the initial estimate."""
    return bitrate


POLICIES: Dict[str, StepPolicy] = {
    POLICY_PROPORTIONAL: proportional_step_policy,
    POLICY_FIXED: fixed_step_policy,
}


def get_policy(name: str) -> StepPolicy:
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown step policy '{name}'. Choose from: {', '.join(POLICIES)}") from None
