"""
Defines custom exception types for sizefit.

Each fatal condition of a run has its own exception so that the controller can
map it onto the matching `Outcome` without inspecting message text.

All custom exceptions inherit from the base `SizeFitException`.
"""
from typing import Optional


class SizeFitException(Exception):
    """Base class for all custom exceptions in sizefit."""

    pass


class InputNotFoundException(SizeFitException):
    """Raised when the input file is missing or cannot be accessed."""

    pass


# --- Probe Specific Exceptions ---
class ProbeFailureException(SizeFitException):
    """
    Raised when the source duration cannot be determined.

    This covers ffprobe failing to start, exiting with an error, and returning
    a duration that is missing, unparseable or not positive. Without a duration
    no initial bitrate can be computed, so the run stops before encoding.
    """

    pass


# --- Encoding Specific Exceptions ---
class EncodeFailureException(SizeFitException):
    """
    Raised when either pass of a two-pass attempt fails.

    The captured ffmpeg stderr is kept on the exception so it can be shown to
    the user and written to the error log.
    """

    def __init__(self, pass_number: int, diagnostic: str, message: Optional[str] = None):
        self.pass_number = pass_number
        self.diagnostic = diagnostic
        super().__init__(message or f"FFmpeg pass {pass_number} failed: {diagnostic}")


class SizeQueryFailureException(SizeFitException):
    """
    Raised when the output file cannot be measured after an encode.

    ffmpeg reported success but left nothing readable at the output path,
    which means the encoder and the filesystem disagree.
    """

    pass
