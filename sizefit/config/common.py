"""
Common configuration settings used throughout the application.

This module holds constants shared by the CLI, the ffmpeg services and the
logging layer: the Loguru format, the error log location, and the default
encoder options that apply when neither the command line nor the user
configuration file says otherwise.
"""
import os
from pathlib import Path

# --- Logging Configuration ---

# The format string for the Loguru logger.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# Levels accepted by the `--log-level` option.
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_LOG_LEVEL = "INFO"


# --- Directory and File Management ---

# Fatal diagnostics (probe failures, ffmpeg stderr) are appended to a text
# file inside this directory.
BASE_ERROR_DIR = Path("encode_error")
ERROR_LOG_FILENAME = "error.txt"

# Name of the optional user configuration file, looked up in the current
# working directory unless the environment variable below points elsewhere.
USER_CONFIG_FILENAME = "config.user.yaml"
USER_CONFIG_ENV_VAR = "SIZEFIT_CONFIG"


# --- Encoder Defaults ---

# A software encoder that ships with practically every ffmpeg build.
DEFAULT_CODEC = "libx264"

# Let ffmpeg pick a hardware decoder if one is available.
DEFAULT_HWACCEL = "auto"

# First-pass output is thrown away; only the statistics file matters.
NULL_OUTPUT = os.devnull
NULL_FORMAT = "null"

# Executable names for the external tools.
FFMPEG_EXE_NAME = "ffmpeg.exe" if os.name == "nt" else "ffmpeg"
FFPROBE_EXE_NAME = "ffprobe.exe" if os.name == "nt" else "ffprobe"
