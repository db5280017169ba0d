"""
Utilities Package for sizefit.

Modules:
    - ffmpeg_utils.py: Runs external commands with logging and error capture.
    - format_utils.py: Formats sizes, bitrates and durations for log messages.
    - tool_paths.py: Locates and verifies the ffmpeg and ffprobe executables.
"""
