"""
Main entry point for sizefit.

Re-encodes a video with ffmpeg two-pass encoding, adjusting the bitrate between
attempts until the output file lands within a tolerance of the target size.

Example:
    python main.py input.mp4 output.mp4 10 0.5 --codec libx265
"""

import sys

from sizefit.app import main


if __name__ == "__main__":
    sys.exit(main())
