"""
sizefit: re-encode a video with ffmpeg until it hits a target file size.
"""

__version__ = "0.1.0"
