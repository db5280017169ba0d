"""
Services Package for sizefit.

- **Convergence Controller (`controller.py`):** The loop that re-encodes a
  video until its size lands within tolerance of the target.
- **Step Policies (`policies.py`):** The rules that turn a size error into
  the next bitrate.
- **FFmpeg Encoder (`encoder.py`):** Builds and runs the ffmpeg commands for
  each pass of a two-pass encode.
- **Logging Service (`logging_service.py`):** Text error logs and YAML run
  reports, separate from the real-time console logging.
"""
