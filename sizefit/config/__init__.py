"""
Configuration Package for sizefit.

This package centralizes the static settings of the application so that the
convergence loop, the ffmpeg invocation and the logging setup can be tuned
without touching the code that uses them.

This package includes settings for:
- Logging format and error log locations.
- Default encoder options (codec, hardware acceleration, null output target).
- Convergence parameters (iteration limit, size-error step brackets).
- Loading of the optional user configuration file (`config.user.yaml`).
"""
