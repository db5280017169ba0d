"""
Settings for the bitrate convergence loop.

The controller receives these values as constructor arguments; they live here
as named defaults so tests and the CLI can override them explicitly.
"""

# The loop gives up after this many two-pass attempts and keeps the last output.
MAX_ITERATIONS = 10

# Size conversions. Sizes are reported in MiB, labelled "MB" like the encoder does.
BYTES_PER_MB = 1024 * 1024
BITS_PER_BYTE = 8

# Step brackets for the proportional policy, checked from the top:
# (minimum absolute size error in MB, factor when oversized, factor when undersized).
# The last bracket has a threshold of 0 and therefore always matches.
SIZE_ERROR_BRACKETS = (
    (30.0, 0.80, 1.20),
    (8.5, 0.85, 1.15),
    (0.0, 0.90, 1.10),
)

# Names accepted by `--policy`.
POLICY_PROPORTIONAL = "proportional"
POLICY_FIXED = "fixed"
POLICY_NAMES = (POLICY_PROPORTIONAL, POLICY_FIXED)
