"""
This package contains the core domain models of sizefit.

Modules:
    exceptions.py: Exception types for the fatal conditions of a run.
    models.py: `EncodeRequest`, `ConvergenceState`, `PassResult` and the
               `Outcome` of a run.
    interfaces.py: Protocols for the external tools the controller drives
                   (duration prober, encoder, size querier).
    media.py: ffprobe and filesystem implementations of the probing
              protocols.
"""
