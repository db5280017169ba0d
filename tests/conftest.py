"""Shared test fixtures and stand-ins for the external tools."""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest
from loguru import logger

from sizefit.config.convergence import BYTES_PER_MB
from sizefit.domain.exceptions import ProbeFailureException
from sizefit.domain.models import EncodeRequest, PassResult


def mb_to_bytes(size_mb: float) -> int:
    return int(size_mb * BYTES_PER_MB)


class StubProber:
    """Returns a fixed duration, or raises when given an exception."""

    def __init__(self, duration: float = 100.0, error: Optional[Exception] = None):
        self.duration = duration
        self.error = error
        self.calls: List[Path] = []

    def probe_duration(self, path: Path) -> float:
        self.calls.append(path)
        if self.error:
            raise self.error
        return self.duration


class RecordingEncoder:
    """Records every pass and fails the passes listed in `fail_on`."""

    def __init__(self, fail_on: Sequence[Tuple[int, int]] = (), diagnostic: str = "Unknown encoder 'bogus'"):
        # (attempt number starting at 1, pass number)
        self.fail_on = set(fail_on)
        self.diagnostic = diagnostic
        self.calls: List[Tuple[int, int]] = []

    @property
    def attempt(self) -> int:
        return sum(1 for _, pass_number in self.calls if pass_number == 1)

    def encode_pass(self, input_path, output_path, bitrate_kbps, codec, hwaccel, pass_number) -> PassResult:
        self.calls.append((bitrate_kbps, pass_number))
        if (self.attempt, pass_number) in self.fail_on:
            return PassResult(False, self.diagnostic)
        return PassResult(True)


class ScriptedSizes:
    """Returns the given sizes (in MB) one per query; the last one repeats."""

    def __init__(self, *sizes_mb: float):
        self.sizes_mb = list(sizes_mb)
        self.calls = 0

    def size_bytes(self, path: Path) -> int:
        index = min(self.calls, len(self.sizes_mb) - 1)
        self.calls += 1
        return mb_to_bytes(self.sizes_mb[index])


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    path = tmp_path / "input.mp4"
    path.write_bytes(b"\x00" * 1024)
    return path


@pytest.fixture
def request_10mb(input_file: Path, tmp_path: Path) -> EncodeRequest:
    return EncodeRequest(
        input_path=input_file,
        output_path=tmp_path / "output.mp4",
        target_size_mb=10.0,
        tolerance_mb=0.5,
    )


@pytest.fixture
def no_user_config(tmp_path: Path, monkeypatch):
    """Run from an empty directory with no config file and no env override."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SIZEFIT_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def probe_error() -> ProbeFailureException:
    return ProbeFailureException("ffprobe failed for input.mp4: Invalid data found when processing input")


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks added during a test so they do not outlive its captured streams."""
    yield
    logger.remove()
