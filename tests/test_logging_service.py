"""Tests for the error log and the YAML run report."""

from datetime import datetime, timedelta

import yaml

from sizefit.domain.models import ConvergenceResult, ConvergenceState, EncodeRequest, Outcome
from sizefit.services.logging_service import ErrorLog, RunReport


def test_error_log_appends_blocks(tmp_path):
    log = ErrorLog(tmp_path / "errors")
    log.write("first problem")
    log.write("second problem", "with detail")

    content = (tmp_path / "errors" / "error.txt").read_text(encoding="utf-8")
    assert content.count("=" * 50) == 2
    assert content.index("first problem") < content.index("second problem")
    assert "with detail" in content


def test_error_log_ignores_empty_write(tmp_path):
    ErrorLog(tmp_path).write()
    assert not (tmp_path / "error.txt").exists()


def _finished_result() -> ConvergenceResult:
    state = ConvergenceState(bitrate=671_088.64)
    state.record(838, 45.0, 35.0)
    state.record(671, 10.2, 0.2)
    return ConvergenceResult(
        outcome=Outcome.CONVERGED,
        message="Converged after 2 iteration(s) at 10.20 MB",
        duration_seconds=100.0,
        initial_bitrate=838_860.8,
        state=state,
    )


def test_build_entry(tmp_path):
    request = EncodeRequest(tmp_path / "in.mp4", tmp_path / "out.mp4", 10.0, 0.5)
    started = datetime(2026, 1, 2, 3, 4, 5)
    entry = RunReport.build_entry(request, _finished_result(), started, started + timedelta(seconds=42))

    assert entry["outcome"] == "converged"
    assert entry["iterations"] == 2
    assert entry["initial_bitrate_bps"] == 838_860.8
    assert entry["elapsed_seconds"] == 42.0
    assert entry["attempts"][0] == {"iteration": 1, "bitrate_kbps": 838, "size_mb": 45.0, "error_mb": 35.0}


def test_build_entry_for_early_failure(tmp_path):
    request = EncodeRequest(tmp_path / "in.mp4", tmp_path / "out.mp4", 10.0, 0.5)
    entry = RunReport.build_entry(request, ConvergenceResult(Outcome.PROBE_FAILED, "no duration"), datetime.now())

    assert entry["attempts"] == []
    assert entry["initial_bitrate_bps"] is None
    assert entry["outcome"] == "probe_failed"


def test_report_appends_indexed_entries(tmp_path):
    report_path = tmp_path / "reports" / "runs.yaml"
    RunReport(report_path).write({"outcome": "converged"})
    RunReport(report_path).write({"outcome": "encode_failed"})

    entries = yaml.safe_load(report_path.read_text(encoding="utf-8"))
    assert [e["index"] for e in entries] == [1, 2]
    assert [e["outcome"] for e in entries] == ["converged", "encode_failed"]


def test_report_replaces_unexpected_content(tmp_path):
    report_path = tmp_path / "runs.yaml"
    report_path.write_text("just a string\n", encoding="utf-8")
    RunReport(report_path).write({"outcome": "converged"})

    entries = yaml.safe_load(report_path.read_text(encoding="utf-8"))
    assert entries == [{"index": 1, "outcome": "converged"}]
