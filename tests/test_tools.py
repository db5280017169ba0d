"""Tests for tool resolution and the command runner."""

import subprocess
from unittest.mock import patch

from sizefit.utils.ffmpeg_utils import format_cmd_for_display, run_cmd
from sizefit.utils.format_utils import format_timedelta, formatted_bitrate
from sizefit.utils.tool_paths import ToolPaths


class TestToolPaths:
    def test_defaults_to_path_lookup(self):
        tools = ToolPaths()
        assert tools.ffmpeg in ("ffmpeg", "ffmpeg.exe")
        assert tools.ffprobe in ("ffprobe", "ffprobe.exe")

    def test_prefers_configured_directory(self, tmp_path):
        (tmp_path / "ffmpeg").write_text("")
        (tmp_path / "ffprobe").write_text("")
        tools = ToolPaths(tmp_path)
        assert tools.ffmpeg == str(tmp_path / "ffmpeg")
        assert tools.ffprobe == str(tmp_path / "ffprobe")

    def test_falls_back_when_directory_lacks_tools(self, tmp_path):
        assert ToolPaths(tmp_path).ffmpeg == "ffmpeg"

    def test_verify_reports_missing_tools(self):
        with patch("sizefit.utils.tool_paths.shutil.which", return_value=None):
            tools = ToolPaths()
            tools.ffmpeg = "/missing/ffmpeg"
            tools.ffprobe = "/missing/ffprobe"
            assert tools.verify_tools() is False

    def test_verify_success(self):
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="ffmpeg version 7.1\n", stderr="")
        with patch("sizefit.utils.tool_paths.shutil.which", return_value="/usr/bin/ffmpeg"), patch(
            "sizefit.utils.tool_paths.subprocess.run", return_value=completed
        ) as run:
            assert ToolPaths().verify_tools() is True
        assert run.call_count == 2

    def test_verify_failing_version_command(self):
        error = subprocess.CalledProcessError(1, ["ffmpeg", "-version"], stderr="broken")
        with patch("sizefit.utils.tool_paths.shutil.which", return_value="/usr/bin/ffmpeg"), patch(
            "sizefit.utils.tool_paths.subprocess.run", side_effect=error
        ):
            assert ToolPaths().verify_tools() is False


class TestRunCmd:
    def test_passes_list_and_returns_result(self):
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="ok", stderr="")
        with patch("sizefit.utils.ffmpeg_utils.subprocess.run", return_value=completed) as run:
            assert run_cmd(["ffmpeg", "-version"]) is completed
        assert run.call_args.args[0] == ["ffmpeg", "-version"]
        assert run.call_args.kwargs["shell"] is False

    def test_splits_string_command(self):
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")
        with patch("sizefit.utils.ffmpeg_utils.subprocess.run", return_value=completed) as run:
            run_cmd("ffmpeg -i 'my file.mp4'")
        assert run.call_args.args[0] == ["ffmpeg", "-i", "my file.mp4"]

    def test_empty_command(self):
        assert run_cmd([]) is None

    def test_missing_executable_returns_none(self):
        assert run_cmd(["/definitely/not/a/binary"]) is None

    def test_non_zero_exit_is_returned(self):
        completed = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="boom")
        with patch("sizefit.utils.ffmpeg_utils.subprocess.run", return_value=completed):
            assert run_cmd(["ffmpeg"]).returncode == 1


def test_format_cmd_for_display_quotes_spaces():
    assert "'my file.mp4'" in format_cmd_for_display(["ffmpeg", "-i", "my file.mp4"]) or '"my file.mp4"' in (
        format_cmd_for_display(["ffmpeg", "-i", "my file.mp4"])
    )


def test_formatters():
    from datetime import timedelta

    assert format_timedelta(timedelta(seconds=7261)) == "02:01:01"
    assert formatted_bitrate(838_860.8) == "838.86 kbps"
    assert formatted_bitrate(2_500_000) == "2.50 Mbps"
