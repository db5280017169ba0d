"""
This module provides the ToolPaths class, which locates the external tools the
application needs (ffmpeg and ffprobe) and checks that they actually run.
"""
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.common import FFMPEG_EXE_NAME, FFPROBE_EXE_NAME


class ToolPaths:
    """
    Resolves the ffmpeg and ffprobe executables.

    A directory configured in the user config (`paths.ffmpeg_dir`) is preferred.
    If it is not set, or does not contain the executable, the bare executable
    name is used and the system PATH decides.

    Attributes:
        ffmpeg (str): Command or absolute path for ffmpeg.
        ffprobe (str): Command or absolute path for ffprobe.
    """

    def __init__(self, ffmpeg_dir: Optional[Path] = None):
        self.ffmpeg_dir = ffmpeg_dir
        self.ffmpeg = self._resolve(FFMPEG_EXE_NAME)
        self.ffprobe = self._resolve(FFPROBE_EXE_NAME)

    def _resolve(self, exe_name: str) -> str:
        if self.ffmpeg_dir:
            configured_path = self.ffmpeg_dir / exe_name
            if configured_path.is_file():
                logger.debug(f"Using {exe_name} from configured path: '{configured_path}'")
                return str(configured_path)
            logger.warning(
                f"`ffmpeg_dir` is configured, but '{exe_name}' was not found in '{self.ffmpeg_dir}'. Falling back to system PATH."
            )
        return exe_name

    @staticmethod
    def _verify(cmd: str) -> bool:
        """
        Runs `<cmd> -version` and logs the first line of its output.

        Returns:
            True if the tool started and exited successfully.
        """
        if shutil.which(cmd) is None and not Path(cmd).is_file():
            logger.error(
                f"'{cmd}' command not found. Please ensure FFmpeg is installed and accessible.\n"
                "You can either add it to your system's PATH or set `paths.ffmpeg_dir` in 'config.user.yaml'."
            )
            return False
        try:
            result = subprocess.run(
                [cmd, "-version"],
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"'{cmd} -version' failed (return code {e.returncode}):\n{e.stderr}")
            return False
        except OSError as e:
            logger.error(f"Could not run '{cmd}': {e}")
            return False

        version_output_lines = result.stdout.splitlines()
        first_line = version_output_lines[0] if version_output_lines else "(no output)"
        logger.debug(f"{cmd} version check successful: {first_line}")
        return True

    def verify_tools(self) -> bool:
        """
        Checks that both ffmpeg and ffprobe can be executed.

        Both tools are always checked so that every missing tool is reported.
        """
        ffmpeg_ok = self._verify(self.ffmpeg)
        ffprobe_ok = self._verify(self.ffprobe)
        return ffmpeg_ok and ffprobe_ok
