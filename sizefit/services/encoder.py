import os
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..config.common import FFMPEG_EXE_NAME, NULL_FORMAT, NULL_OUTPUT
from ..domain.models import PassResult
from ..utils.ffmpeg_utils import run_cmd


class FFmpegTwoPassEncoder:
    """
    Runs single passes of an ffmpeg two-pass encode.

    Pass 1 analyses the source and writes the rate-control statistics file;
    its video output is discarded to the null muxer. Pass 2 reads those
    statistics and writes the real output, overwriting it if it exists.

    Attributes:
        ffmpeg_cmd (str): The ffmpeg executable.
        passlog_dir (Optional[Path]): Where the statistics files go. When None,
                                      ffmpeg writes them to the working directory
                                      under its default name.
        error_log_dir (Optional[Path]): Directory for the error log used when
                                        ffmpeg cannot be started at all.
    """

    def __init__(
        self,
        ffmpeg_cmd: str = FFMPEG_EXE_NAME,
        passlog_dir: Optional[Path] = None,
        error_log_dir: Optional[Path] = None,
    ):
        self.ffmpeg_cmd = ffmpeg_cmd
        self.passlog_dir = passlog_dir
        self.error_log_dir = error_log_dir

    def passlog_prefix(self, output_path: Path) -> Optional[Path]:
        if self.passlog_dir is None:
            return None
        return self.passlog_dir / f"{output_path.stem}_2pass"

    def build_command(
        self,
        input_path: Path,
        output_path: Path,
        bitrate_kbps: int,
        codec: str,
        hwaccel: str,
        pass_number: int,
    ) -> List[str]:
        """
        Builds the ffmpeg argument list for one pass.

        Raises:
            ValueError: If `pass_number` is not 1 or 2.
        """
        if pass_number not in (1, 2):
            raise ValueError(f"pass_number must be 1 or 2, got {pass_number}")

        cmd = [
            self.ffmpeg_cmd,
            "-hide_banner",
            "-y",
            "-hwaccel", hwaccel,
            "-i", str(input_path),
            "-c:v", codec,
            "-b:v", f"{bitrate_kbps}k",
            "-pass", str(pass_number),
        ]
        prefix = self.passlog_prefix(output_path)
        if prefix is not None:
            cmd += ["-passlogfile", str(prefix)]

        if pass_number == 1:
            cmd += ["-an", "-f", NULL_FORMAT, NULL_OUTPUT]
        else:
            cmd.append(str(output_path))
        return cmd

    def encode_pass(
        self,
        input_path: Path,
        output_path: Path,
        bitrate_kbps: int,
        codec: str,
        hwaccel: str,
        pass_number: int,
    ) -> PassResult:
        if self.passlog_dir is not None:
            try:
                os.makedirs(self.passlog_dir, exist_ok=True)
            except OSError as e:
                logger.error(f"Could not create pass log directory {self.passlog_dir}: {e}")
                return PassResult(False, f"Could not create pass log directory {self.passlog_dir}: {e}")

        cmd = self.build_command(input_path, output_path, bitrate_kbps, codec, hwaccel, pass_number)
        logger.debug(f"Starting ffmpeg pass {pass_number} at {bitrate_kbps} kbps")
        res = run_cmd(
            cmd,
            src_file_for_log=input_path,
            error_log_dir_for_run_cmd=self.error_log_dir,
            show_cmd=True,
        )

        if res is None:
            return PassResult(False, f"Could not execute '{self.ffmpeg_cmd}'.")
        if res.returncode != 0:
            diagnostic = res.stderr.strip() if res.stderr else f"ffmpeg exited with code {res.returncode}"
            return PassResult(False, diagnostic)
        return PassResult(True)
