"""
Loading of the optional user configuration file.

Users can drop a `config.user.yaml` next to where they run the tool (or point
`SIZEFIT_CONFIG` at one) to say where ffmpeg lives and to change the default
encoder options without retyping them on every run:

    paths:
      ffmpeg_dir: C:/tools/ffmpeg/bin
    defaults:
      codec: libx265
      hwaccel: cuda
      max_iterations: 6

Every key is optional. A missing file is normal; a broken one is reported and
ignored so that a typo never blocks an encode.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger

from .common import DEFAULT_CODEC, DEFAULT_HWACCEL, USER_CONFIG_ENV_VAR, USER_CONFIG_FILENAME
from .convergence import MAX_ITERATIONS


@dataclass(frozen=True)
class UserConfig:
    """Effective defaults after merging the user file over the built-in constants."""

    ffmpeg_dir: Optional[Path] = None
    codec: str = DEFAULT_CODEC
    hwaccel: str = DEFAULT_HWACCEL
    max_iterations: int = MAX_ITERATIONS


def default_config_path() -> Path:
    env_path = os.environ.get(USER_CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / USER_CONFIG_FILENAME


def _section(raw: dict, name: str, path: Path) -> dict:
    section = raw.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        logger.warning(f"Ignoring '{name}' in '{path}': expected a mapping, got {type(section).__name__}.")
        return {}
    return section


def _string_option(section: dict, label: str, key: str, default: Optional[str], path: Path) -> Optional[str]:
    value = section.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        logger.warning(f"Ignoring {label} in '{path}': expected a string, got {type(value).__name__}.")
        return default
    return value


def load_user_config(config_path: Optional[Path] = None) -> UserConfig:
    """
    Reads the user configuration file and returns the merged defaults.

    Args:
        config_path: The YAML file to read. Defaults to `default_config_path()`.

    Returns:
        A `UserConfig`. Values absent from the file (or the whole file, if it
        does not exist or cannot be parsed) fall back to the built-in defaults.
    """
    path = config_path or default_config_path()
    if not path.is_file():
        logger.debug(f"User config '{path}' not found. Using built-in defaults and system PATH.")
        return UserConfig()

    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load or parse '{path}': {e}")
        return UserConfig()

    if not isinstance(raw, dict):
        logger.warning(f"Ignoring '{path}': expected a mapping at the top level, got {type(raw).__name__}.")
        return UserConfig()

    paths_config = _section(raw, "paths", path)
    defaults_config = _section(raw, "defaults", path)

    ffmpeg_dir_str = _string_option(paths_config, "paths.ffmpeg_dir", "ffmpeg_dir", None, path)
    codec = _string_option(defaults_config, "defaults.codec", "codec", DEFAULT_CODEC, path)
    hwaccel = _string_option(defaults_config, "defaults.hwaccel", "hwaccel", DEFAULT_HWACCEL, path)

    max_iterations = MAX_ITERATIONS
    raw_iterations = defaults_config.get("max_iterations")
    if raw_iterations is not None:
        try:
            max_iterations = int(raw_iterations)
        except (TypeError, ValueError):
            logger.warning(f"Invalid defaults.max_iterations '{raw_iterations}' in '{path}', using {MAX_ITERATIONS}.")
        else:
            if max_iterations < 1:
                logger.warning(f"defaults.max_iterations must be at least 1 in '{path}', using {MAX_ITERATIONS}.")
                max_iterations = MAX_ITERATIONS

    config = UserConfig(
        ffmpeg_dir=Path(ffmpeg_dir_str) if ffmpeg_dir_str else None,
        codec=codec,
        hwaccel=hwaccel,
        max_iterations=max_iterations,
    )
    logger.debug(f"Loaded user config from '{path}': {config}")
    return config
