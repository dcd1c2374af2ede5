"""
Unified configuration loader with priority resolution.

Root directory (VIDEODIGEST_ROOT):
- macOS/Linux: ~/.videodigest
- Windows: %APPDATA%\\videodigest
- Override: VIDEODIGEST_ROOT environment variable

Value priority (highest to lowest):
1. Environment variables (VIDEODIGEST_<FIELD>, e.g. VIDEODIGEST_MAX_FRAMES)
2. Project config (.videodigest/config.yaml)
3. User config ({root_dir}/config.yaml)
4. Defaults (config/defaults.py)

Layers are merged field by field, so a project config may set only
``batch_size`` and still inherit ``max_frames`` from the user config.
"""

import dataclasses
import logging
import os
import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from videodigest.config import defaults
from videodigest.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "VIDEODIGEST_"


class ConfigSource(Enum):
    """Source of the configuration value."""

    ENV = "env"
    PROJECT = "project"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True)
class PipelineConfig:
    """Resolved videodigest configuration."""

    max_frames: int = defaults.MAX_FRAMES
    min_frames: int = defaults.MIN_FRAMES
    frame_interval: float = defaults.FRAME_INTERVAL
    min_estimated_duration: float = defaults.MIN_ESTIMATED_DURATION
    seconds_per_megabyte: float = defaults.SECONDS_PER_MEGABYTE
    batch_size: int = defaults.BATCH_SIZE
    fallback_duration: float = defaults.FALLBACK_DURATION
    sample_rate: int = defaults.SAMPLE_RATE
    channels: int = defaults.CHANNELS
    bytes_per_sample: int = defaults.BYTES_PER_SAMPLE
    confidence: float = defaults.CONFIDENCE
    frame_timeout: float = defaults.FRAME_TIMEOUT
    audio_timeout: float = defaults.AUDIO_TIMEOUT
    probe_timeout: float = defaults.PROBE_TIMEOUT
    vision_model: str = defaults.DEFAULT_VISION_MODEL
    summary_model: str = defaults.DEFAULT_SUMMARY_MODEL
    transcription_model: str = defaults.DEFAULT_TRANSCRIPTION_MODEL
    language: str | None = defaults.DEFAULT_LANGUAGE
    vision_max_tokens: int = defaults.VISION_MAX_TOKENS
    summary_max_tokens: int = defaults.SUMMARY_MAX_TOKENS
    ffmpeg_path: str | None = None
    ffprobe_path: str | None = None
    source: ConfigSource = ConfigSource.DEFAULT

    def __post_init__(self) -> None:
        if self.min_frames < 1:
            raise ConfigError(f"min_frames must be >= 1, got {self.min_frames}")
        if self.min_frames > self.max_frames:
            raise ConfigError(
                f"min_frames ({self.min_frames}) exceeds max_frames ({self.max_frames})"
            )
        if self.batch_size < 1:
            raise ConfigError(f"batch_size must be >= 1, got {self.batch_size}")
        if self.frame_interval <= 0:
            raise ConfigError(
                f"frame_interval must be positive, got {self.frame_interval}"
            )
        if not 0.0 <= self.confidence <= 1.0:
            raise ConfigError(f"confidence must be in [0, 1], got {self.confidence}")

    @property
    def bytes_per_second(self) -> int:
        """Byte rate of the transcoded PCM audio."""
        return self.sample_rate * self.channels * self.bytes_per_sample


# Field name -> converter, derived from the dataclass defaults
_OPTIONAL_STR_FIELDS = {"language", "ffmpeg_path", "ffprobe_path"}


def _config_fields() -> dict[str, Any]:
    return {
        f.name: f.default
        for f in dataclasses.fields(PipelineConfig)
        if f.name != "source"
    }


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw config value to the type of the field's default."""
    if name in _OPTIONAL_STR_FIELDS:
        if value is None:
            return None
        text = str(value).strip()
        return None if text.lower() in ("", "none", "null", "auto") else text

    default = _config_fields()[name]
    try:
        if isinstance(default, int) and not isinstance(default, bool):
            return int(value)
        if isinstance(default, float):
            return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from e
    return str(value)


def _load_yaml_config(config_path: Path) -> dict[str, Any] | None:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Parsed config dict, or None if file doesn't exist or fails to parse.
    """
    if not config_path.exists():
        return None

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        return None

    if config is None:
        return {}
    if not isinstance(config, dict):
        logger.warning(f"Config file {config_path} is not a valid YAML dict")
        return None
    return config


def _values_from_yaml(config: dict[str, Any] | None, config_path: Path) -> dict[str, Any]:
    """Pick known pipeline fields out of a parsed YAML config."""
    if not config:
        return {}

    known = _config_fields()
    values = {}
    for key, value in config.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key '{key}' in {config_path}")
            continue
        values[key] = _coerce(key, value)
    return values


def _values_from_env() -> dict[str, Any]:
    """Collect VIDEODIGEST_<FIELD> overrides from the environment."""
    values = {}
    for name in _config_fields():
        raw = os.environ.get(ENV_PREFIX + name.upper())
        if raw is not None:
            values[name] = _coerce(name, raw)
    return values


def _find_project_config() -> Path | None:
    """Find project-level config by walking up from cwd.

    Returns:
        Path to .videodigest/config.yaml if found, None otherwise.
    """
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        config_path = parent / ".videodigest" / "config.yaml"
        if config_path.exists():
            return config_path
    return None


def _get_root_dir() -> Path:
    """Get the videodigest root directory.

    Priority:
    1. VIDEODIGEST_ROOT environment variable
    2. Platform-specific default:
       - Windows: %APPDATA%\\videodigest
       - macOS/Linux: ~/.videodigest

    Returns:
        Path to the root directory (may not exist yet).
    """
    env_root = os.environ.get("VIDEODIGEST_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()

    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata) / "videodigest"
        return Path.home() / "AppData" / "Roaming" / "videodigest"
    return Path.home() / ".videodigest"


def _get_user_config_path() -> Path:
    """Get the user-level config path ({root_dir}/config.yaml)."""
    return _get_root_dir() / "config.yaml"


def _resolve_config() -> PipelineConfig:
    """Resolve configuration from all sources in priority order.

    Returns:
        PipelineConfig with merged values and the highest-priority source
        that contributed at least one value.
    """
    values: dict[str, Any] = {}
    source = ConfigSource.DEFAULT

    user_config_path = _get_user_config_path()
    user_values = _values_from_yaml(_load_yaml_config(user_config_path), user_config_path)
    if user_values:
        logger.info(f"Loaded user config from {user_config_path}")
        values.update(user_values)
        source = ConfigSource.USER

    project_config_path = _find_project_config()
    if project_config_path:
        project_values = _values_from_yaml(
            _load_yaml_config(project_config_path), project_config_path
        )
        if project_values:
            logger.info(f"Loaded project config from {project_config_path}")
            values.update(project_values)
            source = ConfigSource.PROJECT

    env_values = _values_from_env()
    if env_values:
        logger.info(f"Using config overrides from environment: {sorted(env_values)}")
        values.update(env_values)
        source = ConfigSource.ENV

    logger.debug(f"Resolved config from {source.value}")
    return PipelineConfig(**values, source=source)


@lru_cache(maxsize=1)
def get_config() -> PipelineConfig:
    """Get resolved videodigest configuration.

    Results are cached - configuration is resolved once per process.
    To force re-resolution (e.g., after env change), use clear_config_cache().
    """
    return _resolve_config()


def clear_config_cache() -> None:
    """Clear the cached configuration.

    Call this if environment variables or config files have changed
    and you need to re-resolve the configuration.
    """
    get_config.cache_clear()
