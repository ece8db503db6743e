"""Central configuration for lifereel.

The chronology engine itself takes every setting as an explicit argument;
this module is where applications (the CLI, a UI shell) read those settings
from the environment and an optional YAML file.

Configuration priority (highest wins):
    1. Environment variables (``LIFEREEL_*``, nested with ``__``)
    2. Config file (YAML)
    3. In-code defaults

Example:
    >>> from lifereel.config import get_config
    >>> cfg = get_config()
    >>> cfg.playback.seconds_per_item
    2.0

Config File Format (YAML):
    ```yaml
    chronology:
      default_granularity: fine   # fine | coarse
      year_order: descending      # descending | ascending
      sort_order: oldest_to_latest

    playback:
      seconds_per_item: 2.0
      max_speed: 3

    logging:
      level: INFO
      log_file: ~/.lifereel/lifereel.log
    ```

Environment example:
    ``LIFEREEL_PLAYBACK__SECONDS_PER_ITEM=1.5``
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from lifereel.core.models import Granularity, SortOrder
from lifereel.core.ordering import YearOrder
from lifereel.core.playback import ScrubPlayer

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileError(ConfigError):
    """Raised when an explicitly requested config file cannot be read."""

    pass


# =============================================================================
# Sections
# =============================================================================


class ChronologyConfig(BaseModel):
    """Bucketing and ordering defaults.

    Attributes:
        default_granularity: Granularity used when none is requested.
        year_order: Direction of year buckets in the canonical order.
        sort_order: Initial display direction for stacks.
    """

    default_granularity: Granularity = Field(
        default=Granularity.FINE, description="Bucket granularity when none is requested."
    )
    year_order: YearOrder = Field(
        default=YearOrder.DESCENDING, description="Direction of year buckets."
    )
    sort_order: SortOrder = Field(
        default=SortOrder.OLDEST_TO_LATEST, description="Initial stack display direction."
    )


class PlaybackConfig(BaseModel):
    """Slideshow pacing.

    Attributes:
        seconds_per_item: Wall-clock seconds per photo at 1x.
        max_speed: Highest speed multiplier before cycling back to 1x.
    """

    seconds_per_item: float = Field(default=2.0, gt=0)
    max_speed: int = Field(default=3, ge=1)

    def create_player(self, count: int) -> ScrubPlayer:
        """Build a ScrubPlayer paced by these settings."""
        return ScrubPlayer(
            count=count,
            seconds_per_item=self.seconds_per_item,
            max_speed=self.max_speed,
        )


class LoggingConfig(BaseModel):
    """Logging settings.

    Attributes:
        level: Log level name.
        log_file: Optional log file path.
    """

    level: str = "INFO"
    log_file: Path | None = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Attributes:
        chronology: Bucketing and ordering defaults.
        playback: Slideshow pacing.
        logging: Logging settings.
    """

    chronology: ChronologyConfig = Field(default_factory=ChronologyConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "LIFEREEL_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # File values arrive as init kwargs; the environment must win over them.
        return env_settings, init_settings, dotenv_settings, file_secret_settings


# =============================================================================
# Loading
# =============================================================================

DEFAULT_SEARCH_PATHS = [
    Path("./lifereel.yaml"),
    Path("./lifereel.yml"),
    Path.home() / ".lifereel" / "config.yaml",
    Path.home() / ".lifereel" / "config.yml",
]


def _read_yaml(config_file: Path) -> dict[str, Any]:
    """Read a YAML mapping, returning {} for empty or malformed files."""
    try:
        content = config_file.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(f"Cannot read config file {config_file}: {e}") from e

    if not content.strip():
        return {}

    try:
        loaded = yaml.safe_load(content)
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse config file {config_file}: {e}. Using defaults.")
        return {}

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        logger.warning(f"Config file {config_file} has unexpected format. Using defaults.")
        return {}
    return loaded


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from file, environment, and defaults.

    Args:
        path: Explicit config file. If None, the default locations are
            searched and a missing file is not an error.

    Returns:
        Fully-populated AppConfig.

    Raises:
        ConfigFileError: If ``path`` is given but does not exist or cannot
            be read.
        ConfigError: If the LIFEREEL_* environment holds invalid values.
    """
    if path is not None:
        if not path.exists():
            raise ConfigFileError(f"Config file not found: {path}")
        config_file: Path | None = path
    else:
        config_file = next((p for p in DEFAULT_SEARCH_PATHS if p.exists()), None)

    config_data = _read_yaml(config_file) if config_file is not None else {}
    if config_file is not None:
        logger.debug(f"Loaded config file {config_file}")

    try:
        return AppConfig(**config_data)
    except ValidationError as e:
        logger.warning(f"Invalid config values: {e.error_count()} error(s). Using defaults.")

    # Defaults still read the environment, which may itself be invalid.
    try:
        return AppConfig()
    except ValidationError as e:
        raise ConfigError(f"Invalid LIFEREEL_* environment settings: {e}") from e


@functools.lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the cached configuration singleton."""
    return load_config()


def reset_config() -> None:
    """Clear the configuration cache (used by tests)."""
    get_config.cache_clear()
