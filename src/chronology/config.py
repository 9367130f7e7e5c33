"""Central Configuration System for Chronology.

This module is the single source of truth for application configuration.
Only the outer layers (command line, embedding applications) read it; the
timeline core receives a `TimelineConfig` value explicitly and never looks
up global settings.

The configuration system supports:
- Multi-source configuration (environment variables > config file > defaults)
- Validation of bucket sizes so every generated taxonomy is well formed
- Graceful fallback to defaults when a discovered config file is broken

Example:
    >>> from chronology.config import get_config
    >>>
    >>> cfg = get_config()
    >>> print(cfg.timeline.use_24_hour_clock)  # True by default

Config File Format (YAML):
    ```yaml
    timeline:
      use_24_hour_clock: true
      group_items_in_same_bucket: true
      first_weekday: 6        # 0 = Monday ... 6 = Sunday
      minute_bucket_width: 10
      minute_bucket_count: 3
      hour_bucket_width: 4

    logging:
      level: WARNING
      log_file: ~/.chronology/chronology.log

    debug: false
    verbose: false
    ```
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class ConfigError(Exception):
    """Base exception for configuration errors.

    All configuration-related exceptions inherit from this class to allow
    for easy exception handling at a higher level.
    """

    pass


class ConfigFileError(ConfigError):
    """Exception raised for YAML config file issues.

    Raised when:
    - An explicitly requested config file does not exist or cannot be read
    - The file contains malformed YAML
    - The file's values fail validation
    """

    pass


# =============================================================================
# Configuration Models
# =============================================================================


class TimelineConfig(BaseModel):
    """Settings that shape the timeline taxonomies.

    Attributes:
        use_24_hour_clock: Label hour slots "00".."23" instead of "12 AM".."11 PM".
        group_items_in_same_bucket: Collapse clusters holding several items into
            a single summary line when rendering.
        first_weekday: Weekday that opens the week view (0 = Monday, 6 = Sunday).
        minute_bucket_width: Width in minutes of a cluster in the day view.
        minute_bucket_count: Number of minute clusters shown per hour.
        hour_bucket_width: Width in hours of a cluster in the week view.

    Example:
        >>> cfg = TimelineConfig(use_24_hour_clock=False)
        >>> cfg.minute_bucket_starts()
        [0, 10, 20]
    """

    use_24_hour_clock: bool = Field(
        default=True, description="Use 24-hour labels for hour slots."
    )
    group_items_in_same_bucket: bool = Field(
        default=True, description="Collapse multi-item clusters when rendering."
    )
    first_weekday: int = Field(
        default=6, ge=0, le=6, description="First day of the week (0 = Monday, 6 = Sunday)."
    )
    minute_bucket_width: int = Field(
        default=10, ge=1, le=60, description="Minutes covered by one day-view cluster."
    )
    minute_bucket_count: int = Field(
        default=3, ge=1, le=60, description="Number of day-view clusters per hour."
    )
    hour_bucket_width: int = Field(
        default=4, ge=1, le=24, description="Hours covered by one week-view cluster."
    )

    @field_validator("minute_bucket_width")
    @classmethod
    def validate_minute_width(cls, v: int) -> int:
        if 60 % v != 0:
            raise ValueError(f"minute_bucket_width must divide 60, got {v}")
        return v

    @field_validator("hour_bucket_width")
    @classmethod
    def validate_hour_width(cls, v: int) -> int:
        if 24 % v != 0:
            raise ValueError(f"hour_bucket_width must divide 24, got {v}")
        return v

    @model_validator(mode="after")
    def check_minute_buckets_fit(self) -> "TimelineConfig":
        """Ensure the minute clusters stay inside one hour."""
        if self.minute_bucket_width * self.minute_bucket_count > 60:
            raise ValueError(
                f"{self.minute_bucket_count} buckets of {self.minute_bucket_width} minutes "
                "exceed one hour"
            )
        return self

    def minute_bucket_starts(self) -> list[int]:
        """Start minute of each day-view cluster, ascending."""
        return [i * self.minute_bucket_width for i in range(self.minute_bucket_count)]

    def hour_bucket_starts(self) -> list[int]:
        """Start hour of each week-view cluster, descending."""
        return [
            i * self.hour_bucket_width for i in reversed(range(24 // self.hour_bucket_width))
        ]


class LoggingConfig(BaseModel):
    """Logging settings used by the command line.

    Attributes:
        level: Log level for the chronology package logger.
        log_file: Optional file receiving a copy of every log record.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_file: Path | None = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        """Expand ~ in the log file path."""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Supports loading from environment variables with the CHRONOLOGY_ prefix,
    nested sections separated by a double underscore
    (e.g. CHRONOLOGY_TIMELINE__USE_24_HOUR_CLOCK=false).

    Configuration priority (highest wins):
    1. Environment variables (CHRONOLOGY_*)
    2. Config file (YAML)
    3. In-code defaults

    Attributes:
        timeline: Taxonomy and rendering settings.
        logging: Log level and optional log file.
        debug: Enable debug mode (debug logging, tracebacks).
        verbose: Enable verbose output.
    """

    timeline: TimelineConfig = Field(default_factory=TimelineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    debug: bool = Field(default=False, description="Enable debug mode.")
    verbose: bool = Field(default=False, description="Enable verbose output.")

    model_config = {
        "env_prefix": "CHRONOLOGY_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # File values arrive as init kwargs; environment must still win.
        return env_settings, init_settings, dotenv_settings, file_secret_settings


# =============================================================================
# Module-Level Functions
# =============================================================================

DEFAULT_SEARCH_PATHS = [
    Path("./chronology.yaml"),
    Path("./chronology.yml"),
    Path.home() / ".chronology" / "config.yaml",
]


def _read_yaml(config_file: Path) -> dict[str, Any]:
    try:
        content = config_file.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(f"Cannot read config file {config_file}: {e}") from e

    if not content.strip():
        return {}

    try:
        loaded = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigFileError(f"Failed to parse config file {config_file}: {e}") from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigFileError(
            f"Config file {config_file} must contain a mapping, got {type(loaded).__name__}"
        )
    return loaded


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from file, environment, and defaults.

    An explicitly requested file must exist and be valid. A file discovered in
    the default locations that turns out to be broken is skipped with a
    warning, since the user never asked for it.

    Args:
        path: Optional path to a config file. If None, searches default locations.

    Returns:
        Fully-populated AppConfig instance.

    Raises:
        ConfigFileError: If the explicitly requested file is missing or invalid.

    Example:
        >>> config = load_config()  # Defaults and env vars
        >>> config = load_config(Path("./my-config.yaml"))
    """
    if path is not None:
        path = Path(path).expanduser()
        if not path.exists():
            raise ConfigFileError(f"Config file not found: {path}")
        data = _read_yaml(path)
        try:
            return AppConfig(**data)
        except ValidationError as e:
            raise ConfigFileError(f"Invalid values in config file {path}: {e}") from e

    config_file = next((p for p in DEFAULT_SEARCH_PATHS if p.exists()), None)
    if config_file is None:
        return AppConfig()

    try:
        return AppConfig(**_read_yaml(config_file))
    except (ConfigFileError, ValidationError) as e:
        logger.warning(f"Ignoring config file {config_file}: {e}. Using defaults.")
        return AppConfig()


@functools.lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the cached configuration singleton.

    Returns:
        Cached AppConfig instance.
    """
    return load_config()


def reset_config() -> None:
    """Clear the configuration cache for testing.

    After calling this, the next call to get_config() will reload
    configuration from sources.
    """
    get_config.cache_clear()
