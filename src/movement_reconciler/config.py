"""Configuration loading and validation for the movement reconciler."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from movement_reconciler.utils.logging_config import DEFAULT_LOG_FILE, get_logger

logger = get_logger(__name__)

# Environment variable overriding the configured log level
LOG_LEVEL_ENV = "MOVEMENT_RECONCILER_LOG_LEVEL"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


def _as_bool(value: object, name: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"'{name}' must be true or false, got {value!r}")


def _as_non_negative_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"'{name}' must be a non-negative integer, got {value!r}")
    return value


@dataclass
class ValidationConfig:
    """Configuration for request validation and verdict rendering.

    Attributes:
        group_reasons: Group findings by kind in the response.
        future_date_grace_days: Days after today still accepted as a date.
        max_date_age_years: Oldest accepted date, in years before today.
        require_movements_with_balances: Reject requests that carry balances
            without a movements list.
    """

    group_reasons: bool = False
    future_date_grace_days: int = 1
    max_date_age_years: int = 100
    require_movements_with_balances: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "ValidationConfig":
        """Create from dictionary."""
        defaults = cls()
        return cls(
            group_reasons=_as_bool(
                data.get("group_reasons", defaults.group_reasons), "group_reasons"
            ),
            future_date_grace_days=_as_non_negative_int(
                data.get("future_date_grace_days", defaults.future_date_grace_days),
                "future_date_grace_days",
            ),
            max_date_age_years=_as_non_negative_int(
                data.get("max_date_age_years", defaults.max_date_age_years),
                "max_date_age_years",
            ),
            require_movements_with_balances=_as_bool(
                data.get(
                    "require_movements_with_balances",
                    defaults.require_movements_with_balances,
                ),
                "require_movements_with_balances",
            ),
        )


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        indent: JSON indentation.
        sort_duplicates_by_id: Report duplicate records ordered by movement id.
    """

    indent: int = 2
    sort_duplicates_by_id: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "OutputConfig":
        """Create from dictionary."""
        return cls(
            indent=_as_non_negative_int(data.get("indent", 2), "indent"),
            sort_duplicates_by_id=_as_bool(
                data.get("sort_duplicates_by_id", True), "sort_duplicates_by_id"
            ),
        )


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file.
    """

    level: str = "INFO"
    file: str = DEFAULT_LOG_FILE

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        level = str(data.get("level", "INFO")).upper()
        if level not in VALID_LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {level}")
        return cls(
            level=level,
            file=str(data.get("file", DEFAULT_LOG_FILE)),
        )


@dataclass
class Config:
    """Main configuration container.

    Attributes:
        validation: Request validation and verdict settings.
        output: Output generation settings.
        logging: Logging settings.
    """

    validation: ValidationConfig = field(default_factory=ValidationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If file is invalid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not content:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def _section(data: dict[str, object], name: str) -> dict[str, object]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def load_settings(path: Path) -> Config:
    """Load settings from settings.yaml.

    Args:
        path: Path to settings.yaml.

    Returns:
        Config built from the file.
    """
    data = load_yaml_file(path)

    return Config(
        validation=ValidationConfig.from_dict(_section(data, "validation")),
        output=OutputConfig.from_dict(_section(data, "output")),
        logging=LoggingConfig.from_dict(_section(data, "logging")),
    )


def apply_environment(config: Config) -> Config:
    """Apply environment variable overrides.

    Args:
        config: Config to update in place.

    Returns:
        The same config.
    """
    level = os.environ.get(LOG_LEVEL_ENV)
    if level:
        level = level.upper()
        if level in VALID_LOG_LEVELS:
            config.logging.level = level
        else:
            logger.warning(f"Ignoring invalid {LOG_LEVEL_ENV}={level}")
    return config


def load_config(
    settings_path: Optional[Path] = None,
    config_dir: Optional[Path] = None,
) -> Config:
    """Load configuration, falling back to defaults when no file exists.

    Args:
        settings_path: Path to settings.yaml (or None to use default).
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete Config object.

    Raises:
        ConfigError: If the settings file is malformed.
    """
    if config_dir is None:
        config_dir = Path("config")

    if settings_path is None:
        settings_path = config_dir / "settings.yaml"

    if settings_path.exists():
        config = load_settings(settings_path)
        logger.info(f"Loaded settings from {settings_path}")
    else:
        config = Config()
        logger.warning(f"Settings file not found: {settings_path}, using defaults")

    return apply_environment(config)
