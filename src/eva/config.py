"""Configuration management for Eva."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .core.strategy import Strategy

logger = logging.getLogger(__name__)

EVA_HOME = Path(os.environ.get("EVA_HOME", Path.home() / ".eva"))
CONFIG_FILE = EVA_HOME / "eva.conf"
DATA_DIR = EVA_HOME / "data"

ENV_PREFIX = "EVA_"


class ConfigError(ValueError):
    """Raised when a configuration value is unusable."""

    pass


@dataclass
class Config:
    """Eva configuration."""

    database: str = str(DATA_DIR / "db.sqlite")
    scheduling_strategy: str = "importance"
    timezone: str = "UTC"
    horizon_days: int = 365
    # Nothing is planned before now + this delay
    schedule_delay_minutes: int = 1

    @property
    def database_path(self) -> Path:
        return Path(self.database).expanduser()

    @property
    def strategy(self) -> Strategy:
        try:
            return Strategy.parse(self.scheduling_strategy)
        except ValueError as e:
            raise ConfigError(str(e)) from None

    @property
    def tz(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigError(f"Unknown timezone '{self.timezone}'") from None


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from an unquoted value."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _to_int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{key.upper()} must be a whole number, got '{value}'") from None


def _apply(config: Config, key: str, value: str) -> None:
    match key:
        case "database":
            config.database = value
        case "scheduling_strategy":
            config.scheduling_strategy = value
        case "timezone":
            config.timezone = value
        case "horizon_days":
            config.horizon_days = _to_int(key, value)
        case "schedule_delay_minutes":
            config.schedule_delay_minutes = _to_int(key, value)
        case _:
            logger.warning(f"Ignoring unknown configuration key: {key}")


def load_config(config_file: Path | None = None) -> Config:
    """
    Load configuration from eva.conf, then from EVA_* environment variables.

    Raises ConfigError if the resulting strategy or numbers are unusable.
    """
    config = Config()
    config_file = config_file or CONFIG_FILE

    if config_file.exists():
        for line in config_file.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            _apply(config, key.strip().lower(), _unquote(value.strip()))

    for name, value in os.environ.items():
        if not name.startswith(ENV_PREFIX) or name == "EVA_HOME":
            continue
        _apply(config, name[len(ENV_PREFIX):].lower(), value.strip())

    # Fail early rather than at scheduling time
    config.strategy
    config.tz
    if config.horizon_days <= 0:
        raise ConfigError(f"HORIZON_DAYS must be positive, got {config.horizon_days}")
    if config.schedule_delay_minutes < 0:
        raise ConfigError(
            f"SCHEDULE_DELAY_MINUTES must not be negative, got {config.schedule_delay_minutes}"
        )

    return config
