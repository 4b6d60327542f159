"""Configuration management for Cadence."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CADENCE_HOME = Path(os.environ.get("CADENCE_HOME", Path.home() / "cadence"))
CONFIG_FILE = CADENCE_HOME / "config" / "cadence.conf"
DATA_DIR = CADENCE_HOME / "data"


@dataclass
class Config:
    """Cadence configuration."""

    data_file: str = ""
    heatmap_days: int = 91
    rate_window_days: int = 7
    behind_threshold: float = 0.5
    # None scans carry-forward history back to the activity's creation
    carry_forward_lookback_days: int | None = None
    log_level: str = "WARNING"

    @property
    def data_path(self) -> Path:
        if self.data_file:
            return Path(self.data_file).expanduser()
        return DATA_DIR / "tracker.json"


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _positive_int(key: str, value: str, default: int | None) -> int | None:
    try:
        number = int(value)
    except ValueError:
        logger.warning(f"Invalid {key.upper()} {value!r}, using {default}")
        return default
    if number <= 0:
        logger.warning(f"{key.upper()} must be positive, using {default}")
        return default
    return number


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from cadence.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_file":
                config.data_file = value
            case "heatmap_days":
                config.heatmap_days = _positive_int(key, value, config.heatmap_days)
            case "rate_window_days":
                config.rate_window_days = _positive_int(key, value, config.rate_window_days)
            case "behind_threshold":
                try:
                    config.behind_threshold = float(value)
                except ValueError:
                    logger.warning(f"Invalid BEHIND_THRESHOLD {value!r}, using {config.behind_threshold}")
            case "carry_forward_lookback_days":
                if value.lower() in ("", "none", "unlimited"):
                    config.carry_forward_lookback_days = None
                else:
                    config.carry_forward_lookback_days = _positive_int(key, value, None)
            case "log_level":
                config.log_level = value.upper()
            case _:
                logger.debug(f"Ignoring unknown config key {key!r}")

    return config
