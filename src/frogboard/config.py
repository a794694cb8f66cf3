"""Configuration management for frogboard."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.timectx import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

FROGBOARD_HOME = Path(os.environ.get("FROGBOARD_HOME", Path.home() / "frogboard"))
CONFIG_FILE = FROGBOARD_HOME / "config" / "frogboard.conf"
DATA_DIR = FROGBOARD_HOME / "data"


@dataclass
class Config:
    """frogboard configuration."""

    timezone: str = DEFAULT_TIMEZONE
    user_id: str = "local"
    monitor_interval_seconds: int = 60
    tasks_dir: str = ""
    # Supabase storage; the local JSON store is used when unset
    supabase_url: str = ""
    supabase_key: str = ""

    @property
    def uses_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from frogboard.conf."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "timezone":
                config.timezone = value
            case "user_id":
                config.user_id = value
            case "monitor_interval_seconds":
                try:
                    interval = int(value)
                except ValueError:
                    logger.warning(f"Invalid MONITOR_INTERVAL_SECONDS: {value!r}")
                    continue
                if interval <= 0:
                    logger.warning(f"MONITOR_INTERVAL_SECONDS must be positive, got {interval}")
                    continue
                config.monitor_interval_seconds = interval
            case "tasks_dir":
                config.tasks_dir = value
            case "supabase_url":
                config.supabase_url = value.rstrip("/")
            case "supabase_key":
                config.supabase_key = value
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
