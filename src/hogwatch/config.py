"""Settings and default locations for hogwatch."""

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from hogwatch.errors import ConfigError

APP_NAME = "hogwatch"


def cache_dir() -> Path:
    base = os.environ.get("XDG_CACHE_HOME") or str(Path.home() / ".cache")
    return Path(base) / APP_NAME


def config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_NAME


def default_cache_path() -> Path:
    override = os.environ.get("HOGWATCH_CACHE")
    if override:
        return Path(override)
    return cache_dir() / "ignored.msgpack"


def default_config_path() -> Path:
    override = os.environ.get("HOGWATCH_CONFIG")
    if override:
        return Path(override)
    return config_dir() / "config.json"


def log_path() -> Path:
    return cache_dir() / "hogwatch.log"


class Settings(BaseModel):
    """Tunable policy and environment parameters."""

    poll_seconds: float = Field(default=4.0, ge=0.1)
    cpu_threshold: float = Field(default=85.0, gt=0)
    hogs_threshold: int = Field(default=2, ge=0)
    timeouts_threshold: int = Field(default=2, ge=1)
    promote_after: int = Field(default=3, ge=1)
    notification_timeout: int = Field(default=10, ge=1)
    alerter_path: str = "/usr/local/bin/alerter"
    notification_group: str = "hog_detector"
    notification_icon: str | None = None
    cache_path: Path = Field(default_factory=default_cache_path)
    log_file: Path | None = Field(default_factory=log_path)
    log_level: str = "INFO"

    def to_detector_config(self) -> dict:
        return {
            "cpu_threshold": self.cpu_threshold,
            "hogs_threshold": self.hogs_threshold,
            "timeouts_threshold": self.timeouts_threshold,
            "promote_after": self.promote_after,
        }


def load_settings(path: Path | None = None) -> Settings:
    """
    Load settings from a JSON file, falling back to defaults when it is absent.

    A file that exists but cannot be parsed or validated raises ConfigError:
    running with guessed thresholds would silently change what gets flagged.
    """
    path = path or default_config_path()
    if not path.exists():
        return Settings()

    try:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw) if raw.strip() else {}
        return Settings.model_validate(data)
    except (OSError, ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid settings file {path}: {e}") from e
