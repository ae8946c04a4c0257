from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

import pytz
from dotenv import load_dotenv

from .errors import ConfigError

load_dotenv()

DEFAULT_SCHEDULE_URL = "https://aikatsu-academy.com/schedule/"
DEFAULT_TIMEZONE = "Asia/Tokyo"


@dataclass
class Settings:
    schedule_url: str
    gcs_bucket: Optional[str]
    gcs_path: Optional[str]
    timezone: str = DEFAULT_TIMEZONE
    log_level: str = "INFO"

    def require_storage(self) -> tuple[str, str]:
        """Bucket and object path for the upload; both must be set."""
        if not self.gcs_bucket:
            raise ConfigError("GCS_BUCKET must be set")
        if not self.gcs_path:
            raise ConfigError("GCS_PATH must be set")
        return self.gcs_bucket, self.gcs_path


def get_settings() -> Settings:
    tz_name = os.getenv("TIMEZONE", DEFAULT_TIMEZONE)
    try:
        pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError as e:
        raise ConfigError(f"Unknown TIMEZONE {tz_name!r}") from e

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown LOG_LEVEL {log_level!r}")

    return Settings(
        schedule_url=os.getenv("SCHEDULE_URL") or DEFAULT_SCHEDULE_URL,
        gcs_bucket=os.getenv("GCS_BUCKET"),
        gcs_path=os.getenv("GCS_PATH"),
        timezone=tz_name,
        log_level=log_level,
    )
