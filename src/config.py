"""Configuration management for RSS Feed List."""

import json
import os
from dataclasses import dataclass
from pathlib import Path

from .date_utils import DEFAULT_DATE_FORMAT
from .logging_config import create_execution_logger
from .models import MAX_ENTRIES


@dataclass
class PluginSettings:
    """User settings read from the host's settings store."""

    preferred_date_format: str = DEFAULT_DATE_FORMAT
    max_items: int = MAX_ENTRIES


@dataclass
class FetchConfig:
    """Configuration for feed downloads."""

    timeout: int = 30
    user_agent: str = "RSS-Feed-List/1.0"


class Config:
    """Main configuration manager."""

    # Default settings file path
    SETTINGS_FILE = "settings.json"

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.settings_file = os.getenv("RSS_FEED_LIST_SETTINGS", self.SETTINGS_FILE)
        self.preferred_date_format = os.getenv("RSS_PREFERRED_DATE_FORMAT", "")
        self.max_items = os.getenv("RSS_MAX_ITEMS", "")
        self.request_timeout = os.getenv("RSS_REQUEST_TIMEOUT", "")
        self.user_agent = os.getenv("RSS_USER_AGENT", FetchConfig.user_agent)
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.logger = create_execution_logger("config")

    def _read_settings_file(self) -> dict:
        """Read the JSON settings file; missing or broken files yield no settings."""
        settings_path = Path(self.settings_file)
        if not settings_path.exists():
            return {}

        try:
            with open(settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning(
                f"Could not read settings file, using defaults: {e}",
                settings_file=str(settings_path),
                error=str(e),
            )
            return {}

        if not isinstance(data, dict):
            self.logger.warning(
                "Settings file does not contain an object, using defaults",
                settings_file=str(settings_path),
            )
            return {}
        return data

    def get_plugin_settings(self) -> PluginSettings:
        """Get user settings; environment variables override the settings file."""
        stored = self._read_settings_file()

        date_format = self.preferred_date_format or stored.get("preferredDateFormat")
        max_items = self.max_items or stored.get("maxItems")

        return PluginSettings(
            preferred_date_format=(
                date_format if isinstance(date_format, str) and date_format
                else DEFAULT_DATE_FORMAT
            ),
            max_items=_positive_int(max_items, MAX_ENTRIES),
        )

    def get_fetch_config(self) -> FetchConfig:
        """Get feed download configuration."""
        return FetchConfig(
            timeout=_positive_int(self.request_timeout, FetchConfig.timeout),
            user_agent=self.user_agent,
        )


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default
