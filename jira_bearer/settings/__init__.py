"""Settings and credential loading."""

from jira_bearer.settings.app import DEFAULT_CONFIG_PATH, AppSettings, get_settings
from jira_bearer.settings.credentials import (
    ConfigurationError,
    load_credentials,
    read_config_file,
    write_config_file,
)


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "AppSettings",
    "ConfigurationError",
    "get_settings",
    "load_credentials",
    "read_config_file",
    "write_config_file",
]
