"""Application settings powered by Pydantic BaseSettings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CONFIG_PATH = Path("config.json")


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    jira_base_url: str | None = Field(default=None, validation_alias="JIRA_BASE_URL")
    jira_bearer_token: str | None = Field(
        default=None, validation_alias="JIRA_BEARER_TOKEN", repr=False
    )
    config_path: Path = Field(
        default=DEFAULT_CONFIG_PATH, validation_alias="JIRA_MCP_CONFIG"
    )
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_format: Literal["json", "console"] = Field(
        default="json", validation_alias="LOG_FORMAT"
    )


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
