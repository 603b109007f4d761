"""Credential loading: config file first, then environment variables."""

import json
import os
from pathlib import Path

import structlog
from pydantic import ValidationError

from jira_bearer.fetch.models import Credentials
from jira_bearer.settings.app import AppSettings


logger = structlog.get_logger()

MISSING_CREDENTIALS_MESSAGE = (
    "Jira credentials not configured.\n"
    "\n"
    "Please either:\n"
    "1. Run setup: jira-bearer-mcp setup\n"
    "2. Set environment variables: JIRA_BASE_URL and JIRA_BEARER_TOKEN"
)


class ConfigurationError(Exception):
    """Raised when no usable Jira credentials are configured."""


def load_credentials(settings: AppSettings) -> Credentials:
    """Resolve credentials for this process.

    A config file holding both values takes precedence over the
    environment. An unreadable or incomplete file is logged and skipped.

    Args:
        settings: Application settings.

    Returns:
        Credentials for the Jira instance.

    Raises:
        ConfigurationError: If neither source provides credentials.
    """
    credentials = read_config_file(settings.config_path)
    if credentials is not None:
        logger.info("credentials_loaded", source="config_file")
        return credentials

    if settings.jira_base_url and settings.jira_bearer_token:
        try:
            credentials = Credentials(
                base_url=settings.jira_base_url,
                bearer_token=settings.jira_bearer_token,
            )
        except ValidationError as e:
            msg = "JIRA_BASE_URL must start with http:// or https://"
            raise ConfigurationError(msg) from e
        logger.info("credentials_loaded", source="environment")
        return credentials

    raise ConfigurationError(MISSING_CREDENTIALS_MESSAGE)


def read_config_file(path: Path) -> Credentials | None:
    """Read credentials from a JSON config file.

    Expected shape: ``{"jira": {"baseUrl": ..., "bearerToken": ...}}``.

    Args:
        path: Config file path.

    Returns:
        Credentials, or None if the file is missing, unreadable or incomplete.
    """
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        jira = data.get("jira") or {}
        base_url = jira.get("baseUrl")
        bearer_token = jira.get("bearerToken")
        if not (base_url and bearer_token):
            return None
        return Credentials(base_url=base_url, bearer_token=bearer_token)
    except (OSError, ValueError, AttributeError) as e:
        logger.warning("config_file_unreadable", path=str(path), error=str(e))
        return None


def write_config_file(path: Path, base_url: str, bearer_token: str) -> Path:
    """Write credentials to a JSON config file readable only by the owner.

    Args:
        path: Destination path.
        base_url: Jira base URL; trailing slashes are removed.
        bearer_token: Bearer token.

    Returns:
        The path written.
    """
    payload = {"jira": {"baseUrl": base_url.rstrip("/"), "bearerToken": bearer_token}}
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    os.chmod(path, 0o600)
    return path
