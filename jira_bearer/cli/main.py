"""CLI commands for the Jira MCP server."""

import logging
import sys
from pathlib import Path

import click
import structlog

from jira_bearer import __version__
from jira_bearer.observability.logging import configure_logging
from jira_bearer.server import build_server
from jira_bearer.settings import (
    DEFAULT_CONFIG_PATH,
    ConfigurationError,
    get_settings,
    load_credentials,
    write_config_file,
)


logger = structlog.get_logger()


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Jira MCP server with bearer-token authentication."""


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.json (overrides JIRA_MCP_CONFIG).",
)
def serve(config_path: Path | None) -> None:
    """Run the MCP server over stdio."""
    settings = get_settings()
    if config_path is not None:
        settings = settings.model_copy(update={"config_path": config_path})

    configure_logging(
        level=logging.DEBUG if settings.debug else logging.INFO,
        json_format=settings.log_format == "json",
    )

    try:
        credentials = load_credentials(settings)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    server = build_server(credentials)
    logger.info("server_started", transport="stdio", base_url=credentials.base_url)
    server.run()


def _validate_base_url(
    _ctx: click.Context, _param: click.Parameter, value: str
) -> str:
    if not value.startswith(("http://", "https://")):
        msg = "Invalid URL. Must start with http:// or https://"
        raise click.BadParameter(msg)
    return value


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Where to write the config file.",
)
@click.option(
    "--base-url",
    prompt="Enter your Jira base URL (e.g., https://jira.example.com)",
    callback=_validate_base_url,
    help="Jira base URL.",
)
@click.option(
    "--token",
    prompt="Enter your Jira bearer token",
    hide_input=True,
    help="Jira bearer token.",
)
def setup(config_path: Path, base_url: str, token: str) -> None:
    """Create a config file holding the Jira credentials."""
    if not token.strip():
        click.echo("Error: Bearer token is required", err=True)
        sys.exit(1)

    if config_path.exists() and not click.confirm(
        "Config file already exists. Overwrite?", default=False
    ):
        click.echo("Setup cancelled.")
        return

    try:
        written = write_config_file(config_path, base_url, token.strip())
    except OSError as e:
        click.echo(f"Error writing config file: {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration saved to {written}")
    click.echo("Next steps:")
    click.echo("  1. Register the server with your MCP client, e.g.:")
    click.echo(f"     jira-bearer-mcp serve --config {written.resolve()}")
    click.echo("  2. Keep the config file out of version control.")


if __name__ == "__main__":
    cli()
