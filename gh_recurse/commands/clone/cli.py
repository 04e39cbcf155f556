"""CLI for cloning every repository of an organisation."""

import logging
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError

from ...config.settings import get_settings
from ...core.credentials import CredentialError
from ...core.dispatcher import FatalCloneError
from ...core.github_client import GitHubError
from ...core.types import LogLevel
from .service import clone_org


def _configure_logging(level: LogLevel) -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(message)s")
    logging.getLogger().setLevel(level.value)


def clone(
    org: str = typer.Argument(..., help="GitHub organisation login (e.g. 'github')"),
    concurrency: int | None = typer.Option(None, "--concurrency", min=1, help="Parallel clone workers [default: 4]"),
    config: Path | None = typer.Option(
        None, "--config", exists=True, dir_okay=False, help="YAML config file (default is $HOME/.gh-recurse.yaml)"
    ),
    dest: str | None = typer.Option(None, "--dest", help="Directory to clone into [default: current directory]"),
    key: str | None = typer.Option(None, "--key", help="SSH private key [default: ~/.ssh/id_rsa]"),
    insecure: bool = typer.Option(False, "--insecure", help="Accept any SSH host key (no verification)"),
    log_level: LogLevel | None = typer.Option(
        None, "--log-level", case_sensitive=False, help="Logging level [default: INFO]"
    ),
):
    """Download every git repo under a GitHub organisation - concurrently.

    Example:
      GITHUB_OAUTH_TOKEN=your-fancy-token gh-recurse github
    """
    _configure_logging(log_level or LogLevel.INFO)
    try:
        s = get_settings(
            config,
            concurrency=concurrency,
            dest=dest,
            ssh_key_path=key,
            insecure=True if insecure else None,
            log_level=log_level,
        )
    except (ValidationError, yaml.YAMLError) as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2) from e
    _configure_logging(s.log_level)

    try:
        clone_org(org, s)
    except (GitHubError, CredentialError, FatalCloneError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
