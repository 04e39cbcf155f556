"""CLI entrypoint that wires the clone command into a Typer app."""

import typer

from ..commands.clone.cli import clone

app = typer.Typer(
    add_completion=False,
    help="Download every git repo under a GitHub organisation - concurrently.",
)

app.command()(clone)
