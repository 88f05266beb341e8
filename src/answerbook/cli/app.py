"""Unified CLI entry point for answerbook.

Config precedence: settings.default.toml -> settings.local.toml -> env vars (ANSWERBOOK_* with double underscores) -> CLI flags.
"""

from __future__ import annotations

import logging

import typer

from answerbook.cli.answer_cmd import register_answer_commands
from answerbook.cli.serve_cmd import register_serve_command
from answerbook.cli.settings_cmd import settings_app

try:
    from importlib.metadata import version

    VERSION = version("answerbook")
except Exception:
    VERSION = "unknown"

APP_HELP = (
    "answerbook: open the book of answers from the command line. "
    "Config precedence: settings.default.toml -> settings.local.toml -> env vars (ANSWERBOOK_* with __) -> CLI flags."
)

app = typer.Typer(add_completion=True, help=APP_HELP)

register_answer_commands(app)
register_serve_command(app)
app.add_typer(settings_app, name="settings")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Show help when no subcommand is provided."""
    if version:
        typer.echo(f"answerbook {VERSION}")
        raise typer.Exit()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
