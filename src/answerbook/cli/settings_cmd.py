"""CLI commands for inspecting and validating answerbook settings."""

from __future__ import annotations

import json

import typer
from rich.console import Console

settings_app = typer.Typer(help="Inspect and validate answerbook configuration.")
console = Console()


@settings_app.command("show")
def show_settings() -> None:
    """Display the currently resolved settings."""
    from answerbook.settings import get_settings

    settings = get_settings()
    console.print_json(json.dumps(settings.model_dump(mode="json"), indent=2, default=str))


@settings_app.command("validate")
def validate_settings() -> None:
    """Validate settings and report any issues."""
    from answerbook.models import PresentationMode
    from answerbook.settings import get_settings

    try:
        settings = get_settings()
    except Exception as e:
        console.print(f"[red]✗[/red] Settings validation failed: {e}")
        raise typer.Exit(code=1)

    if PresentationMode.parse(settings.answer.mode) is None:
        console.print(f"[red]✗[/red] Unknown answer mode: {settings.answer.mode!r}")
        raise typer.Exit(code=1)

    console.print("[green]✓[/green] Settings are valid.")
    console.print(f"  Environment: {settings.env}")
    console.print(f"  Answer mode: {settings.answer.mode}")
    console.print(f"  Answer page: {settings.page.url}")
