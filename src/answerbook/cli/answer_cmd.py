"""CLI commands for opening the book of answers."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from answerbook.models import PresentationMode, Reply

console = Console()
logger = logging.getLogger(__name__)


async def _open_once(mode: Optional[str]) -> Reply | None:
    """Start a session, answer one request, and always stop the session.

    Returns ``None`` when the browser cannot be launched or the request fails.
    """
    from answerbook.book import AnswerBook
    from answerbook.browser.session import BrowserSessionManager
    from answerbook.settings import get_settings

    settings = get_settings()
    session = BrowserSessionManager(settings.browser)
    try:
        await session.start()
    except Exception:
        logger.exception("Failed to launch the browser")
        return None
    try:
        return await AnswerBook(session, settings).answer(mode)
    finally:
        await session.stop()


def open_book_command(
    mode: Optional[str] = typer.Option(None, "--mode", "-m", help="Presentation mode (slug or label); see `answerbook modes`."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Where to write the image in image mode."),
) -> None:
    """Open the book of answers and print (or save) the answer."""
    from answerbook.book import prompt_text
    from answerbook.settings import get_settings

    prompt = prompt_text(get_settings())
    if prompt:
        console.print(prompt)

    with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), console=console) as progress:
        task = progress.add_task("Opening the book...", total=None)
        reply = asyncio.run(_open_once(mode))
        progress.update(task, completed=True)

    if reply is None:
        console.print("[red]✗[/red] Could not open the book; see the log for details.")
        raise typer.Exit(code=1)

    if reply.is_image:
        suffix = ".jpg" if reply.mime_type == "image/jpeg" else ".png"
        path = output or Path(f"answer{suffix}")
        path.write_bytes(reply.image or b"")
        console.print(f"[green]✓[/green] Answer saved to: {path}")
    else:
        console.print(reply.text, markup=False, highlight=False)


def list_modes_command() -> None:
    """List the available presentation modes."""
    table = Table(title="Presentation modes")
    table.add_column("Mode")
    table.add_column("Label")
    for mode in PresentationMode:
        table.add_row(mode.value, mode.label)
    console.print(table)


def register_answer_commands(app: typer.Typer) -> None:
    app.command("open")(open_book_command)
    app.command("modes")(list_modes_command)
